"""Configuration loading and environment variable parsing for vm-preflight."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from preflight.constants import (
    COMMIT_STORAGE,
    CPU_CORES_RE,
    DEFAULT_CPU_CORES,
    DEFAULT_MIRRORS,
    DEFAULT_MIRRORS_CONFIG,
    DEFAULT_RAM_SIZE,
    DEFAULT_STORAGE,
    EXIT_INVALID_CORES,
    EXIT_SHM_MISSING,
    EXIT_STORAGE_MISSING,
    RUN_SHM_DIR,
    SHM_DIR,
)
from preflight.exceptions import ConfigurationError
from preflight.models import PreflightConfig
from preflight.utils import ensure_directory, get_env, get_env_bool, log


def parse_env() -> PreflightConfig:
    cpu_cores = get_env("CPU_CORES", DEFAULT_CPU_CORES) or ""
    if not CPU_CORES_RE.fullmatch(cpu_cores):
        raise ConfigurationError(f"Invalid amount of CPU_CORES: {cpu_cores}", exit_code=EXIT_INVALID_CORES)

    commit = (get_env("COMMIT") or "")[:1] in ("Y", "y", "1")
    storage = COMMIT_STORAGE if commit else Path(get_env("STORAGE", str(DEFAULT_STORAGE)) or DEFAULT_STORAGE)

    mirrors_config = get_env("MIRRORS_CONFIG")
    return PreflightConfig(
        timezone=(get_env("TZ") or "").strip(),
        country=(get_env("COUNTRY") or "").strip().upper(),
        ram_size=get_env("RAM_SIZE", DEFAULT_RAM_SIZE) or "",
        ram_check=get_env_bool("RAM_CHECK", True),
        cpu_cores=cpu_cores.replace(" ", ""),
        storage=storage,
        commit=commit,
        mirrors_config=Path(mirrors_config) if mirrors_config else None,
    )


def check_environment(cfg: PreflightConfig) -> None:
    """Verify shared memory and the storage folder exist."""
    if not SHM_DIR.is_dir():
        raise ConfigurationError(f"Directory {SHM_DIR} not found!", exit_code=EXIT_SHM_MISSING)
    if not RUN_SHM_DIR.exists():
        try:
            RUN_SHM_DIR.symlink_to(SHM_DIR)
        except OSError as exc:
            log("WARN", f"Unable to link {RUN_SHM_DIR} to {SHM_DIR}: {exc}")

    if cfg.commit:
        ensure_directory(cfg.storage)
    if not cfg.storage.is_dir():
        raise ConfigurationError(f"Storage folder ({cfg.storage}) not found!", exit_code=EXIT_STORAGE_MISSING)


def load_mirror_config(config_path: Optional[Path] = None) -> Dict[str, str]:
    """Return the country -> mirror host table, merged over the built-in defaults."""
    mirrors = dict(DEFAULT_MIRRORS)
    explicit = config_path is not None
    if config_path is None:
        config_path = DEFAULT_MIRRORS_CONFIG
    if not config_path.exists():
        if explicit:
            raise ConfigurationError(f"Mirror config missing: {config_path}")
        return mirrors
    data = yaml.safe_load(config_path.read_text()) or {}
    entries = data.get("mirrors", {}) if isinstance(data, dict) else None
    if not isinstance(entries, dict):
        raise ConfigurationError(f"Mirror config {config_path} must contain a 'mirrors' mapping")
    for country, host in entries.items():
        code = str(country).strip().upper()
        if not host:
            mirrors.pop(code, None)
            continue
        mirrors[code] = str(host).strip()
    return mirrors
