"""CLI entry points for vm-preflight."""

from __future__ import annotations

import argparse
import dataclasses
import shlex
import traceback
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from preflight.config import check_environment, load_mirror_config, parse_env
from preflight.country import CountryResolver
from preflight.exceptions import PreflightError
from preflight.host import inspect_host
from preflight.memory import MemoryGovernor, describe_memory
from preflight.models import FilesystemProfile, HostInfo, PreflightConfig, SizeSpec
from preflight.packages import PackageInstaller
from preflight.sizes import parse_size
from preflight.status import StatusBroadcaster
from preflight.storage import profile_filesystem
from preflight.utils import format_bytes, log


def parse_package_arg(raw: str) -> Tuple[str, str]:
    """Split ``name[:description]``; the description defaults to the name."""
    name, _, description = raw.partition(":")
    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(f"invalid package '{raw}'")
    return name, description.strip() or name


def show_config(cfg: PreflightConfig) -> None:
    """Print the parsed configuration."""
    for field in dataclasses.fields(cfg):
        print(f"  {field.name}: {getattr(cfg, field.name)}")


def print_host_summary(host: HostInfo) -> None:
    log(
        "INFO",
        f"CPU: {host.cpu_model} | RAM: {describe_memory(host.mem_total, host.mem_available)} | "
        f"DISK: {format_bytes(host.disk_free, 'down')} ({host.fs_display}) | KERNEL: {host.kernel}...",
    )


def resolved_values(
    cfg: PreflightConfig,
    host: HostInfo,
    size: SizeSpec,
    profile: FilesystemProfile,
    resolver: CountryResolver,
) -> Dict[str, str]:
    return {
        "CORES": str(host.cpu_cores),
        "SOCKETS": str(host.sockets),
        "RAM_SIZE": size.normalized,
        "RAM_WANTED": str(size.bytes),
        "CPU_CORES": cfg.cpu_cores,
        "STORAGE": str(cfg.storage),
        "DISK_IO": profile.io_mode or "",
        "DISK_CACHE": profile.cache_mode or "",
        "COUNTRY": resolver.code or "",
    }


def write_env_file(path: Path, values: Dict[str, str]) -> None:
    """Write ``KEY=value`` lines that the launcher can source."""
    lines = [f"{key}={shlex.quote(value)}" for key, value in values.items()]
    path.write_text("\n".join(lines) + "\n")
    log("DEBUG", f"Wrote resolved settings to {path}")


def run_preflight(cfg: PreflightConfig, packages: List[Tuple[str, str]], env_file: Optional[Path] = None) -> Dict[str, str]:
    """Run every check in order; any PreflightError aborts the sequence."""
    check_environment(cfg)

    host = inspect_host(cfg.storage)
    profile = profile_filesystem(host.fs_type)
    if profile.tuned:
        log("DEBUG", f"{host.fs_type} storage: DISK_IO={profile.io_mode} DISK_CACHE={profile.cache_mode}")

    size = parse_size(cfg.ram_size)
    print_host_summary(host)

    governor = MemoryGovernor(
        total=host.mem_total,
        available=host.mem_available,
        fs_type=host.fs_type,
        enforce=cfg.ram_check,
    )
    governor.check(size)

    resolver = CountryResolver(timezone=cfg.timezone, preset=cfg.country)
    if packages:
        installer = PackageInstaller(
            resolver,
            status=StatusBroadcaster(),
            mirrors=load_mirror_config(cfg.mirrors_config),
        )
        for name, description in packages:
            installer.ensure(name, description)

    values = resolved_values(cfg, host, size, profile, resolver)
    if env_file is not None:
        write_env_file(env_file, values)
    return values


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Pre-flight checks for the VM launcher")
    parser.add_argument(
        "--install",
        action="append",
        default=[],
        type=parse_package_arg,
        metavar="PACKAGE[:DESCRIPTION]",
        help="Ensure a system package is installed (repeatable)",
    )
    parser.add_argument("--env-file", type=Path, help="Write resolved settings as shell assignments")
    parser.add_argument("--show-config", action="store_true", help="Show parsed configuration and exit")
    args = parser.parse_args(argv)

    try:
        cfg = parse_env()
        if args.show_config:
            show_config(cfg)
            return 0
        run_preflight(cfg, args.install, args.env_file)
    except PreflightError as exc:
        log("ERROR", str(exc))
        return exc.exit_code
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        traceback.print_exc()
        return 1
    return 0
