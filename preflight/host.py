"""Host introspection for vm-preflight."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Optional

from preflight.exceptions import PreflightError
from preflight.models import HostInfo
from preflight.storage import display_filesystem
from preflight.utils import log, run

MEMINFO = Path("/proc/meminfo")
CPUINFO = Path("/proc/cpuinfo")


def _read_meminfo() -> Dict[str, int]:
    """Return /proc/meminfo fields in bytes."""
    values: Dict[str, int] = {}
    try:
        with open(MEMINFO) as f:
            for line in f:
                key, _, rest = line.partition(":")
                parts = rest.split()
                if parts and parts[0].isascii() and parts[0].isdigit():
                    scale = 1024 if len(parts) > 1 and parts[1] == "kB" else 1
                    values[key.strip()] = int(parts[0]) * scale
    except OSError as exc:
        raise PreflightError(f"Unable to read {MEMINFO}: {exc}") from exc
    if "MemTotal" not in values:
        raise PreflightError(f"Unable to read {MEMINFO}: no MemTotal field")
    return values


def _cpu_model() -> str:
    try:
        with open(CPUINFO) as f:
            for line in f:
                if line.lower().startswith("model name"):
                    return " ".join(line.split(":", 1)[1].split())
    except OSError:
        pass
    return "Unknown"


def _cpu_cores() -> int:
    try:
        with open(CPUINFO) as f:
            count = sum(1 for line in f if line.startswith("processor"))
    except OSError:
        count = 0
    return count or os.cpu_count() or 1


def _cpu_sockets() -> int:
    try:
        result = run(["lscpu"], check=False, capture_output=True)
    except OSError:
        return 1
    for line in result.stdout.splitlines():
        if line.lower().startswith("socket(s)"):
            value = line.split(":", 1)[1].strip()
            if value.isdigit():
                return int(value)
    return 1


def filesystem_type(path: Path) -> str:
    """Filesystem type name as reported by `stat -f`."""
    try:
        result = run(["stat", "-f", "-c", "%T", str(path)], capture_output=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        log("WARN", f"Unable to detect filesystem of {path}: {exc}")
        return "unknown"
    return result.stdout.strip() or "unknown"


def disk_free(path: Path) -> int:
    try:
        return shutil.disk_usage(path).free
    except OSError:
        return 0


def inspect_host(storage: Path, meminfo: Optional[Dict[str, int]] = None) -> HostInfo:
    """Collect everything the pre-flight checks need to know about the host."""
    mem = meminfo if meminfo is not None else _read_meminfo()
    total = mem.get("MemTotal", 0)
    fs_type = filesystem_type(storage)
    return HostInfo(
        cpu_model=_cpu_model(),
        cpu_cores=_cpu_cores(),
        sockets=_cpu_sockets(),
        kernel=os.uname().release.replace("-generic", ""),
        mem_total=total,
        mem_available=mem.get("MemAvailable", mem.get("MemFree", 0)),
        disk_free=disk_free(storage),
        fs_type=fs_type,
        fs_display=display_filesystem(fs_type),
    )
