"""Utility functions for vm-preflight."""

from __future__ import annotations

import math
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from preflight.constants import _LOG_VERBOSE, FALSY, TRUTHY


def log(level: str, message: str) -> None:
    """Lightweight structured logging compatible with existing colour expectation."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a Y/N style flag; unknown values fall back to ``default``."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    if value[:1] in ("y", "1"):
        return True
    if value[:1] == "n":
        return False
    return default


def format_bytes(value: int, rounding: str = "nearest") -> str:
    """Format a byte count in base-1024 units.

    ``rounding`` is ``down`` for headroom figures (never overstate what is
    free), ``up`` for capacity figures, ``nearest`` otherwise.
    """
    units = (("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024))
    for label, size in units:
        if value >= size:
            break
    else:
        return f"{value} bytes"
    amount = value / size
    if rounding == "down":
        whole = math.floor(amount)
    elif rounding == "up":
        whole = math.ceil(amount)
    else:
        whole = round(amount)
    return f"{whole} {label}"


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def run(cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
    """Run command with logging."""
    log("DEBUG", f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=check, text=True, **kwargs)
    return result
