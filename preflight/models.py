"""Data models for vm-preflight."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

VERDICT_OK = "ok"
VERDICT_WARNING = "warning"
VERDICT_FATAL = "fatal"


@dataclass(frozen=True)
class SizeSpec:
    raw: str
    normalized: str  # e.g. "512M"
    unit: str  # "", "K", "M", "G", "T", "P" or "E"
    bytes: int

    @property
    def display(self) -> str:
        """Human form used in messages, e.g. ``4 GB``."""
        if not self.unit:
            return self.normalized
        return f"{self.normalized[:-1]} {self.unit}B"


@dataclass
class MemoryStatus:
    total: int
    available: int
    wanted: int
    spare: int
    fs_type: str
    verdict: str = VERDICT_OK
    message: str = ""

    @property
    def violated(self) -> bool:
        return self.verdict != VERDICT_OK


@dataclass(frozen=True)
class FilesystemProfile:
    fs_type: str
    io_mode: Optional[str] = None
    cache_mode: Optional[str] = None

    def __post_init__(self):
        if (self.io_mode is None) != (self.cache_mode is None):
            raise ValueError("io_mode and cache_mode must be set together")

    @property
    def tuned(self) -> bool:
        return self.io_mode is not None


@dataclass
class PackageRequest:
    name: str
    description: str
    installed: bool = False


@dataclass
class HostInfo:
    cpu_model: str
    cpu_cores: int
    sockets: int
    kernel: str
    mem_total: int
    mem_available: int
    disk_free: int
    fs_type: str  # raw `stat -f` type, used for policy decisions
    fs_display: str


@dataclass
class PreflightConfig:
    timezone: str
    country: str
    ram_size: str
    ram_check: bool
    cpu_cores: str
    storage: Path
    commit: bool = False
    mirrors_config: Optional[Path] = None
