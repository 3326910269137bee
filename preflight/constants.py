"""Global constants and path configuration for vm-preflight."""

from __future__ import annotations

import os
import re
from pathlib import Path

TRUTHY = {"1", "true", "yes", "on", "y"}
FALSY = {"0", "false", "no", "off", "n"}

_LOG_VERBOSE = any(
    os.environ.get(name, "").strip().lower() in TRUTHY for name in ("DEBUG", "LOG_VERBOSE")
)

# Environment defaults
DEFAULT_RAM_SIZE = "2G"
DEFAULT_CPU_CORES = "2"
DEFAULT_STORAGE = Path("/storage")
COMMIT_STORAGE = Path("/local")
SHM_DIR = Path("/dev/shm")
RUN_SHM_DIR = Path("/run/shm")
DEFAULT_MIRRORS_CONFIG = Path("/config/mirrors.yaml")

# Exit codes
EXIT_STORAGE_MISSING = 13
EXIT_SHM_MISSING = 14
EXIT_INVALID_CORES = 15
EXIT_INVALID_RAM = 16
EXIT_RAM_TOO_HIGH = 17

CPU_CORES_RE = re.compile(r"[0-9 ]*")

# Memory
RAM_SPARE = 500_000_000
RAM_FLOOR = 136_314_880  # 130 MiB
LEGACY_GB_THRESHOLD = 130
SIZE_RE = re.compile(r"^([0-9]+(?:\.[0-9]*)?|\.[0-9]+)([KMGTPE]?)$")
SIZE_ALIASES = (("MB", "M"), ("GB", "G"), ("TB", "T"))
IEC_MULTIPLIERS = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
    "E": 1024**6,
}

# Filesystems
RAM_CHECK_EXEMPT_FS = {"zfs"}
FS_TUNING = {
    "ecryptfs": {"io_mode": "threads", "cache_mode": "writeback"},
    "tmpfs": {"io_mode": "threads", "cache_mode": "writeback"},
}

# Country resolution
GEO_TIMEOUT = 5
GEO_HEADERS = {"Accept": "application/json", "User-Agent": "vm-preflight/1.0"}
GEO_PROVIDERS = (
    ("https://api.ipapi.is", ("location", "country_code")),
    ("https://ifconfig.co/json", ("country_iso",)),
    ("https://api.ip2location.io", ("country_code",)),
    ("https://ipinfo.io/json", ("country",)),
    ("https://api.myip.com", ("cc",)),
)
UNKNOWN_COUNTRY = "XX"
TIMEZONE_COUNTRIES = {
    "asia/harbin": "CN",
    "asia/beijing": "CN",
    "asia/urumqi": "CN",
    "asia/kashgar": "CN",
    "asia/shanghai": "CN",
    "asia/chongqing": "CN",
}

# Package management
APT_SOURCES = Path("/etc/apt/sources.list.d/debian.sources")
DEFAULT_MIRROR_HOST = "deb.debian.org"
DEFAULT_MIRRORS = {"CN": "mirrors.ustc.edu.cn"}
