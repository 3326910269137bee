"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from preflight.models import HostInfo, PreflightConfig


@pytest.fixture
def host_info() -> HostInfo:
    """An 8 GiB host with 4 GB free on ext4."""
    return HostInfo(
        cpu_model="Intel Xeon",
        cpu_cores=4,
        sockets=1,
        kernel="6.8.0-31",
        mem_total=8 * 1024**3,
        mem_available=4_000_000_000,
        disk_free=100 * 1024**3,
        fs_type="ext2/ext3",
        fs_display="ext4",
    )


@pytest.fixture
def preflight_config(tmp_path) -> PreflightConfig:
    return PreflightConfig(
        timezone="",
        country="",
        ram_size="2G",
        ram_check=True,
        cpu_cores="2",
        storage=tmp_path,
    )


@pytest.fixture
def mock_env(monkeypatch):
    """Helper to set environment variables for tests."""

    def _set(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, str(value))

    return _set


# All environment variables that parse_env() reads — used to ensure a clean slate.
_PARSE_ENV_VARS = [
    "TZ",
    "COUNTRY",
    "RAM_SIZE",
    "RAM_CHECK",
    "CPU_CORES",
    "STORAGE",
    "COMMIT",
    "MIRRORS_CONFIG",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear all environment variables that parse_env() reads."""
    for key in _PARSE_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


def json_response(payload=None, status_code=200, json_error=False, chunks=None):
    """Build a fake streamed requests.Response whose body is ``payload`` as JSON."""
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    resp.status_code = status_code
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    if chunks is None:
        body = b"<html>busy</html>" if json_error else json.dumps(payload).encode()
        chunks = [body]
    resp.iter_content.return_value = iter(chunks)
    return resp


@pytest.fixture
def geo_session():
    """A requests.Session stand-in; set ``side_effect`` on ``.get`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sources_file(tmp_path) -> Path:
    path = tmp_path / "debian.sources"
    path.write_text(
        "Types: deb\n"
        "URIs: http://deb.debian.org/debian\n"
        "Suites: bookworm bookworm-updates\n"
        "Components: main\n"
    )
    return path
