"""Filesystem-derived disk tuning for vm-preflight."""

from __future__ import annotations

from preflight.constants import FS_TUNING
from preflight.models import FilesystemProfile


def profile_filesystem(fs_type: str) -> FilesystemProfile:
    """Return the io/cache hints for ``fs_type``; unknown types keep engine defaults.

    ecryptfs and tmpfs do not cope with O_DIRECT, so the disk must run with
    threaded I/O and the host page cache.
    """
    tuning = FS_TUNING.get(fs_type.strip().lower())
    if tuning is None:
        return FilesystemProfile(fs_type=fs_type)
    return FilesystemProfile(fs_type=fs_type, **tuning)


def display_filesystem(fs_type: str) -> str:
    """Clean up `stat -f` output for the startup banner."""
    name = fs_type.replace("UNKNOWN ", "")
    name = name.replace("ext2/ext3", "ext4")
    return name.replace("(", "").replace(")", "")
