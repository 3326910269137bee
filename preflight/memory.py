"""Requested-versus-available memory policy for vm-preflight."""

from __future__ import annotations

from preflight.constants import RAM_CHECK_EXEMPT_FS, RAM_SPARE
from preflight.exceptions import ResourceInsufficientError
from preflight.models import (
    VERDICT_FATAL,
    VERDICT_WARNING,
    MemoryStatus,
    SizeSpec,
)
from preflight.utils import format_bytes, log


class MemoryGovernor:
    """Decide whether the requested guest memory fits on this host."""

    def __init__(self, total: int, available: int, fs_type: str, enforce: bool = True, spare: int = RAM_SPARE) -> None:
        self.total = total
        self.available = available
        self.fs_type = fs_type
        self.enforce = enforce
        self.spare = spare

    @property
    def exempt(self) -> bool:
        return self.fs_type.strip().lower() in RAM_CHECK_EXEMPT_FS

    def evaluate(self, size: SizeSpec) -> MemoryStatus:
        status = MemoryStatus(
            total=self.total,
            available=self.available,
            wanted=size.bytes,
            spare=self.spare,
            fs_type=self.fs_type,
        )
        if not self.enforce or size.bytes + self.spare <= self.available:
            return status
        status.message = (
            f"Your configured RAM_SIZE of {size.display} is too high for the "
            f"{format_bytes(self.available)} of memory available, please set a lower value."
        )
        status.verdict = VERDICT_WARNING if self.exempt else VERDICT_FATAL
        return status

    def check(self, size: SizeSpec) -> MemoryStatus:
        """Evaluate ``size`` and raise when the verdict is fatal."""
        status = self.evaluate(size)
        if status.verdict == VERDICT_FATAL:
            raise ResourceInsufficientError(status.message)
        if status.verdict == VERDICT_WARNING:
            log("WARN", status.message)
        elif not self.enforce:
            log("DEBUG", "RAM_CHECK disabled; skipping available memory check")
        return status


def describe_memory(total: int, available: int) -> str:
    """Banner figure such as ``3/8 GB``: available rounded down, total rounded up."""
    avail = format_bytes(available, "down")
    total_text = format_bytes(total, "up")
    unit = total_text.split(" ", 1)[1]
    if avail.endswith(f" {unit}"):
        avail = avail[: -len(unit) - 1]
    return f"{avail}/{total_text}"
