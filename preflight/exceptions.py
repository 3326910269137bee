"""Custom exceptions for vm-preflight."""

from __future__ import annotations

from typing import List, Optional

from preflight.constants import EXIT_RAM_TOO_HIGH


class PreflightError(RuntimeError):
    """Raised on unrecoverable configuration or runtime errors."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(PreflightError):
    """Malformed or missing environment input."""


class ResourceInsufficientError(PreflightError):
    """Requested memory exceeds what the host has available."""

    exit_code = EXIT_RAM_TOO_HIGH


class LookupFailure(Exception):
    """A single geolocation provider failed or returned unusable data."""


class InstallFailure(PreflightError):
    """Package index refresh or install step failed."""

    def __init__(self, command: List[str], status: int) -> None:
        self.command = command
        self.status = status
        super().__init__(
            f"Status {status} while: {' '.join(command)}",
            exit_code=status if status > 0 else 1,
        )
