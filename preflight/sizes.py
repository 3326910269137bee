"""Memory size parsing for vm-preflight."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from preflight.constants import (
    EXIT_INVALID_RAM,
    IEC_MULTIPLIERS,
    LEGACY_GB_THRESHOLD,
    RAM_FLOOR,
    SIZE_ALIASES,
    SIZE_RE,
)
from preflight.exceptions import ConfigurationError
from preflight.models import SizeSpec


def _apply_legacy_unit(value: str) -> str:
    """Bare numbers below 130 are gigabytes, anything larger is megabytes."""
    whole = value.split(".", 1)[0]
    amount = int(whole) if whole else 0
    return f"{value}G" if amount < LEGACY_GB_THRESHOLD else f"{value}M"


def normalize_size(raw: str) -> str:
    value = "".join(raw.split())
    if not value:
        raise ConfigurationError("RAM_SIZE not specified!", exit_code=EXIT_INVALID_RAM)
    if all(ch in "0123456789." for ch in value):
        value = _apply_legacy_unit(value)
    value = value.upper()
    for alias, unit in SIZE_ALIASES:
        value = value.replace(alias, unit)
    return value


def parse_size(raw: str, floor: int = RAM_FLOOR) -> SizeSpec:
    """Parse an IEC size string such as ``2G``, ``512 mb`` or ``4096``."""
    normalized = normalize_size(raw)
    match = SIZE_RE.match(normalized)
    if not match:
        raise ConfigurationError(f"Invalid RAM_SIZE: {normalized}", exit_code=EXIT_INVALID_RAM)
    number, unit = match.groups()
    try:
        amount = Decimal(number) * IEC_MULTIPLIERS[unit]
    except InvalidOperation:
        raise ConfigurationError(f"Invalid RAM_SIZE: {normalized}", exit_code=EXIT_INVALID_RAM)
    wanted = int(math.ceil(amount))
    if wanted < floor:
        raise ConfigurationError(f"RAM_SIZE is too low: {normalized}", exit_code=EXIT_INVALID_RAM)
    return SizeSpec(raw=raw, normalized=normalized, unit=unit, bytes=wanted)
