"""vm-preflight package."""

__all__ = [
    "cli",
    "config",
    "constants",
    "country",
    "exceptions",
    "host",
    "memory",
    "models",
    "packages",
    "sizes",
    "status",
    "storage",
    "utils",
]
