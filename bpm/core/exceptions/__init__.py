"""Exception definitions module."""

from bpm.core.exceptions.errors import (
    BpmError,
    ConfigurationError,
    GitError,
    ImportParseError,
    LockfileError,
    PackageNotFoundError,
    ScanError,
    VendorError,
)

__all__ = [
    "BpmError",
    "ConfigurationError",
    "GitError",
    "ImportParseError",
    "LockfileError",
    "PackageNotFoundError",
    "ScanError",
    "VendorError",
]
