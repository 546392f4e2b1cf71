"""Custom exception definitions for bpm."""

from typing import Any


class BpmError(Exception):
    """Base exception for all bpm errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class GitError(BpmError):
    """Exception raised for Git operation errors."""

    def __init__(
        self,
        message: str,
        repo_url: str | None = None,
        git_ref: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize Git error.

        Args:
            message: Error message.
            repo_url: Repository URL that caused the error.
            git_ref: Git reference (branch/commit) involved.
            details: Additional error details.
        """
        details = details or {}
        if repo_url:
            details["repo_url"] = repo_url
        if git_ref:
            details["git_ref"] = git_ref
        super().__init__(message, details)


class ScanError(BpmError):
    """Exception raised when a project tree cannot be scanned."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize scan error.

        Args:
            message: Error message.
            path: Directory or file that could not be read.
            details: Additional error details.
        """
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class ImportParseError(ScanError):
    """Exception raised when a source file's imports cannot be parsed."""


class LockfileError(BpmError):
    """Exception raised when the lockfile cannot be read, written, or is invalid."""

    def __init__(
        self,
        message: str,
        lockfile_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize lockfile error.

        Args:
            message: Error message.
            lockfile_path: Path to the lockfile involved.
            details: Additional error details.
        """
        details = details or {}
        if lockfile_path:
            details["lockfile_path"] = lockfile_path
        super().__init__(message, details)


class PackageNotFoundError(BpmError):
    """Exception raised when a package is not recorded in the lockfile."""

    def __init__(self, package: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["package"] = package
        super().__init__(f"Package not found in lockfile: {package}", details)
        self.package = package


class VendorError(BpmError):
    """Exception raised for vendor directory management errors."""

    def __init__(
        self,
        message: str,
        vendor_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize vendor error.

        Args:
            message: Error message.
            vendor_path: Path to the vendor directory.
            details: Additional error details.
        """
        details = details or {}
        if vendor_path:
            details["vendor_path"] = vendor_path
        super().__init__(message, details)


class ConfigurationError(BpmError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
