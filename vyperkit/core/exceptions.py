"""
Centralized exception hierarchy for vyperkit.

This module defines all custom exceptions used across the codebase so that
callers can catch a single base class (VyperKitError) at the CLI boundary
while still distinguishing resolution, transport, filesystem, parse and
state failures.
"""

from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class VyperKitError(Exception):
    """Base exception for all vyperkit errors."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class UnknownVersionError(VyperKitError):
    """Raised when a version has no artifact for this platform or is not installed."""

    def __init__(self, version: Optional[str] = None, detail: str = ""):
        self.version = version
        if version is not None:
            msg = f"Unknown version: {version}"
        else:
            msg = "Unknown version"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


# ============================================================================
# Transport Exceptions
# ============================================================================


class TransportError(VyperKitError):
    """Base exception for network failures."""

    pass


class DownloadError(TransportError):
    """Raised when a request fails before a response is received."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Request to {url} failed: {reason}")


class DownloadTimeoutError(DownloadError):
    """Raised when a request exceeds its timeout."""

    pass


class UnsuccessfulResponseError(TransportError):
    """Raised when the server does not return a success status."""

    def __init__(self, url: str, status: int):
        self.url = url
        self.status = status
        super().__init__(f"Unsuccessful response from {url}: HTTP {status}")


# ============================================================================
# Integrity Exceptions
# ============================================================================


class ChecksumMismatchError(VyperKitError):
    """Raised when a downloaded binary does not match its published digest."""

    def __init__(self, version: str, expected: str, actual: str):
        self.version = version
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for version {version}: "
            f"expected {expected}, got {actual}"
        )


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class VyperIoError(VyperKitError):
    """An I/O failure attached to the path it happened on."""

    def __init__(self, path: Union[str, Path], error: BaseException):
        self.path = Path(path)
        self.error = error
        super().__init__(f'"{self.path}": {error}')


class InstallLockError(VyperKitError):
    """Raised when the per-version install lock cannot be acquired."""

    def __init__(self, lock_path: Union[str, Path], reason: str):
        self.lock_path = Path(lock_path)
        super().__init__(f"Could not acquire install lock {self.lock_path}: {reason}")


# ============================================================================
# Parse Exceptions
# ============================================================================


class InvalidVersionError(VyperKitError, ValueError):
    """Invalid semantic version string."""

    pass


class ReleaseCatalogError(VyperKitError):
    """Malformed response from the release listing."""

    pass


class CacheError(VyperKitError):
    """Malformed or incompatible compilation cache document."""

    pass


class ConfigError(VyperKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# State Exceptions
# ============================================================================


class GlobalVersionNotSetError(VyperKitError):
    """Raised when the global version is required but has never been set."""

    def __init__(self):
        super().__init__(
            "Global version not set. Run 'vvm use <version>' to select one."
        )
