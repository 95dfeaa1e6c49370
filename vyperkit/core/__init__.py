"""
Core functionality for vyperkit.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    VersionDirectory,
    get_default_home,
)

from .locking import (
    install_lock,
    cleanup_stale_locks,
    read_lock_holder,
    LockHolder,
)

from .platform import (
    Platform,
    detect_platform,
    platform_for,
)

from .version import Version

from .config import (
    VvmConfig,
    load_config,
)

from .exceptions import (
    VyperKitError,
    UnknownVersionError,
    TransportError,
    DownloadError,
    DownloadTimeoutError,
    UnsuccessfulResponseError,
    ChecksumMismatchError,
    VyperIoError,
    InstallLockError,
    InvalidVersionError,
    ReleaseCatalogError,
    CacheError,
    ConfigError,
    GlobalVersionNotSetError,
)

__all__ = [
    # Directory
    "VersionDirectory",
    "get_default_home",
    # Locking
    "install_lock",
    "cleanup_stale_locks",
    "read_lock_holder",
    "LockHolder",
    # Platform
    "Platform",
    "detect_platform",
    "platform_for",
    # Version
    "Version",
    # Config
    "VvmConfig",
    "load_config",
    # Exceptions
    "VyperKitError",
    "UnknownVersionError",
    "TransportError",
    "DownloadError",
    "DownloadTimeoutError",
    "UnsuccessfulResponseError",
    "ChecksumMismatchError",
    "VyperIoError",
    "InstallLockError",
    "InvalidVersionError",
    "ReleaseCatalogError",
    "CacheError",
    "ConfigError",
    "GlobalVersionNotSetError",
]
