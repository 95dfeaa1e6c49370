"""
Platform detection for vyperkit.

Vyper publishes one binary per operating system; release assets carry the
platform token in their name (e.g. 'vyper.0.3.3+commit.48e326f0.darwin').
This module maps the host to that token.

Usage:
    from vyperkit.core.platform import detect_platform

    platform = detect_platform()
    print(f"Asset token: {platform}")
"""

import functools
import platform as _platform
from enum import Enum
from pathlib import Path


class Platform(Enum):
    """Platforms with published Vyper binaries."""

    LINUX = "linux"
    MACOS = "darwin"
    WINDOWS = "windows"
    UNSUPPORTED = "Unsupported-platform"

    def __str__(self) -> str:
        return self.value

    @property
    def token(self) -> str:
        """Substring that identifies this platform's release assets."""
        return self.value

    @classmethod
    def from_str(cls, name: str) -> "Platform":
        """
        Parse a platform name.

        Args:
            name: One of 'linux', 'darwin', 'macosx', 'windows'

        Returns:
            Matching Platform

        Raises:
            ValueError: If the name is not a supported platform
        """
        aliases = {
            "linux": cls.LINUX,
            "darwin": cls.MACOS,
            "macosx": cls.MACOS,
            "macos": cls.MACOS,
            "windows": cls.WINDOWS,
        }
        try:
            return aliases[name.strip().lower()]
        except KeyError:
            raise ValueError(f"unsupported platform {name}")


_SUPPORTED = {
    ("linux", "x86_64"): Platform.LINUX,
    ("linux", "aarch64"): Platform.LINUX,
    ("darwin", "x86_64"): Platform.MACOS,
    ("darwin", "arm64"): Platform.MACOS,
    ("darwin", "aarch64"): Platform.MACOS,
    ("windows", "amd64"): Platform.WINDOWS,
    ("windows", "x86_64"): Platform.WINDOWS,
}


def platform_for(system: str, machine: str) -> Platform:
    """
    Map an (OS, architecture) pair to a Platform.

    Args:
        system: Value of platform.system() (case-insensitive)
        machine: Value of platform.machine() (case-insensitive)

    Returns:
        Platform, or Platform.UNSUPPORTED for unknown combinations

    Example:
        >>> platform_for("Linux", "x86_64")
        <Platform.LINUX: 'linux'>
    """
    return _SUPPORTED.get((system.lower(), machine.lower()), Platform.UNSUPPORTED)


@functools.lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.
    """
    return platform_for(_platform.system(), _platform.machine())


def is_nixos() -> bool:
    """Check whether the host runs NixOS (prebuilt binaries need patching there)."""
    return Path("/etc/NIXOS").exists()
