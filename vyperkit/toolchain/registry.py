"""
Installed and active version tracking.

The registry holds no state of its own: installed versions are the version
directories under the root, and the active version is the content of the
``.global-version`` pointer file.
"""

import logging
from pathlib import Path
from typing import List, Optional

from vyperkit.core.directory import VersionDirectory
from vyperkit.core.exceptions import (
    GlobalVersionNotSetError,
    UnknownVersionError,
    VyperIoError,
)
from vyperkit.core.filesystem import remove_tree
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)


class VersionRegistry:
    """
    Reads and writes the installed/active version state of a VersionDirectory.

    set_current() does not check that the version is installed; callers do
    that before calling it. remove() does not touch the pointer file.

    Example:
        >>> registry = VersionRegistry(VersionDirectory(home))
        >>> registry.set_current(Version.parse("0.3.3"))
        >>> registry.current()
        Version('0.3.3')
    """

    def __init__(self, directory: VersionDirectory):
        self.directory = directory

    def list_installed(self) -> List[Version]:
        """
        List installed versions in ascending order.

        Returns:
            Sorted versions; empty when nothing is installed or the root is missing

        Raises:
            UnknownVersionError: If any version entry has an unparseable name
            VyperIoError: If the root cannot be read
        """
        root = self.directory.root
        if not root.exists():
            return []

        prefix = f"{self.directory.tool_name}-"
        versions = []
        try:
            entries = list(root.iterdir())
        except OSError as e:
            raise VyperIoError(root, e) from e

        for entry in entries:
            name = entry.name
            if self.directory.is_reserved(name):
                continue
            if name.startswith(prefix):
                name = name[len(prefix):]

            version = Version.try_parse(name)
            if version is None:
                raise UnknownVersionError(
                    entry.name, f"unexpected entry in {root}"
                )
            versions.append(version)

        versions.sort()
        return versions

    def is_installed(self, version: Version) -> bool:
        return version in self.list_installed()

    def current(self) -> Optional[Version]:
        """
        Read the global version.

        Returns:
            The active version, or None if unset. Unparseable pointer content
            is treated as unset (and logged).
        """
        pointer = self.directory.global_version_path
        try:
            content = pointer.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring undecodable global version in {pointer}: {e}")
            return None
        except OSError as e:
            raise VyperIoError(pointer, e) from e

        if not content:
            return None

        version = Version.try_parse(content)
        if version is None:
            logger.warning(
                f"Ignoring malformed global version {content!r} in {pointer}"
            )
        return version

    def require_current(self) -> Version:
        """
        Read the global version, failing when none is set.

        Raises:
            GlobalVersionNotSetError: If no global version is set
        """
        version = self.current()
        if version is None:
            raise GlobalVersionNotSetError()
        return version

    def set_current(self, version: Version) -> None:
        """Make a version the global version."""
        self._write_pointer(str(version))
        logger.debug(f"Global version set to {version}")

    def unset_current(self) -> None:
        """Clear the global version."""
        self._write_pointer("")
        logger.debug("Global version unset")

    def remove(self, version: Version) -> None:
        """
        Delete an installed version's directory.

        Raises:
            VyperIoError: If the version directory is missing or cannot be removed
        """
        path = self.directory.version_path(version)
        remove_tree(path, require_prefix=self.directory.root)
        logger.info(f"Removed vyper {version}")

    def binary_path(self, version: Version) -> Path:
        return self.directory.binary_path(version)

    def _write_pointer(self, content: str) -> None:
        pointer = self.directory.global_version_path
        try:
            pointer.parent.mkdir(parents=True, exist_ok=True)
            pointer.write_text(content, encoding="utf-8")
        except OSError as e:
            raise VyperIoError(pointer, e) from e
