"""
Directory structure management for vyperkit.

Every installed compiler, the global version pointer, per-version install
locks and the compilation cache live under a single root directory. The root
is passed explicitly to the components that use it so tests can point them
at an isolated temporary directory.

Directory Structure (~/.vvm/ or %USERPROFILE%\\.vvm\\):
    - .global-version           : Empty, or the active version string
    - .lock-vyper-<version>     : Transient install lock
    - config.yaml               : Optional configuration
    - <version>/vyper-<version> : Installed binary
    - cache/                    : Compilation cache documents
"""

import logging
import os
from pathlib import Path
from typing import Union

from vyperkit.core.exceptions import VyperIoError
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)

TOOL_NAME = "vyper"
GLOBAL_VERSION_FILENAME = ".global-version"
LOCK_FILE_PREFIX = ".lock-"
CACHE_DIRNAME = "cache"
CONFIG_FILENAME = "config.yaml"
CACHE_FILENAME = "vvm-vyper-files-cache.json"


def get_default_home() -> Path:
    """
    Get the platform-specific default root directory.

    The VVM_HOME environment variable overrides the default.

    Returns:
        Path: The root directory path.
            - Windows: %USERPROFILE%\\.vvm
            - Linux/macOS: ~/.vvm/
    """
    override = os.environ.get("VVM_HOME")
    if override:
        return Path(override).expanduser()

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if user_profile:
            return Path(user_profile) / ".vvm"
    return Path.home() / ".vvm"


class VersionDirectory:
    """
    Path derivation for the version-keyed directory tree.

    Holds no state besides the root path. All derived paths are pure
    functions of the root and the version.

    Example:
        >>> directory = VersionDirectory(Path("/home/user/.vvm"))
        >>> directory.binary_path(Version.parse("0.3.3"))
        PosixPath('/home/user/.vvm/0.3.3/vyper-0.3.3')
    """

    def __init__(self, root: Union[str, Path], tool_name: str = TOOL_NAME):
        self.root = Path(root)
        self.tool_name = tool_name

    @property
    def global_version_path(self) -> Path:
        return self.root / GLOBAL_VERSION_FILENAME

    @property
    def cache_dir(self) -> Path:
        return self.root / CACHE_DIRNAME

    @property
    def cache_file_path(self) -> Path:
        return self.cache_dir / CACHE_FILENAME

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def version_path(self, version: Union[Version, str]) -> Path:
        """Directory holding one installed version."""
        return self.root / str(version)

    def binary_name(self, version: Union[Version, str]) -> str:
        return f"{self.tool_name}-{version}"

    def binary_path(self, version: Union[Version, str]) -> Path:
        """Path of the installed binary for a version."""
        return self.version_path(version) / self.binary_name(version)

    def lock_file_path(self, version: Union[Version, str]) -> Path:
        """Lock file guarding installation of a version."""
        return self.root / f"{LOCK_FILE_PREFIX}{self.tool_name}-{version}"

    def is_reserved(self, name: str) -> bool:
        """
        Check whether a root entry belongs to the layout itself.

        Reserved entries are the pointer file, lock and other dot-files, the
        cache directory and the configuration file. Everything else under
        the root is an installed version.
        """
        return name.startswith(".") or name in (CACHE_DIRNAME, CONFIG_FILENAME)

    def setup(self) -> Path:
        """
        Create the root directory and empty pointer file (idempotent).

        Returns:
            The root directory path

        Raises:
            VyperIoError: If the root or pointer file cannot be created
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VyperIoError(self.root, e) from e

        pointer = self.global_version_path
        if not pointer.exists():
            try:
                pointer.touch()
                logger.debug(f"Created global version file: {pointer}")
            except OSError as e:
                raise VyperIoError(pointer, e) from e

        return self.root

    def ensure_version_dir(self, version: Union[Version, str]) -> Path:
        """Create the directory for a version if missing."""
        path = self.version_path(version)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VyperIoError(path, e) from e
        return path

    def __repr__(self) -> str:
        return f"VersionDirectory({str(self.root)!r})"
