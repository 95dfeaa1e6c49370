"""
Install pipeline for Vyper compiler binaries.

Installing a version runs these steps:

1. Resolve the platform artifact for the version (release catalog)
2. Download the artifact bytes (bounded timeout)
3. Verify the SHA256 digest when the catalog publishes one
4. Acquire the version's install lock (blocks while another process or
   thread installs the same version)
5. Atomically place the binary at ``<root>/<version>/vyper-<version>`` with
   executable permissions
6. Release the lock and delete the lock file

Installs of different versions use different locks and proceed in parallel.
Two installs of the same version leave one complete binary behind, since
both write identical bytes through an atomic rename.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import requests

from vyperkit.core.directory import VersionDirectory
from vyperkit.core.download import (
    REQUEST_TIMEOUT,
    DownloadProgress,
    checksum_matches,
    fetch_bytes,
    sha256_hex,
)
from vyperkit.core.exceptions import ChecksumMismatchError
from vyperkit.core.filesystem import atomic_write
from vyperkit.core.locking import install_lock
from vyperkit.core.version import Version
from vyperkit.toolchain.releases import ReleaseCatalog

logger = logging.getLogger(__name__)

BINARY_MODE = 0o755


class Installer:
    """
    Downloads and installs compiler versions into a VersionDirectory.

    Example:
        >>> installer = Installer(VersionDirectory(home), ReleaseCatalog(detect_platform()))
        >>> installer.install(Version.parse("0.3.3"))
        PosixPath('/home/user/.vvm/0.3.3/vyper-0.3.3')
    """

    def __init__(
        self,
        directory: VersionDirectory,
        catalog: ReleaseCatalog,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        verify_checksums: bool = True,
        lock_timeout: float = -1,
    ):
        """
        Initialize installer.

        Args:
            directory: Version directory to install into
            catalog: Release catalog used to resolve artifacts
            timeout: Download timeout in seconds
            session: Optional requests session for downloads
            verify_checksums: Compare payloads against published digests
            lock_timeout: Seconds to wait for the install lock (negative blocks)
        """
        self.directory = directory
        self.catalog = catalog
        self.timeout = timeout
        self.session = session
        self.verify_checksums = verify_checksums
        self.lock_timeout = lock_timeout

    def is_installed(self, version: Version) -> bool:
        """Check whether the binary for a version exists."""
        return self.directory.binary_path(version).is_file()

    def install(
        self,
        version: Version,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Install a version, replacing any existing binary for it.

        Args:
            version: Version to install
            progress_callback: Optional callback for download progress

        Returns:
            Path to the installed binary

        Raises:
            UnknownVersionError: If the catalog has no artifact for the version
            UnsuccessfulResponseError: If the download returns a non-2xx status
            DownloadError: On network failure or timeout
            ChecksumMismatchError: If the payload does not match its digest
            InstallLockError: If the lock file cannot be acquired
            VyperIoError: On filesystem failures
        """
        self.directory.setup()

        artifact = self.catalog.resolve_artifact(version)
        url = self.catalog.artifact_url(version, artifact)

        binbytes = fetch_bytes(
            url,
            timeout=self.timeout,
            session=self.session,
            progress_callback=progress_callback,
        )
        self._ensure_checksum(version, binbytes)

        self.directory.ensure_version_dir(version)
        binary_path = self.directory.binary_path(version)

        with install_lock(
            self.directory.lock_file_path(version), timeout=self.lock_timeout
        ):
            atomic_write(binary_path, binbytes, mode=BINARY_MODE)

        logger.info(f"Installed vyper {version} at {binary_path}")
        return binary_path

    async def install_async(
        self,
        version: Version,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """Awaitable install; runs the blocking pipeline on a worker thread."""
        return await asyncio.to_thread(self.install, version, progress_callback)

    def ensure_installed(self, version: Version) -> Path:
        """Return the installed binary path, installing the version if needed."""
        if self.is_installed(version):
            logger.debug(f"vyper {version} already installed")
            return self.directory.binary_path(version)
        return self.install(version)

    def _ensure_checksum(self, version: Version, binbytes: bytes) -> None:
        if not self.verify_checksums:
            return

        expected = self.catalog.get_checksum(version)
        if not expected:
            logger.warning(
                f"No published checksum for vyper {version}; installing unverified binary"
            )
            return

        if not checksum_matches(binbytes, expected):
            raise ChecksumMismatchError(str(version), expected, sha256_hex(binbytes))
        logger.debug(f"Checksum verified for vyper {version}")
