"""
Shared utilities for CLI commands.

Builds the components a command needs from the parsed arguments and
configuration, and provides consistent prompts and output.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from vyperkit.core.config import VvmConfig, load_config
from vyperkit.core.directory import VersionDirectory
from vyperkit.core.download import DownloadProgress
from vyperkit.core.platform import detect_platform
from vyperkit.core.version import Version
from vyperkit.toolchain.installer import Installer
from vyperkit.toolchain.registry import VersionRegistry
from vyperkit.toolchain.releases import ReleaseCatalog

logger = logging.getLogger(__name__)


# ============================================================================
# Component Wiring
# ============================================================================


@dataclass
class VvmContext:
    """Components shared by the vvm commands."""

    config: VvmConfig
    directory: VersionDirectory
    registry: VersionRegistry
    catalog: ReleaseCatalog
    installer: Installer
    assume_yes: bool = False
    quiet: bool = False


def build_context(args) -> VvmContext:
    """
    Build command components from parsed arguments.

    Args:
        args: Parsed arguments; reads optional `home`, `yes` and `quiet`

    Returns:
        VvmContext rooted at --home, VVM_HOME or ~/.vvm

    Raises:
        ConfigError: If the configuration file is invalid
        VyperIoError: If the root directory cannot be created
    """
    home: Optional[Path] = getattr(args, "home", None)
    config = load_config(home)

    directory = VersionDirectory(config.home)
    directory.setup()

    catalog = ReleaseCatalog(
        detect_platform(),
        releases_url=config.releases_url,
        download_base_url=config.download_base_url,
        timeout=config.request_timeout,
        token=config.github_token,
    )
    installer = Installer(
        directory,
        catalog,
        timeout=config.request_timeout,
        verify_checksums=config.verify_checksums,
    )

    return VvmContext(
        config=config,
        directory=directory,
        registry=VersionRegistry(directory),
        catalog=catalog,
        installer=installer,
        assume_yes=bool(getattr(args, "yes", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    """
    Ask a yes/no question, defaulting to no.

    Args:
        prompt: Question to show
        assume_yes: Skip the prompt and answer yes

    Returns:
        True if the user answered yes
    """
    if assume_yes:
        return True

    try:
        response = input(f"{prompt} [y/N] ").strip().lower()
    except EOFError:
        print()
        return False

    return response in ("y", "yes")


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_versions(title: str, versions: Iterable[Version]):
    """Print a titled list of versions, one per line."""
    versions = list(versions)
    print(f"{title}:")
    if not versions:
        print("  (none)")
        return
    for version in versions:
        print(f"  {version}")


def print_set_global_version(version: Version):
    print(f"Global version set: {version}")


def print_unsupported_version(version: Version):
    print_error(f"Version {version} is not supported on this platform")


def make_progress_printer(quiet: bool = False):
    """
    Build a download progress callback that redraws one stderr line.

    Returns:
        Callback, or None when quiet
    """
    if quiet:
        return None

    def on_progress(progress: DownloadProgress):
        print(f"\r  {progress}", end="", file=sys.stderr, flush=True)
        if progress.total_bytes and progress.bytes_downloaded >= progress.total_bytes:
            print(file=sys.stderr)

    return on_progress
