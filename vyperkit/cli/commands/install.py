"""
Install command implementation.

Downloads and installs compiler versions. The first version installed
becomes the global version.
"""

import logging

from vyperkit.cli.utils import (
    VvmContext,
    build_context,
    confirm,
    make_progress_printer,
    print_set_global_version,
    print_unsupported_version,
)
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments with:
            - versions: Version strings to install

    Returns:
        Exit code (0 for success, 1 if any version is unsupported)
    """
    versions = [Version.parse(v) for v in args.versions]
    ctx = build_context(args)

    exit_code = 0
    for version in versions:
        if install_version(ctx, version) != 0:
            exit_code = 1
    return exit_code


def install_version(ctx: VvmContext, version: Version) -> int:
    """
    Install one version, or offer to activate it if already installed.

    Returns:
        Exit code for this version
    """
    installed = ctx.registry.list_installed()

    if version in installed:
        print(f"Vyper {version} is already installed")
        if confirm("Would you like to set it as the global version?", ctx.assume_yes):
            ctx.registry.set_current(version)
            print_set_global_version(version)
        return 0

    if version not in ctx.catalog.all_versions():
        print_unsupported_version(version)
        return 1

    current = ctx.registry.current()

    print(f"Installing Vyper {version}...")
    path = ctx.installer.install(version, make_progress_printer(ctx.quiet))
    print(f"Downloaded Vyper: {version}")
    logger.debug(f"Binary at {path}")

    if current is None:
        ctx.registry.set_current(version)
        print_set_global_version(version)

    return 0
