"""
Use command implementation.

Sets the global version, offering to install it first when needed.
"""

import logging

from vyperkit.cli.commands.install import install_version
from vyperkit.cli.utils import (
    build_context,
    confirm,
    print_set_global_version,
    print_unsupported_version,
)
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments with:
            - version: Version string to activate

    Returns:
        Exit code (0 for success)
    """
    version = Version.parse(args.version)
    ctx = build_context(args)

    if ctx.registry.is_installed(version):
        ctx.registry.set_current(version)
        print_set_global_version(version)
        return 0

    if version in ctx.catalog.all_versions():
        print(f"Vyper {version} is not installed")
        if confirm("Would you like to install it?", ctx.assume_yes):
            return install_version(ctx, version)
        return 0

    print_unsupported_version(version)
    return 1
