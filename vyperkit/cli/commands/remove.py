"""
Remove command implementation.

Removes installed versions. When the global version is removed, the greatest
remaining installed version becomes global, or the pointer is cleared if
none remain.
"""

import logging

from vyperkit.cli.utils import (
    VvmContext,
    build_context,
    confirm,
    print_error,
    print_set_global_version,
)
from vyperkit.core.version import Version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments with:
            - version: Version string, or 'all'

    Returns:
        Exit code (0 for success, 1 if the version is not installed)
    """
    if args.version.lower() == "all":
        return _remove_all(build_context(args))

    version = Version.parse(args.version)
    return remove_version(build_context(args), version)


def _remove_all(ctx: VvmContext) -> int:
    for version in ctx.registry.list_installed():
        ctx.registry.remove(version)
        print(f"Removed Vyper {version}")
    ctx.registry.unset_current()
    return 0


def remove_version(ctx: VvmContext, version: Version) -> int:
    """
    Remove one version and repoint the global version if it was removed.

    Returns:
        Exit code
    """
    installed = ctx.registry.list_installed()
    current = ctx.registry.current()

    if version not in installed:
        print_error(f"Version {version} is not installed")
        return 1

    if not confirm(f"Remove Vyper {version}. Are you sure?", ctx.assume_yes):
        print("Removal cancelled")
        return 0

    ctx.registry.remove(version)
    print(f"Removed Vyper {version}")

    if current == version:
        remaining = [v for v in installed if v != version]
        if remaining:
            fallback = remaining[-1]
            ctx.registry.set_current(fallback)
            print_set_global_version(fallback)
        else:
            ctx.registry.unset_current()
            print("Global version unset")

    return 0
