"""
List command implementation.

Shows the global version, installed versions and versions available for
download on this platform.
"""

import logging

from vyperkit.cli.utils import build_context, print_versions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)

    all_versions = ctx.catalog.all_versions()
    installed = ctx.registry.list_installed()
    current = ctx.registry.current()

    installed_set = set(installed)
    available = sorted(v for v in all_versions if v not in installed_set)

    print(f"Current version: {current if current is not None else '(not set)'}")
    print()
    print_versions("Installed versions", installed)
    print()
    print_versions("Available versions", available)

    return 0
