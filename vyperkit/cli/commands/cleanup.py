"""
Cleanup command implementation.

Removes install lock files left behind by killed processes and, on request,
the compilation cache.
"""

import logging

from vyperkit.cli.utils import build_context
from vyperkit.core.exceptions import VyperIoError
from vyperkit.core.locking import cleanup_stale_locks

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cleanup command.

    Args:
        args: Parsed command-line arguments with:
            - older_than: Lock age threshold in hours
            - cache: Also delete the compilation cache file

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)

    removed = cleanup_stale_locks(ctx.directory.root, max_age_hours=args.older_than)
    print(f"Removed {removed} stale lock file(s)")

    if args.cache:
        cache_file = ctx.directory.cache_file_path
        if cache_file.exists():
            try:
                cache_file.unlink()
            except OSError as e:
                raise VyperIoError(cache_file, e) from e
            print(f"Removed compilation cache: {cache_file}")
        else:
            print("No compilation cache to remove")

    return 0
