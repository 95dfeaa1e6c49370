"""
Entry point for the `vyper` wrapper command.

Runs the global Vyper version with the given arguments, serving single-file
compiles from the compilation cache when the source is unchanged.

Set VVM_DEBUG=1 to log cache decisions to stderr.
"""

import logging
import os
import sys
from typing import List, Optional

from vyperkit.caching.files_cache import NullFilesCache, VyperFilesCache
from vyperkit.cli.utils import print_error
from vyperkit.core.config import load_config
from vyperkit.core.directory import VersionDirectory
from vyperkit.core.exceptions import VyperKitError
from vyperkit.toolchain.registry import VersionRegistry
from vyperkit.toolchain.wrapper import CompilerWrapper

logger = logging.getLogger(__name__)


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run the wrapper.

    Args:
        argv: Compiler arguments (default: sys.argv[1:])

    Returns:
        Exit code of the compiler, or 1 on vyperkit errors
    """
    args = sys.argv[1:] if argv is None else argv

    try:
        config = load_config()
        directory = VersionDirectory(config.home)
        directory.setup()

        if config.cache_enabled:
            cache = VyperFilesCache.load(directory.cache_file_path)
        else:
            cache = NullFilesCache.new()

        wrapper = CompilerWrapper(VersionRegistry(directory), cache)
        return wrapper.run(args)
    except VyperKitError as e:
        print_error(str(e))
        return 1


def main():
    """Main entry point for the vyper wrapper."""
    debug = os.environ.get("VVM_DEBUG", "").lower() in ("1", "true", "yes")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )
    sys.exit(run())


if __name__ == "__main__":
    main()
