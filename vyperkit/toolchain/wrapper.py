"""
Caching wrapper around the active Vyper binary.

``vyper Token.vy`` first looks the file up in the compilation cache. If the
file is unchanged since its last successful compile, the cached bytecode is
printed and the compiler is never started. Otherwise the active binary runs
with the same arguments and, on success, the new bytecode is cached.

Only the single-file form (exactly one argument, not a flag) is cached;
every other invocation passes straight through to the compiler.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from vyperkit.caching.files_cache import VyperFilesCache
from vyperkit.core.exceptions import VyperIoError, VyperKitError
from vyperkit.toolchain.registry import VersionRegistry

logger = logging.getLogger(__name__)


def is_cacheable(args: Sequence[str]) -> bool:
    """Check whether an invocation is the single-file form."""
    return len(args) == 1 and not args[0].startswith("-")


def extract_bytecode(stdout: str) -> Optional[str]:
    """
    Pick cacheable output from compiler stdout.

    Returns:
        The trimmed output if it is a hex bytecode string, else None
    """
    text = stdout.strip()
    if text.startswith("0x"):
        return text
    return None


class CompilerWrapper:
    """
    Runs the active compiler through the compilation cache.

    Example:
        >>> wrapper = CompilerWrapper(registry, VyperFilesCache.load(cache_path))
        >>> exit_code = wrapper.run(["contracts/Token.vy"])
    """

    def __init__(
        self,
        registry: VersionRegistry,
        cache: VyperFilesCache,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.registry = registry
        self.cache = cache
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def run(self, args: List[str]) -> int:
        """
        Compile with the active version, using the cache when possible.

        Args:
            args: Arguments for the compiler

        Returns:
            Exit status (0 for cache hits)

        Raises:
            GlobalVersionNotSetError: If no global version is set
            VyperIoError: If the active binary is missing or cannot be started
        """
        source = None
        if is_cacheable(args):
            source = Path(args[0]).expanduser().resolve()
            entry = self.cache.lookup(source)
            if entry is not None and entry.is_fresh():
                logger.debug(f"Cache hit for {source}")
                print(entry.deployed_bytecode, file=self.stdout)
                return 0
            logger.debug(f"Cache miss for {source}")

        version = self.registry.require_current()
        binary = self.registry.binary_path(version)
        if not binary.is_file():
            raise VyperIoError(
                binary, FileNotFoundError(f"vyper {version} is not installed")
            )

        logger.debug(f"Running {binary} {' '.join(args)}")
        try:
            result = subprocess.run(
                [str(binary), *args], capture_output=True, text=True
            )
        except OSError as e:
            raise VyperIoError(binary, e) from e

        if result.returncode != 0:
            self.stderr.write(result.stderr)
            return result.returncode

        self.stdout.write(result.stdout)

        if source is not None:
            self._update_cache(source, result.stdout)

        return 0

    def _update_cache(self, source: Path, stdout: str) -> None:
        bytecode = extract_bytecode(stdout)
        if bytecode is None:
            return

        try:
            self.cache.upsert(source, bytecode)
            self.cache.persist()
            logger.debug(f"Cached output for {source}")
        except VyperKitError as e:
            logger.debug(f"Could not update compilation cache: {e}")
