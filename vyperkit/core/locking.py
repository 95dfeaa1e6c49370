"""
Per-version install locks.

Installing a compiler version writes into a shared directory tree, so two
processes (or threads) installing the same version must not interleave. Each
version gets its own lock file under the root directory; installs of
different versions use different files and never wait on each other.

Features:
- Cross-platform, cross-process and cross-thread locking via `filelock`
- Blocking acquisition by default, optional timeout
- Lock file removed on every exit path of the guarded block
- Holder metadata (pid, acquisition time) written into the lock file
- Age-based cleanup of lock files left behind by killed processes

A process killed with SIGKILL (or any exit that skips `finally` blocks)
leaves its lock file on disk. The OS still drops the underlying lock, so the
leftover file only costs an extra open on the next install; use
`cleanup_stale_locks` to reclaim it.

Usage:
    from vyperkit.core.locking import install_lock

    with install_lock(directory.lock_file_path(version)):
        # Exclusive access to this version's binary
        write_binary()
"""

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from filelock import FileLock, Timeout as LockTimeout

from vyperkit.core.directory import LOCK_FILE_PREFIX
from vyperkit.core.exceptions import InstallLockError

logger = logging.getLogger(__name__)


@dataclass
class LockHolder:
    """Metadata recorded by the process holding a lock."""

    pid: int
    acquired_at: float

    def age_seconds(self, now: Optional[float] = None) -> float:
        return (now if now is not None else time.time()) - self.acquired_at


def read_lock_holder(lock_path: Union[str, Path]) -> Optional[LockHolder]:
    """
    Read holder metadata from a lock file.

    Returns:
        LockHolder, or None if the file is missing, empty or malformed
    """
    try:
        lines = Path(lock_path).read_text(encoding="utf-8").split()
    except OSError:
        return None

    if len(lines) < 2:
        return None

    try:
        return LockHolder(pid=int(lines[0]), acquired_at=float(lines[1]))
    except ValueError:
        return None


def _record_holder(lock_path: Path) -> None:
    try:
        lock_path.write_text(f"{os.getpid()}\n{time.time()}\n", encoding="utf-8")
    except OSError as e:
        # Windows locks the byte range, metadata is informational only
        logger.debug(f"Could not record lock holder in {lock_path}: {e}")


def _remove_lock_file(lock_path: Path) -> None:
    try:
        lock_path.unlink(missing_ok=True)
        logger.debug(f"Removed lock file: {lock_path}")
    except OSError as e:
        logger.debug(f"Could not remove lock file {lock_path}: {e}")


@contextmanager
def install_lock(
    lock_path: Union[str, Path], timeout: float = -1
) -> Iterator[Path]:
    """
    Hold the exclusive install lock for one version.

    Blocks until the lock is free. The lock file is deleted when the block
    exits, whether it returns normally or raises.

    Args:
        lock_path: Lock file path (see VersionDirectory.lock_file_path)
        timeout: Seconds to wait; negative waits forever

    Yields:
        The lock file path

    Raises:
        InstallLockError: If the lock file cannot be opened or the timeout expires

    Example:
        >>> with install_lock(Path('/home/user/.vvm/.lock-vyper-0.3.3')):
        ...     install_binary()
    """
    lock_path = Path(lock_path)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        lock.acquire()
    except LockTimeout as e:
        logger.error(
            f"Could not acquire install lock after {timeout}s. "
            "Another process may be installing this version."
        )
        raise InstallLockError(lock_path, f"timed out after {timeout}s") from e
    except OSError as e:
        raise InstallLockError(lock_path, str(e)) from e

    logger.debug(f"Acquired install lock: {lock_path}")
    try:
        _record_holder(lock_path)
        yield lock_path
    finally:
        lock.release()
        _remove_lock_file(lock_path)
        logger.debug(f"Released install lock: {lock_path}")


def cleanup_stale_locks(root: Union[str, Path], max_age_hours: float = 24) -> int:
    """
    Remove install lock files older than max_age_hours.

    Age comes from the recorded holder metadata, falling back to the file
    modification time when the file carries none.

    Args:
        root: Root directory holding the lock files
        max_age_hours: Maximum age in hours before a lock is considered stale

    Returns:
        Number of stale locks removed

    Example:
        >>> removed = cleanup_stale_locks(Path('/home/user/.vvm'), max_age_hours=24)
    """
    root = Path(root)
    if not root.is_dir():
        return 0

    now = time.time()
    removed_count = 0

    for lock_file in root.glob(f"{LOCK_FILE_PREFIX}*"):
        try:
            holder = read_lock_holder(lock_file)
            if holder is not None:
                age_hours = holder.age_seconds(now) / 3600
            else:
                age_hours = (now - lock_file.stat().st_mtime) / 3600

            if age_hours > max_age_hours:
                lock_file.unlink()
                logger.info(f"Removed stale lock file: {lock_file}")
                removed_count += 1
        except OSError as e:
            # Lock may be in use or already deleted
            logger.debug(f"Could not remove lock {lock_file}: {e}")

    return removed_count


__all__ = [
    "LockHolder",
    "LockTimeout",
    "cleanup_stale_locks",
    "install_lock",
    "read_lock_holder",
]
