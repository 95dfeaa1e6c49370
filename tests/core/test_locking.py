"""
Unit tests for per-version install locks.

Tests cover:
- Lock acquisition and release
- Lock file removal on success and on error
- Timeout behavior
- Mutual exclusion across threads
- Stale lock cleanup
"""

import os
import threading
import time

import pytest
from filelock import FileLock

from vyperkit.core.exceptions import InstallLockError
from vyperkit.core.locking import (
    LockHolder,
    cleanup_stale_locks,
    install_lock,
    read_lock_holder,
)


class TestInstallLock:
    """Tests for the install_lock context manager."""

    def test_lock_file_exists_while_held(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"

        with install_lock(lock_path) as held:
            assert held == lock_path
            assert lock_path.exists()

        assert not lock_path.exists()

    def test_lock_file_removed_on_error(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"

        with pytest.raises(RuntimeError):
            with install_lock(lock_path):
                raise RuntimeError("install failed")

        assert not lock_path.exists()

    def test_records_holder(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"

        with install_lock(lock_path):
            holder = read_lock_holder(lock_path)

        assert holder is not None
        assert holder.pid == os.getpid()
        assert holder.age_seconds() < 60

    def test_reacquire_after_release(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"

        with install_lock(lock_path, timeout=1):
            pass
        with install_lock(lock_path, timeout=1):
            pass

    def test_timeout_while_held(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"
        other = FileLock(lock_path)

        with other:
            with pytest.raises(InstallLockError) as exc_info:
                with install_lock(lock_path, timeout=0.1):
                    pass

        assert exc_info.value.lock_path == lock_path
        assert "timed out" in str(exc_info.value)

    def test_unwritable_location(self, tmp_path):
        lock_path = tmp_path / "missing-dir" / ".lock-vyper-0.3.3"
        blocker = tmp_path / "missing-dir"
        blocker.write_text("not a directory")

        with pytest.raises(InstallLockError):
            with install_lock(lock_path, timeout=0.1):
                pass

    def test_mutual_exclusion_across_threads(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"
        active = []
        overlaps = []
        guard = threading.Lock()

        def worker():
            with install_lock(lock_path, timeout=10):
                with guard:
                    active.append(1)
                    if len(active) > 1:
                        overlaps.append(1)
                time.sleep(0.02)
                with guard:
                    active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert not lock_path.exists()

    def test_different_versions_do_not_block(self, tmp_path):
        with install_lock(tmp_path / ".lock-vyper-0.3.3"):
            with install_lock(tmp_path / ".lock-vyper-0.3.1", timeout=0.1):
                pass


class TestLockHolder:
    """Tests for lock holder metadata."""

    def test_read_missing(self, tmp_path):
        assert read_lock_holder(tmp_path / "missing") is None

    def test_read_malformed(self, tmp_path):
        lock_path = tmp_path / ".lock-vyper-0.3.3"
        lock_path.write_text("garbage")
        assert read_lock_holder(lock_path) is None

    def test_age(self):
        holder = LockHolder(pid=1, acquired_at=100.0)
        assert holder.age_seconds(now=160.0) == 60.0


class TestCleanupStaleLocks:
    """Tests for cleanup_stale_locks."""

    def test_removes_old_locks(self, tmp_path):
        stale = tmp_path / ".lock-vyper-0.3.1"
        stale.write_text(f"12345\n{time.time() - 48 * 3600}\n")
        fresh = tmp_path / ".lock-vyper-0.3.3"
        fresh.write_text(f"12345\n{time.time()}\n")

        removed = cleanup_stale_locks(tmp_path, max_age_hours=24)

        assert removed == 1
        assert not stale.exists()
        assert fresh.exists()

    def test_falls_back_to_mtime(self, tmp_path):
        stale = tmp_path / ".lock-vyper-0.3.1"
        stale.write_text("")
        old = time.time() - 48 * 3600
        os.utime(stale, (old, old))

        assert cleanup_stale_locks(tmp_path, max_age_hours=24) == 1
        assert not stale.exists()

    def test_ignores_other_files(self, tmp_path):
        pointer = tmp_path / ".global-version"
        pointer.write_text("0.3.3")
        old = time.time() - 48 * 3600
        os.utime(pointer, (old, old))

        assert cleanup_stale_locks(tmp_path, max_age_hours=24) == 0
        assert pointer.exists()

    def test_missing_root(self, tmp_path):
        assert cleanup_stale_locks(tmp_path / "missing") == 0
