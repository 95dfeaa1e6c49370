"""
Unit tests for filesystem helpers.
"""

import os
import stat
from unittest.mock import patch

import pytest

from vyperkit.core.exceptions import VyperIoError
from vyperkit.core.filesystem import (
    atomic_write,
    compute_file_hash,
    remove_tree,
)


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_write_bytes(self, tmp_path):
        target = tmp_path / "out.bin"
        atomic_write(target, b"\x00\x01payload")
        assert target.read_bytes() == b"\x00\x01payload"

    def test_write_text_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "out.txt"
        atomic_write(target, "hello")
        assert target.read_text() == "hello"

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "out.txt"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_mode_applied(self, tmp_path):
        target = tmp_path / "vyper-0.3.3"
        atomic_write(target, b"#!/bin/sh\n", mode=0o755)
        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_no_temp_files_left(self, tmp_path):
        atomic_write(tmp_path / "out.txt", "data")
        assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]

    def test_failure_cleans_up_temp(self, tmp_path):
        target = tmp_path / "out.txt"
        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            with pytest.raises(VyperIoError) as exc_info:
                atomic_write(target, "data")

        assert exc_info.value.path == target
        assert list(tmp_path.iterdir()) == []


class TestHashing:
    """Tests for content hashing."""

    def test_md5_of_file(self, tmp_path):
        source = tmp_path / "Token.vy"
        source.write_bytes(b"hello")
        assert compute_file_hash(source) == "5d41402abc4b2a76b9719d911017c592"

    def test_sha256_of_file(self, tmp_path):
        source = tmp_path / "data"
        source.write_bytes(b"")
        assert compute_file_hash(source, "sha256") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(VyperIoError):
            compute_file_hash(tmp_path / "missing.vy")

    def test_unsupported_algorithm(self, tmp_path):
        source = tmp_path / "data"
        source.write_bytes(b"x")
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            compute_file_hash(source, "not-a-hash")


class TestRemoveTree:
    """Tests for remove_tree."""

    def test_removes_directory(self, tmp_path):
        target = tmp_path / "0.3.3"
        target.mkdir()
        (target / "vyper-0.3.3").write_bytes(b"bin")

        remove_tree(target, require_prefix=tmp_path)

        assert not target.exists()

    def test_refuses_outside_prefix(self, tmp_path):
        root = tmp_path / "root"
        root.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            remove_tree(outside, require_prefix=root)
        assert outside.exists()

    def test_refuses_prefix_itself(self, tmp_path):
        with pytest.raises(ValueError):
            remove_tree(tmp_path, require_prefix=tmp_path)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(VyperIoError):
            remove_tree(tmp_path / "0.3.3", require_prefix=tmp_path)
