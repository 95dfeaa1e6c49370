"""
Unit tests for installed and active version tracking.
"""

import logging

import pytest

from tests.fixtures.directories import install_fake_version
from vyperkit.core.directory import VersionDirectory
from vyperkit.core.exceptions import (
    GlobalVersionNotSetError,
    UnknownVersionError,
    VyperIoError,
)
from vyperkit.core.version import Version
from vyperkit.toolchain.registry import VersionRegistry


class TestListInstalled:
    """Tests for VersionRegistry.list_installed."""

    def test_empty_root(self, registry):
        assert registry.list_installed() == []

    def test_missing_root(self, tmp_path):
        registry = VersionRegistry(VersionDirectory(tmp_path / "never-created"))
        assert registry.list_installed() == []

    def test_sorted(self, registry, installed_versions):
        assert registry.list_installed() == installed_versions

    def test_numeric_order(self, registry, version_directory):
        for v in ("0.3.10", "0.3.9", "0.3.1"):
            install_fake_version(version_directory, v)

        assert [str(v) for v in registry.list_installed()] == ["0.3.1", "0.3.9", "0.3.10"]

    def test_ignores_reserved_entries(self, registry, version_directory, installed_versions):
        version_directory.cache_dir.mkdir()
        version_directory.config_path.write_text("cache_enabled: true\n")
        version_directory.lock_file_path("0.3.3").write_text("")

        assert registry.list_installed() == installed_versions

    def test_accepts_prefixed_entries(self, registry, version_directory):
        (version_directory.root / "vyper-0.3.3").mkdir()
        assert registry.list_installed() == [Version.parse("0.3.3")]

    def test_unexpected_entry(self, registry, version_directory):
        (version_directory.root / "notes.txt").write_text("")

        with pytest.raises(UnknownVersionError) as exc_info:
            registry.list_installed()
        assert exc_info.value.version == "notes.txt"

    def test_is_installed(self, registry, installed_versions):
        assert registry.is_installed(Version.parse("0.3.1"))
        assert not registry.is_installed(Version.parse("0.4.0"))


class TestGlobalVersion:
    """Tests for reading and writing the global version pointer."""

    def test_unset_by_default(self, registry):
        assert registry.current() is None

    def test_set_and_read(self, registry, version_directory):
        registry.set_current(Version.parse("0.3.3"))

        assert registry.current() == Version.parse("0.3.3")
        assert version_directory.global_version_path.read_text() == "0.3.3"

    def test_unset(self, registry, version_directory):
        registry.set_current(Version.parse("0.3.3"))
        registry.unset_current()

        assert registry.current() is None
        assert version_directory.global_version_path.read_text() == ""

    def test_missing_pointer(self, tmp_path):
        registry = VersionRegistry(VersionDirectory(tmp_path))
        assert registry.current() is None

    def test_whitespace_tolerated(self, registry, version_directory):
        version_directory.global_version_path.write_text("0.3.3\n")
        assert registry.current() == Version.parse("0.3.3")

    def test_malformed_pointer_logs_warning(self, registry, version_directory, caplog):
        version_directory.global_version_path.write_text("latest")

        with caplog.at_level(logging.WARNING, logger="vyperkit.toolchain.registry"):
            assert registry.current() is None

        assert "latest" in caplog.text

    def test_undecodable_pointer_logs_warning(self, registry, version_directory, caplog):
        version_directory.global_version_path.write_bytes(b"\xff0.3.3")

        with caplog.at_level(logging.WARNING, logger="vyperkit.toolchain.registry"):
            assert registry.current() is None

        assert "undecodable" in caplog.text
        with pytest.raises(GlobalVersionNotSetError):
            registry.require_current()

    def test_require_current(self, registry):
        with pytest.raises(GlobalVersionNotSetError):
            registry.require_current()

        registry.set_current(Version.parse("0.3.1"))
        assert registry.require_current() == Version.parse("0.3.1")


class TestRemove:
    """Tests for VersionRegistry.remove."""

    def test_removes_directory(self, registry, version_directory, installed_versions):
        registry.remove(Version.parse("0.3.1"))

        assert not version_directory.version_path("0.3.1").exists()
        assert [str(v) for v in registry.list_installed()] == ["0.2.16", "0.3.3"]

    def test_does_not_touch_pointer(self, registry, installed_versions):
        registry.set_current(Version.parse("0.3.3"))
        registry.remove(Version.parse("0.3.3"))

        assert registry.current() == Version.parse("0.3.3")

    def test_not_installed(self, registry):
        with pytest.raises(VyperIoError):
            registry.remove(Version.parse("0.3.3"))
