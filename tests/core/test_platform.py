"""
Unit tests for platform detection.
"""

from unittest.mock import patch

import pytest

from vyperkit.core.platform import Platform, detect_platform, is_nixos, platform_for


class TestPlatform:
    """Tests for the Platform enum."""

    def test_tokens(self):
        assert Platform.LINUX.token == "linux"
        assert Platform.MACOS.token == "darwin"
        assert Platform.WINDOWS.token == "windows"
        assert str(Platform.UNSUPPORTED) == "Unsupported-platform"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("linux", Platform.LINUX),
            ("darwin", Platform.MACOS),
            ("macosx", Platform.MACOS),
            ("Windows", Platform.WINDOWS),
        ],
    )
    def test_from_str(self, name, expected):
        assert Platform.from_str(name) == expected

    def test_from_str_unknown(self):
        with pytest.raises(ValueError, match="unsupported platform"):
            Platform.from_str("solaris")


class TestPlatformFor:
    """Tests for mapping OS and architecture pairs."""

    @pytest.mark.parametrize(
        "system, machine, expected",
        [
            ("Linux", "x86_64", Platform.LINUX),
            ("Linux", "aarch64", Platform.LINUX),
            ("Darwin", "arm64", Platform.MACOS),
            ("Darwin", "x86_64", Platform.MACOS),
            ("Windows", "AMD64", Platform.WINDOWS),
        ],
    )
    def test_supported(self, system, machine, expected):
        assert platform_for(system, machine) == expected

    def test_unsupported(self):
        assert platform_for("FreeBSD", "amd64") == Platform.UNSUPPORTED
        assert platform_for("Linux", "riscv64") == Platform.UNSUPPORTED

    def test_detect_platform_is_cached(self):
        detect_platform.cache_clear()
        try:
            with patch("vyperkit.core.platform._platform.system", return_value="Linux"), patch(
                "vyperkit.core.platform._platform.machine", return_value="x86_64"
            ) as machine:
                assert detect_platform() == Platform.LINUX
                assert detect_platform() == Platform.LINUX
                assert machine.call_count == 1
        finally:
            detect_platform.cache_clear()


class TestIsNixos:
    """Tests for NixOS detection."""

    def test_marker_present(self):
        with patch("vyperkit.core.platform.Path.exists", return_value=True):
            assert is_nixos()

    def test_marker_absent(self):
        with patch("vyperkit.core.platform.Path.exists", return_value=False):
            assert not is_nixos()
