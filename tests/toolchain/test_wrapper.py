"""
Unit tests for the caching compiler wrapper.

Uses a shell script standing in for the compiler binary, so these tests
only run on POSIX systems.
"""

import io
import os

import pytest

from tests.fixtures.directories import install_fake_version
from vyperkit.caching.files_cache import NullFilesCache, VyperFilesCache
from vyperkit.core.exceptions import GlobalVersionNotSetError, VyperIoError
from vyperkit.core.version import Version
from vyperkit.toolchain.wrapper import CompilerWrapper, extract_bytecode, is_cacheable

pytestmark = pytest.mark.skipif(os.name == "nt", reason="requires a POSIX shell")

BYTECODE = "0x6100ff61000356"


def counting_compiler(counter_path, output=BYTECODE, exit_code=0):
    """Shell script that records each invocation and prints fixed output."""
    return (
        "#!/bin/sh\n"
        f'echo run >> "{counter_path}"\n'
        f'echo "{output}"\n'
        f'echo "compiler stderr" >&2\n'
        f"exit {exit_code}\n"
    ).encode()


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "Token.vy"
    path.write_text("# @version 0.3.3\nx: uint256\n")
    return path


@pytest.fixture
def counter(tmp_path):
    return tmp_path / "runs.log"


def runs(counter_path):
    if not counter_path.exists():
        return 0
    return len(counter_path.read_text().splitlines())


@pytest.fixture
def active_compiler(registry, version_directory, counter):
    install_fake_version(version_directory, "0.3.3", counting_compiler(counter))
    registry.set_current(Version.parse("0.3.3"))
    return version_directory.binary_path("0.3.3")


def make_wrapper(registry, cache):
    return CompilerWrapper(registry, cache, stdout=io.StringIO(), stderr=io.StringIO())


class TestHelpers:
    """Tests for argument and output helpers."""

    def test_is_cacheable(self):
        assert is_cacheable(["Token.vy"])
        assert not is_cacheable(["--version"])
        assert not is_cacheable(["-f", "abi", "Token.vy"])
        assert not is_cacheable([])

    def test_extract_bytecode(self):
        assert extract_bytecode(f"{BYTECODE}\n") == BYTECODE
        assert extract_bytecode("0.3.3+commit.48e326f0\n") is None


class TestCompilerWrapper:
    """Tests for CompilerWrapper.run."""

    def test_miss_runs_compiler_and_caches(
        self, registry, version_directory, active_compiler, source, counter
    ):
        cache = VyperFilesCache.new(version_directory.cache_file_path)
        wrapper = make_wrapper(registry, cache)

        assert wrapper.run([str(source)]) == 0

        assert runs(counter) == 1
        assert wrapper.stdout.getvalue().strip() == BYTECODE
        stored = VyperFilesCache.read(version_directory.cache_file_path)
        assert stored.lookup(source).deployed_bytecode == BYTECODE

    def test_hit_skips_compiler(
        self, registry, version_directory, active_compiler, source, counter
    ):
        cache_path = version_directory.cache_file_path
        make_wrapper(registry, VyperFilesCache.new(cache_path)).run([str(source)])

        wrapper = make_wrapper(registry, VyperFilesCache.load(cache_path))
        assert wrapper.run([str(source)]) == 0

        assert runs(counter) == 1
        assert wrapper.stdout.getvalue().strip() == BYTECODE

    def test_modified_source_recompiles(
        self, registry, version_directory, active_compiler, source, counter
    ):
        cache = VyperFilesCache.new(version_directory.cache_file_path)
        wrapper = make_wrapper(registry, cache)
        wrapper.run([str(source)])

        source.write_text("# @version 0.3.3\nx: uint256\ny: uint256\n")
        wrapper.run([str(source)])

        assert runs(counter) == 2

    def test_non_cacheable_passes_through(
        self, registry, version_directory, active_compiler, source, counter
    ):
        cache = VyperFilesCache.new(version_directory.cache_file_path)
        wrapper = make_wrapper(registry, cache)

        wrapper.run(["-f", "bytecode", str(source)])
        wrapper.run(["-f", "bytecode", str(source)])

        assert runs(counter) == 2
        assert len(cache) == 0

    def test_failure_forwards_stderr(self, registry, version_directory, source, counter):
        install_fake_version(
            version_directory, "0.3.3", counting_compiler(counter, exit_code=3)
        )
        registry.set_current(Version.parse("0.3.3"))
        cache = VyperFilesCache.new(version_directory.cache_file_path)
        wrapper = make_wrapper(registry, cache)

        assert wrapper.run([str(source)]) == 3

        assert "compiler stderr" in wrapper.stderr.getvalue()
        assert len(cache) == 0

    def test_non_bytecode_output_not_cached(
        self, registry, version_directory, source, counter
    ):
        install_fake_version(
            version_directory, "0.3.3", counting_compiler(counter, output="warning only")
        )
        registry.set_current(Version.parse("0.3.3"))
        cache = VyperFilesCache.new(version_directory.cache_file_path)

        assert make_wrapper(registry, cache).run([str(source)]) == 0
        assert len(cache) == 0

    def test_disabled_cache_always_compiles(
        self, registry, active_compiler, source, counter
    ):
        wrapper = make_wrapper(registry, NullFilesCache.new())

        wrapper.run([str(source)])
        wrapper.run([str(source)])

        assert runs(counter) == 2

    def test_no_global_version(self, registry, source):
        wrapper = make_wrapper(registry, VyperFilesCache.new())
        with pytest.raises(GlobalVersionNotSetError):
            wrapper.run([str(source)])

    def test_missing_binary(self, registry, source):
        registry.set_current(Version.parse("0.3.3"))
        wrapper = make_wrapper(registry, VyperFilesCache.new())

        with pytest.raises(VyperIoError):
            wrapper.run([str(source)])
