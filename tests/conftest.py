"""
Pytest configuration and shared fixtures for vyperkit tests.
"""

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.directories import (
    vvm_home,
    version_directory,
    registry,
    installed_versions,
)
from tests.fixtures.releases import (
    mocked_responses,
    linux_catalog,
    releases_payload,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if config.getoption("--integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.vvm and any ambient configuration."""
    monkeypatch.setenv("VVM_HOME", str(tmp_path / "default-home"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("VVM_NO_CACHE", raising=False)
    monkeypatch.delenv("VVM_REQUEST_TIMEOUT", raising=False)
