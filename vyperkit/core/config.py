"""YAML configuration for vyperkit.

Settings are resolved in three layers, later layers winning:

1. Built-in defaults
2. ``<home>/config.yaml``
3. Environment variables (``VVM_HOME``, ``GITHUB_TOKEN``, ``VVM_NO_CACHE``,
   ``VVM_REQUEST_TIMEOUT``)

Example config.yaml::

    request_timeout: 60
    verify_checksums: true
    cache_enabled: true
    releases_url: https://api.github.com/repos/vyperlang/vyper/releases?per_page=100
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from vyperkit.core.directory import CONFIG_FILENAME, get_default_home
from vyperkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

GITHUB_RELEASES = "https://api.github.com/repos/vyperlang/vyper/releases?per_page=100"
DOWNLOAD_BASE_URL = "https://github.com/vyperlang/vyper/releases/download"

_TRUTHY = {"1", "true", "yes", "on"}

_KNOWN_KEYS = {
    "releases_url",
    "download_base_url",
    "request_timeout",
    "github_token",
    "verify_checksums",
    "cache_enabled",
}


@dataclass
class VvmConfig:
    """Resolved vyperkit settings."""

    home: Path = field(default_factory=get_default_home)
    releases_url: str = GITHUB_RELEASES
    download_base_url: str = DOWNLOAD_BASE_URL
    request_timeout: float = 120
    github_token: Optional[str] = None
    verify_checksums: bool = True
    cache_enabled: bool = True


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug(f"Config file not found (optional): {path}")
        return {}

    logger.debug(f"Loading configuration from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")


def _as_timeout(key: str, value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    if timeout <= 0:
        raise ConfigError(f"'{key}' must be positive, got {value!r}")
    return timeout


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string, got {value!r}")
    return value


def load_config(
    home: Optional[Path] = None, environ: Optional[Dict[str, str]] = None
) -> VvmConfig:
    """
    Load configuration for a root directory.

    Args:
        home: Root directory (default: VVM_HOME or ~/.vvm)
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved VvmConfig

    Raises:
        ConfigError: If config.yaml is malformed or holds invalid values
    """
    env = os.environ if environ is None else environ

    if home is None:
        if env.get("VVM_HOME"):
            home = Path(env["VVM_HOME"]).expanduser()
        else:
            home = get_default_home()
    config = VvmConfig(home=Path(home))

    data = _load_yaml(config.home / CONFIG_FILENAME)

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

    if "releases_url" in data:
        config.releases_url = _as_str("releases_url", data["releases_url"])
    if "download_base_url" in data:
        config.download_base_url = _as_str(
            "download_base_url", data["download_base_url"]
        ).rstrip("/")
    if "request_timeout" in data:
        config.request_timeout = _as_timeout("request_timeout", data["request_timeout"])
    if data.get("github_token"):
        config.github_token = _as_str("github_token", data["github_token"])
    if "verify_checksums" in data:
        config.verify_checksums = _as_bool("verify_checksums", data["verify_checksums"])
    if "cache_enabled" in data:
        config.cache_enabled = _as_bool("cache_enabled", data["cache_enabled"])

    if env.get("GITHUB_TOKEN"):
        config.github_token = env["GITHUB_TOKEN"]
    if env.get("VVM_REQUEST_TIMEOUT"):
        config.request_timeout = _as_timeout(
            "VVM_REQUEST_TIMEOUT", env["VVM_REQUEST_TIMEOUT"]
        )
    if env.get("VVM_NO_CACHE") and _as_bool("VVM_NO_CACHE", env["VVM_NO_CACHE"]):
        config.cache_enabled = False

    return config
