"""
Compiler release discovery, installation and version tracking.
"""

from .releases import (
    BuildInfo,
    ReleaseCatalog,
    Releases,
    artifact_url,
    parse_releases,
)
from .installer import Installer
from .registry import VersionRegistry
from .wrapper import CompilerWrapper

__all__ = [
    "BuildInfo",
    "ReleaseCatalog",
    "Releases",
    "artifact_url",
    "parse_releases",
    "Installer",
    "VersionRegistry",
    "CompilerWrapper",
]
