"""
Compilation output caching for single-file compiler invocations.
"""

from .files_cache import (
    FORMAT_VERSION,
    CacheEntry,
    NullFilesCache,
    VyperFilesCache,
    get_file_hash,
)

__all__ = [
    "FORMAT_VERSION",
    "CacheEntry",
    "NullFilesCache",
    "VyperFilesCache",
    "get_file_hash",
]
