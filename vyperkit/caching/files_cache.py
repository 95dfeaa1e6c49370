"""
Content-addressed compilation cache.

Maps a source file's canonical path to the output of its last successful
compile, together with the MD5 of the file content at that time. An entry is
fresh only while the file still hashes to the recorded value; the hash is
recomputed on every check and never trusted from a previous run.

The cache is an optimization: a missing, unreadable or incompatible cache
file loads as an empty cache, and freshness checks that hit I/O errors report
the entry as stale.

Cache document format::

    {
        "_format": "vvm-rs-vyper-cache-1",
        "files": {
            "/abs/path/Token.vy": {
                "contentHash": "089f6055c2d023b76eed71e820e7b580",
                "sourceName": "/abs/path/Token.vy",
                "deployedBytecode": "0x6100..."
            }
        }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from vyperkit.core.exceptions import CacheError, VyperIoError
from vyperkit.core.filesystem import compute_file_hash

logger = logging.getLogger(__name__)

FORMAT_VERSION = "vvm-rs-vyper-cache-1"
HASH_ALGORITHM = "md5"

PathLike = Union[str, Path]


def get_file_hash(path: PathLike) -> str:
    """Content hash used for cache entries (lowercase hex MD5)."""
    return compute_file_hash(path, HASH_ALGORITHM)


@dataclass
class CacheEntry:
    """Last known compile output of one source file."""

    content_hash: str
    source_name: Path
    deployed_bytecode: str

    def is_fresh(self) -> bool:
        """
        Check whether the source still matches the recorded hash.

        Returns False if the file changed, vanished or cannot be read.
        """
        try:
            return get_file_hash(self.source_name) == self.content_hash
        except VyperIoError as e:
            logger.debug(f"Treating cache entry as stale: {e}")
            return False

    def is_dirty(self) -> bool:
        return not self.is_fresh()

    def to_dict(self) -> Dict[str, str]:
        return {
            "contentHash": self.content_hash,
            "sourceName": str(self.source_name),
            "deployedBytecode": self.deployed_bytecode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        try:
            return cls(
                content_hash=str(data["contentHash"]),
                source_name=Path(data["sourceName"]),
                deployed_bytecode=str(data["deployedBytecode"]),
            )
        except (KeyError, TypeError) as e:
            raise CacheError(f"Malformed cache entry: {data!r}") from e


@dataclass
class VyperFilesCache:
    """
    In-memory view of the cache file.

    Example:
        >>> cache = VyperFilesCache.load(directory.cache_file_path)
        >>> entry = cache.lookup(source)
        >>> if entry is not None and entry.is_fresh():
        ...     print(entry.deployed_bytecode)
    """

    format: str = FORMAT_VERSION
    files: Dict[Path, CacheEntry] = field(default_factory=dict)
    path: Optional[Path] = field(default=None, compare=False, repr=False)

    @classmethod
    def new(cls, path: Optional[PathLike] = None) -> "VyperFilesCache":
        """Empty cache bound to an optional file path."""
        return cls(path=Path(path) if path is not None else None)

    @classmethod
    def read(cls, path: PathLike) -> "VyperFilesCache":
        """
        Read a cache file strictly.

        Raises:
            VyperIoError: If the file cannot be read
            CacheError: If the document is malformed or has another format tag
        """
        path = Path(path)
        logger.debug(f"Reading vyper files cache at {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise VyperIoError(path, e) from e
        except (ValueError, RecursionError) as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise CacheError(f"Invalid JSON in cache file {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("files"), dict):
            raise CacheError(f"Malformed cache document: {path}")

        fmt = data.get("_format")
        if fmt != FORMAT_VERSION:
            raise CacheError(
                f"Unsupported cache format {fmt!r} in {path} (expected {FORMAT_VERSION!r})"
            )

        files = {
            Path(name): CacheEntry.from_dict(entry)
            for name, entry in data["files"].items()
        }
        cache = cls(format=fmt, files=files, path=path)
        logger.debug(f'Read cache "{cache.format}" with {len(cache)} entries')
        return cache

    @classmethod
    def load(cls, path: PathLike) -> "VyperFilesCache":
        """
        Load a cache file, falling back to an empty cache on any error.

        The returned cache remembers the path so persist() writes back to it.
        """
        try:
            return cls.read(path)
        except (VyperIoError, CacheError) as e:
            logger.debug(f"Starting with an empty cache: {e}")
            return cls.new(path)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[CacheEntry]:
        return iter(self.files.values())

    def entry(self, file: PathLike) -> Optional[CacheEntry]:
        """Entry for a file path as stored (no canonicalization)."""
        return self.files.get(Path(file))

    def lookup(self, file: PathLike) -> Optional[CacheEntry]:
        """Entry for a file, canonicalizing the path first."""
        return self.entry(_canonical(file))

    def upsert(self, file: PathLike, bytecode: str) -> CacheEntry:
        """
        Insert or replace the entry for a file.

        The content hash is recomputed from the file's current bytes.

        Raises:
            VyperIoError: If the file cannot be read
        """
        key = _canonical(file)
        entry = CacheEntry(
            content_hash=get_file_hash(key),
            source_name=key,
            deployed_bytecode=bytecode,
        )
        self.files[key] = entry
        return entry

    add_entry = upsert

    def remove(self, file: PathLike) -> bool:
        """Drop the entry for a file. Returns True if one existed."""
        return self.files.pop(_canonical(file), None) is not None

    def clear(self) -> None:
        self.files.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_format": self.format,
            "files": {str(name): entry.to_dict() for name, entry in self.files.items()},
        }

    def write(self, path: PathLike) -> None:
        """
        Write the whole cache as pretty JSON, creating parent directories.

        Raises:
            VyperIoError: If the file cannot be written
        """
        path = Path(path)
        logger.debug(f"Writing cache with {len(self)} entries to {path}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise VyperIoError(path, e) from e

    def persist(self) -> None:
        """Write the cache back to the path it was loaded from."""
        if self.path is None:
            raise CacheError("Cache has no backing file; use write(path)")
        self.write(self.path)


class NullFilesCache(VyperFilesCache):
    """Cache stand-in used when caching is disabled: never hits, never writes."""

    def lookup(self, file: PathLike) -> Optional[CacheEntry]:
        return None

    def entry(self, file: PathLike) -> Optional[CacheEntry]:
        return None

    def upsert(self, file: PathLike, bytecode: str) -> CacheEntry:
        key = _canonical(file)
        return CacheEntry(
            content_hash="", source_name=key, deployed_bytecode=bytecode
        )

    add_entry = upsert

    def write(self, path: PathLike) -> None:
        pass

    def persist(self) -> None:
        pass


def _canonical(file: PathLike) -> Path:
    # resolve(strict=False) so missing files still get a stable key
    return Path(file).expanduser().resolve()
