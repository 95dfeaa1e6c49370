"""
Filesystem helpers for vyperkit.

Provides the file primitives the installer and cache build on:
- Atomic writes (temp file + rename) with optional permission bits
- Chunked file hashing
- Guarded recursive removal
"""

import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from vyperkit.core.exceptions import VyperIoError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


def atomic_write(
    file_path: Union[str, Path],
    content: Union[str, bytes],
    mode: Optional[int] = None,
    encoding: str = "utf-8",
) -> None:
    """
    Write file atomically using temp file + rename.

    The destination is never observed partially written: readers see either
    the previous file or the complete new one.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        mode: Permission bits applied before the rename (ignored on Windows)
        encoding: Text encoding (used only for string content)

    Raises:
        VyperIoError: If any step fails; the temp file is removed

    Example:
        >>> atomic_write('vyper-0.3.3', payload, mode=0o755)
    """
    file_path = Path(file_path)

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        # Temp file in the same directory so the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise VyperIoError(file_path, e) from e

    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        if mode is not None and not IS_WINDOWS:
            os.chmod(temp_path, mode)

        temp_path.replace(file_path)

    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise VyperIoError(file_path, e) from e


def compute_file_hash(
    file_path: Union[str, Path], algorithm: str = "md5", chunk_size: int = 8192
) -> str:
    """
    Compute the hex digest of a file's bytes.

    Args:
        file_path: Path to file
        algorithm: Any hashlib algorithm name
        chunk_size: Number of bytes to read at once

    Returns:
        Lowercase hex digest

    Raises:
        VyperIoError: If the file cannot be read
        ValueError: If the algorithm is unsupported
    """
    file_path = Path(file_path)

    try:
        hasher = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    try:
        with open(file_path, "rb") as f:
            while chunk := f.read(chunk_size):
                hasher.update(chunk)
    except OSError as e:
        raise VyperIoError(file_path, e) from e

    return hasher.hexdigest()


def remove_tree(path: Union[str, Path], require_prefix: Union[str, Path]) -> None:
    """
    Remove a directory tree that must live under require_prefix.

    Args:
        path: Directory to remove
        require_prefix: Directory that must contain path

    Raises:
        ValueError: If path is not under require_prefix
        VyperIoError: If path does not exist or removal fails
    """
    path = Path(path)
    prefix = Path(require_prefix).resolve()

    resolved = path.resolve()
    if resolved == prefix or prefix not in resolved.parents:
        raise ValueError(
            f"Refusing to delete '{resolved}': not under required prefix '{prefix}'"
        )

    if not path.is_dir():
        raise VyperIoError(path, FileNotFoundError("no such directory"))

    def handle_remove_readonly(func, target, exc_info):
        # Windows refuses to delete read-only files
        if not os.access(target, os.W_OK):
            os.chmod(target, 0o777)
            func(target)
        else:
            raise exc_info[1]

    try:
        if IS_WINDOWS:
            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise VyperIoError(path, e) from e

    logger.debug(f"Removed directory tree: {path}")
