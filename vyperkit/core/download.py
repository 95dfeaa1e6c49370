"""
HTTP download of release artifacts.

Compiler binaries are small enough to hold in memory, so the whole payload
is fetched before anything touches the install directory. This keeps the
install lock window short and lets the checksum be verified up front.

- Bounded timeout (120s by default)
- Streamed transfer with progress reporting
- Typed errors for timeouts, transport failures and non-success statuses
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException, Timeout

from vyperkit.core.exceptions import (
    DownloadError,
    DownloadTimeoutError,
    UnsuccessfulResponseError,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 120
USER_AGENT = "vyperkit"


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        return format_progress(self)


def fetch_bytes(
    url: str,
    timeout: float = REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    headers: Optional[dict] = None,
) -> bytes:
    """
    Download a URL fully into memory.

    Args:
        url: URL to download
        timeout: Request timeout in seconds
        session: Optional requests session (connection reuse, tests)
        progress_callback: Optional callback for progress updates
        headers: Extra request headers

    Returns:
        Response body

    Raises:
        UnsuccessfulResponseError: If the server returns a non-2xx status
        DownloadTimeoutError: If the request times out
        DownloadError: On any other transport failure

    Example:
        >>> payload = fetch_bytes("https://github.com/vyperlang/vyper/releases/download/...")
    """
    if not url:
        raise ValueError("URL cannot be empty")

    http = session or requests
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    logger.info(f"Downloading from {url}")

    try:
        response = http.get(
            url,
            headers=request_headers,
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        )
    except Timeout as e:
        raise DownloadTimeoutError(url, f"timed out after {timeout}s") from e
    except RequestException as e:
        raise DownloadError(url, str(e)) from e

    with response:
        if not 200 <= response.status_code < 300:
            raise UnsuccessfulResponseError(url, response.status_code)

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        chunks = []
        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        try:
            for chunk in response.iter_content(chunk_size=8192):
                if not chunk:
                    continue
                chunks.append(chunk)
                downloaded += len(chunk)

                # Report progress (max once per 0.5 seconds to avoid spam)
                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5
                    or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size if total_size > 0 else downloaded,
                            percentage=(downloaded / total_size * 100)
                            if total_size > 0
                            else 0,
                            speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                        )
                    )
                    last_progress_time = current_time
        except Timeout as e:
            raise DownloadTimeoutError(url, f"timed out after {timeout}s") from e
        except RequestException as e:
            raise DownloadError(url, str(e)) from e

    payload = b"".join(chunks)
    logger.debug(f"Downloaded {len(payload)} bytes from {url}")
    return payload


def sha256_hex(data: bytes) -> str:
    """SHA256 hex digest of a payload."""
    return hashlib.sha256(data).hexdigest()


def checksum_matches(data: bytes, expected_sha256: str) -> bool:
    """
    Compare a payload against an expected SHA256 digest (case-insensitive).

    Accepts digests with or without a 'sha256:' prefix.
    """
    expected = expected_sha256.lower()
    if expected.startswith("sha256:"):
        expected = expected[len("sha256:"):]
    return sha256_hex(data) == expected


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(5242880, 10485760, 50.0, 1048576)
        >>> format_progress(progress)
        '5.0/10.0 MB (50.0%) at 1.0 MB/s'
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
