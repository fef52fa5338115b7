"""
Release archive download for swiftdevkit.

Streams an HTTP(S) download to disk with progress reporting and optional
SHA256 verification. There is a single attempt: a failure is
reported to the caller as :class:`DownloadOrExtractError`.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .exceptions import DownloadOrExtractError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    speed_bps: float  # bytes per second

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download a file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified after download)
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadOrExtractError: On HTTP, connection or checksum failure
        ValueError: If URL is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading {url}")

    hasher = hashlib.sha256() if expected_sha256 else None
    downloaded = 0
    start_time = time.time()
    last_report = start_time

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()
            total_size = int(response.headers.get("content-length") or 0)

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    if hasher:
                        hasher.update(chunk)

                    now = time.time()
                    if progress_callback and (
                        now - last_report >= 0.5 or downloaded == total_size
                    ):
                        elapsed = now - start_time
                        progress_callback(
                            DownloadProgress(
                                bytes_downloaded=downloaded,
                                total_bytes=total_size,
                                speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                            )
                        )
                        last_report = now
    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadOrExtractError(f"Download failed for {url}: {e}", url=url) from e

    if hasher and expected_sha256:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            destination.unlink(missing_ok=True)
            raise DownloadOrExtractError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}",
                url=url,
            )
        logger.debug("Checksum verified successfully")

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> format_progress(DownloadProgress(52428800, 104857600, 1048576))
        '50.0/100.0 MB (50.0%) at 1.0 MB/s'
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        mb_total = progress.total_bytes / 1024 / 1024
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = ["DownloadProgress", "download_file", "format_progress"]
