"""
Network download of release assets.

This module streams a release asset to disk with:
- HTTP/HTTPS downloads with TLS verification and redirect following
- Progress reporting (bytes, percentage, speed, ETA)
- Transport-level timeout handling

A failed download is never retried; it raises DownloadError and the run
fails.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from mmock_setup.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout handed to the HTTP transport, in seconds
        session: Optional requests session (a plain requests.get is used otherwise)

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails, returns an error status, or the
            file cannot be written
        ValueError: If URL or destination is invalid

    Example:
        >>> from mmock_setup.core.download import download_file
        >>> url = "https://github.com/jmartin82/mmock/releases/download/v3.1.6/mmock_Linux_x86_64.tar.gz"
        >>> download_file(url, Path("/tmp/mmock.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    getter = session.get if session is not None else requests.get

    logger.info(f"Downloading from {url}")

    try:
        with getter(url, stream=True, timeout=timeout, allow_redirects=True) as response:
            response.raise_for_status()
            _write_stream(response, destination, progress_callback)
    except (RequestException, OSError) as e:
        if destination.exists():
            destination.unlink()
        raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.info(f"Download complete: {destination}")
    return destination


def _write_stream(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    """Write a streamed response body to destination, reporting progress."""
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time


def download_tool(
    url: str,
    temp_dir: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download a release asset into a uniquely named file under temp_dir.

    The file name keeps the asset's suffix so that callers can still see
    which archive format they received.

    Returns:
        Path to the downloaded temporary file
    """
    asset_name = url.rstrip("/").split("/")[-1]
    destination = Path(temp_dir) / f"{uuid.uuid4().hex}-{asset_name}"
    return download_file(
        url, destination, progress_callback=progress_callback, session=session
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"
