"""Download capability: persist an HTTP response body to a local file."""

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

from .errors import DownloadError
from .hashing import copy_and_hash

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of a completed download."""
    md5_hash: str
    size: int


class Downloader(Protocol):
    """
    Protocol for download implementations.

    Implementations consume and close the response.
    """

    def download(self, response: requests.Response, filename: str) -> DownloadResult:
        """
        Write the response body to `filename`.

        Args:
            response: Streaming response with an unread body
            filename: Destination path chosen by apt

        Returns:
            DownloadResult with MD5 digest and byte count

        Raises:
            DownloadError: If the body cannot be read or written
        """
        ...


class FileDownloader:
    """Streams the body to disk in chunks while hashing it."""

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size

    def download(self, response: requests.Response, filename: str) -> DownloadResult:
        try:
            md5_hash, size = copy_and_hash(response.iter_content(self.chunk_size), filename)
        except (OSError, requests.RequestException) as e:
            raise DownloadError(filename, str(e)) from e
        finally:
            response.close()
        logger.debug("Wrote %d bytes to %s", size, filename)
        return DownloadResult(md5_hash=md5_hash, size=size)


__all__ = ["DownloadResult", "Downloader", "FileDownloader", "CHUNK_SIZE"]
