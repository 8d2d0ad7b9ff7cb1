"""
Upstream image fetching for the CORS image proxy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ProxyError(Exception):
    """Raised when the upstream resource cannot be fetched."""


@dataclass
class UpstreamImage:
    content_type: str
    # Closes the upstream connection once exhausted or on error.
    chunks: Iterator[bytes]


class ImageFetcher(Protocol):
    def fetch(self, url: str) -> UpstreamImage:
        ...


class RequestsImageFetcher:
    """
    Streams a remote resource with ``requests``.

    No allow-list, size limit or caching is applied. The timeout is unset
    unless configured.
    """

    def __init__(
        self, timeout: Optional[float] = None, chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        self.timeout = timeout
        self.chunk_size = chunk_size

    def fetch(self, url: str) -> UpstreamImage:
        response = None
        try:
            response = requests.get(url, stream=True, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            if response is not None:
                response.close()
            logger.warning("Proxy fetch failed for %s: %s", url, exc)
            raise ProxyError(str(exc)) from exc

        content_type = response.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE
        return UpstreamImage(
            content_type=content_type, chunks=self._stream(url, response)
        )

    def _stream(self, url: str, response: requests.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_content(chunk_size=self.chunk_size)
        except requests.RequestException as exc:
            logger.warning("Proxy stream from %s broke off: %s", url, exc)
            raise
        finally:
            response.close()
