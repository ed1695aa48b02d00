"""Byte sources for audio input.

Every source exposes ``read() -> bytes`` so the pipeline does not care
whether the WAV file comes from a pre-signed URL, a local path, or a
buffer already in memory.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit, urlunsplit

import requests

from .exceptions import ExpiredURLError, FetchError

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Strip query string and fragment, which carry pre-signed credentials."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class ByteSource(ABC):
    """Something that can produce the raw bytes of an audio file."""
    
    @abstractmethod
    def read(self) -> bytes:
        """Return the complete file contents."""
    
    @abstractmethod
    def describe(self) -> str:
        """Short human-readable name for logs."""


class URLSource(ByteSource):
    """Fetches audio with a single HTTP GET.
    
    There are no retries: a non-2xx response fails immediately. A 403 is
    reported as ``ExpiredURLError`` because pre-signed storage URLs
    answer 403 once their signature has expired.
    
    Attributes:
        url: Full URL, including any signature in the query string
        timeout: Optional requests timeout in seconds (default: none)
    """
    
    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        if not isinstance(url, str):
            raise TypeError(f"url must be str, got {type(url).__name__}")
        if not url:
            raise ValueError("url cannot be empty")
        
        self.url = url
        self.timeout = timeout
        self._session = session
    
    def describe(self) -> str:
        return redact_url(self.url)
    
    def read(self) -> bytes:
        """Download the response body.
        
        Raises:
            ExpiredURLError: If the server answers 403
            FetchError: On any other non-2xx status or transport failure
        """
        safe_url = self.describe()
        logger.info(f"Fetching audio from {safe_url}")
        
        http = self._session if self._session is not None else requests
        try:
            response = http.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(
                f"Failed to fetch audio from {safe_url}: {e}",
                reason=str(e),
                url=safe_url,
            ) from e
        
        if not 200 <= response.status_code < 300:
            status = response.status_code
            reason = response.reason or ""
            message = f"Failed to fetch audio: {status} {reason}".rstrip()
            if status == 403:
                raise ExpiredURLError(
                    f"{message} (URL may have expired)",
                    status_code=status,
                    reason=reason,
                    url=safe_url,
                )
            raise FetchError(message, status_code=status, reason=reason, url=safe_url)
        
        data = response.content
        logger.info(f"Fetched {len(data)} bytes")
        return data


class FileSource(ByteSource):
    """Reads audio from a local file."""
    
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
    
    def describe(self) -> str:
        return str(self.path)
    
    def read(self) -> bytes:
        if not self.path.is_file():
            raise FileNotFoundError(
                f"Audio file '{self.path}' not found. Check file path and permissions"
            )
        return self.path.read_bytes()


class BytesSource(ByteSource):
    """Wraps a buffer that is already in memory."""
    
    def __init__(self, data: bytes, name: str = "<bytes>"):
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"data must be bytes, got {type(data).__name__}")
        self.data = bytes(data)
        self.name = name
    
    def describe(self) -> str:
        return self.name
    
    def read(self) -> bytes:
        return self.data


def open_source(location: Union[str, Path]) -> ByteSource:
    """Pick a source for ``location``: http(s) URLs are fetched, anything else is a path."""
    if isinstance(location, str) and urlsplit(location).scheme in ("http", "https"):
        return URLSource(location)
    return FileSource(location)
