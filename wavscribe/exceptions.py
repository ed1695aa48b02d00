"""Exception hierarchy for wavscribe.

Argument validation uses the builtin ``TypeError``/``ValueError``. The
classes below mark failures of a specific pipeline stage so callers can
tell a dead download link from a broken WAV file or a crashed model.
"""

from typing import Optional


class WavscribeError(Exception):
    """Base class for all wavscribe errors."""


class ConfigError(WavscribeError, ValueError):
    """Raised when a configuration value cannot be parsed or is out of range."""


class FetchError(WavscribeError):
    """Raised when audio bytes cannot be retrieved from a source.
    
    Attributes:
        status_code: HTTP status code, or None for transport failures
        reason: HTTP reason phrase or transport error text
        url: Source URL with the query string removed
    """
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.url = url


class ExpiredURLError(FetchError):
    """Raised on HTTP 403, the usual symptom of an expired pre-signed URL."""


class DecodeError(WavscribeError, ValueError):
    """Raised when a buffer is not a readable WAV container."""


class InferenceError(WavscribeError, RuntimeError):
    """Raised when the ASR engine fails. The original error is ``__cause__``."""
