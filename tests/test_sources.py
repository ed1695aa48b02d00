"""Tests for audio byte sources."""

from unittest import mock

import pytest
import requests

from wavscribe import (
    BytesSource,
    ExpiredURLError,
    FetchError,
    FileSource,
    URLSource,
    open_source,
)
from wavscribe.sources import redact_url

SIGNED_URL = (
    "https://storage.example.com/bucket/harvard.wav"
    "?X-Goog-Expires=345600&X-Goog-Signature=deadbeef"
)


def fake_response(status_code=200, reason="OK", content=b""):
    response = mock.Mock()
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 300
    response.content = content
    return response


class TestURLSource:
    """Test HTTP fetching."""
    
    def test_read_success(self):
        """Test a 200 response returns the body."""
        session = mock.Mock()
        session.get.return_value = fake_response(content=b"RIFFdata")
        
        source = URLSource(SIGNED_URL, session=session)
        
        assert source.read() == b"RIFFdata"
        session.get.assert_called_once_with(SIGNED_URL, timeout=None)
    
    def test_read_403_reports_expired_url(self):
        """Test a 403 raises ExpiredURLError mentioning expiration."""
        session = mock.Mock()
        session.get.return_value = fake_response(403, "Forbidden")
        
        source = URLSource(SIGNED_URL, session=session)
        
        with pytest.raises(ExpiredURLError, match="URL may have expired") as exc_info:
            source.read()
        
        assert isinstance(exc_info.value, FetchError)
        assert exc_info.value.status_code == 403
        assert exc_info.value.reason == "Forbidden"
        assert "403 Forbidden" in str(exc_info.value)
    
    def test_read_500_generic_fetch_error(self):
        """Test a 500 raises a plain FetchError."""
        session = mock.Mock()
        session.get.return_value = fake_response(500, "Internal Server Error")
        
        source = URLSource(SIGNED_URL, session=session)
        
        with pytest.raises(FetchError) as exc_info:
            source.read()
        
        assert not isinstance(exc_info.value, ExpiredURLError)
        assert exc_info.value.status_code == 500
        assert "expired" not in str(exc_info.value)
        assert str(exc_info.value) == "Failed to fetch audio: 500 Internal Server Error"
    
    @pytest.mark.parametrize(
        "status_code,reason", [(304, "Not Modified"), (300, "Multiple Choices")]
    )
    def test_read_3xx_not_followed(self, status_code, reason):
        """Test an unfollowed redirect status is a failure, not an empty body."""
        session = mock.Mock()
        session.get.return_value = fake_response(status_code, reason)
        
        with pytest.raises(FetchError, match=f"{status_code} {reason}") as exc_info:
            URLSource(SIGNED_URL, session=session).read()
        
        assert exc_info.value.status_code == status_code
    
    def test_read_real_response_304(self):
        """Test a real requests.Response with 304 raises FetchError."""
        response = requests.Response()
        response.status_code = 304
        response.reason = "Not Modified"
        response._content = b""
        session = mock.Mock()
        session.get.return_value = response
        
        with pytest.raises(FetchError, match="304 Not Modified"):
            URLSource(SIGNED_URL, session=session).read()
    
    def test_read_404(self):
        """Test a 404 raises FetchError with the status code."""
        session = mock.Mock()
        session.get.return_value = fake_response(404, "Not Found")
        
        with pytest.raises(FetchError, match="404 Not Found"):
            URLSource(SIGNED_URL, session=session).read()
    
    def test_transport_error(self):
        """Test connection failures become FetchError without a status."""
        session = mock.Mock()
        session.get.side_effect = requests.ConnectionError("connection refused")
        
        with pytest.raises(FetchError, match="connection refused") as exc_info:
            URLSource(SIGNED_URL, session=session).read()
        
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    
    def test_single_attempt(self):
        """Test failures are not retried."""
        session = mock.Mock()
        session.get.return_value = fake_response(503, "Service Unavailable")
        
        with pytest.raises(FetchError):
            URLSource(SIGNED_URL, session=session).read()
        
        assert session.get.call_count == 1
    
    def test_default_uses_requests(self):
        """Test the module-level requests.get is used without a session."""
        with mock.patch("wavscribe.sources.requests.get") as get:
            get.return_value = fake_response(content=b"abc")
            
            data = URLSource(SIGNED_URL, timeout=5.0).read()
        
        assert data == b"abc"
        get.assert_called_once_with(SIGNED_URL, timeout=5.0)
    
    def test_signature_not_in_errors(self):
        """Test error messages and describe() never leak the query string."""
        session = mock.Mock()
        session.get.side_effect = requests.Timeout("timed out")
        source = URLSource(SIGNED_URL, session=session)
        
        with pytest.raises(FetchError) as exc_info:
            source.read()
        
        assert "Signature" not in str(exc_info.value)
        assert "Signature" not in source.describe()
        assert exc_info.value.url == "https://storage.example.com/bucket/harvard.wav"
    
    def test_invalid_url_type(self):
        """Test non-string URL raises TypeError."""
        with pytest.raises(TypeError, match="url must be str"):
            URLSource(None)
    
    def test_empty_url(self):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError, match="url cannot be empty"):
            URLSource("")


class TestLocalSources:
    """Test file and in-memory sources."""
    
    def test_file_source(self, tmp_path):
        """Test FileSource returns the file contents."""
        path = tmp_path / "audio.wav"
        path.write_bytes(b"RIFF1234")
        
        assert FileSource(path).read() == b"RIFF1234"
        assert FileSource(str(path)).describe() == str(path)
    
    def test_file_source_missing(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="not found"):
            FileSource(tmp_path / "missing.wav").read()
    
    def test_bytes_source(self):
        """Test BytesSource returns its buffer."""
        source = BytesSource(bytearray(b"xyz"), name="buffer")
        
        assert source.read() == b"xyz"
        assert source.describe() == "buffer"
    
    def test_bytes_source_invalid_type(self):
        """Test BytesSource rejects non-bytes."""
        with pytest.raises(TypeError, match="data must be bytes"):
            BytesSource("xyz")


class TestOpenSource:
    """Test source selection."""
    
    @pytest.mark.parametrize("url", [SIGNED_URL, "http://localhost:8000/a.wav"])
    def test_urls(self, url):
        """Test http(s) locations open as URLSource."""
        assert isinstance(open_source(url), URLSource)
    
    def test_paths(self, tmp_path):
        """Test other locations open as FileSource."""
        assert isinstance(open_source("audios/harvard.wav"), FileSource)
        assert isinstance(open_source(tmp_path / "a.wav"), FileSource)


def test_redact_url():
    """Test query string and fragment are removed."""
    assert redact_url(SIGNED_URL + "#frag") == "https://storage.example.com/bucket/harvard.wav"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
