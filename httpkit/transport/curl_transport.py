"""curl_cffi transport implementation with httpx fallback."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Mapping, Sequence

from ..models import FileUpload, TransportError, TransportResult
from .base import BaseTransport, split_headers

# Try to import curl_cffi, fall back to httpx if unavailable
try:
    from curl_cffi import CurlMime, CurlOpt
    from curl_cffi.requests import Session

    CURL_AVAILABLE = True
except ImportError:
    CURL_AVAILABLE = False
    CurlMime = None
    CurlOpt = None
    Session = None

# Fallback to httpx
try:
    import httpx

    HTTPX_AVAILABLE = True
except ImportError:
    HTTPX_AVAILABLE = False
    httpx = None

logger = logging.getLogger(__name__)


def _upload_name(upload: FileUpload, field: str) -> str:
    if upload.filename:
        return upload.filename
    if upload.path:
        return os.path.basename(upload.path)
    return field


class CurlTransport(BaseTransport):
    """Transport using curl_cffi, falling back to httpx if it is not available.

    Only the connection phase is bounded by a timeout; once connected, a
    request may take as long as the server needs.
    """

    def __init__(self, impersonate: str | None = None):
        """Initialize curl transport.

        Args:
            impersonate: Browser to impersonate (e.g., "chrome120"). curl_cffi only.
        """
        super().__init__(impersonate)

        self._using_curl = CURL_AVAILABLE
        self._sessions: dict[tuple, Any] = {}

        if not CURL_AVAILABLE and not HTTPX_AVAILABLE:
            raise ImportError(
                "Neither curl_cffi nor httpx is available. "
                "Install one of them: pip install curl_cffi or pip install httpx"
            )

    def _get_session(
        self, verify_ssl: bool, connect_timeout: float, max_redirects: int
    ) -> Any:
        """Get or create a session for the given connection policy."""
        if self._using_curl:
            # verify and redirects are per request in curl_cffi
            key: tuple = (connect_timeout,)
        else:
            key = (verify_ssl, connect_timeout, max_redirects)

        if key not in self._sessions:
            if self._using_curl:
                self._sessions[key] = Session(
                    impersonate=self._impersonate,
                    curl_options={CurlOpt.CONNECTTIMEOUT_MS: int(connect_timeout * 1000)},
                )
            else:
                self._sessions[key] = httpx.Client(
                    verify=verify_ssl,
                    max_redirects=max_redirects,
                    timeout=httpx.Timeout(None, connect=connect_timeout),
                )
        return self._sessions[key]

    def _build_multipart(self, body: Mapping[str, Any]) -> Any:
        """Build a CurlMime form from a mapping body."""
        form = CurlMime()
        for name, value in body.items():
            if isinstance(value, FileUpload):
                form.addpart(
                    name=str(name),
                    content_type=value.content_type,
                    filename=_upload_name(value, str(name)),
                    local_path=value.path,
                    data=value.data,
                )
            else:
                form.addpart(name=str(name), data=str(value).encode("utf-8"))
        return form

    def _split_form(
        self, body: Mapping[str, Any]
    ) -> tuple[dict[str, str], dict[str, tuple]]:
        """Split a mapping body into httpx ``data`` and ``files`` arguments."""
        data: dict[str, str] = {}
        files: dict[str, tuple] = {}
        for name, value in body.items():
            if isinstance(value, FileUpload):
                content = value.data if value.data is not None else Path(value.path).read_bytes()  # type: ignore[arg-type]
                files[str(name)] = (
                    _upload_name(value, str(name)),
                    content,
                    value.content_type or "application/octet-stream",
                )
            else:
                data[str(name)] = str(value)
        return data, files

    def _build_request_kwargs(
        self,
        method: str,
        url: str,
        headers: Sequence[str],
        body: Any,
        verify_ssl: bool,
        max_redirects: int,
    ) -> dict[str, Any]:
        """Build kwargs for the underlying HTTP library."""
        kwargs: dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": split_headers(headers),
        }

        # GET requests never carry a body
        send_body = method != "GET" and body is not None and body != ""

        if self._using_curl:
            kwargs["verify"] = verify_ssl
            kwargs["allow_redirects"] = max_redirects > 0
            kwargs["max_redirects"] = max_redirects
            kwargs["timeout"] = None
            if send_body:
                if isinstance(body, Mapping):
                    kwargs["multipart"] = self._build_multipart(body)
                else:
                    kwargs["data"] = body
        else:
            kwargs["follow_redirects"] = max_redirects > 0
            if send_body:
                if isinstance(body, Mapping):
                    data, files = self._split_form(body)
                    kwargs["data"] = data
                    if files:
                        kwargs["files"] = files
                else:
                    kwargs["content"] = body

        return kwargs

    def _send(
        self,
        method: str,
        url: str,
        headers: Sequence[str],
        body: Any,
        verify_ssl: bool,
        connect_timeout: float,
        max_redirects: int,
    ) -> TransportResult:
        """Execute a synchronous HTTP request.

        Non-2xx responses are returned like any other response.

        Raises:
            TransportError: On connection, TLS or protocol errors.
        """
        start_time = time.monotonic()
        multipart = None

        try:
            session = self._get_session(verify_ssl, connect_timeout, max_redirects)
            kwargs = self._build_request_kwargs(
                method, url, headers, body, verify_ssl, max_redirects
            )
            multipart = kwargs.get("multipart")
            raw_response = session.request(**kwargs)
        except Exception as e:
            error_name = type(e).__name__
            logger.debug("%s %s failed: %s", method, url, e)
            raise TransportError(
                f"Request failed: {error_name}: {str(e)}",
                original_error=e,
            ) from e
        finally:
            if multipart is not None:
                multipart.close()

        return TransportResult(
            status_code=raw_response.status_code,
            body=raw_response.content,
            error="",
            elapsed=time.monotonic() - start_time,
        )

    def close(self) -> None:
        """Close all sessions."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        super().close()

    @property
    def using_curl_cffi(self) -> bool:
        """Check if using curl_cffi (True) or httpx fallback (False)."""
        return self._using_curl

    @property
    def backend_name(self) -> str:
        """Get name of the underlying HTTP library."""
        return "curl_cffi" if self._using_curl else "httpx"
