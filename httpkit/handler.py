"""Stateful HTTP handler with auth headers, content negotiation and rate limiting.

This module provides the main client interface:
- Authorization headers for Bearer, API key and Basic schemes
- Symbolic content types ("json", "url", "form-data", "text", "xml")
- Request-count rate limiting over a resettable window
- Helpers to decode, inspect and save the last response
- Redacted debug snapshots

Basic usage:

    from httpkit import HTTPHandler

    handler = HTTPHandler()
    handler.bearer(content_type="json", accept_type="json", token="secret")
    handler.limit_requests(10, 60)

    handler.post("https://api.example.com/items", {"name": "widget"})
    print(handler.get_status_code())
    print(handler.as_map())

    handler.save_file("items.json")
    print(handler.debug_info().render())
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from .auth import AuthScheme, build_headers, custom_header_lines
from ._debug import DebugSnapshot, redact_headers
from .config import ClientConfig
from .executor import ClientState, RequestExecutor, to_result
from .models import HTTPClientError, Method, NoResponseError, RequestResult
from .response import ResponseView
from .safety import RateLimiter, WindowRateLimiter
from .transport import CurlTransport, Transport

logger = logging.getLogger(__name__)


class HTTPHandler:
    """HTTP client that owns its headers, rate limit window and last result.

    Each request overwrites the previous result; there is no history. A
    handler is meant for a single caller: concurrent use from several threads
    needs external locking.

    Args:
        config: Client configuration. Built from ``overrides`` when omitted.
        transport: Transport to use. Defaults to CurlTransport.
        rate_limiter: Limiter to use. Defaults to a blocking WindowRateLimiter
                      configured from ``config.rate_limit``/``config.rate_window``.
        **overrides: ClientConfig fields, used when ``config`` is None.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        rate_limiter: RateLimiter | None = None,
        **overrides: Any,
    ) -> None:
        if config is None:
            config = ClientConfig(**overrides)
        elif overrides:
            raise TypeError("Pass either a config or keyword overrides, not both")
        self._config = config

        self._state = ClientState(enable_length=config.enable_length)
        self._auth_scheme = AuthScheme.NONE

        if rate_limiter is None:
            rate_limiter = WindowRateLimiter(config.rate_limit, config.rate_window)
        self._rate_limiter = rate_limiter

        self._transport = transport or CurlTransport(impersonate=config.impersonate)
        self._executor = RequestExecutor(
            self._transport,
            self._rate_limiter,
            connect_timeout=config.connect_timeout,
            max_redirects=config.max_redirects,
        )
        self._closed = False

    # -------------------------------------------------------------------------
    # Authorization and Headers
    # -------------------------------------------------------------------------

    def _apply_scheme(
        self,
        scheme: AuthScheme,
        enable_length: bool,
        content_type: str | None,
        accept_type: str | None,
        token: str,
    ) -> None:
        self._state.enable_length = enable_length
        self._state.headers = build_headers(
            scheme,
            token,
            content_type if content_type is not None else self._config.content_type,
            accept_type if accept_type is not None else self._config.accept_type,
        )
        self._auth_scheme = scheme

    def bearer(
        self,
        enable_length: bool = False,
        content_type: str | None = None,
        accept_type: str | None = None,
        token: str = "",
    ) -> None:
        """Replace all headers with a Bearer token and content headers.

        Args:
            enable_length: Whether to send Content-Length.
            content_type: Content type symbol. None uses the configured default.
            accept_type: Accept type symbol. None uses the configured default.
            token: Bearer token.
        """
        self._apply_scheme(AuthScheme.BEARER, enable_length, content_type, accept_type, token)

    def key(
        self,
        enable_length: bool = False,
        content_type: str | None = None,
        accept_type: str | None = None,
        token: str = "",
    ) -> None:
        """Replace all headers with an X-API-Key header and content headers."""
        self._apply_scheme(AuthScheme.API_KEY, enable_length, content_type, accept_type, token)

    api_key = key

    def basic(
        self,
        enable_length: bool = False,
        content_type: str | None = None,
        accept_type: str | None = None,
        token: str = "",
    ) -> None:
        """Replace all headers with a Basic header and content headers.

        ``token`` is usually ``"user:password"``; it is base64 encoded here.
        """
        self._apply_scheme(AuthScheme.BASIC, enable_length, content_type, accept_type, token)

    def custom_headers(self, headers: Mapping[str, Any]) -> None:
        """Append headers without touching the existing ones.

        Args:
            headers: Dict of header name to value.
        """
        self._state.headers.extend(custom_header_lines(headers))
        if self._auth_scheme is AuthScheme.NONE:
            self._auth_scheme = AuthScheme.CUSTOM

    def get_headers(self) -> list[str]:
        """Get the current header set (unredacted)."""
        return list(self._state.headers)

    @property
    def auth_scheme(self) -> AuthScheme:
        """The authorization scheme currently applied."""
        return self._auth_scheme

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    def limit_requests(self, limit: int, seconds: float) -> None:
        """Allow at most ``limit`` requests per ``seconds`` window.

        Once the window is spent, the next request blocks until the window
        has elapsed.

        Raises:
            HTTPClientError: If a custom rate limiter without ``configure`` is used.
        """
        configure = getattr(self._rate_limiter, "configure", None)
        if configure is None:
            raise HTTPClientError(
                f"{type(self._rate_limiter).__name__} does not support configure()"
            )
        configure(limit, seconds)

    @property
    def rate_limiter(self) -> RateLimiter:
        """The limiter consulted before every request."""
        return self._rate_limiter

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    def request(
        self,
        url: str,
        method: Method | str = Method.GET,
        body: Any = "",
    ) -> RequestResult:
        """Make an HTTP request and store its result.

        Bad input and network failures do not raise: they produce a result
        with status 500, no body and the error message.

        Args:
            url: Absolute request URL.
            method: GET, POST, PUT or DELETE.
            body: str/bytes payload, or a dict encoded according to the
                  content type (FileUpload values force multipart).

        Returns:
            The stored RequestResult.

        Raises:
            HTTPClientError: If the handler has been closed. The attempt is
                             not counted.
        """
        if self._closed:
            raise HTTPClientError("Handler is closed")

        outcome = self._executor.execute(self._state, url, method, body)
        result = to_result(self._state, url, outcome)
        self._state.result = result
        logger.debug("%s -> %d", url, result.status_code)
        return result

    def get(self, url: str, body: Any = "") -> bytes | None:
        """Make a GET request and return the response body."""
        return self.request(url, Method.GET, body).body

    def post(self, url: str, body: Any = "") -> bytes | None:
        """Make a POST request and return the response body."""
        return self.request(url, Method.POST, body).body

    def put(self, url: str, body: Any = "") -> bytes | None:
        """Make a PUT request and return the response body."""
        return self.request(url, Method.PUT, body).body

    def delete(self, url: str, body: Any = "") -> bytes | None:
        """Make a DELETE request and return the response body."""
        return self.request(url, Method.DELETE, body).body

    # -------------------------------------------------------------------------
    # Response Helper Methods
    # -------------------------------------------------------------------------

    def get_result(self) -> RequestResult:
        """Get the full result of the last request.

        Raises:
            NoResponseError: If no request has been made yet.
        """
        if self._state.result is None:
            raise NoResponseError()
        return self._state.result

    def get_status_code(self) -> int:
        """Get the status code of the last request (500 on failure)."""
        return self.get_result().status_code

    def get_response(self) -> bytes | None:
        """Get the body of the last response, None on failure."""
        return self.get_result().body

    def get_error(self) -> str | None:
        """Get the error message of the last request, empty on success."""
        return self.get_result().transport_error

    def response_view(self) -> ResponseView:
        """Get a decoding view over the last response body."""
        return ResponseView(self.get_result().body)

    def _view(self) -> ResponseView:
        result = self._state.result
        return ResponseView(result.body if result else None)

    def as_map(self) -> dict | list:
        """Decode the last response as JSON, empty dict if not possible."""
        return self._view().as_map()

    def as_object(self) -> Any:
        """Decode the last response as a JSON object namespace, or None."""
        return self._view().as_object()

    def as_json(self) -> str:
        """Render the last response as JSON text."""
        return self._view().as_json_text()

    def save_file(self, path: str) -> bool | str:
        """Save the last response as pretty-printed JSON.

        Returns:
            True on success, otherwise a message explaining the failure.
        """
        return self._view().save_file(path)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    @property
    def url(self) -> str | None:
        """URL of the last request attempt."""
        return self._state.url

    @property
    def verify_ssl(self) -> bool:
        """Whether TLS verification was enabled for the last request."""
        return self._state.verify_ssl

    @property
    def total_requests(self) -> int:
        """Number of request attempts made, failed ones included."""
        return self._state.total_requests

    def debug_info(self) -> DebugSnapshot:
        """Build a redacted snapshot of the handler state."""
        state = self._state
        result = state.result

        window = getattr(self._rate_limiter, "window", None)
        rate_limit: dict[str, Any] = {}
        if window is not None and window.enabled:
            rate_limit = {
                "limit": window.limit,
                "window_seconds": window.window_seconds,
                "count": window.count,
            }

        return DebugSnapshot(
            url=state.url if state.url is not None else "N/A",
            verify_ssl=state.verify_ssl,
            status_code=result.status_code if result else "N/A",
            error=(result.transport_error or "N/A") if result else "N/A",
            headers=redact_headers(state.headers),
            execution_time=f"{int(time.monotonic() - state.started_at)}s",
            content_length=state.content_length,
            auth_scheme=self._auth_scheme.value,
            total_requests=state.total_requests,
            rate_limit=rate_limit,
        )

    def __repr__(self) -> str:
        snapshot = self.debug_info()
        return (
            f"<HTTPHandler url={snapshot.url!r} status={snapshot.status_code!r} "
            f"headers={snapshot.headers!r}>"
        )

    # -------------------------------------------------------------------------
    # Context Manager / Cleanup
    # -------------------------------------------------------------------------

    def __enter__(self) -> "HTTPHandler":
        """Enter context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self) -> None:
        """Close the handler and release transport sessions."""
        if not self._closed:
            self._transport.close()
            self._closed = True
