"""Request state, results, outcomes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Method(str, Enum):
    """HTTP verbs accepted by the request engine."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class FileUpload:
    """Body value sent as a binary multipart file part.

    Either ``path`` (a file on local disk) or ``data`` (in-memory content)
    must be given.

    Attributes:
        path: Local file to upload.
        data: Raw file content.
        filename: File name reported to the server.
        content_type: Media type of the part (e.g. ``image/png``).
    """

    path: str | None = None
    data: bytes | None = None
    filename: str | None = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        """Require exactly one content source."""
        if (self.path is None) == (self.data is None):
            raise ValueError("FileUpload needs exactly one of path or data")


@dataclass
class TransportResult:
    """Raw outcome of one HTTP exchange as reported by a transport.

    Attributes:
        status_code: HTTP status code, 0 when no response was received.
        body: Response body, None when no response was received.
        error: Transport-level error message, empty on success.
        elapsed: Exchange duration in seconds.
    """

    status_code: int
    body: bytes | None
    error: str = ""
    elapsed: float = 0.0


@dataclass
class RequestResult:
    """Normalized result of the last request call.

    Attributes:
        url: The requested URL.
        status_code: HTTP status code, 500 for validation or transport failures.
        body: Response body, None on failure.
        transport_error: Error message, empty or None on success.
        content_length: Length sent in the Content-Length header, or "N/A".
        verify_ssl: Whether TLS verification was in effect.
    """

    url: str
    status_code: int
    body: bytes | None
    transport_error: str | None
    content_length: str = "N/A"
    verify_ssl: bool = False

    @property
    def text(self) -> str:
        """Decode body as UTF-8 text."""
        if self.body is None:
            return ""
        return self.body.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status_code < 300


@dataclass
class RateLimitWindow:
    """Counting window of the request rate limiter.

    Attributes:
        limit: Requests allowed per window, None when unlimited.
        window_seconds: Window length in seconds, None when unlimited.
        count: Requests recorded in the current window.
        window_start: Monotonic timestamp of the window start.
    """

    limit: int | None
    window_seconds: float | None
    count: int
    window_start: float

    @property
    def enabled(self) -> bool:
        """Rate limiting applies only when both limit and window are set."""
        return self.limit is not None and self.window_seconds is not None

    @property
    def at_capacity(self) -> bool:
        """Check if the window has used up its allowance."""
        return self.enabled and self.count >= self.limit  # type: ignore[operator]


@dataclass(frozen=True)
class Success:
    """The transport produced a response (any status code)."""

    response: TransportResult


@dataclass(frozen=True)
class ValidationFailure:
    """The request was rejected before reaching the transport."""

    reason: str


@dataclass(frozen=True)
class TransportFailure:
    """The transport could not complete the exchange."""

    reason: str


Outcome = Union[Success, ValidationFailure, TransportFailure]


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class ValidationError(HTTPClientError):
    """Malformed URL, unsupported method or body not matching its content type."""
    pass


class TransportError(HTTPClientError):
    """Error during HTTP transport (connection, timeout, etc.)."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class RateLimitExceeded(HTTPClientError):
    """Rate limit exceeded error."""

    def __init__(self, limit: int, retry_after: float | None = None):
        message = f"Rate limit of {limit} requests exceeded"
        if retry_after:
            message += f", retry after {retry_after:.1f}s"
        super().__init__(message)
        self.limit = limit
        self.retry_after = retry_after


class NoResponseError(HTTPClientError):
    """Raised when accessing response data before making a request."""

    def __init__(self) -> None:
        super().__init__("No response available. Make a request first.")


def describe(value: Any) -> str:
    """Short type description used in error messages."""
    return type(value).__name__
