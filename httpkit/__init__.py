"""HTTP client with auth headers, content negotiation and rate limiting.

This package provides a stateful request engine on top of curl_cffi
(or httpx when curl_cffi is unavailable) with:

- Bearer, API key and Basic authorization headers
- Symbolic content types that drive body encoding (JSON, form, XML, multipart)
- Request-count rate limiting that blocks once a window is spent
- TLS verification derived from the URL scheme
- JSON helpers and file persistence for the last response
- Redacted debug snapshots

Basic usage:

    from httpkit import HTTPHandler

    handler = HTTPHandler()
    handler.key(content_type="json", token="my-api-key")
    handler.get("https://api.example.com/items")
    print(handler.get_status_code(), handler.as_map())

    # File uploads are sent as multipart form data
    from httpkit import FileUpload

    handler.post(
        "https://api.example.com/upload",
        {"file": FileUpload(path="report.pdf", content_type="application/pdf")},
    )

    # Stateless one-shot request
    from httpkit import simple

    result = simple.request("https://example.com", "GET", ["Accept: text/plain"])
"""

from . import simple
from ._debug import DebugSnapshot
from .auth import AuthScheme
from .config import ClientConfig
from .encoding import BodyEncoding
from .handler import HTTPHandler
from .models import (
    FileUpload,
    HTTPClientError,
    Method,
    NoResponseError,
    RateLimitExceeded,
    RateLimitWindow,
    RequestResult,
    TransportError,
    TransportResult,
    ValidationError,
)
from .response import ResponseView
from .safety import RateLimiter, WindowRateLimiter

__version__ = "0.1.0"

__all__ = [
    # Main client
    "HTTPHandler",
    "simple",
    # Configuration
    "ClientConfig",
    # Models
    "AuthScheme",
    "BodyEncoding",
    "FileUpload",
    "Method",
    "RateLimitWindow",
    "RequestResult",
    "TransportResult",
    "ResponseView",
    "DebugSnapshot",
    # Exceptions
    "HTTPClientError",
    "ValidationError",
    "TransportError",
    "RateLimitExceeded",
    "NoResponseError",
    # Rate limiting
    "RateLimiter",
    "WindowRateLimiter",
    # Version
    "__version__",
]
