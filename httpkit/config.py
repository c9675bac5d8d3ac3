"""Configuration dataclass for the HTTP handler."""

from dataclasses import dataclass


@dataclass
class ClientConfig:
    """Configuration for HTTPHandler.

    Attributes:
        enable_length: Whether to send a Content-Length header computed from
                       the encoded body, until an auth call sets it again.
        content_type: Default content type symbol for bearer/key/basic ("json",
                      "url", "form-data", "text" or "xml"). Unknown symbols
                      produce no header.
        accept_type: Default accept type symbol, same symbols as content_type.
        rate_limit: Requests allowed per window. None disables rate limiting.
        rate_window: Window length in seconds. None disables rate limiting.
        connect_timeout: Connection establishment timeout in seconds. There is
                         no total request deadline.
        max_redirects: Maximum number of redirects to follow.
        impersonate: Browser to impersonate when the curl_cffi backend is used
                     (e.g., "chrome120").
    """

    # Headers
    enable_length: bool = False
    content_type: str = "json"
    accept_type: str = "json"

    # Rate limiting
    rate_limit: int | None = None
    rate_window: float | None = None

    # Transport policy
    connect_timeout: float = 10.0
    max_redirects: int = 5

    # Transport backend
    impersonate: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.rate_limit is not None and self.rate_limit < 1:
            raise ValueError("rate_limit must be >= 1")
        if self.rate_window is not None and self.rate_window < 0:
            raise ValueError("rate_window must be >= 0")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be > 0")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")
