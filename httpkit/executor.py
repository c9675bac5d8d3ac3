"""Request execution: validation, body encoding, TLS policy and transport call.

The executor drives one request through a fixed sequence of steps:

1. record the URL in the client state,
2. consult the rate limiter (may block),
3. validate URL and method,
4. derive the body encoding from the header set,
5. detect file uploads (which strips Content-Type from the header set),
6. URL- or JSON-encode structured bodies,
7. check XML bodies,
8. derive TLS verification from the URL scheme,
9. append Content-Length when enabled,
10. call the transport.

Every attempt ends by counting the request, whatever happened above. The
tagged ``Outcome`` is collapsed into a ``RequestResult`` by ``to_result``:
validation and transport failures both become status 500 with no body and
the error message, so callers can only tell them apart by the message.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from .encoding import (
    BodyEncoding,
    body_length,
    check_xml,
    detect_encoding,
    encode_body,
    has_file_upload,
)
from .models import (
    Method,
    Outcome,
    RequestResult,
    Success,
    TransportFailure,
    ValidationError,
    ValidationFailure,
)
from .safety import RateLimiter
from .transport import Transport

logger = logging.getLogger(__name__)

FAILURE_STATUS = 500


@dataclass
class ClientState:
    """Mutable state of one client.

    Owned by a single HTTPHandler; not safe for concurrent use.
    """

    headers: list[str] = field(default_factory=list)
    enable_length: bool = False
    url: str | None = None
    verify_ssl: bool = False
    content_length: str = "N/A"
    total_requests: int = 0
    result: RequestResult | None = None
    started_at: float = field(default_factory=time.monotonic)


def parse_method(method: Method | str) -> Method:
    """Resolve a method name to one of the supported verbs.

    Names are matched exactly, so "post" is rejected.

    Raises:
        ValidationError: If the method is not GET, POST, PUT or DELETE.
    """
    if isinstance(method, Method):
        return method
    try:
        return Method(method)
    except ValueError:
        raise ValidationError(
            f"Unsupported method {method!r}. Use GET, POST, PUT or DELETE."
        ) from None


def validate_url(url: str) -> str:
    """Check that a URL is absolute and return its lower-cased scheme.

    Raises:
        ValidationError: If the URL has no scheme or host, or contains whitespace.
    """
    if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
        raise ValidationError(f"Invalid URL: {url!r}")
    try:
        parts = urlsplit(url)
        _ = parts.port  # raises on a malformed port
    except ValueError:
        raise ValidationError(f"Invalid URL: {url!r}") from None
    if not parts.scheme or not parts.hostname:
        raise ValidationError(f"Invalid URL: {url!r}")
    return parts.scheme.lower()


class RequestExecutor:
    """Runs requests against a transport on behalf of a ClientState."""

    def __init__(
        self,
        transport: Transport,
        rate_limiter: RateLimiter,
        connect_timeout: float = 10.0,
        max_redirects: int = 5,
    ):
        """Initialize executor.

        Args:
            transport: Transport performing the HTTP exchange.
            rate_limiter: Limiter consulted before every attempt.
            connect_timeout: Connection timeout passed to the transport.
            max_redirects: Redirect limit passed to the transport.
        """
        self.transport = transport
        self.rate_limiter = rate_limiter
        self.connect_timeout = connect_timeout
        self.max_redirects = max_redirects

    def execute(
        self,
        state: ClientState,
        url: str,
        method: Method | str = Method.GET,
        body: Any = "",
    ) -> Outcome:
        """Run one request and return its tagged outcome.

        Mutates ``state.url``, ``state.verify_ssl``, ``state.content_length``
        and, for file uploads, ``state.headers``. Always counts the attempt.
        """
        try:
            return self._run(state, url, method, body)
        except ValidationError as e:
            return ValidationFailure(str(e))
        except Exception as e:
            return TransportFailure(str(e) or type(e).__name__)
        finally:
            self.rate_limiter.record()
            state.total_requests += 1

    def _run(
        self, state: ClientState, url: str, method: Method | str, body: Any
    ) -> Outcome:
        state.url = url

        self.rate_limiter.acquire()

        scheme = validate_url(url)
        verb = parse_method(method)

        encoding = detect_encoding(state.headers)

        if has_file_upload(body):
            encoding |= BodyEncoding.MULTIPART
            # let the transport set the multipart boundary itself
            state.headers = [
                h for h in state.headers if not h.lower().startswith("content-type:")
            ]
            logger.debug("File upload detected, Content-Type header removed")
        else:
            body = encode_body(body, encoding)

        if BodyEncoding.XML in encoding:
            check_xml(body)

        verify_ssl = scheme == "https"
        state.verify_ssl = verify_ssl

        headers = list(state.headers)
        if state.enable_length and BodyEncoding.MULTIPART not in encoding:
            length = str(body_length(body))
            headers.append(f"Content-Length: {length}")
            state.content_length = length

        logger.debug("%s %s (verify_ssl=%s)", verb.value, url, verify_ssl)
        response = self.transport.send(
            verb.value,
            url,
            headers,
            body,
            verify_ssl=verify_ssl,
            connect_timeout=self.connect_timeout,
            max_redirects=self.max_redirects,
        )

        if response.error and response.status_code == 0:
            return TransportFailure(response.error)
        return Success(response)


def to_result(state: ClientState, url: str, outcome: Outcome) -> RequestResult:
    """Collapse an outcome into the RequestResult exposed to callers.

    Validation and transport failures map to the same shape: status 500,
    no body, and the failure message as the transport error.
    """
    if isinstance(outcome, Success):
        response = outcome.response
        return RequestResult(
            url=url,
            status_code=response.status_code,
            body=response.body,
            transport_error=response.error,
            content_length=state.content_length,
            verify_ssl=state.verify_ssl,
        )

    logger.warning("Request to %s failed: %s", url, outcome.reason)
    return RequestResult(
        url=url,
        status_code=FAILURE_STATUS,
        body=None,
        transport_error=outcome.reason,
        content_length=state.content_length,
        verify_ssl=state.verify_ssl,
    )
