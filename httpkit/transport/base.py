"""Abstract transport protocol for HTTP requests."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Protocol, Sequence, runtime_checkable

from ..models import TransportError, TransportResult


@runtime_checkable
class Transport(Protocol):
    """Protocol defining the transport interface.

    A transport executes exactly one HTTP exchange per ``send`` call and
    never raises: failures are reported through ``TransportResult.error``.
    """

    def send(
        self,
        method: str,
        url: str,
        headers: Sequence[str],
        body: Any = None,
        verify_ssl: bool = True,
        connect_timeout: float = 10.0,
        max_redirects: int = 5,
    ) -> TransportResult:
        """Execute a synchronous HTTP request.

        Args:
            method: HTTP method.
            url: Request URL.
            headers: Header lines in "Name: value" form.
            body: str or bytes payload, or a mapping sent as multipart form data.
            verify_ssl: Whether to verify SSL certificates.
            connect_timeout: Connection establishment timeout in seconds.
            max_redirects: Maximum number of redirects to follow, 0 to return
                           3xx responses without following them.

        Returns:
            TransportResult with status 0 and an error message on failure.
        """
        ...

    def close(self) -> None:
        """Release sessions."""
        ...


def split_headers(headers: Sequence[str]) -> list[tuple[str, str]]:
    """Turn "Name: value" lines into pairs, skipping empty or malformed lines."""
    pairs = []
    for line in headers:
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            continue
        pairs.append((name.strip(), value.strip()))
    return pairs


class BaseTransport(ABC):
    """Abstract base class for transport implementations.

    Provides common functionality and enforces the transport interface.
    """

    def __init__(self, impersonate: str | None = None):
        """Initialize transport.

        Args:
            impersonate: Browser to impersonate (for TLS fingerprinting).
        """
        self._impersonate = impersonate
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Check if transport has been closed."""
        return self._closed

    def send(
        self,
        method: str,
        url: str,
        headers: Sequence[str],
        body: Any = None,
        verify_ssl: bool = True,
        connect_timeout: float = 10.0,
        max_redirects: int = 5,
    ) -> TransportResult:
        """Execute a synchronous HTTP request.

        TransportError raised by ``_send`` is reported as a result with
        status 0, no body and the error message.
        """
        start_time = time.monotonic()
        try:
            if self._closed:
                raise TransportError("Transport is closed")
            return self._send(
                method, url, headers, body, verify_ssl, connect_timeout, max_redirects
            )
        except TransportError as e:
            return TransportResult(
                status_code=0,
                body=None,
                error=str(e),
                elapsed=time.monotonic() - start_time,
            )

    @abstractmethod
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
        """Perform the exchange.

        Raises:
            TransportError: On connection or transport errors.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release sessions."""
        self._closed = True

    def __enter__(self) -> "BaseTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
