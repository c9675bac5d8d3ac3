"""Shared test fixtures and configuration."""

from typing import Generator
from unittest.mock import MagicMock

import pytest

from httpkit import ClientConfig, HTTPHandler, TransportResult, WindowRateLimiter
from httpkit.transport import CurlTransport


# ============== Configuration Fixtures ==============

@pytest.fixture
def default_config() -> ClientConfig:
    """Default client configuration."""
    return ClientConfig()


@pytest.fixture
def length_config() -> ClientConfig:
    """Configuration sending Content-Length."""
    return ClientConfig(enable_length=True)


# ============== Transport Result Fixtures ==============

@pytest.fixture
def json_result() -> TransportResult:
    """Successful JSON response."""
    return TransportResult(status_code=200, body=b'{"success": true}', error="", elapsed=0.1)


@pytest.fixture
def not_found_result() -> TransportResult:
    """404 response from the server."""
    return TransportResult(status_code=404, body=b"Not Found", error="", elapsed=0.1)


@pytest.fixture
def connection_error_result() -> TransportResult:
    """Transport-level failure with no response."""
    return TransportResult(
        status_code=0,
        body=None,
        error="Request failed: ConnectionError: could not resolve host",
    )


# ============== Mock Fixtures ==============

@pytest.fixture
def mock_transport(json_result: TransportResult) -> MagicMock:
    """Mock transport for testing without network."""
    transport = MagicMock(spec=CurlTransport)
    transport.is_closed = False
    transport.send.return_value = json_result
    return transport


@pytest.fixture
def fake_clock() -> "FakeClock":
    """Controllable monotonic clock with a recording sleep."""
    return FakeClock()


class FakeClock:
    """Clock that only advances when slept on."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============== Handler Fixtures ==============

@pytest.fixture
def handler(mock_transport: MagicMock) -> Generator[HTTPHandler, None, None]:
    """HTTPHandler with mocked transport."""
    handler = HTTPHandler(transport=mock_transport)
    yield handler
    handler.close()


@pytest.fixture
def limited_handler(
    mock_transport: MagicMock, fake_clock: FakeClock
) -> Generator[HTTPHandler, None, None]:
    """HTTPHandler with a one-request-per-10s limiter on a fake clock."""
    limiter = WindowRateLimiter(
        limit=1, window_seconds=10, clock=fake_clock, sleep=fake_clock.sleep
    )
    handler = HTTPHandler(transport=mock_transport, rate_limiter=limiter)
    yield handler
    handler.close()


@pytest.fixture
def last_send(mock_transport: MagicMock):
    """Return a function giving the last transport.send call as a dict."""

    def _last_send() -> dict:
        args, kwargs = mock_transport.send.call_args
        names = ["method", "url", "headers", "body"]
        call = dict(zip(names, args))
        call.update(kwargs)
        return call

    return _last_send
