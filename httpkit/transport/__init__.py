"""Transport layer implementations."""

from .base import BaseTransport, Transport
from .curl_transport import CurlTransport

__all__ = ["BaseTransport", "Transport", "CurlTransport"]
