"""Content negotiation: symbolic content types to header strings."""

from __future__ import annotations

MEDIA_TYPES: dict[str, str] = {
    "json": "application/json",
    "url": "application/x-www-form-urlencoded",
    "form-data": "multipart/form-data",
    "text": "text/plain",
    "xml": "application/xml",
}


def content_type_header(symbol: str) -> str:
    """Build the Content-Type header for a symbol.

    Unknown symbols yield an empty string instead of raising.
    """
    media_type = MEDIA_TYPES.get(symbol)
    return f"Content-Type: {media_type}" if media_type else ""


def accept_header(symbol: str) -> str:
    """Build the Accept header for a symbol, empty for unknown symbols."""
    media_type = MEDIA_TYPES.get(symbol)
    return f"Accept: {media_type}" if media_type else ""


def negotiate(content_type: str, accept_type: str) -> tuple[str, str]:
    """Resolve both roles at once."""
    return content_type_header(content_type), accept_header(accept_type)
