"""Authorization header construction."""

from __future__ import annotations

import base64
from enum import Enum
from typing import Mapping

from .negotiation import negotiate

SENSITIVE_HEADERS = ("authorization:", "x-api-key:")


class AuthScheme(str, Enum):
    """Authorization scheme currently applied to a header set."""

    NONE = "none"
    BEARER = "bearer"
    API_KEY = "key"
    BASIC = "basic"
    CUSTOM = "custom"


def scheme_header(scheme: AuthScheme, token: str) -> str:
    """Build the authorization header line for a scheme.

    Basic tokens are base64 encoded. Tokens are not validated, an empty
    token produces a header with an empty credential.

    Args:
        scheme: One of BEARER, API_KEY or BASIC.
        token: Credential to embed.

    Returns:
        Header string in "Name: value" form.
    """
    if scheme is AuthScheme.BEARER:
        return f"Authorization: Bearer {token}"
    if scheme is AuthScheme.API_KEY:
        return f"X-API-Key: {token}"
    if scheme is AuthScheme.BASIC:
        encoded = base64.b64encode(token.encode("utf-8")).decode("ascii")
        return f"Authorization: Basic {encoded}"
    raise ValueError(f"{scheme.value!r} has no authorization header")


def build_headers(
    scheme: AuthScheme,
    token: str,
    content_type: str = "json",
    accept_type: str = "json",
) -> list[str]:
    """Build a fresh header set: scheme, content type and accept headers."""
    content_header, accept = negotiate(content_type, accept_type)
    return [scheme_header(scheme, token), content_header, accept]


def custom_header_lines(headers: Mapping[str, object]) -> list[str]:
    """Render a mapping as header lines, one per entry."""
    return [f"{name}: {value}" for name, value in headers.items()]


def is_sensitive(header: str) -> bool:
    """Check whether a header line carries credentials."""
    return header.lower().startswith(SENSITIVE_HEADERS)
