"""One-shot requests without handler state.

Same validation and body encoding rules as HTTPHandler, but no auth
builder, no rate limiting and no stored result. TLS verification is off
and redirects are not followed: a 3xx response is returned as is.
"""

from __future__ import annotations

from typing import Any, Sequence

from .encoding import BodyEncoding, check_xml, detect_encoding, encode_body, has_file_upload
from .executor import parse_method, validate_url
from .models import ValidationError
from .transport import CurlTransport, Transport


def request(
    url: str,
    method: str = "GET",
    headers: Sequence[str] = (),
    body: Any = "",
    transport: Transport | None = None,
) -> dict[str, Any]:
    """Execute a single HTTP request.

    Args:
        url: Absolute request URL.
        method: GET, POST, PUT or DELETE.
        headers: Header lines in "Name: value" form.
        body: str/bytes payload or a dict encoded according to ``headers``.
        transport: Transport to use. A temporary CurlTransport when omitted.

    Returns:
        Dict with ``status_code`` and ``response``. Invalid input yields
        status 400 and transport failures status 500, with a message as
        the response.
    """
    try:
        validate_url(url)
    except ValidationError:
        return {"status_code": 400, "response": f"Invalid URL -> {url}"}
    try:
        verb = parse_method(method)
    except ValidationError:
        return {"status_code": 400, "response": f"Method not allowed -> {method}"}

    encoding = detect_encoding(headers)
    if has_file_upload(body):
        encoding |= BodyEncoding.MULTIPART
        headers = [h for h in headers if not h.lower().startswith("content-type:")]
    else:
        try:
            body = encode_body(body, encoding)
        except ValidationError:
            return {"status_code": 400, "response": "Invalid body for application/json"}
    if BodyEncoding.XML in encoding:
        try:
            check_xml(body)
        except ValidationError:
            return {"status_code": 400, "response": "Invalid body for application/xml"}

    owned = transport is None
    if transport is None:
        transport = CurlTransport()
    try:
        result = transport.send(
            verb.value, url, list(headers), body, verify_ssl=False, max_redirects=0
        )
    finally:
        if owned:
            transport.close()

    if result.error:
        return {"status_code": 500, "response": f"Request error -> {result.error}"}
    return {"status_code": result.status_code, "response": result.body}
