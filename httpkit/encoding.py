"""Request body encoding decisions and encoders."""

from __future__ import annotations

import json
from enum import Flag, auto
from typing import Any, Iterable, Iterator, Mapping
from urllib.parse import urlencode

from .models import FileUpload, ValidationError, describe

Body = Any


class BodyEncoding(Flag):
    """Encodings requested by a header set for one request."""

    RAW = 0
    URLENCODED = auto()
    JSON = auto()
    XML = auto()
    MULTIPART = auto()


_MARKERS = (
    ("application/x-www-form-urlencoded", BodyEncoding.URLENCODED),
    ("application/json", BodyEncoding.JSON),
    ("application/xml", BodyEncoding.XML),
)


def detect_encoding(headers: Iterable[str]) -> BodyEncoding:
    """Scan header lines for the media types that drive body encoding.

    Matching is a case-insensitive substring search over every header,
    so several encodings may be flagged at once.
    """
    encoding = BodyEncoding.RAW
    for header in headers:
        lowered = header.lower()
        for marker, flag in _MARKERS:
            if marker in lowered:
                encoding |= flag
    return encoding


def is_structured(body: Body) -> bool:
    """Check if the body is a mapping or list that still needs encoding."""
    return isinstance(body, (Mapping, list, tuple))


def has_file_upload(body: Body) -> bool:
    """Check if a mapping body carries at least one FileUpload value."""
    if not isinstance(body, Mapping):
        return False
    return any(isinstance(value, FileUpload) for value in body.values())


def to_json(data: Any, pretty: bool = False) -> str:
    """Serialize without escaping slashes or non-ASCII characters.

    Floats keep their fractional part (``1.0`` stays ``1.0``).

    Raises:
        ValueError: If the data holds NaN or infinite floats.
    """
    if pretty:
        return json.dumps(data, ensure_ascii=False, allow_nan=False, indent=4)
    return json.dumps(
        data, ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )


def _scalar(value: Any) -> str:
    if value is True:
        return "1"
    if value is False:
        return "0"
    return str(value)


def _flatten(prefix: str, value: Any) -> Iterator[tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        items: Iterable[tuple[Any, Any]] = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        yield prefix, _scalar(value)
        return
    for key, item in items:
        yield from _flatten(f"{prefix}[{key}]", item)


def build_query(data: Mapping[Any, Any] | list | tuple) -> str:
    """Form-encode structured data, nesting keys as ``a[b]`` and ``a[0]``."""
    items = data.items() if isinstance(data, Mapping) else enumerate(data)
    pairs: list[tuple[str, str]] = []
    for key, value in items:
        pairs.extend(_flatten(str(key), value))
    return urlencode(pairs)


def encode_body(body: Body, encoding: BodyEncoding) -> Body:
    """Apply URL or JSON encoding to a structured body.

    URL encoding takes precedence when both are requested; bodies carrying
    file uploads are returned untouched.

    Raises:
        ValidationError: If a JSON body cannot be serialized.
    """
    if BodyEncoding.MULTIPART in encoding or not is_structured(body):
        return body
    if BodyEncoding.URLENCODED in encoding:
        return build_query(body)
    if BodyEncoding.JSON in encoding:
        try:
            return to_json(body)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid body for application/json: {e}") from None
    return body


def check_xml(body: Body) -> None:
    """Require an XML body to be a string opening with an XML declaration."""
    if not isinstance(body, str):
        raise ValidationError(
            f"Invalid body for application/xml: expected str, got {describe(body)}"
        )
    if not body.lstrip().lower().startswith("<?xml"):
        raise ValidationError(
            "Invalid body for application/xml: missing <?xml declaration"
        )


def body_length(body: Body) -> int:
    """Byte length of a body as it will be sent."""
    if body is None:
        return 0
    if isinstance(body, bytes):
        return len(body)
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    return len(to_json(body).encode("utf-8"))
