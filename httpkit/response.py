"""Decoding and persistence helpers for a stored response body."""

from __future__ import annotations

import json
import logging
from types import SimpleNamespace
from typing import Any

from .encoding import to_json

logger = logging.getLogger(__name__)

NOTHING_TO_SAVE = "No response to save."

_UNDECODABLE = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class ResponseView:
    """Read-only view over the body of the last response.

    None of the decoding helpers raise: bodies that are not JSON fall back
    to an empty mapping, ``None`` or a ``{"data": ...}`` wrapper.

    Args:
        body: Raw response body (bytes or text), or an already decoded
              structure.
    """

    def __init__(self, body: bytes | str | dict | list | None):
        self._body = body

    @property
    def raw(self) -> bytes | str | dict | list | None:
        """The stored body, unmodified."""
        return self._body

    @property
    def text(self) -> str | None:
        """The body as text, None when there is no textual body."""
        if isinstance(self._body, bytes):
            return self._body.decode("utf-8", errors="replace")
        if isinstance(self._body, str):
            return self._body
        return None

    def _decode(self, **kwargs: Any) -> Any:
        text = self.text
        if text is None:
            return _UNDECODABLE
        try:
            return json.loads(text, parse_constant=_reject_constant, **kwargs)
        except ValueError:
            return _UNDECODABLE

    def as_map(self) -> dict | list:
        """Decode the body as a JSON object or array.

        Returns:
            The decoded dict or list, or an empty dict otherwise.
        """
        decoded = self._decode()
        return decoded if isinstance(decoded, (dict, list)) else {}

    def as_object(self) -> SimpleNamespace | None:
        """Decode a JSON object body into attribute-accessible namespaces.

        Returns:
            A SimpleNamespace when the body is a JSON object, else None.
        """
        decoded = self._decode(object_hook=lambda d: SimpleNamespace(**d))
        return decoded if isinstance(decoded, SimpleNamespace) else None

    def as_json_text(self) -> str:
        """Render the body as JSON text.

        Valid JSON is returned verbatim, structures are serialized and
        anything else is wrapped as ``{"data": <text>}``.
        """
        if self._decode() is not _UNDECODABLE:
            return self.text  # type: ignore[return-value]
        if isinstance(self._body, (dict, list)):
            try:
                return to_json(self._body)
            except ValueError:
                return to_json({"data": repr(self._body)})
        return to_json({"data": self.text})

    def save_file(self, path: str) -> bool | str:
        """Write the body to ``path`` as pretty-printed UTF-8 JSON.

        Non-JSON bodies are saved as ``{"data": <text>}``.

        Args:
            path: Destination file path.

        Returns:
            True on success, otherwise a message describing why nothing was
            written (no body, or the serialization or I/O error).
        """
        if not self._body:
            return NOTHING_TO_SAVE

        if isinstance(self._body, (dict, list)):
            data = self._body
        else:
            data = self._decode()
            if data is _UNDECODABLE:
                data = {"data": self.text}

        try:
            text = to_json(data, pretty=True)
        except ValueError as e:
            logger.warning("Response is not serializable as JSON: %s", e)
            return str(e)

        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logger.warning("Could not save response to %s: %s", path, e)
            return str(e)

        logger.debug("Response saved to %s", path)
        return True
