"""Redacted diagnostic snapshot of an HTTPHandler."""

from __future__ import annotations

import sys
from dataclasses import asdict, dataclass, field
from typing import Any, TextIO

from .auth import is_sensitive

REDACTED = "[REDACTED]"


def redact_header(header: str) -> str:
    """Replace the value of a credential header, keeping its name."""
    if not is_sensitive(header):
        return header
    name, _, _ = header.partition(":")
    return f"{name}: {REDACTED}"


def redact_headers(headers: list[str]) -> list[str]:
    """Redact every credential header in a header set."""
    return [redact_header(h) for h in headers]


@dataclass(frozen=True)
class DebugSnapshot:
    """Read-only view of client state safe to print or log.

    Header values for Authorization and X-API-Key are replaced by
    ``[REDACTED]``; everything else is reported as is.
    """

    url: str = "N/A"
    verify_ssl: bool = False
    status_code: int | str = "N/A"
    error: str = "N/A"
    headers: list[str] = field(default_factory=list)
    execution_time: str = "0s"
    content_length: str = "N/A"
    auth_scheme: str = "none"
    total_requests: int = 0
    rate_limit: dict[str, Any] = field(default_factory=dict)
    mode: str = "httpkit - HTTPHandler"

    def as_dict(self) -> dict[str, Any]:
        """Snapshot as a plain dict."""
        return asdict(self)

    def render(self) -> str:
        """Format the snapshot as a human-readable block."""
        sep = "=" * 80
        lines = [
            sep,
            f"{self.mode} | Auth: {self.auth_scheme} | Requests: {self.total_requests}",
            sep,
            f"> URL: {self.url}",
            f"> Verify SSL: {self.verify_ssl}",
            f"> Content Length: {self.content_length}",
        ]

        if self.headers:
            lines.append("")
            lines.append("> Headers:")
            lines.extend(f"  {h}" for h in self.headers if h)

        if self.rate_limit:
            window = ", ".join(f"{k}={v}" for k, v in self.rate_limit.items())
            lines.append(f"> Rate Limit: {window}")

        lines.append("-" * 80)
        lines.append(f"< Status: {self.status_code}")
        if self.error and self.error != "N/A":
            lines.append(f"< ERROR: {self.error}")
        lines.append(f"< Elapsed since start: {self.execution_time}")
        lines.append(sep)
        return "\n".join(lines)

    def write(self, output: TextIO | None = None) -> None:
        """Write the rendered snapshot to a stream (defaults to stderr)."""
        out = output or sys.stderr
        out.write(self.render() + "\n")
        out.flush()
