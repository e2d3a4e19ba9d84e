"""Upstream Letters API error formatting and status classification.

The Letters API does not return structured error codes, so the HTTP status
our proxy answers with is chosen by looking for known phrases in the
upstream message. ``classify_error_message`` is the only place that knows
those phrases; swap it out if the upstream ever grows a real error contract.
"""

from __future__ import annotations

from typing import Any, Optional

from prefill_kit.errors import PrefillError

# (status, phrases) checked in order; first hit wins.
_STATUS_PHRASES: tuple[tuple[int, tuple[str, ...]], ...] = (
    (404, ("Template not found",)),
    (400, ("Invalid letter params", "Invalid attribute", "Missing param")),
    (401, ("Unauthorized", "API key")),
)


class LettersAPIError(PrefillError):
    """The Letters API rejected a request or returned something unusable."""

    def __init__(self, message: str, upstream_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


def classify_error_message(message: str) -> int:
    """Map an upstream error message to the status code we respond with."""
    for status, phrases in _STATUS_PHRASES:
        if any(phrase in message for phrase in phrases):
            return status
    return 500


def _describe(err: Any) -> str:
    if not isinstance(err, dict):
        return str(err)
    prefix = f"Item {err['id']}: " if err.get("id") is not None else ""
    kind = f"({err['errorType']}) " if err.get("errorType") else ""
    return f"{prefix}{kind}{err.get('message', '')}"


def format_upstream_message(data: Any, status_code: int) -> str:
    """Build a single readable message from an upstream error body.

    Per-item ``errors`` are appended as ``Item <id>: (<errorType>) <message>``
    joined by ``; ``.
    """
    body = data if isinstance(data, dict) else {}
    message = body.get("message") or f"Request failed with status {status_code}"
    details = body.get("errors")
    if isinstance(details, list) and details:
        message += ": " + "; ".join(_describe(e) for e in details)
    return message
