"""Letters API client, upstream error handling and recipient import."""

from prefill_kit.letters.client import DEFAULT_BASE_URL, LettersClient, UpstreamResponse
from prefill_kit.letters.errors import (
    LettersAPIError,
    classify_error_message,
    format_upstream_message,
)
from prefill_kit.letters.recipients import (
    NOTIFICATION_METHODS,
    build_bulk_payload,
    csv_headers,
    map_recipients,
    sanitize_csv_text,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "LettersClient",
    "UpstreamResponse",
    "LettersAPIError",
    "classify_error_message",
    "format_upstream_message",
    "NOTIFICATION_METHODS",
    "build_bulk_payload",
    "csv_headers",
    "map_recipients",
    "sanitize_csv_text",
]
