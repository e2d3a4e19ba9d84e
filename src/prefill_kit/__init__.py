"""prefill_kit — form prefill URLs, text transforms and a Letters API proxy."""

__all__ = [
    "__version__",
    "Field",
    "ParsedUrl",
    "construct_url",
    "parse_url",
    "validate_url",
    "column_to_row",
    "row_to_column",
    # Errors
    "PrefillError",
    "BatchError",
    "TransformError",
]
__version__ = "0.1.0"

from prefill_kit.codec import construct_url, parse_url, validate_url  # noqa: E402, F401
from prefill_kit.errors import BatchError, PrefillError, TransformError  # noqa: E402, F401
from prefill_kit.model.field import Field, ParsedUrl  # noqa: E402, F401
from prefill_kit.transform import column_to_row, row_to_column  # noqa: E402, F401
