"""Batch template import.

A template is a CSV with one row per form field::

    FieldID,values,description
    67488bb37e8c75e33b9f9191,John;Jane;Alex,Names

``values`` holds every value to prefill for that field, separated by the
*values delimiter* (``;`` by default, so it never clashes with the CSV's own
commas). Rows are normalized to the longest list: a single value is
repeated for every link, and a shorter list repeats its last value.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Optional

from prefill_kit.errors import BatchError
from prefill_kit.model.link import PrefillColumn

logger = logging.getLogger(__name__)

FIELD_ID_PATTERN = re.compile(r"^[a-f0-9]{24}$", re.IGNORECASE)

DEFAULT_VALUES_DELIMITER = ";"
SUPPORTED_VALUES_DELIMITERS = (";", ",", "|")

# A delimiter must appear more often than this to be auto-detected.
_DETECT_MIN_COUNT = 5

TEMPLATE_ROWS = (
    {
        "FieldID": "67488bb37e8c75e33b9f9191",
        "values": "John;Jane;Alex",
        "description": "Names",
    },
    {
        "FieldID": "67488f8e088e833537af24aa",
        "values": "john@agency.gov.sg;jane@agency.gov.sg;alex@agency.gov.sg",
        "description": "Email",
    },
)


def template_csv() -> str:
    """CSV text of the example template offered for download."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=["FieldID", "values", "description"])
    writer.writeheader()
    writer.writerows(TEMPLATE_ROWS)
    return out.getvalue()


def _find_column(headers: list[str], name: str) -> Optional[str]:
    return next((h for h in headers if h.lower() == name), None)


def detect_values_delimiter(text: str) -> str:
    """Guess the values delimiter from the first five lines of *text*.

    Only the ``values`` cells are counted, so the CSV's own commas never
    vote. Falls back to ``;`` unless one candidate clearly dominates.
    """
    head = "\n".join(text.lstrip("\ufeff").split("\n")[:5])
    reader = csv.DictReader(io.StringIO(head))
    values_col = _find_column(list(reader.fieldnames or []), "values")
    if values_col is None:
        return DEFAULT_VALUES_DELIMITER

    cells = "\n".join(row.get(values_col) or "" for row in reader)
    best, best_count = DEFAULT_VALUES_DELIMITER, 0
    for candidate in SUPPORTED_VALUES_DELIMITERS:
        count = cells.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best if best_count > _DETECT_MIN_COUNT else DEFAULT_VALUES_DELIMITER


def _normalize(values: list[str], length: int) -> tuple[str, ...]:
    if len(values) == 1:
        return tuple(values * length)
    return tuple(values + [values[-1]] * (length - len(values)))


def load_columns(
    csv_text: str, values_delimiter: str = DEFAULT_VALUES_DELIMITER
) -> list[PrefillColumn]:
    """Parse a batch template into normalized prefill columns.

    Raises
    ------
    BatchError
        If the CSV is empty, lacks the ``FieldID``/``values`` columns, or a
        row has a malformed FieldID or no values.
    """
    if not values_delimiter:
        raise BatchError("Values delimiter must not be empty")

    reader = csv.DictReader(io.StringIO(csv_text.lstrip("\ufeff")))
    rows = [
        row
        for row in reader
        if any((v or "").strip() for k, v in row.items() if k is not None)
    ]
    if not rows:
        raise BatchError("CSV file is empty or invalid")

    headers = list(reader.fieldnames or [])
    id_col = _find_column(headers, "fieldid")
    values_col = _find_column(headers, "values")
    desc_col = _find_column(headers, "description")
    if id_col is None or values_col is None:
        raise BatchError("Missing required columns: FieldID and values")

    parsed: list[tuple[str, list[str], str]] = []
    for row in rows:
        field_id = (row.get(id_col) or "").strip()
        raw_values = row.get(values_col) or ""
        description = (row.get(desc_col) or "") if desc_col else ""

        if not field_id or not FIELD_ID_PATTERN.match(field_id):
            raise BatchError(
                f"Invalid FieldID format: {field_id}. Must be a 24-digit hexadecimal."
            )
        values = [v.strip() for v in raw_values.split(values_delimiter)]
        values = [v for v in values if v]
        if not values:
            raise BatchError(f"Missing values for FieldID: {field_id}")
        parsed.append((field_id, values, description or field_id))

    longest = max(len(values) for _, values, _ in parsed)
    columns = [
        PrefillColumn(
            field_id=field_id,
            values=_normalize(values, longest),
            description=description,
            is_single_value=len(values) == 1,
        )
        for field_id, values, description in parsed
    ]
    logger.info(f"Imported {len(columns)} fields with {longest} values each")
    return columns
