"""Recipient import for bulk letters.

A recipients CSV has one row per letter. ``field_mapping`` maps each
template field name to the CSV header holding its value::

    {"name": "Full Name", "email": "Email"}

Mapped rows become the ``lettersParams`` of a bulk request, and
``build_bulk_payload`` checks the request before it is sent upstream.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Any, Iterable, Mapping, Optional, Sequence

from prefill_kit.errors import RecipientsError

logger = logging.getLogger(__name__)

NOTIFICATION_METHODS = ("SMS", "EMAIL")

# Local SG mobile (8/9 + 7 digits) or international (+ and 6-15 digits).
_SG_PHONE = re.compile(r"^[89]\d{7}$")
_INTL_PHONE = re.compile(r"^\+\d{6,15}$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def sanitize_csv_text(text: str) -> str:
    """Drop a leading BOM, use ``\\n`` line endings, end with a newline."""
    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    return text if text.endswith("\n") else text + "\n"


def csv_headers(csv_text: str) -> list[str]:
    """Header row of a recipients CSV, for choosing a mapping."""
    reader = csv.reader(io.StringIO(sanitize_csv_text(csv_text)))
    return [h.strip() for h in next(reader, [])]


def map_recipients(csv_text: str, field_mapping: Mapping[str, str]) -> list[dict[str, str]]:
    """Turn CSV rows into letter params keyed by template field name.

    Fields mapped to an empty header are ignored. A mapped header missing
    from a row yields ``""``. Rows whose mapped values are all blank are
    dropped.

    Raises
    ------
    RecipientsError
        If no field is mapped, or no row has any mapped value.
    """
    mapping = {name: header for name, header in field_mapping.items() if name and header}
    if not mapping:
        raise RecipientsError("Please map at least one template field to a CSV header.")

    reader = csv.DictReader(io.StringIO(sanitize_csv_text(csv_text)))
    if reader.fieldnames:
        reader.fieldnames = [h.strip() for h in reader.fieldnames]

    rows: list[dict[str, str]] = []
    for row in reader:
        mapped = {name: (row.get(header) or "") for name, header in mapping.items()}
        if any(value.strip() for value in mapped.values()):
            rows.append(mapped)

    if not rows:
        raise RecipientsError("No valid data found after mapping. Please check your CSV file.")
    logger.info(f"Mapped {len(rows)} recipient row(s) onto {len(mapping)} field(s)")
    return rows


def _check_recipients(method: str, recipients: Sequence[str]) -> None:
    if method == "SMS":
        if any(not (_SG_PHONE.match(r) or _INTL_PHONE.match(r)) for r in recipients):
            raise RecipientsError(
                "Phone numbers should be in local SG format (8/9XXXXXXX) "
                "or international format (+XXXXXXXXX)"
            )
    elif any(not _EMAIL.match(r) for r in recipients):
        raise RecipientsError("Please provide valid email addresses")


def build_bulk_payload(
    template_id: Any,
    letters_params: Sequence[Mapping[str, Any]],
    *,
    api_key: Optional[str],
    required_fields: Iterable[str] = (),
    notify: bool = False,
    notification_method: Optional[str] = None,
    recipients: Optional[Sequence[str]] = None,
) -> dict[str, Any]:
    """Validate a bulk letters request and return its JSON body.

    ``template_id`` is sent as given. Notification settings are only
    checked, and only included, when *notify* is set; recipients are then
    matched to letters by position.

    Raises
    ------
    RecipientsError
        With the first problem found, in the order a user would fix them.
    """
    if not api_key:
        raise RecipientsError("Please enter your API key")
    if not template_id:
        raise RecipientsError("Please enter a template ID")
    if not letters_params:
        raise RecipientsError("Please add at least one set of letter parameters")

    if notify:
        if notification_method not in NOTIFICATION_METHODS:
            raise RecipientsError("Please select a notification method (SMS or EMAIL)")
        if not recipients:
            kind = "phone numbers" if notification_method == "SMS" else "email addresses"
            raise RecipientsError(f"Please enter {kind} for notifications")

    for name in required_fields:
        for params in letters_params:
            value = params.get(name)
            if not isinstance(value, str) or not value.strip():
                raise RecipientsError(
                    f'The field "{name}" is required but missing or empty in one or more letters'
                )

    payload: dict[str, Any] = {
        "templateId": template_id,
        "lettersParams": [dict(p) for p in letters_params],
    }
    if notify:
        if len(recipients) != len(letters_params):
            raise RecipientsError("The number of recipients must match the number of letters")
        _check_recipients(notification_method, recipients)
        payload["notificationMethod"] = notification_method
        payload["recipients"] = list(recipients)
    return payload
