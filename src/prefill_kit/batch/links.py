"""Batch link generation and CSV export."""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from typing import Sequence

from prefill_kit.codec import construct_url
from prefill_kit.errors import BatchError
from prefill_kit.model import ExportLabel
from prefill_kit.model.field import Field
from prefill_kit.model.link import GeneratedLink, PrefillColumn

logger = logging.getLogger(__name__)

FORM_URL_PATTERN = re.compile(r"^https://form\.gov\.sg/[a-f0-9]{24}$", re.IGNORECASE)


def validate_form_url(url: str) -> None:
    """Raise ``BatchError`` unless *url* is a bare FormSG form URL."""
    if not url:
        raise BatchError("Form URL is required")
    if not FORM_URL_PATTERN.match(url):
        raise BatchError(
            "Invalid form URL. Must be in format: "
            "https://form.gov.sg/[24-digit hexadecimal]"
        )


def generate_links(
    form_url: str, columns: Sequence[PrefillColumn]
) -> list[GeneratedLink]:
    """Build one prefill link per value position across *columns*.

    Columns are expected to be normalized to equal length (see
    ``load_columns``); the first column's length sets the link count.
    """
    validate_form_url(form_url)
    if not columns:
        raise BatchError("No fields imported")

    links: list[GeneratedLink] = []
    for i in range(len(columns[0].values)):
        row = [Field(id=c.field_id, value=c.values[i]) for c in columns]
        url = construct_url(form_url, row)
        if url is None:
            raise BatchError(f"Entry {i + 1} has no values to prefill")

        fields: dict[str, str | bool] = {}
        for column, f in zip(columns, row):
            fields[column.field_id] = f.value
            fields[f"{column.field_id}_description"] = column.description
            fields[f"{column.field_id}_isSingleValue"] = column.is_single_value
        links.append(GeneratedLink(url=url, label=i + 1, fields=fields))

    logger.info(f"Generated {len(links)} prefill links for {form_url}")
    return links


@dataclass(frozen=True)
class ExportConfig:
    """Which columns go into an exported links CSV.

    ``label_field`` is ``"none"``, ``"index"`` (``Entry N``) or a field id
    whose value labels each row.
    """

    include_url: bool = True
    label_field: str = ExportLabel.NONE.value
    additional_fields: tuple[str, ...] = ()


def export_links_csv(
    links: Sequence[GeneratedLink],
    columns: Sequence[PrefillColumn],
    config: ExportConfig = ExportConfig(),
) -> str:
    """Render *links* as CSV text according to *config*.

    Additional field ids that do not belong to any column are ignored.
    """
    by_id = {c.field_id: c for c in columns}
    extra_ids = [fid for fid in config.additional_fields if fid in by_id]
    has_label = config.label_field != ExportLabel.NONE.value

    header: list[str] = []
    if has_label:
        header.append("Label")
    if config.include_url:
        header.append("Form URL")
    header.extend(by_id[fid].description or fid for fid in extra_ids)

    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(header)
    for index, link in enumerate(links):
        row: list[str] = []
        if has_label:
            if config.label_field == ExportLabel.INDEX.value:
                row.append(f"Entry {index + 1}")
            else:
                row.append(str(link.fields.get(config.label_field, "") or ""))
        if config.include_url:
            row.append(link.url)
        row.extend(str(link.fields.get(fid, "") or "") for fid in extra_ids)
        writer.writerow(row)
    return out.getvalue()
