"""Batch models — imported prefill columns and the links generated from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True, slots=True)
class PrefillColumn:
    """One imported template row, normalized to the batch length.

    ``is_single_value`` records whether the source row held exactly one
    value (which was then repeated for every generated link).
    """

    field_id: str
    values: tuple[str, ...]
    description: str
    is_single_value: bool = False

    def to_dict(self) -> dict:
        return {
            "field_id": self.field_id,
            "values": list(self.values),
            "description": self.description,
            "is_single_value": self.is_single_value,
        }


@dataclass(frozen=True, slots=True)
class GeneratedLink:
    """A single prefilled URL plus the field values it was built from."""

    url: str
    label: int
    fields: dict[str, Union[str, bool]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"url": self.url, "label": self.label, "fields": dict(self.fields)}
