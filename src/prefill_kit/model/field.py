"""Field and ParsedUrl — the values that travel through the URL codec."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Field:
    """One form input to pre-fill.

    ``label`` is display-only: it is never encoded into a URL, so a parsed
    field always comes back with an empty label.
    """

    id: str
    value: str
    label: str = ""

    @property
    def is_prefillable(self) -> bool:
        return bool(self.id) and bool(self.value)

    def to_dict(self) -> dict:
        return {"id": self.id, "value": self.value, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict) -> "Field":
        return cls(
            id=str(data.get("id", "") or ""),
            value=str(data.get("value", "") or ""),
            label=str(data.get("label", "") or ""),
        )


@dataclass(frozen=True, slots=True)
class ParsedUrl:
    """A prefill URL split back into its base URL and ordered fields."""

    base_url: str
    params: tuple[Field, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "base_url": self.base_url,
            "params": [p.to_dict() for p in self.params],
        }
