"""Column/row reshaping of delimited text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from prefill_kit.model import TransformDirection
from prefill_kit.transform.cleaning import (
    CleaningOptions,
    clean_items,
    normalize_output_whitespace,
)

_NEWLINE_RE = re.compile(r"\r?\n")

# Defaults: column_to_row only drops blank lines; row_to_column also trims.
COLUMN_TO_ROW_DEFAULTS = CleaningOptions(remove_empty_lines=True)
ROW_TO_COLUMN_DEFAULTS = CleaningOptions(trim_whitespace=True, remove_empty_lines=True)


@dataclass(frozen=True)
class TransformResult:
    output: str
    count: int

    def to_dict(self) -> dict:
        return {"output": self.output, "count": self.count}


def resolve_delimiter(delimiter: str) -> str:
    r"""Map the escaped spelling ``\t`` to a real tab; pass others through."""
    if delimiter == "\\t":
        return "\t"
    return delimiter


def _finish(items: list[str], joiner: str, options: CleaningOptions) -> TransformResult:
    output = joiner.join(items)
    if options.normalize_whitespace:
        output = normalize_output_whitespace(output)
    return TransformResult(output=output, count=len(items))


def column_to_row_items(
    text: str, delimiter: str, options: Optional[CleaningOptions] = None
) -> TransformResult:
    opts = options if options is not None else COLUMN_TO_ROW_DEFAULTS
    lines = clean_items(_NEWLINE_RE.split(text), opts)
    return _finish(lines, resolve_delimiter(delimiter), opts)


def column_to_row(
    text: str, delimiter: str, options: Optional[CleaningOptions] = None
) -> str:
    r"""Join the non-blank lines of *text* with *delimiter*.

    Delimiters already present inside a line are not escaped, so the
    result cannot always be split back unambiguously.

    >>> column_to_row("a\n\nb\nc", ",")
    'a,b,c'
    """
    return column_to_row_items(text, delimiter, options).output


def row_to_column_items(
    text: str, delimiter: str, options: Optional[CleaningOptions] = None
) -> TransformResult:
    opts = options if options is not None else ROW_TO_COLUMN_DEFAULTS
    sep = resolve_delimiter(delimiter)
    items = text.split(sep) if sep else [text]
    return _finish(clean_items(items, opts), "\n", opts)


def row_to_column(
    text: str, delimiter: str, options: Optional[CleaningOptions] = None
) -> str:
    """Split *text* on *delimiter* (taken literally) into one item per line."""
    return row_to_column_items(text, delimiter, options).output


def transform(
    text: str,
    delimiter: str,
    direction: TransformDirection = TransformDirection.COLUMN_TO_ROW,
    options: Optional[CleaningOptions] = None,
) -> TransformResult:
    """Dispatch to the column/row transform for *direction*."""
    if TransformDirection(direction) is TransformDirection.ROW_TO_COLUMN:
        return row_to_column_items(text, delimiter, options)
    return column_to_row_items(text, delimiter, options)
