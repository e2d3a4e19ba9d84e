"""Enums shared across the codec, transform and batch layers."""

from __future__ import annotations

from enum import Enum


class TransformDirection(str, Enum):
    """Which way a text transform reshapes its input."""

    COLUMN_TO_ROW = "column_to_row"
    ROW_TO_COLUMN = "row_to_column"


class ExportLabel(str, Enum):
    """Built-in choices for the label column of a batch export.

    Any other value is treated as a field id whose value labels the row.
    """

    NONE = "none"
    INDEX = "index"
