"""Batch prefill: import a field template, generate links, export them."""

from prefill_kit.batch.links import (
    FORM_URL_PATTERN,
    ExportConfig,
    export_links_csv,
    generate_links,
    validate_form_url,
)
from prefill_kit.batch.template import (
    DEFAULT_VALUES_DELIMITER,
    FIELD_ID_PATTERN,
    SUPPORTED_VALUES_DELIMITERS,
    detect_values_delimiter,
    load_columns,
    template_csv,
)

__all__ = [
    "FORM_URL_PATTERN",
    "ExportConfig",
    "export_links_csv",
    "generate_links",
    "validate_form_url",
    "DEFAULT_VALUES_DELIMITER",
    "FIELD_ID_PATTERN",
    "SUPPORTED_VALUES_DELIMITERS",
    "detect_values_delimiter",
    "load_columns",
    "template_csv",
]
