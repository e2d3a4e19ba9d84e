"""Text transforms: column/row reshaping, line cleaning and name matching."""

from prefill_kit.transform.cleaning import (
    CleaningOptions,
    clean_items,
    normalize_output_whitespace,
)
from prefill_kit.transform.columns import (
    TransformResult,
    column_to_row,
    resolve_delimiter,
    row_to_column,
    transform,
)
from prefill_kit.transform.names import (
    NameMatch,
    find_matches,
    levenshtein,
    match_names,
    normalize_name,
    read_name_table,
    results_to_csv,
    similarity_score,
)

__all__ = [
    "CleaningOptions",
    "clean_items",
    "normalize_output_whitespace",
    "TransformResult",
    "column_to_row",
    "resolve_delimiter",
    "row_to_column",
    "transform",
    # Name matching
    "NameMatch",
    "find_matches",
    "levenshtein",
    "match_names",
    "normalize_name",
    "read_name_table",
    "results_to_csv",
    "similarity_score",
]
