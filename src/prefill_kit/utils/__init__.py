"""Shared utilities for prefill_kit."""

from prefill_kit.utils.exit_codes import ExitCode
from prefill_kit.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
