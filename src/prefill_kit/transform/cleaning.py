"""Line cleaning — the optional per-item rules applied before a transform.

Rules run in a fixed order (trim, drop empties, case, character filters,
smart extractors, custom regex, de-duplication) so that the same options
always produce the same output regardless of how they were toggled.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, fields
from typing import Iterable

from prefill_kit.errors import TransformError

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# ASCII-only \w to keep accented letters classed as "special".
_SPECIAL_CHARS_RE = re.compile(r"[^\w\s]", re.ASCII)
_MULTI_SPACE_RE = re.compile(r"\s+")
_LEADING_NUMBER_RE = re.compile(r"^\d+\s*")
_TRAILING_NUMBER_RE = re.compile(r"\s*\d+$")
_NON_DIGIT_RE = re.compile(r"\D")

_PRE_BLOCK_RE = re.compile(r"<pre[^>]*>([\s\S]*?)</pre>", re.IGNORECASE)
_PRE_PLACEHOLDER_RE = re.compile(r"<PRE_PLACEHOLDER_(\d+)>")
_BLANK_RUN_RE = re.compile(r"(\r\n|\n|\r){2,}")


@dataclass(frozen=True)
class CleaningOptions:
    """Which cleaning rules to apply. Everything is off by default."""

    trim_whitespace: bool = False
    remove_empty_lines: bool = False
    remove_duplicates: bool = False
    to_lower_case: bool = False
    to_upper_case: bool = False
    remove_special_chars: bool = False
    replace_multiple_spaces: bool = False
    remove_leading_numbers: bool = False
    remove_trailing_numbers: bool = False
    normalize_whitespace: bool = False
    smart_email: bool = False
    smart_phone: bool = False
    smart_name: bool = False
    custom_regex: str = ""
    custom_replacement: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CleaningOptions":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _title_words(line: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in line.lower().split(" "))


def _extract_email(line: str) -> str:
    match = _EMAIL_RE.search(line)
    return match.group(0).lower() if match else ""


def clean_items(items: Iterable[str], options: CleaningOptions) -> list[str]:
    """Apply *options* to every item and return the surviving items.

    Raises
    ------
    TransformError
        If ``custom_regex`` is not a valid regular expression.
    """
    out = list(items)

    if options.trim_whitespace:
        out = [s.strip() for s in out]
    if options.remove_empty_lines:
        out = [s for s in out if s.strip()]
    if options.to_lower_case:
        out = [s.lower() for s in out]
    if options.to_upper_case:
        out = [s.upper() for s in out]
    if options.remove_special_chars:
        out = [_SPECIAL_CHARS_RE.sub("", s) for s in out]
    if options.replace_multiple_spaces:
        out = [_MULTI_SPACE_RE.sub(" ", s) for s in out]
    if options.remove_leading_numbers:
        out = [_LEADING_NUMBER_RE.sub("", s) for s in out]
    if options.remove_trailing_numbers:
        out = [_TRAILING_NUMBER_RE.sub("", s) for s in out]

    # ── smart extractors ────────────────────────────────────────────
    if options.smart_email:
        out = [e for e in (_extract_email(s) for s in out) if e]
    if options.smart_phone:
        out = [_NON_DIGIT_RE.sub("", s) for s in out]
    if options.smart_name:
        out = [_title_words(s) for s in out]

    if options.custom_regex:
        try:
            pattern = re.compile(options.custom_regex)
        except re.error as exc:
            raise TransformError(f"Invalid regex pattern: {exc}") from exc
        out = [pattern.sub(options.custom_replacement, s) for s in out]

    if options.remove_duplicates:
        out = list(dict.fromkeys(out))

    return out


def normalize_output_whitespace(text: str) -> str:
    """Collapse blank-line runs and strip every line.

    Anything inside ``<pre>...</pre>`` is preserved byte for byte (the tag
    itself is rewritten without attributes).
    """
    protected: list[str] = []

    def _protect(match: re.Match) -> str:
        protected.append(match.group(1))
        return f"<PRE_PLACEHOLDER_{len(protected) - 1}>"

    tmp = _PRE_BLOCK_RE.sub(_protect, text)
    tmp = _BLANK_RUN_RE.sub("\n", tmp)
    tmp = "\n".join(line.strip() for line in tmp.split("\n"))
    tmp = tmp.strip()
    return _PRE_PLACEHOLDER_RE.sub(
        lambda m: f"<pre>{protected[int(m.group(1))]}</pre>", tmp
    )
