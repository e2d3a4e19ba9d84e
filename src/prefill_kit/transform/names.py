"""Fuzzy name matching between two lists of people.

Names are compared after normalization (lower-cased words in sorted order),
so "Tan Wei Ming" and "ming wei tan" are identical. Similarity is the
Levenshtein distance scaled by the longer string: 1.0 is an exact match,
0.0 shares nothing.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Optional, Sequence

DEFAULT_THRESHOLD = 0.8

# Single-word names shorter than this only match exactly in strict mode.
SHORT_NAME_LENGTH = 5


@dataclass(frozen=True, slots=True)
class Candidate:
    match: str
    score: float

    def to_dict(self) -> dict:
        return {"match": self.match, "score": self.score}


@dataclass(frozen=True, slots=True)
class NameMatch:
    """Best candidate for one input name, plus every candidate over threshold."""

    name: str
    match: Optional[str]
    score: float
    all_matches: tuple[Candidate, ...] = field(default_factory=tuple)
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "match": self.match,
            "score": self.score,
            "all_matches": [c.to_dict() for c in self.all_matches],
            "extra": dict(self.extra),
        }


def normalize_name(name: str) -> str:
    return " ".join(sorted(w.lower() for w in name.split()))


def levenshtein(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def similarity_score(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def _score(
    norm: str,
    candidate: str,
    *,
    require_same_word_count: bool,
    strict_short_names: bool,
) -> float:
    words = norm.split(" ")
    if strict_short_names and len(words) == 1 and len(norm) < SHORT_NAME_LENGTH:
        score = 1.0 if norm == candidate else 0.0
    else:
        score = similarity_score(norm, candidate)
    if require_same_word_count and len(words) != len(candidate.split(" ")):
        score = 0.0
    return score


def find_matches(
    name: str,
    candidates: Sequence[str],
    *,
    threshold: float = DEFAULT_THRESHOLD,
    require_same_word_count: bool = False,
    strict_short_names: bool = True,
) -> list[Candidate]:
    """Return candidates scoring at least *threshold*, best first.

    Ties keep the order of *candidates*.
    """
    norm = normalize_name(name)
    scored = [
        Candidate(
            match=original,
            score=_score(
                norm,
                normalize_name(original),
                require_same_word_count=require_same_word_count,
                strict_short_names=strict_short_names,
            ),
        )
        for original in candidates
    ]
    hits = [c for c in scored if c.score >= threshold]
    return sorted(hits, key=lambda c: c.score, reverse=True)


def match_names(
    names: Sequence[str],
    candidates: Sequence[str],
    *,
    threshold: float = DEFAULT_THRESHOLD,
    require_same_word_count: bool = False,
    strict_short_names: bool = True,
    extras: Optional[Sequence[dict]] = None,
) -> list[NameMatch]:
    """Match every name in *names* against *candidates*.

    *extras*, when given, is zipped with *names* and carried through to the
    result (e.g. other columns of the source row).
    """
    results: list[NameMatch] = []
    for i, name in enumerate(names):
        hits = find_matches(
            name,
            candidates,
            threshold=threshold,
            require_same_word_count=require_same_word_count,
            strict_short_names=strict_short_names,
        )
        best = hits[0] if hits else None
        results.append(
            NameMatch(
                name=name,
                match=best.match if best else None,
                score=best.score if best else 0.0,
                all_matches=tuple(hits),
                extra=dict(extras[i]) if extras is not None and i < len(extras) else {},
            )
        )
    return results


def read_name_table(
    csv_text: str, name_column: str, extra_columns: Sequence[str] = ()
) -> tuple[list[str], list[dict]]:
    """Pull the name column (and any extra columns) out of CSV text.

    Returns ``(names, extras)`` where ``extras[i]`` maps each extra column
    to its value in row *i*. Raises ``KeyError`` for an unknown column.
    """
    reader = csv.DictReader(io.StringIO(csv_text.lstrip("\ufeff")))
    headers = reader.fieldnames or []
    for column in (name_column, *extra_columns):
        if column not in headers:
            raise KeyError(column)

    names: list[str] = []
    extras: list[dict] = []
    for row in reader:
        names.append(row.get(name_column) or "")
        extras.append({c: row.get(c) or "" for c in extra_columns if c != name_column})
    return names, extras


def results_to_csv(results: Sequence[NameMatch], extra_columns: Sequence[str] = ()) -> str:
    """Render match results as CSV, scores as whole percentages."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(["CSV1 Name", *extra_columns, "Best Match in CSV2", "Similarity Score (%)"])
    for r in results:
        writer.writerow(
            [
                r.name,
                *(r.extra.get(c, "") for c in extra_columns),
                r.match or "",
                round(r.score * 100),
            ]
        )
    return out.getvalue()
