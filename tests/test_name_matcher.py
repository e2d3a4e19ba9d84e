"""Tests for the fuzzy name matcher."""

from __future__ import annotations

import csv
import io

import pytest

from prefill_kit.transform.names import (
    find_matches,
    levenshtein,
    match_names,
    normalize_name,
    read_name_table,
    results_to_csv,
    similarity_score,
)


class TestNormalization:
    def test_words_are_lowered_and_sorted(self) -> None:
        assert normalize_name("  Tan  Wei Ming ") == "ming tan wei"

    def test_empty(self) -> None:
        assert normalize_name("") == ""


class TestDistance:
    @pytest.mark.parametrize(
        "a, b, expected",
        [("kitten", "sitting", 3), ("", "abc", 3), ("abc", "", 3), ("same", "same", 0)],
    )
    def test_levenshtein(self, a: str, b: str, expected: int) -> None:
        assert levenshtein(a, b) == expected

    def test_similarity_is_scaled_by_longest(self) -> None:
        assert similarity_score("abcd", "abcf") == pytest.approx(0.75)

    def test_two_empty_strings_are_identical(self) -> None:
        assert similarity_score("", "") == 1.0


# ── find_matches ────────────────────────────────────────────────────


class TestFindMatches:
    def test_word_order_does_not_matter(self) -> None:
        hits = find_matches("Wei Ming Tan", ["John Lee", "Tan Wei Ming"])
        assert [(h.match, h.score) for h in hits] == [("Tan Wei Ming", 1.0)]

    def test_sorted_best_first(self) -> None:
        hits = find_matches("Jonathan Tan", ["Jonathon Tan", "Jonathan Tan"], threshold=0.5)
        assert [h.match for h in hits] == ["Jonathan Tan", "Jonathon Tan"]

    def test_short_single_names_need_exact_match_when_strict(self) -> None:
        assert find_matches("Ali", ["Alia"], threshold=0.5) == []
        assert [h.match for h in find_matches("Ali", ["ali"])] == ["ali"]

    def test_short_names_fuzzy_when_not_strict(self) -> None:
        hits = find_matches("Ali", ["Alia"], threshold=0.5, strict_short_names=False)
        assert hits[0].score == pytest.approx(0.75)

    def test_word_count_requirement(self) -> None:
        assert find_matches("John Smith", ["John Smith Jr"], threshold=0.5)
        assert (
            find_matches(
                "John Smith", ["John Smith Jr"], threshold=0.5, require_same_word_count=True
            )
            == []
        )


class TestMatchNames:
    def test_best_match_or_none(self) -> None:
        results = match_names(["Tan Wei Ming", "Nobody Here"], ["Ming Tan Wei", "Jane Doe"])
        assert results[0].match == "Ming Tan Wei"
        assert results[0].score == 1.0
        assert results[1].match is None
        assert results[1].score == 0.0
        assert results[1].all_matches == ()

    def test_extras_are_carried(self) -> None:
        results = match_names(["Jane Doe"], ["Jane Doe"], extras=[{"Email": "j@x.com"}])
        assert results[0].extra == {"Email": "j@x.com"}
        assert results[0].to_dict()["all_matches"] == [{"match": "Jane Doe", "score": 1.0}]


# ── CSV helpers ─────────────────────────────────────────────────────


class TestCsvHelpers:
    def test_read_name_table(self) -> None:
        text = "\ufeffName,Email,Dept\nJane Doe,j@x.com,HR\nJohn Lee,l@x.com,IT\n"
        names, extras = read_name_table(text, "Name", ["Dept"])
        assert names == ["Jane Doe", "John Lee"]
        assert extras == [{"Dept": "HR"}, {"Dept": "IT"}]

    def test_read_name_table_unknown_column(self) -> None:
        with pytest.raises(KeyError):
            read_name_table("Name\nJane\n", "Full Name")

    def test_results_to_csv(self) -> None:
        results = match_names(
            ["Jane Doe", "Nobody"], ["Jane Doe"], extras=[{"Dept": "HR"}, {"Dept": "IT"}]
        )
        rows = list(csv.reader(io.StringIO(results_to_csv(results, ["Dept"]))))
        assert rows == [
            ["CSV1 Name", "Dept", "Best Match in CSV2", "Similarity Score (%)"],
            ["Jane Doe", "HR", "Jane Doe", "100"],
            ["Nobody", "IT", "", "0"],
        ]
