"""Tests for batch template import, link generation and CSV export."""

from __future__ import annotations

import csv
import io

import pytest

from prefill_kit.batch import (
    ExportConfig,
    detect_values_delimiter,
    export_links_csv,
    generate_links,
    load_columns,
    template_csv,
    validate_form_url,
)
from prefill_kit.errors import BatchError

FORM = "https://form.gov.sg/67488b8b1210a416d2d7cb5b"
NAME_ID = "67488bb37e8c75e33b9f9191"
EMAIL_ID = "67488f8e088e833537af24aa"
DEPT_ID = "0123456789abcdef01234567"


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


# ── load_columns ────────────────────────────────────────────────────


class TestLoadColumns:
    def test_template_loads(self) -> None:
        columns = load_columns(template_csv())
        assert [c.field_id for c in columns] == [NAME_ID, EMAIL_ID]
        assert columns[0].values == ("John", "Jane", "Alex")
        assert columns[1].description == "Email"

    def test_normalizes_to_longest_list(self) -> None:
        text = (
            "FieldID,values,description\n"
            f"{NAME_ID},A;B;C,Names\n"
            f"{EMAIL_ID},only,Single\n"
            f"{DEPT_ID},p;q,Short\n"
        )
        names, single, short = load_columns(text)
        assert names.values == ("A", "B", "C")
        assert single.values == ("only", "only", "only")
        assert single.is_single_value is True
        assert short.values == ("p", "q", "q")
        assert short.is_single_value is False

    def test_headers_are_case_insensitive(self) -> None:
        columns = load_columns(f"fieldid,VALUES\n{NAME_ID},a;b\n")
        assert columns[0].values == ("a", "b")

    def test_description_defaults_to_field_id(self) -> None:
        columns = load_columns(f"FieldID,values\n{NAME_ID},a\n")
        assert columns[0].description == NAME_ID

    def test_values_are_trimmed_and_empties_dropped(self) -> None:
        columns = load_columns(f"FieldID,values\n{NAME_ID}, a ;; b ;\n")
        assert columns[0].values == ("a", "b")

    def test_custom_values_delimiter(self) -> None:
        columns = load_columns(f'FieldID,values\n{NAME_ID},"a,b"\n', values_delimiter=",")
        assert columns[0].values == ("a", "b")

    def test_blank_rows_are_skipped(self) -> None:
        columns = load_columns(f"FieldID,values\n,\n{NAME_ID},a\n\n")
        assert len(columns) == 1

    def test_byte_order_mark_is_ignored(self) -> None:
        columns = load_columns(f"\ufeffFieldID,values\n{NAME_ID},a\n")
        assert columns[0].field_id == NAME_ID

    def test_header_only_is_empty(self) -> None:
        with pytest.raises(BatchError, match="CSV file is empty or invalid"):
            load_columns("FieldID,values\n")

    def test_missing_required_columns(self) -> None:
        with pytest.raises(BatchError, match="Missing required columns"):
            load_columns(f"id,values\n{NAME_ID},a\n")

    def test_invalid_field_id(self) -> None:
        with pytest.raises(BatchError, match="Invalid FieldID format: nothex"):
            load_columns("FieldID,values\nnothex,a\n")

    def test_missing_values(self) -> None:
        with pytest.raises(BatchError, match=f"Missing values for FieldID: {NAME_ID}"):
            load_columns(f"FieldID,values\n{NAME_ID}, ; \n")

    def test_empty_values_delimiter(self) -> None:
        with pytest.raises(BatchError):
            load_columns(template_csv(), values_delimiter="")


class TestDetectValuesDelimiter:
    def test_defaults_to_semicolon(self) -> None:
        assert detect_values_delimiter("FieldID,values\nx,a|b\n") == ";"

    def test_template_is_semicolon_despite_csv_commas(self) -> None:
        assert detect_values_delimiter(template_csv()) == ";"

    def test_dominant_candidate_wins(self) -> None:
        text = "FieldID,values\n" + f"{NAME_ID},a|b|c|d|e|f|g\n"
        assert detect_values_delimiter(text) == "|"

    def test_quoted_commas_are_counted(self) -> None:
        text = "FieldID,values\n" + f'{NAME_ID},"a,b,c,d,e,f,g"\n'
        assert detect_values_delimiter(text) == ","

    def test_only_first_five_lines_count(self) -> None:
        text = "FieldID,values\n" + f"{NAME_ID},a\n" * 4 + f"{NAME_ID},a|b|c|d|e|f|g\n"
        assert detect_values_delimiter(text) == ";"

    def test_without_values_column(self) -> None:
        assert detect_values_delimiter("a,b\n" + "x|y|z|w|v|u|t\n") == ";"


# ── generate_links ──────────────────────────────────────────────────


class TestGenerateLinks:
    def test_one_link_per_value(self) -> None:
        links = generate_links(FORM, load_columns(template_csv()))
        assert [link.label for link in links] == [1, 2, 3]
        assert links[0].url == f"{FORM}?{NAME_ID}=John&{EMAIL_ID}=john%40agency.gov.sg"

    def test_link_fields(self) -> None:
        text = f"FieldID,values,description\n{NAME_ID},A;B,Names\n{EMAIL_ID},x,Email\n"
        link = generate_links(FORM, load_columns(text))[1]
        assert link.fields == {
            NAME_ID: "B",
            f"{NAME_ID}_description": "Names",
            f"{NAME_ID}_isSingleValue": False,
            EMAIL_ID: "x",
            f"{EMAIL_ID}_description": "Email",
            f"{EMAIL_ID}_isSingleValue": True,
        }

    def test_no_columns(self) -> None:
        with pytest.raises(BatchError, match="No fields imported"):
            generate_links(FORM, [])

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/67488b8b1210a416d2d7cb5b",
            "http://form.gov.sg/67488b8b1210a416d2d7cb5b",
            f"{FORM}?x=1",
            "https://form.gov.sg/short",
        ],
    )
    def test_rejects_non_form_urls(self, url: str) -> None:
        with pytest.raises(BatchError, match="Invalid form URL"):
            validate_form_url(url)

    def test_requires_form_url(self) -> None:
        with pytest.raises(BatchError, match="Form URL is required"):
            validate_form_url("")

    def test_form_id_is_case_insensitive(self) -> None:
        validate_form_url("https://form.gov.sg/67488B8B1210A416D2D7CB5B")


# ── export ──────────────────────────────────────────────────────────


class TestExportLinksCsv:
    @pytest.fixture()
    def batch(self):
        columns = load_columns(template_csv())
        return generate_links(FORM, columns), columns

    def test_default_is_url_only(self, batch) -> None:
        links, columns = batch
        rows = _rows(export_links_csv(links, columns))
        assert rows[0] == ["Form URL"]
        assert rows[1] == [links[0].url]
        assert len(rows) == 4

    def test_index_label_and_extra_fields(self, batch) -> None:
        links, columns = batch
        config = ExportConfig(label_field="index", additional_fields=(NAME_ID, "unknown"))
        rows = _rows(export_links_csv(links, columns, config))
        assert rows[0] == ["Label", "Form URL", "Names"]
        assert rows[2] == ["Entry 2", links[1].url, "Jane"]

    def test_field_label_without_url(self, batch) -> None:
        links, columns = batch
        config = ExportConfig(include_url=False, label_field=EMAIL_ID)
        rows = _rows(export_links_csv(links, columns, config))
        assert rows[0] == ["Label"]
        assert rows[3] == ["alex@agency.gov.sg"]
