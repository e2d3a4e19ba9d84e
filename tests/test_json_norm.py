"""Tests for the canonical JSON normalization layer."""

import json

from prefill_kit.model import TransformDirection
from prefill_kit.model.field import Field, ParsedUrl
from prefill_kit.utils.json_norm import stable_json_dump, stable_json_dumps


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_rounds_floats():
    obj = json.loads(stable_json_dumps({"score": 0.833333333}))
    assert obj["score"] == 0.8333


def test_stable_json_dumps_uses_to_dict_and_enum_values():
    parsed = ParsedUrl(base_url="https://example.com", params=(Field("a", "1"),))
    obj = json.loads(stable_json_dumps({"parsed": parsed, "direction": TransformDirection.ROW_TO_COLUMN}))
    assert obj["parsed"]["params"] == [{"id": "a", "label": "", "value": "1"}]
    assert obj["direction"] == "row_to_column"


def test_stable_json_dumps_keeps_non_ascii():
    assert "São Paulo" in stable_json_dumps({"city": "São Paulo"})


def test_stable_json_dump_writes_to_file_like(tmp_path):
    out = tmp_path / "x.json"
    with out.open("w", encoding="utf-8") as f:
        stable_json_dump({"b": 1, "a": 2}, f)
    txt = out.read_text(encoding="utf-8")
    assert txt.endswith("\n")
    assert '"a"' in txt and '"b"' in txt
