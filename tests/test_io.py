import json

import pytest

from wrongway.common.io import IncrementalJSONLWriter, read_jsonl, read_requests


def test_read_jsonl_skips_blank_lines(tmp_path):
    path = tmp_path / "x.jsonl"
    path.write_text('{"a": 1}\n\n{"b": "ü"}\n', encoding="utf-8")
    assert read_jsonl(path) == [{"a": 1}, {"b": "ü"}]


def test_incremental_writer_flushes(tmp_path):
    path = tmp_path / "out.jsonl"
    with IncrementalJSONLWriter(path) as w:
        w.write({"id": 1})
        assert path.read_text(encoding="utf-8") == '{"id": 1}\n'
        w.write({"id": 2})
    assert w.count == 2
    assert read_jsonl(path) == [{"id": 1}, {"id": 2}]


def test_read_requests_csv(tmp_path):
    path = tmp_path / "req.csv"
    path.write_text(
        "scenario,roles,tone,length\n"
        "Queue,Visitor,Dry,short\n"
        "Gallery,Artist|Curator,Zizek,\n",
        encoding="utf-8",
    )
    assert read_requests(path) == [
        {"scenario": "Queue", "roles": ["Visitor"], "tone": "Dry", "length": "short"},
        {"scenario": "Gallery", "roles": ["Artist", "Curator"], "tone": "Zizek"},
    ]


def test_read_requests_json_envelopes(tmp_path):
    path = tmp_path / "req.json"
    path.write_text(
        json.dumps([{"params": {"scenario": "Shop"}}, {"scenario": "Library"}]),
        encoding="utf-8",
    )
    assert read_requests(path) == [{"scenario": "Shop"}, {"scenario": "Library"}]


def test_read_requests_unsupported(tmp_path):
    with pytest.raises(ValueError, match="Unsupported"):
        read_requests(tmp_path / "req.txt")
