import json

from wrongway.generation.extract import extract_json

CLEAN = json.dumps({"joke": "A guard waits", "tags": []})


def test_clean_object_unchanged():
    assert extract_json(CLEAN) == CLEAN


def test_fenced_matches_unfenced():
    assert extract_json(f"```json\n{CLEAN}\n```") == extract_json(CLEAN)
    assert extract_json(f"```\n{CLEAN}\n```") == extract_json(CLEAN)


def test_surrounding_prose_is_sliced_off():
    text = f"Sure! Here is your joke:\n{CLEAN}\nHope you like it."
    assert extract_json(text) == CLEAN


def test_nested_braces_keep_outer_object():
    text = 'prefix {"joke": "x", "meta": {"a": 1}} suffix'
    assert extract_json(text) == '{"joke": "x", "meta": {"a": 1}}'


def test_no_delimiters_returns_input():
    text = "I cannot write that joke."
    assert extract_json(text) == text
    assert extract_json("") == ""
