import json

import pytest

from app.utils.normalize import (
    dedupe_strings,
    normalise_hr_approval_status,
    normalise_score,
    normalise_skill_scores,
    normalise_string_array,
    parse_json_object,
    truncate_text,
)


@pytest.mark.unit
def test_dedupe_is_case_insensitive_and_order_preserving():
    assert dedupe_strings(["Teamwork", "teamwork", "Focus"]) == ["Teamwork", "Focus"]
    assert dedupe_strings(["A"], ["b", "a", "B", "c"]) == ["A", "b", "c"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        (55, 55.0),
        ("72.346", 72.35),
        (0.125, 0.13),
        (" 40 ", 40.0),
        (101, 100.0),
        (-3, 0.0),
        ("abc", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        (float("inf"), None),
    ],
)
def test_normalise_score(value, expected):
    assert normalise_score(value) == expected


@pytest.mark.unit
def test_skill_score_normalisation_is_idempotent():
    raw = [
        {"name": " Communication ", "score": "91.239"},
        {"skill": "Ownership", "score": 150},
        {"name": "COMMUNICATION", "score": 20},
    ]
    once = normalise_skill_scores(raw)
    twice = normalise_skill_scores(once)

    assert once == [{"name": "Communication", "score": 91.24}, {"name": "Ownership", "score": 100.0}]
    assert twice == once


@pytest.mark.unit
def test_skill_scores_accept_json_encoded_lists():
    stored = json.dumps([{"name": "Focus", "score": 70}])
    assert normalise_skill_scores(stored) == [{"name": "Focus", "score": 70.0}]
    assert normalise_skill_scores("not json") == []


@pytest.mark.unit
def test_string_array_parsing_of_stored_values():
    assert normalise_string_array('["One", " two "]', parse_strings=True) == ["One", "two"]
    assert normalise_string_array("Plain sentence", parse_strings=True) == ["Plain sentence"]
    assert normalise_string_array("Plain sentence") == []
    assert normalise_string_array(None, parse_strings=True) == []


@pytest.mark.unit
def test_parse_json_object():
    assert parse_json_object('{"summary": "x"}') == {"summary": "x"}
    assert parse_json_object({"a": 1}) == {"a": 1}
    assert parse_json_object("[1, 2]") is None
    assert parse_json_object("free text summary") is None
    assert parse_json_object("") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("Approved", "approved"),
        ("tryout", "approved"),
        (" GREEN ", "approved"),
        ("declined", "rejected"),
        ("not_approved", "rejected"),
        ("in_review", "pending"),
        ("something else", "pending"),
        (True, "approved"),
        (False, "pending"),
        ("", None),
        (None, None),
        (3, None),
    ],
)
def test_hr_approval_normalisation(value, expected):
    assert normalise_hr_approval_status(value) == expected


@pytest.mark.unit
def test_truncate_text_bounds_length():
    message = "x" * 600
    truncated = truncate_text(message, 500)

    assert len(truncated) == 500
    assert truncated.endswith("…")
    assert truncate_text("short", 500) == "short"
