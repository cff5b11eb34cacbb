import pytest

from wrongway.errors import RequestError
from wrongway.generation.params import JokeRequest, validate_params


def test_valid_params_default_length():
    req = validate_params({"scenario": "Queue", "roles": ["Visitor"], "tone": "Dry"})
    assert req == JokeRequest(scenario="Queue", roles=("Visitor",), tone="Dry", length="medium")


def test_duplicate_roles_allowed():
    req = validate_params({"scenario": "Gallery", "roles": ["Guard", "Guard"], "tone": "Silly", "length": "long"})
    assert req.roles == ("Guard", "Guard")
    assert req.length == "long"


@pytest.mark.parametrize(
    "params, message",
    [
        (None, "Missing params"),
        ({}, "Missing scenario"),
        ("Queue", "Missing params"),
        ({"roles": ["Visitor"], "tone": "Dry"}, "Missing scenario"),
        ({"scenario": "Queue", "tone": "Dry"}, "Roles must be 1–2"),
        ({"scenario": "Queue", "roles": [], "tone": "Dry"}, "Roles must be 1–2"),
        ({"scenario": "Queue", "roles": ["A", "B", "C"], "tone": "Dry"}, "Roles must be 1–2"),
        ({"scenario": "Queue", "roles": "Visitor", "tone": "Dry"}, "Roles must be 1–2"),
        ({"scenario": "Queue", "roles": ["Visitor"]}, "Missing tone"),
    ],
)
def test_invalid_params(params, message):
    with pytest.raises(RequestError) as exc:
        validate_params(params)
    assert str(exc.value) == message


def test_first_violation_wins():
    with pytest.raises(RequestError, match="Missing scenario"):
        validate_params({"roles": [], "tone": ""})


def test_unknown_values_warn_but_pass(caplog):
    req = validate_params({"scenario": "Moon", "roles": ["Astronaut"], "tone": "Dry"})
    assert req.scenario == "Moon"
    assert "Moon" in caplog.text
    assert "Astronaut" in caplog.text
