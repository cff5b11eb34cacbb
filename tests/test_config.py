import dataclasses

import pytest

from wrongway.common.config import Settings, load_config, load_settings


def test_default_config_sections():
    cfg = load_config()
    assert cfg["upstream"]["model"] == "gpt-4o-mini"
    assert cfg["upstream"]["retries"] == 2
    assert cfg["service"]["use_stub"] is False
    assert cfg["project"]["name"] == "wrongway-jokes"


def test_profile_merges_one_level():
    cfg = load_config(profile="local")
    assert cfg["upstream"]["retries"] == 0
    assert cfg["upstream"]["temperature"] == 0.7
    assert cfg["service"]["port"] == 8000


def test_unknown_profile():
    with pytest.raises(KeyError, match="Available"):
        load_config(profile="nope")


def test_custom_config_file(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "defaults:\n  upstream:\n    model: tiny\n    retries: 5\n  service:\n    use_stub: true\n",
        encoding="utf-8",
    )
    settings = load_settings(environ={}, config_path=str(path))
    assert settings.model == "tiny"
    assert settings.retries == 5
    assert settings.use_stub is True
    assert settings.timeout_ms == Settings.timeout_ms


def test_environment_overrides():
    settings = load_settings(
        environ={
            "OPENAI_API_KEY": "sk-env",
            "OPENAI_MODEL": "gpt-test",
            "USE_STUB": "1",
            "WRONGWAY_TIMEOUT_MS": "1500",
            "WRONGWAY_RETRIES": "0",
            "WRONGWAY_BACKOFF_MS": "10",
        }
    )
    assert settings.api_key == "sk-env"
    assert settings.model == "gpt-test"
    assert settings.use_stub is True
    assert settings.timeout_s == 1.5
    assert settings.retries == 0
    assert settings.backoff_s == pytest.approx(0.01)


def test_profile_from_environment():
    settings = load_settings(environ={"WRONGWAY_PROFILE": "stub", "USE_STUB": "0"})
    assert settings.use_stub is False
    assert settings.log_level == "DEBUG"


def test_missing_key_warns(caplog):
    load_settings(environ={"USE_STUB": "0"})
    assert "OPENAI_API_KEY" in caplog.text


@pytest.mark.parametrize("field, value", [("timeout_ms", 0), ("retries", -1), ("backoff_ms", -5)])
def test_settings_validation(field, value):
    with pytest.raises(ValueError, match=field):
        dataclasses.replace(Settings(), **{field: value})
