"""Tests for configuration loading."""

import pytest

from fotobot.config import ConfigError, ConfigManager

ENV = {
    "TELEGRAM_BOT_TOKEN": "123:ABC",
    "TG_ID": "12345",
    "TG_HASH": "deadbeef",
}


@pytest.fixture(autouse=True)
def no_default_config_file(monkeypatch):
    monkeypatch.setattr(ConfigManager, "_find_config_file", staticmethod(lambda: None))


def test_environment_only():
    config = ConfigManager.load(environ=ENV)

    assert config.bot_token == "123:ABC"
    assert config.api_id == 12345
    assert config.api_hash == "deadbeef"
    assert config.get("cache.directory") == "cache"
    assert config.config_path is None


def test_token_variable_priority():
    env = dict(ENV, BOT_TOKEN="second", TELEGRAM_TOKEN="third")
    del env["TELEGRAM_BOT_TOKEN"]

    assert ConfigManager.load(environ=env).bot_token == "second"


def test_file_values_are_merged_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "telegram:\n"
        "  bot_token: from-file\n"
        "  api_id: 999\n"
        "  api_hash: filehash\n"
        "geocoding:\n"
        "  enabled: false\n"
    )

    config = ConfigManager.load(config_path=str(path), environ={})

    assert config.bot_token == "from-file"
    assert config.api_id == 999
    assert config.get("geocoding.enabled") is False
    assert config.get("geocoding.timeout") == 10
    assert config.config_path == path


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("telegram:\n  bot_token: from-file\n  api_id: 1\n  api_hash: h\n")

    config = ConfigManager.load(config_path=str(path), environ={"TELEGRAM_BOT_TOKEN": "from-env", "FOTOBOT_LOG_LEVEL": "DEBUG"})

    assert config.bot_token == "from-env"
    assert config.get("logging.level") == "DEBUG"


def test_missing_required_fields():
    with pytest.raises(ConfigError, match="telegram.api_hash"):
        ConfigManager.load(environ={"TELEGRAM_BOT_TOKEN": "t", "TG_ID": "1"})


def test_api_id_must_be_integer():
    with pytest.raises(ConfigError, match="integer"):
        ConfigManager.load(environ=dict(ENV, TG_ID="not-a-number"))


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        ConfigManager.load(config_path=str(tmp_path / "missing.yaml"), environ=ENV)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        ConfigManager.load(config_path=str(path), environ=ENV)


def test_dot_notation_set_and_get():
    config = ConfigManager.load(environ=ENV)

    config.set("http.timeout", 5)

    assert config.get("http.timeout") == 5
    assert config.get("http.missing", "fallback") == "fallback"
