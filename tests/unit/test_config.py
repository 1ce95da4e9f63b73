import pytest
from pydantic import ValidationError

from mailcampaign.common.errors import ConfigError, MissingConfigError
from mailcampaign.config import get_settings, load_campaign_config, parse_campaign_config


def test_parses_key_value_lines(tmp_path):
    path = tmp_path / "campaign.conf"
    path.write_text(
        "# Mailkit credentials\n"
        "URL = https://api.mailkit.test/rpc.fcgi\n"
        "CLIENTID=123\n"
        "\n"
        "CAMPAIGN_NAME = Spring Newsletter   \n"
        "SEND_TO = $recipients\n"
        "UNRELATED_KEY = ignored\n",
        encoding="utf-8",
    )
    config = load_campaign_config(path)

    assert config.url == "https://api.mailkit.test/rpc.fcgi"
    assert config.require("CLIENTID") == "123"
    assert config.require("CAMPAIGN_NAME") == "Spring Newsletter"
    # no variable interpolation: values are taken literally
    assert config.get("SEND_TO") == "$recipients"


def test_hash_inside_value_is_kept():
    config = parse_campaign_config(
        "CAMPAIGN_NAME = Spring Sale #1 promo\n"
        "CLIENTKEY = abc #def\n"
        "# a real comment\n"
        "SEND_TO = '  padded  '\n"
        "export CLIENTID=\"42\"\n"
    )

    assert config.require("CAMPAIGN_NAME") == "Spring Sale #1 promo"
    assert config.require("CLIENTKEY") == "abc #def"
    assert config.require("SEND_TO") == "  padded  "
    assert config.require("CLIENTID") == "42"


def test_later_line_wins_and_blank_clears():
    config = parse_campaign_config("MAILLIST_NAME = first\nMAILLIST_NAME = second\nSEND_TO = x\nSEND_TO =\n")
    assert config.require("MAILLIST_NAME") == "second"
    assert config.get("SEND_TO") is None


def test_config_is_immutable():
    config = parse_campaign_config("URL = http://x\n")
    with pytest.raises(ValidationError):
        config.url = "http://y"  # type: ignore[misc]


def test_require_missing_and_empty_keys():
    config = parse_campaign_config("CAMPAIGN_NAME =\n")
    with pytest.raises(MissingConfigError) as exc:
        config.require("CAMPAIGN_NAME")
    assert exc.value.key == "CAMPAIGN_NAME"
    assert config.get("CAMPAIGN_DESCRIPTION", "fallback") == "fallback"
    assert config.get("NOT_A_KEY") is None


def test_malformed_line_is_config_error():
    with pytest.raises(ConfigError, match="line|expected KEY = VALUE"):
        parse_campaign_config("URL = http://x\nthis is not a setting\n")


def test_bad_maillist_id_is_config_error():
    with pytest.raises(ConfigError):
        parse_campaign_config("MAILLIST_ID = abc\n")


def test_unreadable_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_campaign_config(tmp_path / "missing.conf")


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("MAILCAMPAIGN_RPC_TIMEOUT", "4.5")
    monkeypatch.setenv("MAILCAMPAIGN_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.RPC_TIMEOUT == 4.5
    assert settings.LOG_LEVEL == "debug"
    assert settings.DEFAULT_LOCK_DIR == "."


def test_invalid_setting_is_config_error(monkeypatch):
    monkeypatch.setenv("MAILCAMPAIGN_USERS_FETCH_TIMEOUT", "later")
    with pytest.raises(ConfigError, match="MAILCAMPAIGN_"):
        get_settings()
