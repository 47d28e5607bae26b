"""Tests for config loading."""

import pytest
from zoneinfo import ZoneInfo

from transitview.config import AppConfig, load_config


@pytest.fixture()
def valid_config_yaml(tmp_path):
    """Write a minimal valid config.yaml and return its path."""
    content = """\
mbta_base_url: "http://localhost:9999"
request_timeout: 3.5
alert_activities: ["board", " ride "]
alert_max_chars: 80
display_timezone: "America/Chicago"
"""
    p = tmp_path / "config.yaml"
    p.write_text(content)
    return str(p)


class TestLoadConfig:
    def test_loads_valid_config(self, valid_config_yaml):
        config = load_config(valid_config_yaml)
        assert config.mbta_base_url == "http://localhost:9999"
        assert config.request_timeout == 3.5
        assert config.alert_activities == ["BOARD", "RIDE"]
        assert config.alert_max_chars == 80
        assert config.display_timezone == "America/Chicago"
        assert config.tz == ZoneInfo("America/Chicago")

    def test_defaults_applied(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("")
        config = load_config(str(p))
        assert config.mbta_base_url == "https://api-v3.mbta.com"
        assert config.request_timeout == 10.0
        assert config.alert_activities == ["BOARD", "EXIT", "RIDE"]
        assert config.alert_max_chars == 140
        assert config.display_timezone == "America/New_York"

    def test_env_provides_secret(self, valid_config_yaml, monkeypatch):
        monkeypatch.setenv("MBTA_API_KEY", "test-key-123")
        config = load_config(valid_config_yaml)
        assert config.mbta_api_key == "test-key-123"

    def test_secret_none_when_not_set(self, valid_config_yaml, monkeypatch):
        monkeypatch.delenv("MBTA_API_KEY", raising=False)
        config = load_config(valid_config_yaml)
        assert config.mbta_api_key is None

    def test_secret_never_read_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MBTA_API_KEY", raising=False)
        p = tmp_path / "config.yaml"
        p.write_text('mbta_api_key: "from-yaml"\n')
        assert load_config(str(p)).mbta_api_key is None

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_config_path_from_env(self, valid_config_yaml, monkeypatch):
        monkeypatch.setenv("CONFIG_PATH", valid_config_yaml)
        config = load_config()
        assert config.alert_max_chars == 80

    def test_empty_activities_raises(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("alert_activities: []\n")
        with pytest.raises(Exception):  # ValidationError
            load_config(str(p))

    def test_blank_activities_raises(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text('alert_activities: ["  "]\n')
        with pytest.raises(Exception, match="at least one activity"):
            load_config(str(p))

    def test_zero_max_chars_raises(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("alert_max_chars: 0\n")
        with pytest.raises(Exception):
            load_config(str(p))

    def test_unknown_timezone_raises(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text('display_timezone: "Mars/Olympus_Mons"\n')
        with pytest.raises(Exception, match="Unknown time zone"):
            load_config(str(p))


class TestAppConfig:
    def test_constructs_without_yaml(self):
        config = AppConfig()
        assert config.alert_max_chars == 140
