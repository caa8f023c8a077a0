"""
Tests for settings loading: environment, legacy config.json fallback,
placeholder rejection.
"""
import json

import pytest

from linkedin_scraper.config import PLACEHOLDER_EMAIL, Settings, load_settings, read_config_file

ENV_KEYS = ("LINKEDIN_EMAIL", "LINKEDIN_PASSWORD", "HEADLESS", "SLOW_MO_MS", "COOKIES_PATH", "CONFIG_FILE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep any developer .env / config.json out of the picture
    monkeypatch.chdir(tmp_path)


def write_config(tmp_path, data) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.headless is True
        assert settings.cookies_path == "./cookies.json"
        assert settings.default_geo_urn == "104195383"
        assert settings.credentials is None

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("LINKEDIN_EMAIL", "jane@example.com")
        monkeypatch.setenv("LINKEDIN_PASSWORD", "hunter2")

        settings = Settings()

        creds = settings.credentials
        assert creds.identifier == "jane@example.com"
        assert creds.secret.get_secret_value() == "hunter2"
        assert "hunter2" not in repr(settings)

    def test_placeholder_email_rejected(self, monkeypatch):
        monkeypatch.setenv("LINKEDIN_EMAIL", PLACEHOLDER_EMAIL)
        with pytest.raises(ValueError, match="placeholder"):
            Settings()


class TestLoadSettings:
    def test_reads_config_file_when_env_has_no_credentials(self, tmp_path):
        write_config(tmp_path, {
            "linkedin": {"email": "jane@example.com", "password": "hunter2"},
            "browser": {"headless": False, "slowMo": 250, "cookiesPath": "/data/cookies.json"},
        })

        settings = load_settings()

        assert settings.credentials.identifier == "jane@example.com"
        assert settings.headless is False
        assert settings.slow_mo_ms == 250
        assert settings.cookies_path == "/data/cookies.json"

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, {
            "linkedin": {"email": "jane@example.com", "password": "hunter2"},
            "browser": {"headless": False},
        })
        monkeypatch.setenv("HEADLESS", "true")

        settings = load_settings()

        assert settings.headless is True
        assert settings.linkedin_email == "jane@example.com"

    def test_missing_file_keeps_env_settings(self):
        settings = load_settings()
        assert settings.credentials is None

    def test_malformed_file_raises(self, tmp_path):
        (tmp_path / "config.json").write_text("{not json")
        with pytest.raises(ValueError, match="Error loading configuration"):
            load_settings()

    def test_placeholder_in_file_rejected(self, tmp_path):
        write_config(tmp_path, {"linkedin": {"email": PLACEHOLDER_EMAIL, "password": "x"}})
        with pytest.raises(ValueError):
            load_settings()


def test_read_config_file_ignores_unknown_keys(tmp_path):
    path = write_config(tmp_path, {"linkedin": {"email": "a@b.c"}, "other": {"x": 1}})
    assert read_config_file(path) == {"linkedin_email": "a@b.c"}
