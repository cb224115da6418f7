"""Tests for env settings and the cached profile file."""
import json
from pathlib import Path

import pytest

from autoapply.config import API_BASE_URLS, load_cached_profile, load_settings, save_cached_profile
from autoapply.errors import ProfileUnavailableError

EXAMPLE_PROFILE = Path(__file__).resolve().parent.parent / "config" / "profile.example.yaml"

_ENV_KEYS = (
    "AUTOAPPLY_ENV",
    "AUTOAPPLY_API_URL",
    "AUTOAPPLY_TOKEN",
    "AUTOAPPLY_TIMEOUT",
    "AUTOAPPLY_HEADLESS",
    "AUTOAPPLY_DEBUG",
    "AUTOAPPLY_PROFILE_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.environment == "production"
        assert settings.api_url == API_BASE_URLS["production"]
        assert settings.auth_token == ""
        assert settings.headless is True
        assert settings.debug is False

    def test_development_environment(self, monkeypatch):
        monkeypatch.setenv("AUTOAPPLY_ENV", "Development")
        assert load_settings().api_url == "http://localhost:5000/api"

    def test_unknown_environment_falls_back(self, monkeypatch):
        monkeypatch.setenv("AUTOAPPLY_ENV", "staging")
        assert load_settings().environment == "production"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTOAPPLY_API_URL", "http://api.test")
        monkeypatch.setenv("AUTOAPPLY_TOKEN", " tok ")
        monkeypatch.setenv("AUTOAPPLY_TIMEOUT", "3.5")
        monkeypatch.setenv("AUTOAPPLY_HEADLESS", "false")
        monkeypatch.setenv("AUTOAPPLY_DEBUG", "yes")
        monkeypatch.setenv("AUTOAPPLY_PROFILE_PATH", str(tmp_path / "p.yaml"))

        settings = load_settings()

        assert settings.api_url == "http://api.test"
        assert settings.auth_token == "tok"
        assert settings.request_timeout == 3.5
        assert settings.headless is False
        assert settings.debug is True
        assert settings.profile_path == tmp_path / "p.yaml"


class TestCachedProfile:
    def test_yaml(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text("name: Jane Doe\nskills: [Go, SQL]\n", encoding="utf-8")
        assert load_cached_profile(path) == {"name": "Jane Doe", "skills": ["Go", "SQL"]}

    def test_json_with_resume_data_envelope(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps({"resumeData": {"email": "a@b.com"}, "savedAt": 1}), encoding="utf-8")
        assert load_cached_profile(path) == {"email": "a@b.com"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProfileUnavailableError):
            load_cached_profile(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ProfileUnavailableError):
            load_cached_profile(path)

    def test_default_path_comes_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "cached.yaml"
        path.write_text("email: env@example.com\n", encoding="utf-8")
        monkeypatch.setenv("AUTOAPPLY_PROFILE_PATH", str(path))
        assert load_cached_profile()["email"] == "env@example.com"

    def test_save_creates_directories(self, tmp_path):
        path = save_cached_profile({"name": "Zoë"}, tmp_path / "nested" / "profile.yaml")
        assert load_cached_profile(path) == {"name": "Zoë"}

    def test_example_profile_is_valid(self):
        profile = load_cached_profile(EXAMPLE_PROFILE)
        assert profile["email"] == "jane.doe@example.com"
        assert profile["education"] and profile["experience"]
