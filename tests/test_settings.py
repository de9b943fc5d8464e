"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from app.config import Settings


def test_defaults_point_at_anilist() -> None:
    settings = Settings(_env_file=None)

    assert str(settings.anilist_api_url) == "https://graphql.anilist.co/"
    assert settings.anilist_timeout_seconds == 20.0
    assert settings.selection_seed is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANILIST_API_URL", "https://anilist.example.com/graphql")
    monkeypatch.setenv("ANILIST_TIMEOUT", "5")
    monkeypatch.setenv("SELECTION_SEED", "1234")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert str(settings.anilist_api_url) == "https://anilist.example.com/graphql"
    assert settings.anilist_timeout_seconds == 5.0
    assert settings.selection_seed == 1234
    assert settings.log_level == "DEBUG"


def test_blank_seed_is_unset() -> None:
    settings = Settings(_env_file=None, SELECTION_SEED="  ")

    assert settings.selection_seed is None


def test_invalid_log_level_raises() -> None:
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, ANILIST_TIMEOUT=0)
