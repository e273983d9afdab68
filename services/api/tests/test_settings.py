"""Tests for settings parsing."""

from anonqa.settings import Settings


def test_comma_separated_banned_words_are_split():
    settings = Settings(banned_words=" spam ,, scam ")
    assert settings.banned_words == ["spam", "scam"]


def test_json_array_lists_are_accepted(monkeypatch):
    monkeypatch.setenv("BANNED_WORDS", '["foo", "bar"]')
    monkeypatch.setenv("ALLOWED_ORIGINS", '["https://board.test"]')
    settings = Settings()
    assert settings.banned_words == ["foo", "bar"]
    assert settings.cors_origins == ["https://board.test"]


def test_async_database_url_forces_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/anonqa")
    assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5432/anonqa"


def test_admin_routes_disabled_by_default(monkeypatch):
    monkeypatch.delenv("ADMIN_TOKEN", raising=False)
    assert Settings(_env_file=None).admin_token == ""
