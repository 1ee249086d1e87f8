import pytest
from pydantic import ValidationError

from notepadzilla.config import AppConfig, load_config


def test_defaults(monkeypatch):
    for name in ("NOTEPAD_DATABASE_URL", "NOTEPAD_AUTOSAVE_INTERVAL_MS", "NOTEPAD_MAX_NOTES"):
        monkeypatch.delenv(name, raising=False)
    config = load_config()
    assert config.database_url == "sqlite+aiosqlite:///./notepadzilla.db"
    assert config.autosave_interval_ms == 3000
    assert config.autosave_interval == 3.0
    assert config.max_notes == 100


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NOTEPAD_DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("NOTEPAD_AUTOSAVE_INTERVAL_MS", "500")
    monkeypatch.setenv("NOTEPAD_MAX_NOTES", "20")
    config = load_config()
    assert config.database_url.endswith("other.db")
    assert config.autosave_interval == 0.5
    assert config.max_notes == 20


def test_non_positive_values_are_rejected():
    with pytest.raises(ValidationError):
        AppConfig(autosave_interval_ms=0)
    with pytest.raises(ValidationError):
        AppConfig(max_notes=-1)
