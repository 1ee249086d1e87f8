"""
Runtime configuration for the note editor core.

Values come from the environment (a local `.env` is loaded first) and are
validated into an `AppConfig`.
"""
from __future__ import annotations
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./notepadzilla.db"
DEFAULT_AUTOSAVE_INTERVAL_MS = 3000
DEFAULT_MAX_NOTES = 100


class AppConfig(BaseModel):
    database_url: str = Field(default=DEFAULT_DATABASE_URL, description="SQLAlchemy URL of the key-value store")
    autosave_interval_ms: int = Field(default=DEFAULT_AUTOSAVE_INTERVAL_MS, gt=0, description="Fixed autosave period")
    max_notes: int = Field(default=DEFAULT_MAX_NOTES, gt=0, description="Cap on the saved notes list")

    @property
    def autosave_interval(self) -> float:
        """Autosave period in seconds."""
        return self.autosave_interval_ms / 1000.0


def load_config() -> AppConfig:
    return AppConfig(
        database_url=os.getenv("NOTEPAD_DATABASE_URL", DEFAULT_DATABASE_URL),
        autosave_interval_ms=int(os.getenv("NOTEPAD_AUTOSAVE_INTERVAL_MS", str(DEFAULT_AUTOSAVE_INTERVAL_MS))),
        max_notes=int(os.getenv("NOTEPAD_MAX_NOTES", str(DEFAULT_MAX_NOTES))),
    )
