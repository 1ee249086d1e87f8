"""Note editor core: persistence, autosaving editing sessions and export."""

from .app import Notepad, open_notepad
from .export import ExportFormat, ExportPayload
from .models import Note, Settings
from .repository import NoteRepository, SettingsStore
from .session import NoteSummary, SaveOutcome, SessionController, SessionState, SessionView
from .storage import MemoryKeyValueStore, SQLKeyValueStore, open_store

__all__ = [
    "Notepad",
    "open_notepad",
    "ExportFormat",
    "ExportPayload",
    "Note",
    "Settings",
    "NoteRepository",
    "SettingsStore",
    "NoteSummary",
    "SaveOutcome",
    "SessionController",
    "SessionState",
    "SessionView",
    "MemoryKeyValueStore",
    "SQLKeyValueStore",
    "open_store",
]
