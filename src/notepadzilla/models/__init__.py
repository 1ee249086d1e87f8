from .note import Note, NOTE_SCHEMA_VERSION, UNTITLED, effective_title
from .settings import Settings

__all__ = ["Note", "NOTE_SCHEMA_VERSION", "UNTITLED", "effective_title", "Settings"]
