"""
Durable note storage on top of a `KeyValueStore`.

Two keys are involved: the current-note slot holds the one document being
edited, the notes list holds saved documents most-recently-saved first. The
repository is the only writer of the list key.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .config import DEFAULT_MAX_NOTES
from .errors import MalformedRecord
from .models.note import Note, decode_note, decode_note_list, encode_note, encode_note_list
from .models.settings import Settings, decode_settings, encode_settings
from .storage import CURRENT_NOTE_KEY, NOTES_LIST_KEY, SETTINGS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoteRepository:
    """Owns the bounded notes list and the current-note slot."""

    def __init__(self, store: KeyValueStore, max_notes: int = DEFAULT_MAX_NOTES, clock: Clock = utcnow) -> None:
        if max_notes < 1:
            raise ValueError("max_notes must be at least 1")
        self.store = store
        self.max_notes = max_notes
        self.clock = clock

    def new_note(self) -> Note:
        return Note.new(self.clock())

    async def list(self) -> List[Note]:
        raw = await self.store.get(NOTES_LIST_KEY)
        if raw is None:
            return []
        try:
            return decode_note_list(NOTES_LIST_KEY, raw)
        except MalformedRecord as e:
            logger.warning("Ignoring unreadable notes list: %s", e.reason)
            return []

    async def get(self, note_id: str) -> Optional[Note]:
        for note in await self.list():
            if note.id == note_id:
                return note
        return None

    async def upsert(self, note: Note) -> None:
        notes = [n for n in await self.list() if n.id != note.id]
        notes.insert(0, note)
        evicted = notes[self.max_notes:]
        if evicted:
            logger.info("Evicting %d oldest note(s) beyond the %d-note cap", len(evicted), self.max_notes)
        await self.store.set(NOTES_LIST_KEY, encode_note_list(notes[:self.max_notes]))

    async def find_current(self) -> Optional[Note]:
        """The note in the current slot, or None when the slot is empty or unreadable."""
        raw = await self.store.get(CURRENT_NOTE_KEY)
        if raw is None:
            return None
        try:
            return decode_note(CURRENT_NOTE_KEY, raw)
        except MalformedRecord as e:
            logger.warning("Current note is unreadable, starting a new one: %s", e.reason)
            return None

    async def load_current(self) -> Note:
        return await self.find_current() or self.new_note()

    async def save_current(self, note: Note) -> None:
        await self.store.set(CURRENT_NOTE_KEY, encode_note(note))


class SettingsStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def load(self) -> Settings:
        raw = await self.store.get(SETTINGS_KEY)
        if raw is None:
            return Settings()
        try:
            return decode_settings(SETTINGS_KEY, raw)
        except MalformedRecord as e:
            logger.warning("Settings are unreadable, using defaults: %s", e.reason)
            return Settings()

    async def save(self, settings: Settings) -> None:
        await self.store.set(SETTINGS_KEY, encode_settings(settings))
