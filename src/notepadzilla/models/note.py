# notepadzilla/models/note.py
from __future__ import annotations
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..errors import MalformedRecord

logger = logging.getLogger(__name__)

NOTE_SCHEMA_VERSION = 1
UNTITLED = "Untitled Document"


def effective_title(title: str) -> str:
    """The title as it is stored: trimmed, with the sentinel standing in for blank."""
    return (title or "").strip() or UNTITLED


class Note(BaseModel):
    """A persisted document. Serialised with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    version: int = Field(default=NOTE_SCHEMA_VERSION, description="Record schema version")
    id: str
    title: str = UNTITLED
    content: str = ""
    preview: str = ""
    created_at: datetime
    updated_at: datetime
    word_count: int = Field(default=0, ge=0)
    char_count: int = Field(default=0, ge=0)

    @field_validator("version")
    @classmethod
    def _known_version(cls, v: int) -> int:
        if v > NOTE_SCHEMA_VERSION:
            raise ValueError(f"unsupported note schema version {v}")
        return v

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        # Legacy records used numeric millisecond ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @classmethod
    def new(cls, now: datetime) -> "Note":
        return cls(id=uuid.uuid4().hex, created_at=now, updated_at=now)


_NOTE_LIST = TypeAdapter(List[Note])
_RAW_LIST = TypeAdapter(List[Any])


def encode_note(note: Note) -> str:
    return note.model_dump_json(by_alias=True)


def decode_note(key: str, raw: str) -> Note:
    try:
        return Note.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedRecord(key, str(e)) from e


def encode_note_list(notes: List[Note]) -> str:
    return _NOTE_LIST.dump_json(notes, by_alias=True).decode("utf-8")


def decode_note_list(key: str, raw: str) -> List[Note]:
    """
    Decodes a stored list. A payload that is not a JSON array raises
    MalformedRecord; entries that fail validation are dropped one by one.
    """
    try:
        items = _RAW_LIST.validate_json(raw)
    except ValidationError as e:
        raise MalformedRecord(key, str(e)) from e

    notes: List[Note] = []
    for position, item in enumerate(items):
        try:
            notes.append(Note.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping malformed entry %d of '%s': %s", position, key, e.errors()[0]["msg"])
    return notes
