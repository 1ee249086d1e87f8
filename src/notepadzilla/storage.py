"""
Key-value storage facade.

Every persisted value in the editor is a string under a well-known key. The
repository only ever talks to a `KeyValueStore`; the SQL-backed store is the
durable one, the memory store backs tests and throwaway sessions, and the
unavailable store is what a session degrades to when the database cannot be
opened.
"""
from __future__ import annotations
import logging
from typing import Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from .database import crud
from .database.database import create_engine_for, create_sessionmaker, create_tables
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)

CURRENT_NOTE_KEY = "currentNote"
NOTES_LIST_KEY = "notesList"
SETTINGS_KEY = "settings"


class KeyValueStore(Protocol):
    available: bool

    async def get(self, key: str) -> Optional[str]: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def close(self) -> None: ...


class MemoryKeyValueStore:
    """Process-local store. Nothing survives the process."""

    available = True

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        pass


class UnavailableKeyValueStore:
    """Stand-in used when the real store cannot be opened: reads find nothing, writes fail fast."""

    available = False

    def __init__(self, reason: str) -> None:
        self.reason = reason

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str) -> None:
        raise StorageUnavailable(self.reason)

    async def delete(self, key: str) -> None:
        raise StorageUnavailable(self.reason)

    async def close(self) -> None:
        pass


class SQLKeyValueStore:
    """
    Key-value store kept in a single SQL table through an async SQLAlchemy
    engine. Each call runs in its own short session and commits before
    returning.
    """

    available = True

    def __init__(self, database_url: str, engine: Optional[AsyncEngine] = None) -> None:
        self.database_url = database_url
        self._engine = engine or create_engine_for(database_url)
        self._sessionmaker = create_sessionmaker(self._engine)

    async def open(self) -> "SQLKeyValueStore":
        """Creates the backing table; raises StorageUnavailable if the database cannot be used."""
        try:
            await create_tables(self._engine)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable(f"Cannot open {self.database_url}: {e}") from e
        return self

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self._sessionmaker() as db:
                entry = await crud.get_entry(db, key)
                return entry.value if entry is not None else None
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable(f"Read of '{key}' failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._sessionmaker() as db:
                await crud.put_entry(db, key, value)
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable(f"Write of '{key}' failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            async with self._sessionmaker() as db:
                await crud.delete_entry(db, key)
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable(f"Delete of '{key}' failed: {e}") from e

    async def close(self) -> None:
        await self._engine.dispose()


async def open_store(database_url: str) -> KeyValueStore:
    """
    Opens the SQL store at `database_url`. If it cannot be opened the failure is
    logged once and an `UnavailableKeyValueStore` is returned, so the caller
    keeps working in memory with every save failing fast.
    """
    store = SQLKeyValueStore(database_url)
    try:
        return await store.open()
    except StorageUnavailable as e:
        logger.error("Storage unavailable, notes will not be persisted: %s", e)
        await store.close()
        return UnavailableKeyValueStore(str(e))
