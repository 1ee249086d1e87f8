"""
Application lifecycle: open the store, start the editing session, and tear
both down in order on exit.

    async with open_notepad() as notepad:
        notepad.session.edit_content("<p>Hello</p>")
        await notepad.session.save()
"""
from __future__ import annotations
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from .autosave import Monotonic, Sleep
from .config import AppConfig, load_config
from .repository import Clock, NoteRepository, SettingsStore, utcnow
from .session import SessionController
from .storage import KeyValueStore, open_store

logger = logging.getLogger(__name__)


@dataclass
class Notepad:
    config: AppConfig
    store: KeyValueStore
    repository: NoteRepository
    settings: SettingsStore
    session: SessionController

    @property
    def storage_available(self) -> bool:
        return getattr(self.store, "available", True)


@asynccontextmanager
async def open_notepad(config: Optional[AppConfig] = None, *,
                       store: Optional[KeyValueStore] = None,
                       clock: Clock = utcnow,
                       autosave: bool = True,
                       sleep: Sleep = asyncio.sleep,
                       monotonic: Optional[Monotonic] = None) -> AsyncIterator[Notepad]:
    config = config or load_config()
    if store is None:
        store = await open_store(config.database_url)
    repository = NoteRepository(store, max_notes=config.max_notes, clock=clock)
    try:
        session = await SessionController.start(
            repository,
            autosave_interval=config.autosave_interval if autosave else None,
            sleep=sleep,
            monotonic=monotonic,
        )
        notepad = Notepad(
            config=config,
            store=store,
            repository=repository,
            settings=SettingsStore(store),
            session=session,
        )
        try:
            yield notepad
        finally:
            await session.shutdown()
    finally:
        await store.close()
        logger.info("Storage closed")
