"""
The live editing session.

A `SessionController` owns exactly one `Session`: the note being edited, its
unsaved draft and the save state machine (idle -> dirty -> saving -> idle).
Manual saves, autosave ticks, note switches and new-note requests all go
through the controller, which runs on a single event loop. The `saving` state
is checked and set with no await in between, so an autosave tick that lands
during a save is ignored rather than overlapping it.
"""
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel

from .autosave import AutosaveScheduler, Monotonic, Sleep
from .errors import SessionClosed, StorageError
from .export import ExportFormat, ExportPayload, export_note
from .models.note import Note, effective_title
from .repository import Clock, NoteRepository
from .text import make_preview, plain_text, relative_time_label, word_count

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    SAVING = "saving"


class SaveOutcome(str, Enum):
    SAVED = "saved"
    UNCHANGED = "unchanged"
    IN_FLIGHT = "in_flight"


class SessionView(BaseModel):
    """What a front end renders: published to listeners on every change."""
    state: SessionState
    note_id: str
    title: str
    word_count: int = 0
    char_count: int = 0
    updated_label: str
    last_error: Optional[str] = None
    storage_available: bool = True


class NoteSummary(BaseModel):
    id: str
    title: str
    preview: str
    word_count: int
    updated_label: str
    active: bool = False


@dataclass
class Session:
    note: Note
    title: str
    content: str
    persisted: bool
    state: SessionState = SessionState.IDLE
    last_error: Optional[str] = None
    # A failed save may have written the current slot but not the list
    needs_sync: bool = False
    closed: bool = False

    @classmethod
    def open(cls, note: Note, persisted: bool) -> "Session":
        return cls(note=note, title=note.title, content=note.content, persisted=persisted)

    @property
    def has_changes(self) -> bool:
        # Compared by value against the last saved or loaded record
        return (self.needs_sync
                or effective_title(self.title) != effective_title(self.note.title)
                or self.content != self.note.content)


Listener = Callable[[SessionView], None]


class SessionController:
    def __init__(self, repository: NoteRepository, session: Session, *,
                 clock: Optional[Clock] = None,
                 autosave_interval: Optional[float] = None,
                 sleep: Sleep = asyncio.sleep,
                 monotonic: Optional[Monotonic] = None) -> None:
        self.repository = repository
        self.session = session
        self._clock = clock or repository.clock
        self._listeners: List[Listener] = []
        self._save_done = asyncio.Event()
        self._save_done.set()
        self.autosave_scheduler: Optional[AutosaveScheduler] = None
        if autosave_interval:
            self.autosave_scheduler = AutosaveScheduler(self.autosave, autosave_interval,
                                                        sleep=sleep, monotonic=monotonic)

    @classmethod
    async def start(cls, repository: NoteRepository, *,
                    clock: Optional[Clock] = None,
                    autosave_interval: Optional[float] = None,
                    sleep: Sleep = asyncio.sleep,
                    monotonic: Optional[Monotonic] = None) -> "SessionController":
        """Opens a session on the stored current note (or a new one) and starts autosave."""
        current = await repository.find_current()
        note = current if current is not None else repository.new_note()
        controller = cls(repository, Session.open(note, persisted=current is not None),
                         clock=clock, autosave_interval=autosave_interval,
                         sleep=sleep, monotonic=monotonic)
        if controller.autosave_scheduler is not None:
            controller.autosave_scheduler.start()
        logger.info("Session started on %s note %s", "stored" if current is not None else "new", note.id)
        return controller

    # ---- Outbound -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def has_unsaved_changes(self) -> bool:
        return self.session.state is not SessionState.IDLE

    @property
    def view(self) -> SessionView:
        s = self.session
        text = plain_text(s.content)
        return SessionView(
            state=s.state,
            note_id=s.note.id,
            title=effective_title(s.title),
            word_count=word_count(text),
            char_count=len(text),
            updated_label=relative_time_label(s.note.updated_at, self._clock()),
            last_error=s.last_error,
            storage_available=getattr(self.repository.store, "available", True),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener` for session views; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _emit(self) -> None:
        if not self._listeners:
            return
        view = self.view
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    # ---- Edits --------------------------------------------------------------

    def edit_title(self, text: str) -> SessionState:
        self._ensure_open()
        self.session.title = text
        return self._refresh_state()

    def edit_content(self, content: str) -> SessionState:
        self._ensure_open()
        self.session.content = content
        return self._refresh_state()

    def _refresh_state(self) -> SessionState:
        s = self.session
        # A running save re-evaluates the draft when it completes
        if s.state is not SessionState.SAVING:
            s.state = SessionState.DIRTY if s.has_changes else SessionState.IDLE
        self._emit()
        return s.state

    # ---- Saving -------------------------------------------------------------

    def _build_record(self) -> Note:
        s = self.session
        text = plain_text(s.content)
        return Note(
            id=s.note.id,
            title=effective_title(s.title),
            content=s.content,
            preview=make_preview(text),
            created_at=s.note.created_at,
            updated_at=self._clock(),
            word_count=word_count(text),
            char_count=len(text),
        )

    async def save(self) -> SaveOutcome:
        """
        Writes the draft to the current slot and the notes list.

        Raises StorageError when a write fails; the session is then left dirty
        with `last_error` set so the save can be retried.
        """
        self._ensure_open()
        s = self.session
        if s.state is SessionState.SAVING:
            logger.debug("Save of note %s already in flight; ignoring", s.note.id)
            return SaveOutcome.IN_FLIGHT
        if s.state is SessionState.IDLE and s.persisted:
            return SaveOutcome.UNCHANGED

        s.state = SessionState.SAVING
        self._save_done.clear()
        self._emit()

        note = self._build_record()
        written = False
        try:
            await self.repository.save_current(note)
            await self.repository.upsert(note)
            written = True
        except StorageError as e:
            s.last_error = str(e)
            logger.warning("Saving note %s failed: %s", note.id, e)
            raise
        finally:
            if written:
                s.note = note
                s.persisted = True
                s.last_error = None
                s.needs_sync = False
                s.state = SessionState.DIRTY if s.has_changes else SessionState.IDLE
            else:
                s.needs_sync = True
                s.state = SessionState.DIRTY
            self._save_done.set()
            self._emit()

        logger.info("Saved note %s (%d words)", note.id, note.word_count)
        return SaveOutcome.SAVED

    async def autosave(self) -> None:
        """Scheduler callback: saves only a dirty session and never raises storage errors."""
        s = self.session
        if s.closed or s.state is not SessionState.DIRTY:
            logger.debug("Autosave skipped for note %s (%s)", s.note.id, s.state.value)
            return
        try:
            await self.save()
        except StorageError as e:
            logger.warning("Autosave of note %s failed: %s", s.note.id, e)

    async def _settle(self) -> None:
        """Waits out any running save, then saves until the draft is clean."""
        while True:
            if self.session.state is SessionState.SAVING:
                await self._save_done.wait()
            elif self.session.state is SessionState.DIRTY:
                await self.save()
            else:
                return

    # ---- Switching ----------------------------------------------------------

    async def switch_to(self, note_id: str) -> Optional[Note]:
        """
        Makes the saved note `note_id` the live note, saving unsaved edits
        first. Returns None, with nothing changed, when no such note exists.
        """
        self._ensure_open()
        if note_id == self.session.note.id:
            await self._settle()
            return self.session.note

        target = await self.repository.get(note_id)
        if target is None:
            logger.info("Note %s not found; staying on %s", note_id, self.session.note.id)
            return None

        await self._settle()
        self.session = Session.open(target, persisted=True)
        logger.info("Switched to note %s", note_id)
        self._emit()
        return target

    async def create_new(self) -> Note:
        self._ensure_open()
        await self._settle()
        note = self.repository.new_note()
        self.session = Session.open(note, persisted=False)
        logger.info("Created note %s", note.id)
        self._emit()
        return note

    # ---- Reading ------------------------------------------------------------

    async def list_notes(self) -> List[NoteSummary]:
        """Saved notes for a picker, most recently saved first."""
        now = self._clock()
        active_id = self.session.note.id
        return [
            NoteSummary(
                id=n.id,
                title=n.title,
                preview=n.preview,
                word_count=n.word_count,
                updated_label=relative_time_label(n.updated_at, now),
                active=n.id == active_id,
            )
            for n in await self.repository.list()
        ]

    def export(self, fmt: ExportFormat | str) -> ExportPayload:
        """Exports the live draft, saved or not."""
        s = self.session
        return export_note(fmt, s.title, s.content, self._clock().astimezone().date())

    # ---- Lifecycle ----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.session.closed:
            raise SessionClosed("the editing session has been shut down")

    async def shutdown(self) -> None:
        """Stops autosave, makes a last attempt to save a dirty draft and closes the session."""
        if self.session.closed:
            return
        if self.autosave_scheduler is not None:
            await self.autosave_scheduler.stop()
        try:
            await self._settle()
        except StorageError as e:
            logger.warning("Unsaved changes to note %s were not written at shutdown: %s", self.session.note.id, e)
        self.session.closed = True
        logger.info("Session on note %s closed", self.session.note.id)
