import pytest

from notepadzilla import SaveOutcome, SessionState, open_notepad
from notepadzilla.config import AppConfig
from notepadzilla.errors import StorageUnavailable
from notepadzilla.models.settings import Settings


@pytest.mark.asyncio
async def test_current_note_survives_restart(tmp_path):
    config = AppConfig(database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")

    async with open_notepad(config, autosave=False) as notepad:
        assert notepad.storage_available
        notepad.session.edit_title("Journal")
        notepad.session.edit_content("<p>Dear diary</p>")
        await notepad.session.save()
        note_id = notepad.session.session.note.id
        await notepad.settings.save(Settings(dark_mode=True))

    async with open_notepad(config, autosave=False) as notepad:
        session = notepad.session
        assert session.session.note.id == note_id
        assert session.view.title == "Journal"
        assert session.state is SessionState.IDLE
        assert await session.save() is SaveOutcome.UNCHANGED
        assert [s.id for s in await session.list_notes()] == [note_id]
        assert (await notepad.settings.load()).dark_mode is True


@pytest.mark.asyncio
async def test_unsaved_draft_is_written_on_close(tmp_path):
    config = AppConfig(database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")

    async with open_notepad(config, autosave=False) as notepad:
        notepad.session.edit_content("<p>not saved by hand</p>")

    async with open_notepad(config, autosave=False) as notepad:
        assert notepad.session.session.content == "<p>not saved by hand</p>"


@pytest.mark.asyncio
async def test_runs_in_memory_when_storage_cannot_open(tmp_path):
    config = AppConfig(database_url=f"sqlite+aiosqlite:///{tmp_path / 'nope' / 'app.db'}")

    async with open_notepad(config, autosave=False) as notepad:
        assert not notepad.storage_available
        assert notepad.session.view.storage_available is False
        notepad.session.edit_content("<p>draft</p>")
        with pytest.raises(StorageUnavailable):
            await notepad.session.save()
        assert notepad.session.state is SessionState.DIRTY


@pytest.mark.asyncio
async def test_autosave_scheduler_runs_with_the_app(tmp_path):
    config = AppConfig(database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}", autosave_interval_ms=3000)

    async with open_notepad(config) as notepad:
        scheduler = notepad.session.autosave_scheduler
        assert scheduler is not None and scheduler.running
        assert scheduler.interval == 3.0

    assert not scheduler.running
