class NotepadError(Exception):
    """Base class for every error raised by the note editor core."""


class StorageError(NotepadError):
    """A read or write against the key-value store failed."""


class StorageUnavailable(StorageError):
    """The key-value store cannot be reached or is disabled."""


class MalformedRecord(NotepadError):
    """A persisted value could not be decoded into a record."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Malformed record under '{key}': {reason}")
        self.key = key
        self.reason = reason


class SessionClosed(NotepadError):
    """The editing session has been shut down."""
