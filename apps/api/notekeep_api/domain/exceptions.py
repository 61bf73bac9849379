from __future__ import annotations


class NoteNotFoundError(LookupError):
    pass


class NoteEditorError(Exception):
    """Base for failures the note editor surfaces to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(NoteEditorError):
    """Raised locally before any request is made (e.g. empty content)."""


class PersistenceError(NoteEditorError):
    """A create, edit or delete call failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(NoteEditorError):
    """The note to open does not exist or is not owned by the caller."""
