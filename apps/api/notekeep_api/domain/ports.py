from __future__ import annotations

from typing import Awaitable, Protocol, Union, runtime_checkable

from notekeep_api.domain.entities import Note


@runtime_checkable
class NoteRepository(Protocol):
    def create_note(self, user_id: str, title: str | None, content: str) -> Note:
        ...

    def edit_note(
        self, user_id: str, note_id: str, content: str, title: str | None, *, keep_title: bool = False
    ) -> Note:
        ...

    def get_note(self, user_id: str, note_id: str) -> Note:
        ...

    def list_notes(self, user_id: str) -> list[Note]:
        ...

    def search_notes(self, user_id: str, query: str) -> list[Note]:
        ...

    def delete_note(self, user_id: str, note_id: str) -> Note:
        ...

    def count_notes(self, user_id: str) -> int:
        ...


@runtime_checkable
class NotesService(Protocol):
    """What the note editor needs from the notes backend."""

    async def fetch_note(self, note_id: str) -> Note:
        ...

    async def create_note(self, title: str | None, content: str) -> Note:
        ...

    async def edit_note(self, note_id: str, title: str | None, content: str) -> Note:
        ...

    async def delete_note(self, note_id: str) -> Note:
        ...


class Navigator(Protocol):
    def __call__(self) -> Union[None, Awaitable[None]]:
        ...


class Confirmer(Protocol):
    def __call__(self, prompt: str) -> Union[bool, Awaitable[bool]]:
        ...
