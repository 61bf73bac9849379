from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import asdict, replace
from pathlib import Path

from .domain.entities import Note
from .domain.exceptions import NoteNotFoundError
from .util import atomic_write_json, clean_title, rfc3339_now

logger = logging.getLogger("notekeep.store")


class NoteStore:
    """
    Notes persisted as a single JSON document keyed by note id.

    Every operation is scoped to the owning user; a note that belongs to
    someone else is reported exactly like a missing one.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.path = data_dir / "notes.json"
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Note]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("notes_file_unreadable", extra={"path": str(self.path)})
            return {}
        if not isinstance(data, dict):
            return {}
        notes: dict[str, Note] = {}
        for note_id, raw in data.items():
            if not isinstance(raw, dict):
                continue
            try:
                notes[str(note_id)] = Note(**raw)
            except TypeError:
                continue
        return notes

    def _write(self, notes: dict[str, Note]) -> None:
        atomic_write_json(self.path, {note_id: asdict(n) for note_id, n in notes.items()})

    def _owned(self, notes: dict[str, Note], user_id: str, note_id: str) -> Note:
        note = notes.get(note_id)
        if note is None or note.user_id != user_id:
            raise NoteNotFoundError(note_id)
        return note

    def create_note(self, user_id: str, title: str | None, content: str) -> Note:
        now = rfc3339_now()
        note = Note(
            id=str(uuid.uuid4()),
            title=clean_title(title),
            content=content,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            notes = self._load()
            notes[note.id] = note
            self._write(notes)
        return note

    def edit_note(
        self, user_id: str, note_id: str, content: str, title: str | None, *, keep_title: bool = False
    ) -> Note:
        with self._lock:
            notes = self._load()
            existing = self._owned(notes, user_id, note_id)
            updated = replace(
                existing,
                title=existing.title if keep_title else clean_title(title),
                content=content,
                updated_at=rfc3339_now(),
            )
            notes[note_id] = updated
            self._write(notes)
        return updated

    def get_note(self, user_id: str, note_id: str) -> Note:
        return self._owned(self._load(), user_id, note_id)

    def list_notes(self, user_id: str) -> list[Note]:
        owned = [n for n in self._load().values() if n.user_id == user_id]
        owned.sort(key=lambda n: n.updated_at, reverse=True)
        return owned

    def search_notes(self, user_id: str, query: str) -> list[Note]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            n
            for n in self.list_notes(user_id)
            if needle in (n.title or "").lower() or needle in n.content.lower()
        ]

    def delete_note(self, user_id: str, note_id: str) -> Note:
        with self._lock:
            notes = self._load()
            note = self._owned(notes, user_id, note_id)
            notes.pop(note_id, None)
            self._write(notes)
        return note

    def count_notes(self, user_id: str) -> int:
        return sum(1 for n in self._load().values() if n.user_id == user_id)
