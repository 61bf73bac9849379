from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

from ..domain.entities import Note
from ..domain.exceptions import NoteEditorError, NotFoundError, PersistenceError, ValidationError
from ..domain.ports import Confirmer, Navigator, NotesService
from .draft import Draft, SaveStatus, status_label

logger = logging.getLogger("notekeep.editor")

AUTOSAVE_DELAY_MS = 3000
CONTENT_REQUIRED_MESSAGE = "Note content is required"
DELETE_PROMPT = "Are you sure you want to delete this note?"

Listener = Callable[["SaveCoordinator"], Any]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class SaveCoordinator:
    """
    Keeps one editing session's draft in sync with the notes service.

    Every draft change re-arms a single debounce timer; when it fires the
    draft is saved in the background. A manual save cancels the timer, saves
    immediately and leaves the editor on success. At most one create/edit/
    delete request is in flight at a time: triggers that arrive while one is
    running are dropped, not queued.

    A session that starts without a note id creates the note on its first
    successful save and edits that note from then on.

    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        notes: NotesService,
        navigate_away: Navigator,
        confirm: Confirmer,
        *,
        note_id: str | None = None,
        draft: Draft | None = None,
        delay_ms: int = AUTOSAVE_DELAY_MS,
    ) -> None:
        self._notes = notes
        self._navigate_away = navigate_away
        self._confirm = confirm
        self._note_id = note_id
        self._draft = draft or Draft()
        self._delay_s = delay_ms / 1000.0

        self._status = SaveStatus.SAVED
        self._error: str | None = None
        self._last_error: NoteEditorError | None = None

        self._lock = asyncio.Lock()
        self._timer: asyncio.TimerHandle | None = None
        self._autosave_task: asyncio.Task | None = None
        self._revision = 0
        self._closed = False
        self._listeners: list[Listener] = []

    @classmethod
    async def open(
        cls,
        notes: NotesService,
        navigate_away: Navigator,
        confirm: Confirmer,
        *,
        note_id: str | None = None,
        delay_ms: int = AUTOSAVE_DELAY_MS,
    ) -> SaveCoordinator:
        """
        Starts a session, loading the note first when ``note_id`` is given.

        Raises NotFoundError if the note cannot be loaded; no session exists
        in that case.
        """
        draft = Draft()
        if note_id is not None:
            try:
                note = await notes.fetch_note(note_id)
            except NotFoundError:
                logger.info("note_open_not_found", extra={"id": note_id})
                raise
            except PersistenceError as e:
                logger.info("note_open_failed", extra={"id": note_id, "error": e.message})
                raise NotFoundError(e.message) from e
            draft = Draft(title=note.title or "", content=note.content)
        return cls(notes, navigate_away, confirm, note_id=note_id, draft=draft, delay_ms=delay_ms)

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def note_id(self) -> str | None:
        return self._note_id

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def status_label(self) -> str:
        return status_label(self._status)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def last_error(self) -> NoteEditorError | None:
        return self._last_error

    @property
    def saving(self) -> bool:
        return self._lock.locked()

    @property
    def can_save(self) -> bool:
        return not self._closed and self._draft.has_content() and not self.saving

    @property
    def can_delete(self) -> bool:
        return not self._closed and self._note_id is not None and not self.saving

    @property
    def autosave_pending(self) -> bool:
        return self._timer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Calls ``listener(self)`` after every status or error change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("listener_error")

    def _set_status(self, status: SaveStatus) -> None:
        if status is self._status:
            return
        self._status = status
        self._notify()

    def _surface(self, err: NoteEditorError | None) -> None:
        self._last_error = err
        self._error = err.message if err else None
        self._notify()

    def dismiss_error(self) -> None:
        if self._error is not None or self._last_error is not None:
            self._surface(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def on_draft_change(self, title: str | None, content: str) -> None:
        if self._closed:
            return
        self._draft = Draft(title=title, content=content or "")
        self._revision += 1
        self._cancel_timer()
        if self._draft.is_empty():
            return
        if not self.saving:
            self._set_status(SaveStatus.UNSAVED)
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._delay_s, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._closed:
            return
        self._autosave_task = asyncio.get_running_loop().create_task(self._autosave())

    async def _autosave(self) -> None:
        if self._closed or not self._draft.has_content():
            return
        if self.saving:
            logger.debug("autosave_skipped_busy", extra={"id": self._note_id})
            return
        if await self._save():
            self.dismiss_error()

    async def _save(self) -> bool:
        """Runs one create-or-edit call under the save lock. Returns True on success."""
        async with self._lock:
            if self._closed:
                return False
            revision = self._revision
            title, content = self._draft.payload()
            self._set_status(SaveStatus.SAVING)
            try:
                if self._note_id is None:
                    note = await self._notes.create_note(title, content)
                    self._promote(note)
                else:
                    await self._notes.edit_note(self._note_id, title, content)
            except PersistenceError as e:
                logger.warning("note_save_failed", extra={"id": self._note_id, "error": e.message})
                self._set_status(SaveStatus.UNSAVED)
                self._surface(e)
                return False
            except Exception as e:
                logger.exception("note_save_error", extra={"id": self._note_id})
                self._set_status(SaveStatus.UNSAVED)
                self._surface(PersistenceError(str(e) or "Failed to save note"))
                return False

            changed_meanwhile = revision != self._revision
            self._set_status(SaveStatus.UNSAVED if changed_meanwhile else SaveStatus.SAVED)
            logger.info("note_saved", extra={"id": self._note_id, "stale": changed_meanwhile})
            return True

    def _promote(self, note: Note) -> None:
        if self._note_id is None:
            self._note_id = note.id
            logger.info("note_created", extra={"id": note.id})

    async def on_manual_save(self) -> bool:
        if self._closed:
            return False
        if not self._draft.has_content():
            self._surface(ValidationError(CONTENT_REQUIRED_MESSAGE))
            return False
        self._cancel_timer()
        if self.saving:
            return False
        self.dismiss_error()
        if not await self._save():
            return False
        self.close()
        await _resolve(self._navigate_away())
        return True

    async def on_delete(self) -> bool:
        if self._closed or self._note_id is None:
            return False
        confirmed = await _resolve(self._confirm(DELETE_PROMPT))
        if not confirmed:
            return False
        self._cancel_timer()
        async with self._lock:
            note_id = self._note_id
            try:
                await self._notes.delete_note(note_id)
            except PersistenceError as e:
                logger.warning("note_delete_failed", extra={"id": note_id, "error": e.message})
                self._surface(e)
                return False
            except Exception as e:
                logger.exception("note_delete_error", extra={"id": note_id})
                self._surface(PersistenceError(str(e) or "Failed to delete note"))
                return False
        logger.info("note_deleted", extra={"id": note_id})
        self.close()
        await _resolve(self._navigate_away())
        return True

    def close(self) -> None:
        self._closed = True
        self._cancel_timer()

    async def aclose(self) -> None:
        """Closes the session and waits for a background save that is already running."""
        self.close()
        task = self._autosave_task
        if task is not None and not task.done():
            await task
