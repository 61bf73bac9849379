from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from ..client.http_notes import HttpNotesService
from ..config import Settings
from ..domain.ports import Confirmer, Navigator
from .coordinator import SaveCoordinator


@asynccontextmanager
async def editor_session(
    settings: Settings,
    navigate_away: Navigator,
    confirm: Confirmer,
    *,
    note_id: str | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[SaveCoordinator]:
    """
    Opens an editing session against the configured notes API.

    The coordinator is closed on exit (pending autosave dropped, a running one
    awaited) before the HTTP client is released.
    """
    service = HttpNotesService.from_settings(settings, token=token, client=client)
    try:
        coordinator = await SaveCoordinator.open(
            service, navigate_away, confirm, note_id=note_id, delay_ms=settings.autosave_delay_ms
        )
        try:
            yield coordinator
        finally:
            await coordinator.aclose()
    finally:
        await service.aclose()
