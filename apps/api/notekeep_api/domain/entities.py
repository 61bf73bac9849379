from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Note:
    id: str
    title: str | None
    content: str
    user_id: str
    created_at: str
    updated_at: str
