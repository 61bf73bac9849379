from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class NoteOut(BaseModel):
    id: str
    title: Optional[str] = None
    content: str
    user_id: str
    created_at: str
    updated_at: str


class NoteCreateIn(BaseModel):
    title: Optional[str] = None
    content: str = ""


class NoteEditIn(BaseModel):
    id: str = ""
    title: Optional[str] = None
    content: str = ""


class TotalNotesOut(BaseModel):
    total_notes: int


class ApiResponseOut(BaseModel):
    status_code: int = 200
    data: Any = None
    message: str = ""
    success: bool = True
