import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from notekeep_api.dependencies import get_store, get_user_id
from notekeep_api.domain.entities import Note
from notekeep_api.domain.exceptions import NoteNotFoundError
from notekeep_api.domain.ports import NoteRepository
from notekeep_api.domain.schemas import ApiResponseOut, NoteCreateIn, NoteEditIn, NoteOut, TotalNotesOut

router = APIRouter()
logger = logging.getLogger("notekeep.api")


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _note_out(note: Note) -> dict:
    return NoteOut(**note.__dict__).model_dump()


@router.get("/health")
def health():
    return {"ok": True}


@router.post("/api/v1/notes/create-note", response_model=ApiResponseOut)
def create_note(
    payload: NoteCreateIn,
    request: Request,
    store: NoteRepository = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    if not payload.content.strip():
        raise HTTPException(status_code=400, detail="Note content is required")
    note = store.create_note(user_id, payload.title, payload.content)
    logger.info("note_create", extra={"rid": _rid(request), "user": user_id, "id": note.id})
    return ApiResponseOut(data=_note_out(note), message="Note created successfully")


@router.patch("/api/v1/notes/edit-note", response_model=ApiResponseOut)
def edit_note(
    payload: NoteEditIn,
    request: Request,
    store: NoteRepository = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    if not payload.id:
        raise HTTPException(status_code=400, detail="Note ID is required")
    if not payload.content.strip():
        raise HTTPException(status_code=400, detail="Note content is required")
    try:
        note = store.edit_note(
            user_id,
            payload.id,
            payload.content,
            payload.title,
            keep_title="title" not in payload.model_fields_set,
        )
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail="Note does not exist or you are not authorized") from e
    logger.info("note_update", extra={"rid": _rid(request), "user": user_id, "id": note.id})
    return ApiResponseOut(data=_note_out(note), message="Note updated successfully!")


@router.get("/api/v1/notes/get-notes", response_model=ApiResponseOut)
def list_notes(store: NoteRepository = Depends(get_store), user_id: str = Depends(get_user_id)):
    notes = store.list_notes(user_id)
    return ApiResponseOut(data=[_note_out(n) for n in notes], message="Notes fetched successfully")


@router.get("/api/v1/notes/get-note/{note_id}", response_model=ApiResponseOut)
def get_note(note_id: str, store: NoteRepository = Depends(get_store), user_id: str = Depends(get_user_id)):
    try:
        note = store.get_note(user_id, note_id)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail="Note not found") from e
    return ApiResponseOut(data=_note_out(note), message="Note fetched successfully!")


@router.delete("/api/v1/notes/delete-note/{note_id}", response_model=ApiResponseOut)
def delete_note(
    note_id: str,
    request: Request,
    store: NoteRepository = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        note = store.delete_note(user_id, note_id)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail="Note not found") from e
    logger.info("note_delete", extra={"rid": _rid(request), "user": user_id, "id": note_id})
    return ApiResponseOut(data=_note_out(note), message="Note Deleted Successfully")


@router.get("/api/v1/notes/search", response_model=ApiResponseOut)
def search_notes(
    query: Optional[str] = Query(None),
    store: NoteRepository = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    notes = store.search_notes(user_id, query)
    return ApiResponseOut(data=[_note_out(n) for n in notes], message="Search results fetched successfully")


@router.get("/api/v1/notes/get-total-notes", response_model=ApiResponseOut)
def total_notes(store: NoteRepository = Depends(get_store), user_id: str = Depends(get_user_id)):
    total = TotalNotesOut(total_notes=store.count_notes(user_id))
    return ApiResponseOut(data=total.model_dump(), message="Total notes count fetched successfully")
