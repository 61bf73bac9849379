from functools import lru_cache

from fastapi import Request

from notekeep_api.config import load_settings
from notekeep_api.store import NoteStore

@lru_cache()
def get_settings():
    return load_settings()

@lru_cache()
def get_store():
    settings = get_settings()
    return NoteStore(settings.data_dir)

def get_user_id(request: Request) -> str:
    return getattr(request.state, "user_id", None) or "default"
