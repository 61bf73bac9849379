from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    api_auth_mode: str
    api_auth_token: str | None
    api_debug_log: bool
    notes_api_base_url: str
    autosave_delay_ms: int
    api_auth_tokens: dict[str, str] = field(default_factory=dict)

    def user_for_token(self, token: str) -> str | None:
        if not token:
            return None
        if self.api_auth_token and token == self.api_auth_token:
            return "default"
        for user_id, user_token in self.api_auth_tokens.items():
            if token == user_token:
                return user_id
        return None


def parse_token_map(raw: str | None) -> dict[str, str]:
    """
    Parses "alice:tok1,bob:tok2" into {"alice": "tok1", "bob": "tok2"}.
    Malformed entries are skipped.
    """
    mapping: dict[str, str] = {}
    if not raw:
        return mapping
    for entry in raw.split(","):
        user_id, sep, token = entry.strip().partition(":")
        if not sep or not user_id.strip() or not token.strip():
            continue
        mapping[user_id.strip()] = token.strip()
    return mapping


def load_settings() -> Settings:
    data_dir = Path(os.environ.get("DATA_DIR", "./data")).resolve()
    api_auth_mode = os.environ.get("API_AUTH_MODE", "none").lower()
    api_auth_token = os.environ.get("API_AUTH_TOKEN")
    api_auth_tokens = parse_token_map(os.environ.get("API_AUTH_TOKENS"))
    api_debug_log = os.environ.get("API_DEBUG_LOG", "false").lower() == "true"
    notes_api_base_url = os.environ.get("NOTES_API_BASE_URL", "http://localhost:8000/api/v1")
    autosave_delay_ms = int(os.environ.get("AUTOSAVE_DELAY_MS", "3000"))
    return Settings(
        data_dir=data_dir,
        api_auth_mode=api_auth_mode,
        api_auth_token=api_auth_token,
        api_debug_log=api_debug_log,
        notes_api_base_url=notes_api_base_url,
        autosave_delay_ms=autosave_delay_ms,
        api_auth_tokens=api_auth_tokens,
    )
