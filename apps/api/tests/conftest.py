from __future__ import annotations

import pytest

from notekeep_api.dependencies import get_settings, get_store


@pytest.fixture(autouse=True)
def clear_dependency_caches(monkeypatch):
    for name in ("API_AUTH_MODE", "API_AUTH_TOKEN", "API_AUTH_TOKENS", "API_DEBUG_LOG"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_store.cache_clear()
