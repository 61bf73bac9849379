from __future__ import annotations

from fastapi.testclient import TestClient


def test_request_id_header_present(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    from main import create_app

    client = TestClient(create_app())
    r = client.get("/health")
    assert r.status_code == 200
    assert r.headers.get("x-request-id")

    r2 = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r2.headers.get("x-request-id") == "abc-123"


def test_bearer_auth_blocks_when_enabled(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("API_AUTH_MODE", "bearer")
    monkeypatch.setenv("API_AUTH_TOKEN", "secret")

    from main import create_app

    client = TestClient(create_app())

    # Health is exempt so containers can be checked.
    r0 = client.get("/health")
    assert r0.status_code == 200

    r1 = client.get("/api/v1/notes/get-notes")
    assert r1.status_code == 401
    assert r1.json() == {"detail": "unauthorized"}

    r2 = client.get("/api/v1/notes/get-notes", headers={"Authorization": "Bearer secret"})
    assert r2.status_code == 200

    r3 = client.get("/api/v1/notes/get-notes", headers={"Authorization": "Basic secret"})
    assert r3.status_code == 401


def test_unhandled_error_becomes_internal_error(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("DATA_DIR", str(tmp_path))

    from main import create_app
    from notekeep_api.store import NoteStore

    def explode(self, user_id):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(NoteStore, "list_notes", explode)

    client = TestClient(create_app(), raise_server_exceptions=False)
    r = client.get("/api/v1/notes/get-notes", headers={"X-Request-ID": "rid-1"})
    assert r.status_code == 500
    assert r.json() == {"detail": "internal_error", "request_id": "rid-1"}
