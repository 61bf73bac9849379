import json

import pytest

from notekeep_api.domain.exceptions import NoteNotFoundError
from notekeep_api.store import NoteStore


def test_created_at_persists_across_edits_and_delete(tmp_path) -> None:
    store = NoteStore(tmp_path)

    n1 = store.create_note("alice", "  Groceries ", "milk\n")
    assert n1.title == "Groceries"
    assert n1.created_at == n1.updated_at

    n2 = store.edit_note("alice", n1.id, "milk, eggs\n", "Groceries")
    assert n2.id == n1.id
    assert n2.created_at == n1.created_at
    assert n2.content == "milk, eggs\n"
    assert n2.updated_at >= n1.updated_at

    raw = json.loads((tmp_path / "notes.json").read_text(encoding="utf-8"))
    assert raw[n1.id]["content"] == "milk, eggs\n"
    assert raw[n1.id]["user_id"] == "alice"

    deleted = store.delete_note("alice", n1.id)
    assert deleted.id == n1.id
    assert store.count_notes("alice") == 0
    assert n1.id not in json.loads((tmp_path / "notes.json").read_text(encoding="utf-8"))


def test_edit_can_keep_or_clear_title(tmp_path) -> None:
    store = NoteStore(tmp_path)
    note = store.create_note("alice", "Title", "body")

    kept = store.edit_note("alice", note.id, "body 2", None, keep_title=True)
    assert kept.title == "Title"

    cleared = store.edit_note("alice", note.id, "body 3", "   ")
    assert cleared.title is None


def test_notes_are_scoped_to_owner(tmp_path) -> None:
    store = NoteStore(tmp_path)
    note = store.create_note("alice", None, "secret")
    store.create_note("bob", None, "bob's")

    with pytest.raises(NoteNotFoundError):
        store.get_note("bob", note.id)
    with pytest.raises(NoteNotFoundError):
        store.edit_note("bob", note.id, "hijack", None)
    with pytest.raises(NoteNotFoundError):
        store.delete_note("bob", note.id)

    assert [n.content for n in store.list_notes("bob")] == ["bob's"]
    assert store.count_notes("alice") == 1


def test_search_is_case_insensitive_over_title_and_content(tmp_path) -> None:
    store = NoteStore(tmp_path)
    a = store.create_note("alice", "Meeting notes", "agenda")
    b = store.create_note("alice", None, "Buy a MEETING room")
    store.create_note("alice", "Other", "nothing here")
    store.create_note("bob", "meeting", "not mine")

    found = {n.id for n in store.search_notes("alice", "meeting")}
    assert found == {a.id, b.id}
    assert store.search_notes("alice", "   ") == []


def test_list_notes_newest_first(tmp_path) -> None:
    store = NoteStore(tmp_path)
    first = store.create_note("alice", None, "one")
    second = store.create_note("alice", None, "two")
    store.edit_note("alice", first.id, "one again", None)

    assert [n.id for n in store.list_notes("alice")] == [first.id, second.id]


def test_unreadable_file_is_treated_as_empty(tmp_path) -> None:
    (tmp_path / "notes.json").write_text("{not json", encoding="utf-8")
    store = NoteStore(tmp_path)
    assert store.list_notes("alice") == []
