import pytest

from notes_api.storage.notes_store import NotesPage


def test_create_assigns_ids_and_owner(store):
    a = store.create_note(user_id=1, title="t1", description="d1")
    b = store.create_note(user_id=1, title="t2", description="d2")
    assert a.id != b.id
    assert a.user_id == 1
    assert (a.title, a.description) == ("t1", "d1")
    assert a.created_at is not None and a.updated_at is not None


def test_get_note_is_not_owner_filtered(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.get_note(note.id) == note
    assert store.get_note(note.id + 100) is None


def test_list_notes_pages_in_insertion_order(store):
    created = [store.create_note(user_id=1, title=f"t{i}", description="d") for i in range(7)]
    store.create_note(user_id=2, title="other", description="d")

    first = store.list_notes(1, limit=3, page=1)
    assert [n.id for n in first.notes] == [n.id for n in created[:3]]
    assert first.total_pages == 3

    last = store.list_notes(1, limit=3, page=3)
    assert [n.id for n in last.notes] == [created[6].id]


def test_page_past_the_end_is_empty(store):
    store.create_note(user_id=1, title="t", description="d")
    result = store.list_notes(1, limit=10, page=5)
    assert result.notes == []
    assert result.total_pages == 1


def test_no_notes_means_zero_pages(store):
    result = store.list_notes(1)
    assert result.notes == []
    assert result.total_pages == 0


def test_defaults_are_first_page_of_ten(store):
    for i in range(12):
        store.create_note(user_id=1, title=f"t{i}", description="d")
    result = store.list_notes(1)
    assert len(result.notes) == 10
    assert result.notes[0].title == "t0"
    assert result.total_pages == 2


def test_non_positive_page_is_first_page(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.list_notes(1, limit=10, page=0).notes == [note]
    assert store.list_notes(1, limit=10, page=-3).notes == [note]


def test_zero_limit_is_rejected(store):
    with pytest.raises(ValueError):
        store.list_notes(1, limit=0)


def test_update_applies_partial_fields_for_owner(store):
    note = store.create_note(user_id=1, title="t", description="d")
    updated = store.update_note(note.id, 1, title="new")
    assert updated.id == note.id
    assert updated.title == "new"
    assert updated.description == "d"
    assert updated.updated_at >= note.updated_at
    assert store.get_note(note.id).title == "new"


def test_update_of_foreign_note_looks_like_missing_note(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.update_note(note.id, 2, title="hacked") is None
    assert store.update_note(note.id + 100, 2, title="hacked") is None
    assert store.get_note(note.id).title == "t"


def test_update_without_fields_returns_owned_note(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.update_note(note.id, 1) == note
    assert store.update_note(note.id, 2) is None


def test_update_rejects_immutable_fields(store):
    note = store.create_note(user_id=1, title="t", description="d")
    with pytest.raises(ValueError):
        store.update_note(note.id, 1, id=5)
    with pytest.raises(ValueError):
        store.update_note(note.id, 1, title="x", created_at=note.created_at)
    assert store.get_note(note.id) == note


def test_delete_twice(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.delete_note(note.id, 1) is True
    assert store.delete_note(note.id, 1) is False
    assert store.get_note(note.id) is None


def test_delete_of_foreign_note_keeps_it(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.delete_note(note.id, 2) is False
    assert store.get_note(note.id) == note


HUGE = 10**25


def test_out_of_range_ids_are_plain_misses(store):
    note = store.create_note(user_id=1, title="t", description="d")
    assert store.get_note(HUGE) is None
    assert store.update_note(HUGE, 1, title="x") is None
    assert store.update_note(note.id, HUGE, title="x") is None
    assert store.delete_note(HUGE, 1) is False
    assert store.list_notes(HUGE) == NotesPage(notes=[], total_pages=0)
    assert store.get_note(note.id) == note


def test_huge_page_is_empty_not_an_error(store):
    store.create_note(user_id=1, title="t", description="d")
    result = store.list_notes(1, limit=10, page=HUGE)
    assert result.notes == []
    assert result.total_pages == 1


def test_create_rejects_unstorable_owner(store):
    with pytest.raises(ValueError):
        store.create_note(user_id=HUGE, title="t", description="d")
