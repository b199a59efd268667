from fastapi import Request

from notes_api.storage.notes_store import NotesStore
from notes_api.storage.users_store import UsersStore


def get_notes_store(request: Request) -> NotesStore:
    return request.app.state.notes_store


def get_users_store(request: Request) -> UsersStore:
    return request.app.state.users_store
