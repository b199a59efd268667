from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import sessionmaker

from notes_api.storage.db import MAX_ROW_ID, NoteRow
from notes_api.utils.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, page_offset, total_pages

UPDATABLE_FIELDS = frozenset({"title", "description"})


@dataclass(frozen=True)
class Note:
    id: int
    user_id: int
    title: str
    description: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class NotesPage:
    notes: list[Note]
    total_pages: int


def _utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_note(row: NoteRow) -> Note:
    return Note(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
    )


def _storable(*ids: int) -> bool:
    # ids outside the INTEGER range cannot match any row
    return all(0 < i <= MAX_ROW_ID for i in ids)


def _owned(note_id: int, user_id: int):
    # id and owner checked in the same predicate; a foreign note looks absent
    return (NoteRow.id == note_id) & (NoteRow.user_id == user_id)


class NotesStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_note(self, user_id: int, title: str, description: str) -> Note:
        if not _storable(user_id):
            raise ValueError("user_id out of range")
        with self.session_factory() as session:
            row = NoteRow(user_id=user_id, title=title, description=description)
            session.add(row)
            session.commit()
            return _to_note(row)

    def get_note(self, note_id: int) -> Optional[Note]:
        if not _storable(note_id):
            return None
        with self.session_factory() as session:
            row = session.get(NoteRow, note_id)
            return _to_note(row) if row is not None else None

    def list_notes(self, user_id: int, limit: int = DEFAULT_LIMIT, page: int = DEFAULT_PAGE) -> NotesPage:
        if page < 1:
            page = DEFAULT_PAGE
        offset = page_offset(page, limit)
        if not _storable(user_id):
            return NotesPage(notes=[], total_pages=0)

        with self.session_factory() as session:
            count = session.scalar(
                select(func.count()).select_from(NoteRow).where(NoteRow.user_id == user_id)
            ) or 0
            rows = []
            # pages past the end never reach the driver, whatever their size
            if offset < count:
                rows = session.scalars(
                    select(NoteRow)
                    .where(NoteRow.user_id == user_id)
                    .order_by(NoteRow.id)
                    .limit(min(limit, count))
                    .offset(offset)
                ).all()

        return NotesPage(notes=[_to_note(r) for r in rows], total_pages=total_pages(count, limit))

    def update_note(self, note_id: int, user_id: int, **fields: Any) -> Optional[Note]:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        if not _storable(note_id, user_id):
            return None

        with self.session_factory() as session:
            if not fields:
                row = session.scalars(select(NoteRow).where(_owned(note_id, user_id))).one_or_none()
                return _to_note(row) if row is not None else None

            row = session.scalars(
                update(NoteRow)
                .where(_owned(note_id, user_id))
                .values(**fields)
                .returning(NoteRow)
            ).one_or_none()
            note = _to_note(row) if row is not None else None
            session.commit()
            return note

    def delete_note(self, note_id: int, user_id: int) -> bool:
        if not _storable(note_id, user_id):
            return False
        with self.session_factory() as session:
            result = session.execute(delete(NoteRow).where(_owned(note_id, user_id)))
            session.commit()
            return result.rowcount > 0
