from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from notes_api.storage.db import UserRow


class UserExistsError(Exception):
    pass


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    hashed_password: str
    created_at: datetime


def _to_record(row: UserRow) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        hashed_password=row.hashed_password,
        created_at=row.created_at,
    )


class UsersStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        with self.session_factory() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).one_or_none()
            return _to_record(row) if row is not None else None

    def create(self, username: str, hashed_password: str) -> UserRecord:
        with self.session_factory() as session:
            row = UserRow(username=username, hashed_password=hashed_password)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise UserExistsError(username) from exc
            return _to_record(row)
