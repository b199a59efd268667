from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

# repository root when running from a checkout (we are in backend/notes_api/storage)
_SOURCE_ROOT = Path(__file__).resolve().parents[3]

# bounds of a signed 64-bit INTEGER column; larger values overflow the driver
MAX_ROW_ID = 2**63 - 1


def default_data_dir() -> Path:
    # an installed wheel lives under site-packages, so fall back to ./data there
    if (_SOURCE_ROOT / "pyproject.toml").exists():
        return _SOURCE_ROOT / "data"
    return Path.cwd() / "data"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class NoteRow(Base):
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False
    )


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    data_dir = Path(os.getenv("APP_DATA_DIR", str(default_data_dir())))
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{data_dir / 'notes.db'}"


def make_engine(url: Optional[str] = None) -> Engine:
    url = url or database_url()
    connect_args = {}
    if url.startswith("sqlite"):
        # requests are served from a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
