from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 50_000

NOTE_FIELDS = ("title", "description")


class NoteCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)


class NoteUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH)


class NoteOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: int
    title: str
    description: str
    created_at: datetime
    updated_at: datetime


class NotesPageOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    notes: list[NoteOut]
    total_pages: int
    page: int


@dataclass(frozen=True)
class NoteValidation:
    note: Optional[NoteCreate] = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.note is not None


def _error_message(field_name: str, err: Mapping[str, Any]) -> str:
    label = field_name.capitalize()
    if err["type"] in ("missing", "string_too_short"):
        return f"{label} is required"
    if err["type"] == "string_too_long":
        return f"{label} must be at most {err['ctx']['max_length']} characters"
    return err["msg"]


def validate_note_create(data: Any) -> NoteValidation:
    """
    Validate raw create-note input (form or JSON values).

    Never raises: returns either the typed NoteCreate or a
    {field: [messages]} mapping. None values count as missing.
    """
    if not isinstance(data, Mapping):
        data = {}
    raw = {name: data.get(name) for name in NOTE_FIELDS if data.get(name) is not None}

    try:
        return NoteValidation(note=NoteCreate.model_validate(raw))
    except ValidationError as exc:
        errors: dict[str, list[str]] = {}
        for err in exc.errors():
            name = str(err["loc"][0]) if err["loc"] else "body"
            errors.setdefault(name, []).append(_error_message(name, err))
        return NoteValidation(errors=errors)
