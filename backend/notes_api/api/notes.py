import logging
import os
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from notes_api.api.deps import get_notes_store
from notes_api.models.notes import NOTE_FIELDS, NoteOut, NotesPageOut, NoteUpdate, validate_note_create
from notes_api.storage.notes_store import Note, NotesStore
from notes_api.utils.jwt_auth import get_current_user_id
from notes_api.utils.pagination import parse_page_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _max_limit() -> int:
    try:
        return int(os.getenv("NOTES_MAX_LIMIT", "100"))
    except ValueError:
        return 100


def _note_out(note: Note) -> NoteOut:
    return NoteOut(**note.to_dict())


async def _read_note_fields(request: Request) -> Any:
    # form posts (urlencoded or multipart) and JSON objects are both accepted
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            return await request.json()
        except ValueError:
            return {}
    form = await request.form()
    return {name: form.get(name) for name in NOTE_FIELDS}


@router.get("", response_model=NotesPageOut)
def list_notes(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    store: NotesStore = Depends(get_notes_store),
) -> NotesPageOut:
    page_num, page_size = parse_page_params(page, limit, _max_limit())
    result = store.list_notes(user_id, limit=page_size, page=page_num)
    return NotesPageOut(
        notes=[_note_out(n) for n in result.notes],
        total_pages=result.total_pages,
        page=page_num,
    )


@router.post("")
async def create_note(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    store: NotesStore = Depends(get_notes_store),
):
    result = validate_note_create(await _read_note_fields(request))
    if not result.ok:
        return JSONResponse({"success": False, "errors": result.errors}, status_code=400)

    try:
        note = await run_in_threadpool(
            store.create_note,
            user_id=user_id,
            title=result.note.title,
            description=result.note.description,
        )
    except SQLAlchemyError:
        logger.exception("Failed to create note for user %s", user_id)
        return JSONResponse({"error": "Failed to create note"}, status_code=500)

    logger.info("note %s created by user %s", note.id, user_id)
    return {"success": True, "note": _note_out(note)}


@router.api_route(
    "",
    methods=["PUT", "PATCH", "DELETE"],
    dependencies=[Depends(get_current_user_id)],
    include_in_schema=False,
)
def notes_method_not_allowed() -> JSONResponse:
    return JSONResponse({"error": "Method not allowed"}, status_code=405)


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    note = store.get_note(note_id)
    if note is None or note.user_id != user_id:
        raise HTTPException(status_code=404, detail="Note not found")
    return _note_out(note)


@router.patch("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: int,
    payload: NoteUpdate,
    user_id: int = Depends(get_current_user_id),
    store: NotesStore = Depends(get_notes_store),
) -> NoteOut:
    updated = store.update_note(note_id, user_id, **payload.model_dump(exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return _note_out(updated)


@router.delete("/{note_id}", status_code=204)
def delete_note(
    note_id: int,
    user_id: int = Depends(get_current_user_id),
    store: NotesStore = Depends(get_notes_store),
) -> None:
    if not store.delete_note(note_id, user_id):
        raise HTTPException(status_code=404, detail="Note not found")
    logger.info("note %s deleted by user %s", note_id, user_id)
    return None
