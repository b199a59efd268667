import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from notes_api.api import auth, notes
from notes_api.storage.db import init_db, make_engine, make_session_factory
from notes_api.storage.notes_store import NotesStore
from notes_api.storage.users_store import UsersStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = make_engine(app.state.database_url)
    init_db(engine)
    session_factory = make_session_factory(engine)
    app.state.notes_store = NotesStore(session_factory)
    app.state.users_store = UsersStore(session_factory)
    logger.info("storage ready at %s", engine.url.render_as_string(hide_password=True))
    yield
    engine.dispose()


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal storage error"}, status_code=500)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    app = FastAPI(title="Paged Notes API", lifespan=lifespan)
    # None -> DATABASE_URL / APP_DATA_DIR, resolved at startup
    app.state.database_url = database_url
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.include_router(auth.router)
    app.include_router(notes.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
