# src/todolist/api/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todolist.config import Settings, load_settings
from todolist.logging import configure_logging, get_logger
from todolist.storage import SQLiteDB, apply_migrations

from .errors import register_exception_handlers
from .routes import router

_LOG = get_logger(__name__)

API_DESCRIPTION = (
    "API RESTful para gerenciamento de tarefas: criar, listar, filtrar, "
    "editar e excluir tarefas."
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Runs DB migrations once at startup and publishes the SQLiteDB on
    app.state for request dependencies.
    """
    settings: Settings = app.state.settings

    db = SQLiteDB(settings.db_path)
    conn = db.connect()
    try:
        apply_migrations(conn, settings.migrations_dir)
    finally:
        conn.close()

    app.state.db = db
    _LOG.info("Startup complete. DB at %s", settings.db_path)

    try:
        yield
    finally:
        _LOG.info("Shutdown complete.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the FastAPI app from explicit settings (env-derived by default).
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="API de Gerenciamento de Tarefas - To-Do List",
        description=API_DESCRIPTION,
        version="1.0.0",
        license_info={"name": "Apache 2.0", "url": "https://www.apache.org/licenses/LICENSE-2.0.html"},
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors.allow_origins),
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=list(settings.cors.allow_methods),
        allow_headers=list(settings.cors.allow_headers),
        expose_headers=["Authorization"],
    )

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()
