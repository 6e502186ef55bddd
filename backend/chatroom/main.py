"""Chatroom API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers registered from api/error_handlers.py
    - CORS configured from settings (not hardcoded)
    - Logging and database initialized on startup via lifespan context manager

Serve with any ASGI server, for example::

    uvicorn chatroom.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import chatroom.infrastructure.database as database
from chatroom.api.error_handlers import register_error_handlers
from chatroom.api.routes import health, messages, users
from chatroom.config import get_settings
from chatroom.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Chatroom API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Chatroom API shutting down")


app = FastAPI(title="Chatroom API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(messages.router)

register_error_handlers(app)
