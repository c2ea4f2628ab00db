"""RentMap API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RentMapError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
    - Stale assistant contexts are swept hourly while the app runs

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers: RentMapError (domain), RequestValidationError
      (Pydantic), Exception (catch-all), registered from api/error_handlers.py
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentmap.api.error_handlers import register_error_handlers
from rentmap.api.routes import (
    account, ai, health, landlord, liked_properties, listings, messaging,
    ocr, properties, users, waitlist,
)
from rentmap.config import get_settings
from rentmap.core.conversation_context import context_store
from rentmap.infrastructure.database import close_db, init_db
from rentmap.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

CONTEXT_SWEEP_INTERVAL_SECONDS = 3600


async def _sweep_assistant_contexts() -> None:
    while True:
        await asyncio.sleep(CONTEXT_SWEEP_INTERVAL_SECONDS)
        removed = context_store.cleanup_old()
        if removed:
            logger.info(f"Dropped {removed} idle assistant conversations")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    sweeper = asyncio.create_task(_sweep_assistant_contexts())
    logger.info("RentMap API started")
    yield
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    await close_db()
    logger.info("RentMap API shutting down")


app = FastAPI(title="RentMap API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Liked-property routes first: /properties/like must not be shadowed
app.include_router(health.router)
app.include_router(liked_properties.router)
app.include_router(properties.router)
app.include_router(listings.router)
app.include_router(landlord.router)
app.include_router(users.router)
app.include_router(account.router)
app.include_router(messaging.router)
app.include_router(ai.router)
app.include_router(ocr.router)
app.include_router(waitlist.router)

register_error_handlers(app)
