"""cyclekeeper API: FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import Settings, get_settings
from src.dependencies import Session
from src.routers import cycles, data, health, insights, preferences, symptoms, users
from src.tracker.config_loader import get_tracker_config, reload_tracker_config
from src.tracker.errors import PersistenceError, UserIndexError
from src.tracker.persistence import (
    FileKeyValueStore,
    KeyValueStore,
    PreferencesRepository,
    UserRepository,
)
from src.tracker.reminders import InMemoryNotificationSink, ReminderScheduler
from src.tracker.store import ChangeEvent, CycleStore

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cyclekeeper")


# ---------- Session ----------

def open_session(settings: Settings, kv: KeyValueStore | None = None) -> Session:
    """Open the store and wire reminders to its change events."""
    config = (
        reload_tracker_config(settings.tracker_config_path)
        if settings.tracker_config_path
        else get_tracker_config()
    )
    kv = kv or FileKeyValueStore(settings.data_dir)
    store = CycleStore.open(UserRepository(kv, settings.users_key), config)
    prefs_repo = PreferencesRepository(kv, settings.preferences_key)
    sink = InMemoryNotificationSink()
    scheduler = ReminderScheduler(sink, config)

    def _reschedule(event: ChangeEvent) -> None:
        scheduler.schedule_all(store.users, prefs_repo.load())

    store.subscribe(_reschedule)

    prefs = prefs_repo.load()
    if not prefs.has_launched_before:
        prefs_repo.save(prefs.model_copy(update={"has_launched_before": True}))
    scheduler.schedule_all(store.users, prefs)
    return Session(store=store, preferences=prefs_repo, scheduler=scheduler, sink=sink)


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.setLevel(settings.log_level)
    logger.info(
        "Starting cyclekeeper API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if getattr(app.state, "session", None) is None:
        app.state.session = open_session(settings)
    yield
    if app.state.session.store.dirty:
        logger.warning("Shutting down with unsaved changes; retrying save")
        try:
            app.state.session.store.flush()
        except PersistenceError:
            logger.error("Final save failed; unsaved changes are lost")
    logger.info("cyclekeeper API shut down")


# ---------- Error handlers ----------

async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"detail": f"Change kept in memory but not saved: {exc}"},
    )


async def user_index_error_handler(request: Request, exc: UserIndexError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# ---------- App factory ----------

def create_app(session: Session | None = None) -> FastAPI:
    """Build the app.  Pass ``session`` to skip opening on-disk storage."""
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Local menstrual cycle tracking: records, predictions and reminders.",
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(UserIndexError, user_index_error_handler)

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(users.router, prefix=v1_prefix)
    app.include_router(cycles.router, prefix=v1_prefix)
    app.include_router(symptoms.router, prefix=v1_prefix)
    app.include_router(insights.router, prefix=v1_prefix)
    app.include_router(data.router, prefix=v1_prefix)
    app.include_router(preferences.router, prefix=v1_prefix)

    return app


app = create_app()
