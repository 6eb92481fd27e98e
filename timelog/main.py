"""
TimeLog – Backend API
Start with: uvicorn timelog.main:create_app --factory --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timelog import __version__
from timelog.config import Settings
from timelog.db import create_db_engine
from timelog.pending import PendingSessions
from timelog.routers import sessions, timer
from timelog.store import SessionStore
from timelog.timer import TimerEngine

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, clock_fn=None) -> FastAPI:
    """Build the app. Logging and the store are set up on startup; the store closes on shutdown."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        engine = create_db_engine(settings.database_url)
        app.state.store = SessionStore(engine)
        logger.info("Session store ready at %s", settings.database_url)
        yield
        engine.dispose()

    app = FastAPI(
        title="TimeLog API",
        description="Single-timer personal time tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.timer = TimerEngine(clock_fn)
    app.state.pending = PendingSessions()

    # Allow the frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        """Check that the API is running. Frontend can call this first."""
        return {"status": "ok", "message": "TimeLog API is running"}

    @app.get("/")
    def root():
        return {"app": "TimeLog", "docs": "/docs"}

    app.include_router(timer.router)
    app.include_router(sessions.router)
    return app
