"""
Legal Compass HTTP server.

    uvicorn legal_compass.server.main:app --port 8000
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import get_settings
from .api import router
from .dependencies import get_engine, startup_load

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Seconds between sweeps for idle conversation sessions
SESSION_SWEEP_INTERVAL = 3600


async def sweep_sessions(interval: float = SESSION_SWEEP_INTERVAL):
    """Periodically drop sessions idle longer than session_max_age_hours."""
    while True:
        await asyncio.sleep(interval)
        removed = await asyncio.to_thread(get_engine().cleanup_sessions)
        if removed:
            logger.info(f"[SESSION] Swept {removed} idle sessions")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load the FAISS index, embedding model and LLM client before serving
    if app.state.preload:
        startup_load()

    sweeper = asyncio.create_task(sweep_sessions())
    yield
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


def create_app(preload: bool = True) -> FastAPI:
    """Build the FastAPI app; preload=False defers engine loading to the first request."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Answers questions about Indian law (BNS, IPC and Supreme Court judgments). "
            "Follow-up questions in a session are rewritten using recent history; "
            "greetings are answered without retrieval; answers can carry arguments "
            "for and against and a neutral analysis."
        ),
        lifespan=lifespan,
    )
    app.state.preload = preload

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.include_router(router, tags=["Legal Compass"])

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "query": "/query",
        }

    return app


app = create_app()
