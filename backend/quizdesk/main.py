"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from quizdesk import __version__
from quizdesk.api import (
    attempts_router,
    health_router,
    quizzes_router,
    reports_router,
    users_router,
)
from quizdesk.api.errors import register_exception_handlers
from quizdesk.config import settings
from quizdesk.services.session_store import SessionStore

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s  %(name)-25s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("quizdesk %s starting (env=%s)", __version__, settings.ENV)
    yield
    logger.info("quizdesk shut down with %d live attempts in memory", len(app.state.session_store))


app = FastAPI(
    title="quizdesk API",
    description="Timed multiple-choice quiz attempts",
    version=__version__,
    lifespan=lifespan,
)
app.state.session_store = SessionStore(retention_seconds=settings.SESSION_RETENTION_SECONDS)

# ── Middleware ─────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

register_exception_handlers(app)

# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(health_router, tags=["Health"])
app.include_router(users_router, prefix="/api/users", tags=["Users"])
app.include_router(quizzes_router, prefix="/api/quizzes", tags=["Quizzes"])
app.include_router(attempts_router, prefix="/api/attempts", tags=["Attempts"])
app.include_router(reports_router, prefix="/api/reports", tags=["Reports"])


@app.get("/")
async def root():
    return {
        "name": "quizdesk API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run("quizdesk.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
