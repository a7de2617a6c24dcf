"""Liveness probe."""

from fastapi import APIRouter, Request

from quizdesk import __version__

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    store = request.app.state.session_store
    return {"status": "healthy", "version": __version__, "live_attempts": len(store)}
