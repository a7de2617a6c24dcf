"""FastAPI dependencies shared across routes."""

import random
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from quizdesk.core.security import decode_access_token
from quizdesk.db.models import RoleEnum, User
from quizdesk.db.session import get_db
from quizdesk.services.session_store import SessionStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """Wall clock used for every time-sensitive attempt call (overridden in tests)."""
    return _utcnow


def get_rng() -> random.Random:
    """Fresh random source per request, so attempts never share selection state."""
    return random.Random()


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Decode JWT and return the authenticated user, or 401."""
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload"
        )
    user = db.get(User, int(subject))
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Raise 403 unless the caller is an admin."""
    if current_user.role != RoleEnum.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
        )
    return current_user
