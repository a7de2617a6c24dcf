"""User registration, login, and profile routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from quizdesk.api.deps import get_current_user
from quizdesk.core.security import create_access_token, hash_password
from quizdesk.db.models import RoleEnum, User
from quizdesk.db.session import get_db
from quizdesk.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from quizdesk.services.identity import authenticate

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, user.role.value)
    return AuthResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    """Create a new examinee account.

    Admin accounts are provisioned out of band (see seed_db.py).
    """
    existing = db.scalars(select(User).where(User.username == body.username)).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already registered",
        )

    try:
        hashed = hash_password(body.password)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    user = User(
        username=body.username,
        hashed_password=hashed,
        full_name=body.full_name,
        role=RoleEnum.STUDENT,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.username, user.role.value)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(body: UserLogin, db: Session = Depends(get_db)):
    """Authenticate and return a JWT access token + user profile."""
    user_id = authenticate(db, body.username, body.password)
    return _auth_response(db.get(User, user_id))


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user
