"""Identity provider: turns username + password into a user id."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from quizdesk.core.exceptions import InvalidCredentials
from quizdesk.core.security import verify_password
from quizdesk.db.models import User

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> int:
    """Return the id of the active user matching the credentials.

    Raises:
        InvalidCredentials: unknown user, wrong password or deactivated account.
    """
    user = db.scalars(select(User).where(User.username == username)).first()
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %r", username)
        raise InvalidCredentials("Invalid username or password")
    if not user.is_active:
        raise InvalidCredentials("Account deactivated")
    return user.id
