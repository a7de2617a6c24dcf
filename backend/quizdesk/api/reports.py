"""Report export routes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from quizdesk.api.deps import get_current_user
from quizdesk.config import settings
from quizdesk.db.models import Attempt, RoleEnum, User
from quizdesk.db.session import get_db
from quizdesk.services.report_export import attempts_to_csv

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/attempts.csv")
def export_attempts(
    quiz_id: int | None = None,
    user_id: int | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download finalized attempts as CSV.

    Examinees always get their own attempts; admins see everyone's and may
    filter by ``user_id``.
    """
    stmt = (
        select(Attempt)
        .options(selectinload(Attempt.user), selectinload(Attempt.quiz))
        .order_by(Attempt.id)
        .limit(settings.REPORT_MAX_ROWS)
    )
    if current_user.role != RoleEnum.ADMIN:
        stmt = stmt.where(Attempt.user_id == current_user.id)
    elif user_id is not None:
        stmt = stmt.where(Attempt.user_id == user_id)
    if quiz_id is not None:
        stmt = stmt.where(Attempt.quiz_id == quiz_id)

    attempts = db.scalars(stmt).all()
    logger.info("Exporting %d attempts for %s", len(attempts), current_user.username)
    return Response(
        content=attempts_to_csv(attempts),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="attempts.csv"'},
    )
