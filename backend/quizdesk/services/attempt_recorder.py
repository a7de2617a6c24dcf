"""Persistence of scored attempts.

An attempt row and all of its answer rows are written in one transaction:
either everything is committed or the session is rolled back and
``StorageError`` is raised.  There is no automatic retry; duplicate
protection comes from the optional unique ``attempt_token``.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizdesk.core.exceptions import StorageError
from quizdesk.core.models import AttemptResult
from quizdesk.db.models import Attempt, AttemptAnswer

logger = logging.getLogger(__name__)


class AttemptRecorder:
    def __init__(self, db: Session) -> None:
        self.db = db

    def persist(self, result: AttemptResult, attempt_token: str | None = None) -> int:
        """Write *result* and return the new attempt id.

        When *attempt_token* was already used, the existing attempt id is
        returned and nothing is written.
        """
        try:
            if attempt_token is not None:
                existing = self.db.scalars(
                    select(Attempt.id).where(Attempt.attempt_token == attempt_token)
                ).first()
                if existing is not None:
                    logger.info("Attempt token %s already persisted as #%s", attempt_token, existing)
                    return existing

            attempt = Attempt(
                attempt_token=attempt_token,
                user_id=result.user_id,
                quiz_id=result.quiz_id,
                status=result.status,
                score=result.score,
                total=result.total,
                percentage=result.percentage,
                started_at=result.started_at,
                ended_at=result.ended_at,
                duration_seconds=result.duration_seconds,
                answers=[
                    AttemptAnswer(
                        question_id=record.question_id,
                        position=position,
                        chosen_option=record.chosen_option,
                        is_correct=record.is_correct,
                        points_awarded=record.points_awarded,
                    )
                    for position, record in enumerate(result.answers)
                ],
            )
            self.db.add(attempt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(
                "Failed to persist attempt for user=%s quiz=%s: %s",
                result.user_id, result.quiz_id, exc,
            )
            raise StorageError("Could not save the attempt; nothing was recorded") from exc

        logger.info(
            "Persisted attempt #%s: user=%s quiz=%s score=%d/%d (%d correct)",
            attempt.id, result.user_id, result.quiz_id, result.score, result.total,
            result.correct_count,
        )
        return attempt.id
