"""Read-through access to the quiz / question catalog."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from quizdesk.core.exceptions import NotFound
from quizdesk.core.models import QuestionSpec, Quiz
from quizdesk.db import models


logger = logging.getLogger(__name__)


class QuestionBank:
    """Loads quizzes and their question pools as immutable engine values.

    Holds only the caller's DB session; it never writes.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def load_quiz(self, quiz_id: int) -> Quiz:
        """Return the active quiz with *quiz_id*, or raise ``NotFound``."""
        row = self.db.scalars(
            select(models.Quiz).where(
                models.Quiz.id == quiz_id, models.Quiz.active.is_(True)
            )
        ).first()
        if row is None:
            raise NotFound(f"No active quiz with id {quiz_id}", quiz_id=quiz_id)
        return row.to_spec()

    def load_questions(self, quiz_id: int) -> list[QuestionSpec]:
        """Return every question of the quiz ordered by id, or raise ``NotFound``."""
        rows = self.db.scalars(
            select(models.Question)
            .where(models.Question.quiz_id == quiz_id)
            .order_by(models.Question.id)
        ).all()
        if not rows:
            raise NotFound(f"Quiz {quiz_id} has no questions", quiz_id=quiz_id)
        logger.debug("Loaded %d questions for quiz %s", len(rows), quiz_id)
        return [row.to_spec() for row in rows]

    def list_quizzes(self, include_inactive: bool = False) -> list[Quiz]:
        stmt = select(models.Quiz).order_by(models.Quiz.id)
        if not include_inactive:
            stmt = stmt.where(models.Quiz.active.is_(True))
        return [row.to_spec() for row in self.db.scalars(stmt).all()]
