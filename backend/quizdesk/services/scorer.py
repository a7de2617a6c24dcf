"""Scoring of finished attempts.

MCQ grading is an exact letter match against the stored correct option.
Unanswered questions score zero but still count towards the total.
"""

from __future__ import annotations

from quizdesk.core.exceptions import NotTerminal
from quizdesk.core.models import AnswerRecord, AttemptResult
from quizdesk.services.attempt_session import AttemptSession


def score(session: AttemptSession) -> AttemptResult:
    """Build the immutable result of a terminal session.

    Pure function of the session's state: calling it twice yields equal
    results.

    Raises:
        NotTerminal: the session is still active.
    """
    if not session.is_terminal or session.ended_at is None:
        raise NotTerminal("Cannot score an attempt that is still in progress")

    answers = session.answers
    records: list[AnswerRecord] = []
    earned = 0
    possible = 0
    for question in session.questions:
        chosen = answers.get(question.id)
        is_correct = chosen is not None and chosen == question.correct_option
        possible += question.points
        if is_correct:
            earned += question.points
        records.append(
            AnswerRecord(
                question_id=question.id,
                chosen_option=chosen,
                correct_option=question.correct_option,
                is_correct=is_correct,
                points=question.points,
            )
        )

    duration = int((session.ended_at - session.started_at).total_seconds())
    return AttemptResult(
        user_id=session.user_id,
        quiz_id=session.quiz_id,
        status=session.status,
        score=earned,
        total=possible,
        started_at=session.started_at,
        ended_at=session.ended_at,
        duration_seconds=duration,
        answers=tuple(records),
    )
