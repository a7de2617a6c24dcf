"""Attempt schemas."""

from datetime import datetime

from pydantic import BaseModel

from quizdesk.core.models import SessionStatus
from quizdesk.schemas.quiz import QuestionRead


class AttemptStart(BaseModel):
    """POST /api/attempts/start"""

    quiz_id: int


class AnswerSubmit(BaseModel):
    """POST /api/attempts/sessions/{token}/answer"""

    question_id: int
    option: str


class AttemptStateRead(BaseModel):
    """Live view of an attempt in progress (or just finished)."""

    token: str
    quiz_id: int
    quiz_title: str | None = None
    status: SessionStatus
    question_number: int
    total_questions: int
    answered_count: int
    remaining_seconds: int
    started_at: datetime
    current_question: QuestionRead | None = None
    attempt_id: int | None = None


class AnswerRecordRead(BaseModel):
    """Per-question outcome in a scored attempt."""

    question_id: int
    chosen_option: str | None = None
    correct_option: str
    is_correct: bool
    points: int
    points_awarded: int
    question_text: str | None = None

    model_config = {"from_attributes": True}


class AttemptResultRead(BaseModel):
    """Scored attempt; serialized shape consumed by reports."""

    attempt_id: int | None = None
    user_id: int
    quiz_id: int
    status: SessionStatus
    score: int
    total: int
    percentage: float
    started_at: datetime
    ended_at: datetime
    duration_seconds: int
    answers: list[AnswerRecordRead] = []

    model_config = {"from_attributes": True}


class AttemptSummaryRead(BaseModel):
    """Row in the attempt history list."""

    id: int
    quiz_id: int
    quiz_title: str
    status: SessionStatus
    score: int
    total: int
    percentage: float
    started_at: datetime
    ended_at: datetime
    duration_seconds: int
