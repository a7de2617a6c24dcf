"""Value types shared by the attempt engine.

These are plain frozen dataclasses, independent of the ORM: the question bank
converts rows into them, the engine only ever sees these.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

OPTION_LABELS: tuple[str, ...] = ("A", "B", "C", "D")


class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    TIMED_OUT = "timed_out"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Quiz:
    """Quiz metadata: how many questions an attempt draws and how long it lasts."""

    id: int
    title: str
    question_count: int
    time_limit_seconds: int
    active: bool = True


@dataclass(frozen=True, slots=True)
class QuestionSpec:
    """Multiple-choice question with exactly four options labelled A–D."""

    id: int
    quiz_id: int
    text: str
    options: tuple[str, str, str, str]
    correct_option: str
    points: int = 1

    def __post_init__(self) -> None:
        if len(self.options) != len(OPTION_LABELS):
            raise ValueError(f"Question {self.id} must have exactly 4 options")
        if self.correct_option not in OPTION_LABELS:
            raise ValueError(
                f"Question {self.id} has invalid correct option {self.correct_option!r}"
            )
        if self.points < 1:
            raise ValueError(f"Question {self.id} must be worth at least 1 point")


@dataclass(frozen=True, slots=True)
class AnswerRecord:
    """Outcome for one question of a finished attempt.

    ``chosen_option`` is ``None`` when the examinee never answered.
    """

    question_id: int
    chosen_option: str | None
    correct_option: str
    is_correct: bool
    points: int

    @property
    def answered(self) -> bool:
        return self.chosen_option is not None

    @property
    def points_awarded(self) -> int:
        return self.points if self.is_correct else 0


@dataclass(frozen=True, slots=True)
class AttemptResult:
    """Scored, immutable summary of a finished attempt."""

    user_id: int
    quiz_id: int
    status: SessionStatus
    score: int
    total: int
    started_at: datetime
    ended_at: datetime
    duration_seconds: int
    answers: tuple[AnswerRecord, ...]

    @property
    def percentage(self) -> float:
        return round(self.score / self.total * 100, 2) if self.total else 0.0

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)
