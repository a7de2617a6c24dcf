"""Timed attempt state machine.

Lifecycle::

    ACTIVE ──(all questions answered / end_now)──▶ COMPLETED
       │
       └────(now >= started_at + time limit)─────▶ TIMED_OUT

Both end states are terminal.  There is no background timer: every call that
takes ``now`` re-validates the deadline against the caller's clock, so a
session that nobody touches simply times out on its next access.

A session belongs to one examinee and is not thread-safe; callers serialize
access to a given instance.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping, Sequence

from quizdesk.core.exceptions import (
    AlreadyAnswered,
    InvalidOption,
    SessionTerminal,
    TimeExpired,
    UnknownQuestion,
)
from quizdesk.core.models import OPTION_LABELS, QuestionSpec, SessionStatus

logger = logging.getLogger(__name__)


class AttemptSession:
    """One examinee's pass through a fixed, ordered selection of questions."""

    def __init__(
        self,
        user_id: int,
        quiz_id: int,
        questions: Sequence[QuestionSpec],
        time_limit_seconds: int,
        started_at: datetime,
    ) -> None:
        if not questions:
            raise ValueError("An attempt needs at least one question")
        if time_limit_seconds <= 0:
            raise ValueError(f"Time limit must be positive, got {time_limit_seconds}")
        by_id = {q.id: q for q in questions}
        if len(by_id) != len(questions):
            raise ValueError("Selected questions contain duplicate ids")

        self._user_id = user_id
        self._quiz_id = quiz_id
        self._questions: tuple[QuestionSpec, ...] = tuple(questions)
        self._by_id = by_id
        self._time_limit_seconds = time_limit_seconds
        self._started_at = started_at
        self._ended_at: datetime | None = None
        self._last_seen = started_at
        self._status = SessionStatus.ACTIVE
        self._cursor = 0
        self._answers: dict[int, str] = {}

    @classmethod
    def start(
        cls,
        user_id: int,
        quiz_id: int,
        questions: Sequence[QuestionSpec],
        time_limit_seconds: int,
        now: datetime,
    ) -> "AttemptSession":
        session = cls(user_id, quiz_id, questions, time_limit_seconds, started_at=now)
        logger.info(
            "Attempt started: user=%s quiz=%s questions=%d limit=%ds",
            user_id, quiz_id, len(session._questions), time_limit_seconds,
        )
        return session

    # ── read-only state ──────────────────────────────────────────────────

    @property
    def user_id(self) -> int:
        return self._user_id

    @property
    def quiz_id(self) -> int:
        return self._quiz_id

    @property
    def questions(self) -> tuple[QuestionSpec, ...]:
        return self._questions

    @property
    def answers(self) -> Mapping[int, str]:
        return MappingProxyType(self._answers)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status is not SessionStatus.ACTIVE

    @property
    def time_limit_seconds(self) -> int:
        return self._time_limit_seconds

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def ended_at(self) -> datetime | None:
        return self._ended_at

    @property
    def deadline(self) -> datetime:
        return self._started_at + timedelta(seconds=self._time_limit_seconds)

    @property
    def last_observed(self) -> datetime:
        """Latest ``now`` this session has been shown."""
        return self._last_seen

    def remaining_seconds(self, now: datetime) -> int:
        """Whole seconds left before the deadline (rounded up), never negative.

        Purely arithmetic: it ignores the status and never changes state.
        """
        remaining = (self.deadline - now).total_seconds()
        return max(0, math.ceil(remaining))

    # ── transitions ──────────────────────────────────────────────────────

    def check_deadline(self, now: datetime) -> bool:
        """Apply the lazy deadline check; return True if the session has timed out."""
        if self.is_terminal:
            return self._status is SessionStatus.TIMED_OUT
        self._observe(now)
        return self._expire_if_due(now)

    def current_question(self, now: datetime) -> QuestionSpec:
        """Return the first unanswered question.

        Raises:
            TimeExpired: the time budget ran out (now or earlier).
            SessionTerminal: the attempt was already completed.
        """
        self._require_active(now)
        return self._questions[self._cursor]

    def submit_answer(self, question_id: int, chosen_option: str, now: datetime) -> None:
        """Record the examinee's choice for *question_id*; the first answer is final."""
        self._require_active(now)

        label = chosen_option.strip().upper() if isinstance(chosen_option, str) else ""
        if label not in OPTION_LABELS:
            raise InvalidOption(
                f"Option must be one of {', '.join(OPTION_LABELS)}, got {chosen_option!r}",
                option=chosen_option,
            )
        if question_id not in self._by_id:
            raise UnknownQuestion(
                f"Question {question_id} is not part of this attempt",
                question_id=question_id,
            )
        if question_id in self._answers:
            raise AlreadyAnswered(
                f"Question {question_id} has already been answered",
                question_id=question_id,
            )

        self._answers[question_id] = label
        self._advance_cursor()
        logger.debug(
            "Answer recorded: user=%s quiz=%s question=%s (%d/%d)",
            self._user_id, self._quiz_id, question_id,
            len(self._answers), len(self._questions),
        )

        if len(self._answers) == len(self._questions):
            self._finish(SessionStatus.COMPLETED, now)

    def end_now(self, now: datetime) -> SessionStatus:
        """Examinee-initiated early submission.

        Returns the final status: COMPLETED normally, TIMED_OUT when the
        deadline had already passed by *now*.
        """
        self._raise_if_terminal()
        self._observe(now)
        if not self._expire_if_due(now):
            self._finish(SessionStatus.COMPLETED, now)
        return self._status

    # ── internals ────────────────────────────────────────────────────────

    def _observe(self, now: datetime) -> None:
        if now < self._last_seen:
            raise ValueError(
                f"Clock went backwards: {now.isoformat()} < {self._last_seen.isoformat()}"
            )
        self._last_seen = now

    def _raise_if_terminal(self) -> None:
        if self._status is SessionStatus.TIMED_OUT:
            raise TimeExpired("The time limit for this attempt has expired")
        if self._status is SessionStatus.COMPLETED:
            raise SessionTerminal("This attempt is already over")

    def _require_active(self, now: datetime) -> None:
        self._raise_if_terminal()
        self._observe(now)
        if self._expire_if_due(now):
            raise TimeExpired("The time limit for this attempt has expired")

    def _expire_if_due(self, now: datetime) -> bool:
        if self._status is SessionStatus.ACTIVE and now >= self.deadline:
            # The attempt ended at the deadline, not when we noticed it.
            self._finish(SessionStatus.TIMED_OUT, self.deadline)
        return self._status is SessionStatus.TIMED_OUT

    def _advance_cursor(self) -> None:
        while (
            self._cursor < len(self._questions)
            and self._questions[self._cursor].id in self._answers
        ):
            self._cursor += 1

    def _finish(self, status: SessionStatus, ended_at: datetime) -> None:
        self._status = status
        self._ended_at = ended_at
        logger.info(
            "Attempt %s: user=%s quiz=%s answered=%d/%d",
            status.value, self._user_id, self._quiz_id,
            len(self._answers), len(self._questions),
        )
