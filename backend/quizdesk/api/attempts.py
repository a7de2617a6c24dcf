"""Attempt routes: drive a timed attempt from start to persisted result.

Flow:
  1. POST /api/attempts/start                  → select questions, start the clock
  2. GET  /api/attempts/sessions/{token}        → current question + remaining time
  3. POST /api/attempts/sessions/{token}/answer → record one answer (first answer is final)
  4. POST /api/attempts/sessions/{token}/end    → finish early
  5. POST /api/attempts/sessions/{token}/submit → score + persist (once per attempt)
  6. GET  /api/attempts/                        → own attempt history
  7. GET  /api/attempts/{attempt_id}            → stored attempt with per-question outcome

Time is never tracked in the background; every call reads the injected clock
and the session times out lazily when its deadline has passed.
"""

import logging
import random
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from quizdesk.api.deps import (
    Clock,
    get_clock,
    get_current_user,
    get_rng,
    get_session_store,
)
from quizdesk.core.exceptions import NotFound
from quizdesk.core.models import OPTION_LABELS, AttemptResult, QuestionSpec
from quizdesk.db.models import Attempt, RoleEnum, User
from quizdesk.db.session import get_db
from quizdesk.schemas.attempt import (
    AnswerRecordRead,
    AnswerSubmit,
    AttemptResultRead,
    AttemptStart,
    AttemptStateRead,
    AttemptSummaryRead,
)
from quizdesk.schemas.quiz import QuestionRead
from quizdesk.services.attempt_recorder import AttemptRecorder
from quizdesk.services.attempt_session import AttemptSession
from quizdesk.services.question_bank import QuestionBank
from quizdesk.services.scorer import score
from quizdesk.services.selector import select as select_questions
from quizdesk.services.session_store import LiveAttempt, SessionStore

logger = logging.getLogger(__name__)
router = APIRouter()


# ── Helpers ───────────────────────────────────────────────────────────────────


def _question_read(question: QuestionSpec) -> QuestionRead:
    return QuestionRead(
        id=question.id,
        text=question.text,
        options=dict(zip(OPTION_LABELS, question.options)),
        points=question.points,
    )


def _session_now(live: LiveAttempt, clock: Clock) -> datetime:
    """Wall-clock time, never earlier than what this attempt has already seen."""
    return max(clock(), live.session.last_observed)


def _finalize(live: LiveAttempt, db: Session, now: datetime) -> None:
    """Score and persist a live attempt once; later calls are no-ops."""
    if live.result is not None:
        return
    live.session.check_deadline(now)
    result = score(live.session)
    live.attempt_id = AttemptRecorder(db).persist(result, attempt_token=live.token)
    live.result = result


def _state_read(live: LiveAttempt, now: datetime) -> AttemptStateRead:
    session = live.session
    session.check_deadline(now)
    current = None
    remaining = 0
    if not session.is_terminal:
        current = _question_read(session.current_question(now))
        remaining = session.remaining_seconds(now)
    total = len(session.questions)
    return AttemptStateRead(
        token=live.token,
        quiz_id=session.quiz_id,
        quiz_title=live.quiz_title,
        status=session.status,
        question_number=min(session.cursor + 1, total),
        total_questions=total,
        answered_count=len(session.answers),
        remaining_seconds=remaining,
        started_at=session.started_at,
        current_question=current,
        attempt_id=live.attempt_id,
    )


def _result_read(
    result: AttemptResult,
    attempt_id: int | None,
    question_texts: dict[int, str],
) -> AttemptResultRead:
    read = AttemptResultRead.model_validate(result)
    for answer in read.answers:
        answer.question_text = question_texts.get(answer.question_id)
    read.attempt_id = attempt_id
    return read


# ── Live attempt endpoints ────────────────────────────────────────────────────


@router.post("/start", response_model=AttemptStateRead, status_code=status.HTTP_201_CREATED)
def start_attempt(
    body: AttemptStart,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
):
    """Select a fresh random set of questions and start the countdown."""
    now = clock()

    def finalize_stale(live: LiveAttempt) -> None:
        _finalize(live, db, max(now, live.session.last_observed))

    store.purge(now, finalize=finalize_stale)

    bank = QuestionBank(db)
    quiz = bank.load_quiz(body.quiz_id)
    pool = bank.load_questions(quiz.id)
    picked = select_questions(pool, quiz.question_count, rng=rng)

    session = AttemptSession.start(
        user_id=current_user.id,
        quiz_id=quiz.id,
        questions=picked,
        time_limit_seconds=quiz.time_limit_seconds,
        now=now,
    )
    live = store.add(session, quiz_title=quiz.title)
    return _state_read(live, now)


@router.get("/sessions/{token}", response_model=AttemptStateRead)
def get_attempt_state(
    token: str,
    current_user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    """Current question and remaining time; reports the end state once over."""
    live = store.get(token, current_user.id)
    with live.lock:
        return _state_read(live, _session_now(live, clock))


@router.post("/sessions/{token}/answer", response_model=AttemptStateRead)
def answer_question(
    token: str,
    body: AnswerSubmit,
    current_user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    """Record an answer and move on to the next unanswered question."""
    live = store.get(token, current_user.id)
    with live.lock:
        now = _session_now(live, clock)
        live.session.submit_answer(body.question_id, body.option, now)
        return _state_read(live, now)


@router.post("/sessions/{token}/end", response_model=AttemptStateRead)
def end_attempt(
    token: str,
    current_user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    """Finish the attempt early; unanswered questions score zero."""
    live = store.get(token, current_user.id)
    with live.lock:
        now = _session_now(live, clock)
        live.session.end_now(now)
        return _state_read(live, now)


@router.post("/sessions/{token}/submit", response_model=AttemptResultRead)
def submit_attempt(
    token: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    """Score a finished attempt and persist it.

    The attempt is written at most once; calling this again returns the
    stored result.
    """
    live = store.get(token, current_user.id)
    with live.lock:
        _finalize(live, db, _session_now(live, clock))
        texts = {q.id: q.text for q in live.session.questions}
        return _result_read(live.result, live.attempt_id, texts)


# ── Stored attempts ───────────────────────────────────────────────────────────


@router.get("/", response_model=list[AttemptSummaryRead])
def list_attempts(
    skip: int = 0,
    limit: int = 20,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's past attempts, newest first."""
    rows = db.scalars(
        select(Attempt)
        .where(Attempt.user_id == current_user.id)
        .order_by(Attempt.ended_at.desc(), Attempt.id.desc())
        .offset(skip)
        .limit(limit)
    ).all()
    return [
        AttemptSummaryRead(
            id=a.id,
            quiz_id=a.quiz_id,
            quiz_title=a.quiz.title,
            status=a.status,
            score=a.score,
            total=a.total,
            percentage=a.percentage,
            started_at=a.started_at,
            ended_at=a.ended_at,
            duration_seconds=a.duration_seconds,
        )
        for a in rows
    ]


@router.get("/{attempt_id}", response_model=AttemptResultRead)
def get_attempt(
    attempt_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stored attempt with per-question correctness and the correct options."""
    attempt = db.get(Attempt, attempt_id)
    if attempt is None or (
        attempt.user_id != current_user.id and current_user.role != RoleEnum.ADMIN
    ):
        raise NotFound(f"Attempt {attempt_id} not found", attempt_id=attempt_id)

    answers = [
        AnswerRecordRead(
            question_id=aa.question_id,
            chosen_option=aa.chosen_option,
            correct_option=aa.question.correct_option,
            is_correct=aa.is_correct,
            points=aa.question.points,
            points_awarded=aa.points_awarded,
            question_text=aa.question.text,
        )
        for aa in attempt.answers
    ]
    return AttemptResultRead(
        attempt_id=attempt.id,
        user_id=attempt.user_id,
        quiz_id=attempt.quiz_id,
        status=attempt.status,
        score=attempt.score,
        total=attempt.total,
        percentage=attempt.percentage,
        started_at=attempt.started_at,
        ended_at=attempt.ended_at,
        duration_seconds=attempt.duration_seconds,
        answers=answers,
    )
