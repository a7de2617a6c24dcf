"""Tests for persisting scored attempts."""

import dataclasses
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from conftest import T0, at
from quizdesk.core.exceptions import StorageError
from quizdesk.core.security import hash_password
from quizdesk.db.models import Attempt, AttemptAnswer, Question, Quiz, User
from quizdesk.services.attempt_recorder import AttemptRecorder
from quizdesk.services.attempt_session import AttemptSession
from quizdesk.services.question_bank import QuestionBank
from quizdesk.services.scorer import score


def _count(db: Session, model) -> int:
    return db.scalar(select(func.count()).select_from(model))


@pytest.fixture
def user(db: Session) -> User:
    u = User(username="alice", hashed_password=hash_password("pw1234"), full_name="Alice")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def finished_result(db: Session, make_quiz, user: User):
    """Scored result of a 2-question attempt: first right, second wrong."""
    quiz = make_quiz(pool=2)
    bank = QuestionBank(db)
    questions = bank.load_questions(quiz.id)
    session = AttemptSession.start(user.id, quiz.id, questions, 90, T0)
    session.submit_answer(questions[0].id, questions[0].correct_option, at(5))
    wrong = "A" if questions[1].correct_option != "A" else "B"
    session.submit_answer(questions[1].id, wrong, at(10))
    return score(session)


def test_persist_writes_attempt_and_answers(db: Session, finished_result):
    attempt_id = AttemptRecorder(db).persist(finished_result)

    attempt = db.get(Attempt, attempt_id)
    assert attempt is not None
    assert attempt.score == 1
    assert attempt.total == 2
    assert attempt.percentage == 50.0
    assert attempt.duration_seconds == 10
    assert attempt.status.value == "completed"
    assert [a.question_id for a in attempt.answers] == [
        r.question_id for r in finished_result.answers
    ]
    assert [a.is_correct for a in attempt.answers] == [True, False]
    assert [a.position for a in attempt.answers] == [0, 1]


def test_unanswered_questions_are_stored_without_choice(db: Session, make_quiz, user: User):
    quiz = make_quiz(pool=2)
    questions = QuestionBank(db).load_questions(quiz.id)
    session = AttemptSession.start(user.id, quiz.id, questions, 90, T0)
    session.check_deadline(at(90))

    attempt_id = AttemptRecorder(db).persist(score(session))

    answers = db.get(Attempt, attempt_id).answers
    assert [a.chosen_option for a in answers] == [None, None]
    assert [a.is_correct for a in answers] == [False, False]


def test_same_token_is_written_once(db: Session, finished_result):
    recorder = AttemptRecorder(db)
    first = recorder.persist(finished_result, attempt_token="tok-1")
    second = recorder.persist(finished_result, attempt_token="tok-1")

    assert first == second
    assert _count(db, Attempt) == 1
    assert _count(db, AttemptAnswer) == 2


def test_failed_answer_insert_leaves_nothing_behind(db: Session, finished_result):
    bad_record = dataclasses.replace(finished_result.answers[1], chosen_option="Z")
    broken = dataclasses.replace(
        finished_result, answers=(finished_result.answers[0], bad_record)
    )

    with pytest.raises(StorageError):
        AttemptRecorder(db).persist(broken)

    assert _count(db, Attempt) == 0
    assert _count(db, AttemptAnswer) == 0


def test_commit_failure_raises_storage_error(db: Session, finished_result):
    boom = OperationalError("COMMIT", {}, Exception("database is gone"))
    with patch.object(db, "commit", side_effect=boom), patch.object(
        db, "rollback", wraps=db.rollback
    ) as rollback:
        with pytest.raises(StorageError):
            AttemptRecorder(db).persist(finished_result)
        rollback.assert_called_once()

    assert _count(db, Attempt) == 0


def test_deleting_quiz_cascades_to_questions_and_attempts(db: Session, finished_result):
    AttemptRecorder(db).persist(finished_result)
    quiz = db.get(Quiz, finished_result.quiz_id)

    db.delete(quiz)
    db.commit()

    assert _count(db, Question) == 0
    assert _count(db, Attempt) == 0
    assert _count(db, AttemptAnswer) == 0
