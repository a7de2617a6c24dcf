"""Quiz catalog routes.

Examinees browse active quizzes; admins create quizzes together with their
question pool and may delete them (which removes questions and attempts).
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quizdesk.api.deps import get_current_user, require_admin
from quizdesk.core.exceptions import NotFound
from quizdesk.core.models import Quiz as QuizSpec
from quizdesk.db.models import Question, Quiz, RoleEnum, User
from quizdesk.db.session import get_db
from quizdesk.schemas.quiz import QuizCreate, QuizRead
from quizdesk.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)
router = APIRouter()


def _pool_sizes(db: Session) -> dict[int, int]:
    rows = db.execute(
        select(Question.quiz_id, func.count(Question.id)).group_by(Question.quiz_id)
    ).all()
    return {quiz_id: count for quiz_id, count in rows}


def _to_read(quiz: QuizSpec, pool_size: int) -> QuizRead:
    return QuizRead(
        id=quiz.id,
        title=quiz.title,
        question_count=quiz.question_count,
        time_limit_seconds=quiz.time_limit_seconds,
        active=quiz.active,
        pool_size=pool_size,
    )


@router.get("/", response_model=list[QuizRead])
def list_quizzes(
    include_inactive: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List quizzes available for an attempt (admins may include inactive ones)."""
    show_inactive = include_inactive and current_user.role == RoleEnum.ADMIN
    quizzes = QuestionBank(db).list_quizzes(include_inactive=show_inactive)
    sizes = _pool_sizes(db)
    return [_to_read(q, sizes.get(q.id, 0)) for q in quizzes]


@router.get("/{quiz_id}", response_model=QuizRead)
def get_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return one active quiz."""
    quiz = QuestionBank(db).load_quiz(quiz_id)
    return _to_read(quiz, _pool_sizes(db).get(quiz.id, 0))


@router.post("/", response_model=QuizRead, status_code=status.HTTP_201_CREATED)
def create_quiz(
    body: QuizCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a quiz and its question pool in one transaction."""
    quiz = Quiz(
        title=body.title,
        total_questions=body.total_questions,
        time_limit_seconds=body.time_limit_seconds,
        active=body.active,
        questions=[
            Question(
                text=q.text,
                option_a=q.options[0],
                option_b=q.options[1],
                option_c=q.options[2],
                option_d=q.options[3],
                correct_option=q.correct_option.value,
                points=q.points,
            )
            for q in body.questions
        ],
    )
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    logger.info(
        "Admin %s created quiz #%s %r (%d/%d questions, %ds)",
        admin.username, quiz.id, quiz.title,
        quiz.total_questions, len(body.questions), quiz.time_limit_seconds,
    )
    return _to_read(quiz.to_spec(), len(body.questions))


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz(
    quiz_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a quiz with its questions and all historical attempts."""
    quiz = db.get(Quiz, quiz_id)
    if quiz is None:
        raise NotFound(f"Quiz {quiz_id} not found", quiz_id=quiz_id)
    db.delete(quiz)
    db.commit()
    logger.info("Admin %s deleted quiz #%s", admin.username, quiz_id)
