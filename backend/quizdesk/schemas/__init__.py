"""Pydantic schemas, re-exported for convenience."""

from quizdesk.schemas.common import ErrorResponse  # noqa: F401
from quizdesk.schemas.user import (  # noqa: F401
    AuthResponse,
    UserCreate,
    UserLogin,
    UserRead,
)
from quizdesk.schemas.quiz import (  # noqa: F401
    OptionLabel,
    QuestionCreate,
    QuestionRead,
    QuizCreate,
    QuizRead,
)
from quizdesk.schemas.attempt import (  # noqa: F401
    AnswerRecordRead,
    AnswerSubmit,
    AttemptResultRead,
    AttemptStart,
    AttemptStateRead,
    AttemptSummaryRead,
)
