"""Domain errors raised by the quiz attempt engine and its collaborators.

Every error carries a stable ``error_code`` so the API layer can turn it into
an ``ErrorResponse`` envelope without inspecting message text.
"""

from typing import Any


class QuizError(Exception):
    """Base class for all quizdesk domain errors."""

    error_code = "quiz_error"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or None


class NotFound(QuizError):
    """A quiz, question, attempt or live session does not exist."""

    error_code = "not_found"


class InsufficientQuestions(QuizError):
    """The quiz asks for more questions than its pool holds."""

    error_code = "insufficient_questions"


class SessionTerminal(QuizError):
    """The attempt is over; no further interaction is possible."""

    error_code = "session_terminal"


class TimeExpired(SessionTerminal):
    """The attempt's time budget has run out."""

    error_code = "time_expired"


class InvalidOption(QuizError):
    """The chosen option is not one of A–D."""

    error_code = "invalid_option"


class UnknownQuestion(QuizError):
    """The question is not part of this attempt's selection."""

    error_code = "unknown_question"


class AlreadyAnswered(QuizError):
    """The question already has a recorded answer."""

    error_code = "already_answered"


class NotTerminal(QuizError):
    """Scoring was requested while the attempt is still active."""

    error_code = "not_terminal"


class StorageError(QuizError):
    """The storage backend failed; nothing was saved."""

    error_code = "storage_error"


class InvalidCredentials(QuizError):
    """Username / password did not match an active account."""

    error_code = "invalid_credentials"
