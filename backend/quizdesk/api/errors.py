"""Translate domain errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from quizdesk.core.exceptions import (
    AlreadyAnswered,
    InsufficientQuestions,
    InvalidCredentials,
    InvalidOption,
    NotFound,
    NotTerminal,
    QuizError,
    SessionTerminal,
    StorageError,
    UnknownQuestion,
)
from quizdesk.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order, so subclasses (TimeExpired) resolve through their parent.
_STATUS_BY_ERROR: list[tuple[type[QuizError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InsufficientQuestions, status.HTTP_409_CONFLICT),
    (SessionTerminal, status.HTTP_409_CONFLICT),
    (InvalidOption, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UnknownQuestion, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AlreadyAnswered, status.HTTP_409_CONFLICT),
    (NotTerminal, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
]


def status_for(exc: QuizError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = ErrorResponse(error_code=exc.error_code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuizError, quiz_error_handler)  # type: ignore[arg-type]
