"""Quiz & question schemas."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class OptionLabel(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class QuestionCreate(BaseModel):
    """One question inside POST /api/quizzes/."""

    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=4, max_length=4)
    correct_option: OptionLabel
    points: int = Field(default=1, ge=1)


class QuizCreate(BaseModel):
    """POST /api/quizzes/: create a quiz together with its question pool."""

    title: str = Field(min_length=1, max_length=100)
    total_questions: int = Field(ge=1)
    time_limit_seconds: int = Field(ge=1)
    active: bool = True
    questions: list[QuestionCreate]

    @model_validator(mode="after")
    def _pool_covers_attempt(self) -> "QuizCreate":
        if self.total_questions > len(self.questions):
            raise ValueError(
                f"total_questions ({self.total_questions}) exceeds the "
                f"{len(self.questions)} questions supplied"
            )
        return self


class QuizRead(BaseModel):
    """Quiz catalog entry."""

    id: int
    title: str
    question_count: int
    time_limit_seconds: int
    active: bool
    pool_size: int | None = None

    model_config = {"from_attributes": True}


class QuestionRead(BaseModel):
    """A question as shown to an examinee, without the correct option."""

    id: int
    text: str
    options: dict[str, str]
    points: int
