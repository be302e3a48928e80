"""Practice problem & attempt schemas."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from webculus.schemas.common import CamelModel


class ProblemDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PracticeProblemRead(BaseModel):
    """A multiple-choice problem; the answer key stays server-side."""

    id: int
    lesson_id: int
    question: str
    choices: list[str] = []
    difficulty: ProblemDifficulty
    topic: str | None = None
    order_index: int

    model_config = {"from_attributes": True}


class AttemptSubmit(CamelModel):
    """POST /api/practice/attempt"""

    practice_id: int
    user_answer: str = Field(min_length=1)
    time_taken: int = Field(ge=0)


class AttemptResult(CamelModel):
    """Stored attempt echoed back with the answer key and explanation."""

    id: int
    user_id: uuid.UUID
    practice_id: int
    user_answer: str
    is_correct: bool
    time_taken: int
    attempted_at: datetime
    correct_answer: str
    explanation: str | None = None


class PreviousAttempt(BaseModel):
    """Latest attempt for one problem in a lesson."""

    practice_id: int
    is_correct: bool
    user_answer: str
    correct_answer: str | None = None
    attempted_at: datetime
