"""Lesson catalog schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class LessonRead(BaseModel):
    """A lesson in the catalog. Content itself lives in the frontend."""

    id: int
    slug: str
    title: str
    description: str | None = None
    difficulty_level: DifficultyLevel
    order_index: int
    created_at: datetime

    model_config = {"from_attributes": True}
