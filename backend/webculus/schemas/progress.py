"""Lesson progress schemas."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from webculus.schemas.common import CamelModel


class ProgressStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ProgressUpdate(CamelModel):
    """POST /api/user/progress"""

    lesson_id: int
    status: ProgressStatus
    completion_percentage: float = Field(ge=0, le=100)


class ProgressRead(BaseModel):
    """One user × lesson progress row."""

    id: int
    user_id: uuid.UUID
    lesson_id: int | None = None
    lesson_title: str | None = None
    status: ProgressStatus
    completion_percentage: float
    started_at: datetime | None = None
    completed_at: datetime | None = None
    last_accessed: datetime
