"""Dashboard statistics schemas.

The ``*Record`` models are the read-only rows the stats aggregator consumes;
``DashboardStats`` is what it produces for the dashboard page.
"""

from datetime import datetime

from pydantic import BaseModel

from webculus.schemas.common import CamelModel


# ── Aggregator inputs ─────────────────────────────────────────────────────────


class AttemptRecord(BaseModel):
    """One practice submission, with the problem's topic and lesson title."""

    practice_id: int | None = None
    is_correct: bool
    attempted_at: datetime
    topic: str | None = None
    lesson_title: str | None = None

    model_config = {"frozen": True}


class ProgressRecord(BaseModel):
    lesson_id: int | None = None
    status: str = "not_started"
    completion_percentage: float | None = None

    model_config = {"frozen": True}


class LessonRecord(BaseModel):
    id: int
    title: str

    model_config = {"frozen": True}


# ── Aggregator output ─────────────────────────────────────────────────────────


class LessonProgressEntry(CamelModel):
    name: str
    completed_percentage: float


class DailyAccuracy(CamelModel):
    day: str  # Mon, Tue, …
    accuracy: int


class ActivityEntry(CamelModel):
    lesson_title: str
    topic: str
    score: str  # "Correct" / "Incorrect"
    status: str
    attempted_at: datetime


class DashboardStats(CamelModel):
    """GET /api/dashboard/stats"""

    completed_lessons: int = 0
    total_lessons: int = 0
    total_problems: int = 0
    accuracy: int = 0
    streak: int = 0
    lesson_progress: list[LessonProgressEntry] = []
    weekly_accuracy: list[DailyAccuracy] = []
    recent_activity: list[ActivityEntry] = []
