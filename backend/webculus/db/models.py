"""SQLAlchemy ORM models for the Webculus platform.

Tables
------
- users                 – learner profiles (password and/or Google login)
- lessons               – lesson catalog (content itself is static frontend)
- practice_problems     – multiple-choice problems attached to a lesson
- practice_attempts     – one row per submitted answer, never updated
- user_lesson_progress  – per-user per-lesson completion, upserted
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webculus.db.session import Base


# ── helpers ───────────────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    # persist the lowercase values the API speaks, not the member names
    return Enum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])


# ── Enums ─────────────────────────────────────────────────────────────────────


class DifficultyLevelEnum(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ProblemDifficultyEnum(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ProgressStatusEnum(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# ── Users ─────────────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # NULL for accounts created through Google sign-in only
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    google_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    attempts: Mapped[list["PracticeAttempt"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    progress_records: Mapped[list["LessonProgress"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


# ── Lessons ───────────────────────────────────────────────────────────────────


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty_level: Mapped[DifficultyLevelEnum] = mapped_column(
        _enum(DifficultyLevelEnum, "difficulty_level_enum"),
        default=DifficultyLevelEnum.BEGINNER,
    )
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    problems: Mapped[list["PracticeProblem"]] = relationship(
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="PracticeProblem.order_index",
    )


# ── Practice ──────────────────────────────────────────────────────────────────


class PracticeProblem(Base):
    __tablename__ = "practice_problems"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lesson_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lessons.id", ondelete="CASCADE"), index=True
    )
    question: Mapped[str] = mapped_column(Text)
    choices: Mapped[list[str]] = mapped_column(JSON, default=list)
    correct_answer: Mapped[str] = mapped_column(String(500))
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[ProblemDifficultyEnum] = mapped_column(
        _enum(ProblemDifficultyEnum, "problem_difficulty_enum"),
        default=ProblemDifficultyEnum.EASY,
    )
    topic: Mapped[str | None] = mapped_column(String(200), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0)

    lesson: Mapped["Lesson"] = relationship(back_populates="problems")


class PracticeAttempt(Base):
    """A single submitted answer. Rows are append-only."""

    __tablename__ = "practice_attempts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )
    practice_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("practice_problems.id", ondelete="SET NULL"), nullable=True
    )
    user_answer: Mapped[str] = mapped_column(String(500))
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    time_taken: Mapped[int] = mapped_column(Integer, default=0)  # seconds
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )

    user: Mapped["User"] = relationship(back_populates="attempts")
    problem: Mapped["PracticeProblem"] = relationship("PracticeProblem")


# ── Progress ──────────────────────────────────────────────────────────────────


class LessonProgress(Base):
    __tablename__ = "user_lesson_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )
    # a deleted lesson leaves its progress rows behind with lesson_id NULL
    lesson_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("lessons.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[ProgressStatusEnum] = mapped_column(
        _enum(ProgressStatusEnum, "progress_status_enum"),
        default=ProgressStatusEnum.NOT_STARTED,
    )
    completion_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_accessed: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    user: Mapped["User"] = relationship(back_populates="progress_records")
    lesson: Mapped["Lesson"] = relationship("Lesson")

    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_lesson_progress"),
    )
