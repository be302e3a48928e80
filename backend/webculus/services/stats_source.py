"""Read access the dashboard aggregator needs, and its SQLAlchemy implementation."""

import uuid
from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from webculus.db.models import Lesson, LessonProgress, PracticeAttempt, PracticeProblem
from webculus.schemas.dashboard import AttemptRecord, LessonRecord, ProgressRecord


class StatsSource(Protocol):
    """Where the aggregator gets its rows from. Results may come in any order."""

    def attempts_for(self, user_id: uuid.UUID) -> Sequence[AttemptRecord]: ...

    def progress_for(self, user_id: uuid.UUID) -> Sequence[ProgressRecord]: ...

    def lesson_catalog(self) -> Sequence[LessonRecord]: ...


class SqlStatsSource:
    """``StatsSource`` over a request-scoped SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def attempts_for(self, user_id: uuid.UUID) -> list[AttemptRecord]:
        stmt = (
            select(
                PracticeAttempt.practice_id,
                PracticeAttempt.is_correct,
                PracticeAttempt.attempted_at,
                PracticeProblem.topic,
                Lesson.title,
            )
            .outerjoin(PracticeProblem, PracticeAttempt.practice_id == PracticeProblem.id)
            .outerjoin(Lesson, PracticeProblem.lesson_id == Lesson.id)
            .where(PracticeAttempt.user_id == user_id)
        )
        return [
            AttemptRecord(
                practice_id=practice_id,
                is_correct=bool(is_correct),
                attempted_at=attempted_at,
                topic=topic,
                lesson_title=title,
            )
            for practice_id, is_correct, attempted_at, topic, title in self._db.execute(stmt)
        ]

    def progress_for(self, user_id: uuid.UUID) -> list[ProgressRecord]:
        rows = self._db.scalars(
            select(LessonProgress).where(LessonProgress.user_id == user_id)
        )
        return [
            ProgressRecord(
                lesson_id=row.lesson_id,
                status=row.status.value if row.status else "not_started",
                completion_percentage=row.completion_percentage,
            )
            for row in rows
        ]

    def lesson_catalog(self) -> list[LessonRecord]:
        rows = self._db.execute(select(Lesson.id, Lesson.title).order_by(Lesson.id))
        return [LessonRecord(id=lesson_id, title=title) for lesson_id, title in rows]
