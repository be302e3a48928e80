"""Lesson progress routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from webculus.api.deps import get_current_user
from webculus.db.models import Lesson, LessonProgress, ProgressStatusEnum, User
from webculus.db.session import get_db
from webculus.db.upsert import dialect_insert
from webculus.schemas.progress import ProgressRead, ProgressStatus, ProgressUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_read(row: LessonProgress, lesson_title: str | None) -> ProgressRead:
    return ProgressRead(
        id=row.id,
        user_id=row.user_id,
        lesson_id=row.lesson_id,
        lesson_title=lesson_title,
        status=ProgressStatus(row.status.value),
        completion_percentage=row.completion_percentage or 0.0,
        started_at=row.started_at,
        completed_at=row.completed_at,
        last_accessed=row.last_accessed,
    )


@router.get("", response_model=list[ProgressRead])
def get_progress(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Every lesson the current user has touched."""
    rows = db.execute(
        select(LessonProgress, Lesson.title)
        .outerjoin(Lesson, LessonProgress.lesson_id == Lesson.id)
        .where(LessonProgress.user_id == current_user.id)
        .order_by(LessonProgress.lesson_id)
    ).all()
    return [_to_read(row, title) for row, title in rows]


@router.post("", response_model=ProgressRead, status_code=status.HTTP_201_CREATED)
def update_progress(
    body: ProgressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record the user's position in a lesson.

    One upsert on (user_id, lesson_id): ``last_accessed`` always moves,
    ``started_at`` keeps the first in-progress time, ``completed_at`` is
    stamped when the lesson is completed at 100%.
    """
    lesson = db.get(Lesson, body.lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")

    now = datetime.now(timezone.utc)
    new_status = ProgressStatusEnum(body.status.value)
    started_at = now if new_status == ProgressStatusEnum.IN_PROGRESS else None
    completed_at = (
        now
        if new_status == ProgressStatusEnum.COMPLETED and body.completion_percentage >= 100
        else None
    )

    table = LessonProgress.__table__
    stmt = dialect_insert(db, table).values(
        user_id=current_user.id,
        lesson_id=lesson.id,
        status=new_status,
        completion_percentage=body.completion_percentage,
        started_at=started_at,
        completed_at=completed_at,
        last_accessed=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.user_id, table.c.lesson_id],
        set_={
            "status": stmt.excluded.status,
            "completion_percentage": stmt.excluded.completion_percentage,
            "last_accessed": stmt.excluded.last_accessed,
            "started_at": func.coalesce(table.c.started_at, stmt.excluded.started_at),
            "completed_at": func.coalesce(stmt.excluded.completed_at, table.c.completed_at),
        },
    )
    db.execute(stmt)
    db.commit()

    row = db.scalars(
        select(LessonProgress).where(
            LessonProgress.user_id == current_user.id,
            LessonProgress.lesson_id == lesson.id,
        )
    ).one()
    db.refresh(row)
    logger.debug(
        "Progress for %s on lesson %s: %s %.0f%%",
        current_user.id, lesson.id, new_status.value, body.completion_percentage,
    )
    return _to_read(row, lesson.title)
