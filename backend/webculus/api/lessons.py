"""Lesson catalog routes (public)."""

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from webculus.db.models import Lesson
from webculus.db.session import get_db
from webculus.schemas.lesson import LessonRead

router = APIRouter()


@router.get("", response_model=list[LessonRead])
def list_lessons(db: Session = Depends(get_db)):
    """Published lessons in curriculum order."""
    return db.scalars(
        select(Lesson)
        .where(Lesson.is_published.is_(True))
        .order_by(Lesson.order_index, Lesson.id)
    ).all()


@router.get("/{slug}", response_model=LessonRead)
def get_lesson(
    slug: str = Path(pattern=r"^[a-z0-9-]+$", max_length=100),
    db: Session = Depends(get_db),
):
    lesson = db.scalars(
        select(Lesson).where(Lesson.slug == slug, Lesson.is_published.is_(True))
    ).first()
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")
    return lesson
