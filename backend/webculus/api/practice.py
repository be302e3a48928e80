"""Practice problem routes.

  GET  /api/practice/{lesson_id}           → problems for a lesson
  GET  /api/practice/attempts/{lesson_id}  → latest answer per problem
  POST /api/practice/attempt               → grade and record one answer
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from webculus.api.deps import get_current_user
from webculus.db.models import PracticeAttempt, PracticeProblem, User
from webculus.db.session import get_db
from webculus.schemas.practice import (
    AttemptResult,
    AttemptSubmit,
    PracticeProblemRead,
    PreviousAttempt,
)
from webculus.services.grading import is_correct_answer

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/attempts/{lesson_id}", response_model=list[PreviousAttempt])
def previous_attempts(
    lesson_id: int = Path(gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The most recent attempt on each problem of a lesson, newest first."""
    rows = db.execute(
        select(PracticeAttempt, PracticeProblem.correct_answer)
        .join(PracticeProblem, PracticeAttempt.practice_id == PracticeProblem.id)
        .where(
            PracticeAttempt.user_id == current_user.id,
            PracticeProblem.lesson_id == lesson_id,
        )
        .order_by(PracticeAttempt.attempted_at.desc(), PracticeAttempt.id.desc())
    ).all()

    latest: dict[int, PreviousAttempt] = {}
    for attempt, correct_answer in rows:
        if attempt.practice_id in latest:
            continue
        latest[attempt.practice_id] = PreviousAttempt(
            practice_id=attempt.practice_id,
            is_correct=attempt.is_correct,
            user_answer=attempt.user_answer,
            correct_answer=correct_answer,
            attempted_at=attempt.attempted_at,
        )
    return list(latest.values())


@router.get("/{lesson_id}", response_model=list[PracticeProblemRead])
def list_problems(
    lesson_id: int = Path(gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Problems for a lesson in display order."""
    return db.scalars(
        select(PracticeProblem)
        .where(PracticeProblem.lesson_id == lesson_id)
        .order_by(PracticeProblem.order_index, PracticeProblem.id)
    ).all()


@router.post("/attempt", response_model=AttemptResult, status_code=status.HTTP_201_CREATED)
def submit_attempt(
    body: AttemptSubmit,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Grade one answer and append it to the user's attempt history."""
    problem = db.get(PracticeProblem, body.practice_id)
    if problem is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Practice problem not found"
        )

    attempt = PracticeAttempt(
        user_id=current_user.id,
        practice_id=problem.id,
        user_answer=body.user_answer,
        is_correct=is_correct_answer(body.user_answer, problem.correct_answer),
        time_taken=body.time_taken,
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    logger.debug(
        "Attempt %s by %s on problem %s: correct=%s",
        attempt.id, current_user.id, problem.id, attempt.is_correct,
    )

    return AttemptResult(
        id=attempt.id,
        user_id=attempt.user_id,
        practice_id=problem.id,
        user_answer=attempt.user_answer,
        is_correct=attempt.is_correct,
        time_taken=attempt.time_taken,
        attempted_at=attempt.attempted_at,
        correct_answer=problem.correct_answer,
        explanation=problem.explanation,
    )
