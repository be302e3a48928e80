"""Profile and account settings routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from webculus.api.deps import get_current_user
from webculus.core.security import hash_password, verify_password
from webculus.db.models import User
from webculus.db.session import get_db
from webculus.schemas.common import SuccessResponse
from webculus.schemas.user import AccountDelete, PasswordChange, ProfileUpdate, UserRead

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.put("/user/profile", response_model=UserRead)
def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change display name and/or email."""
    if body.name is None and body.email is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided"
        )

    if body.email is not None and body.email != current_user.email:
        taken = db.scalars(select(User.id).where(User.email == body.email)).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
            )
        current_user.email = body.email
    if body.name is not None:
        current_user.name = body.name

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
        )
    db.refresh(current_user)
    return current_user


@router.post("/user/change-password", response_model=SuccessResponse)
def change_password(
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the password after re-checking the current one."""
    if not verify_password(body.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    try:
        current_user.hashed_password = hash_password(body.new_password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    db.commit()
    logger.info("Password changed for %s", current_user.id)
    return SuccessResponse(message="Password changed successfully")


@router.delete("/user/account", response_model=SuccessResponse)
def delete_account(
    body: AccountDelete,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate the account. History is kept; the user can no longer sign in."""
    if not verify_password(body.password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Password is incorrect"
        )
    current_user.is_active = False
    db.commit()
    logger.info("Deactivated account %s", current_user.id)
    return SuccessResponse(message="Account deleted successfully")
