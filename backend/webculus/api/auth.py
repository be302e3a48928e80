"""Signup, signin, and Google sign-in routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from webculus.core.security import hash_password, issue_token_for, verify_password
from webculus.db.models import User
from webculus.db.session import get_db
from webculus.schemas.user import AuthResponse, GoogleAuth, SignIn, SignUp, UserRead
from webculus.services.profiles import find_or_create_and_link
from webculus.services.rate_limiter import require_auth_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=issue_token_for(user.id, user.email),
        user=UserRead.model_validate(user),
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth_rate_limit)],
)
def signup(body: SignUp, db: Session = Depends(get_db)):
    """Create a password account and sign it in."""
    existing = db.scalars(select(User).where(User.email == body.email)).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    try:
        hashed = hash_password(body.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    user = User(email=body.email, hashed_password=hashed, name=body.name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup with the same email
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    db.refresh(user)
    logger.info("New account %s", user.id)
    return _auth_response(user)


@router.post(
    "/signin",
    response_model=AuthResponse,
    dependencies=[Depends(require_auth_rate_limit)],
)
def signin(body: SignIn, db: Session = Depends(get_db)):
    """Authenticate and return a JWT access token + user profile."""
    user = db.scalars(select(User).where(User.email == body.email)).first()
    if not user or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated",
        )
    return _auth_response(user)


@router.post("/google", response_model=AuthResponse)
def google_signin(body: GoogleAuth, db: Session = Depends(get_db)):
    """Exchange a Google identity (verified by the frontend) for an API token."""
    # a deactivated account must not pick up a new Google link
    existing = db.scalars(select(User).where(User.email == body.email)).first()
    if existing is not None and not existing.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated",
        )
    try:
        user = find_or_create_and_link(db, body.email, body.name, body.google_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Google account is already linked to another user",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated",
        )
    return _auth_response(user)
