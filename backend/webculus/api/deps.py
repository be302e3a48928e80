"""FastAPI dependencies shared across routes."""

import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from webculus.core.security import decode_access_token
from webculus.db.models import User
from webculus.db.session import get_db
from webculus.services.dashboard_stats import Clock, utc_now
from webculus.services.stats_source import SqlStatsSource, StatsSource

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/signin")


def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Decode JWT and return the authenticated user, or 401."""
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload"
        )
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    # lets the rate limiter bucket by user instead of IP
    request.state.user_id = user.id
    return user


def get_stats_source(db: Session = Depends(get_db)) -> StatsSource:
    """Read access for the dashboard aggregator."""
    return SqlStatsSource(db)


def get_clock() -> Clock:
    """Where "now" comes from; tests override this to pin the date."""
    return utc_now
