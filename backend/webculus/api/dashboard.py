"""Dashboard statistics route."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from webculus.api.deps import get_clock, get_current_user, get_stats_source
from webculus.db.models import User
from webculus.schemas.dashboard import DashboardStats
from webculus.services.dashboard_stats import Clock, build_dashboard_stats
from webculus.services.stats_source import StatsSource

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    source: StatsSource = Depends(get_stats_source),
    clock: Clock = Depends(get_clock),
):
    """Accuracy, streak, weekly accuracy, lesson progress and recent activity.

    If any read fails the whole request fails; partial stats are never
    returned.
    """
    try:
        return build_dashboard_stats(source, current_user.id, clock=clock)
    except SQLAlchemyError:
        logger.exception("Failed to load dashboard stats for %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard stats",
        )
