"""Dashboard statistics aggregation.

Turns a learner's raw practice attempts and lesson-progress rows into the
``DashboardStats`` shown on the dashboard page:

- overall accuracy (rounded percent, 0 with no attempts)
- streak of consecutive local days, ending today, with at least one attempt
- per-day accuracy for the trailing 7 days (always 7 entries, oldest first)
- per-lesson completion
- the most recent attempts

Every ``compute_*`` function is pure: "today" and the timezone that defines
a day are passed in, inputs are never mutated. ``build_dashboard_stats``
does the reads through an injected :class:`StatsSource` and then computes;
a failed read propagates to the caller untouched.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Sequence
from zoneinfo import ZoneInfo

from webculus.config import settings
from webculus.schemas.dashboard import (
    ActivityEntry,
    AttemptRecord,
    DailyAccuracy,
    DashboardStats,
    LessonProgressEntry,
    LessonRecord,
    ProgressRecord,
)
from webculus.services.stats_source import StatsSource

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

UNKNOWN = "Unknown"
_DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── helpers ───────────────────────────────────────────────────────────────────


def _as_aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def _local_day(ts: datetime, tz: tzinfo) -> date:
    return _as_aware(ts).astimezone(tz).date()


def _percent(correct: int, total: int) -> int:
    """``round(correct / total * 100)`` with halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (correct * 200 + total) // (total * 2)


def _newest_first(attempts: Iterable[AttemptRecord]) -> list[AttemptRecord]:
    return sorted(attempts, key=lambda a: _as_aware(a.attempted_at), reverse=True)


# ── pure computations ─────────────────────────────────────────────────────────


def compute_accuracy(attempts: Sequence[AttemptRecord]) -> int:
    """Share of correct attempts as a whole percent."""
    correct = sum(1 for a in attempts if a.is_correct)
    return _percent(correct, len(attempts))


def compute_streak(
    attempts: Sequence[AttemptRecord],
    today: date,
    tz: tzinfo,
    window: int | None = None,
) -> int:
    """Number of consecutive days, ending *today*, with at least one attempt.

    Only the *window* most recent attempts are considered (``None`` or a
    non-positive value scans all of them). A day without attempts ends the streak, and no
    attempt today means a streak of 0 whatever came before.
    """
    recent = _newest_first(attempts)
    if window and window > 0:
        recent = recent[:window]
    active_days = {_local_day(a.attempted_at, tz) for a in recent}

    streak = 0
    day = today
    while day in active_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def compute_weekly_accuracy(
    attempts: Sequence[AttemptRecord],
    today: date,
    tz: tzinfo,
) -> list[DailyAccuracy]:
    """Accuracy for each of the last 7 days, oldest first, today last."""
    tallies: dict[date, list[int]] = defaultdict(lambda: [0, 0])  # day → [correct, total]
    first_day = today - timedelta(days=6)
    for attempt in attempts:
        day = _local_day(attempt.attempted_at, tz)
        if first_day <= day <= today:
            tally = tallies[day]
            tally[1] += 1
            if attempt.is_correct:
                tally[0] += 1

    series: list[DailyAccuracy] = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        correct, total = tallies.get(day, (0, 0))
        series.append(
            DailyAccuracy(day=_DAY_LABELS[day.weekday()], accuracy=_percent(correct, total))
        )
    return series


def compute_lesson_progress(
    progress_rows: Sequence[ProgressRecord],
    catalog: Sequence[LessonRecord],
) -> list[LessonProgressEntry]:
    """One entry per progress row; rows whose lesson is gone are labelled Unknown."""
    titles = {lesson.id: lesson.title for lesson in catalog}
    return [
        LessonProgressEntry(
            name=titles.get(row.lesson_id, UNKNOWN) if row.lesson_id is not None else UNKNOWN,
            completed_percentage=row.completion_percentage or 0,
        )
        for row in progress_rows
    ]


def compute_recent_activity(
    attempts: Sequence[AttemptRecord],
    limit: int = 10,
) -> list[ActivityEntry]:
    """The *limit* newest attempts. Repeated attempts on one problem all show."""
    return [
        ActivityEntry(
            lesson_title=a.lesson_title or UNKNOWN,
            topic=a.topic or UNKNOWN,
            score="Correct" if a.is_correct else "Incorrect",
            status="Completed",
            attempted_at=a.attempted_at,
        )
        for a in _newest_first(attempts)[:limit]
    ]


# ── entry point ───────────────────────────────────────────────────────────────


def build_dashboard_stats(
    source: StatsSource,
    user_id: uuid.UUID,
    clock: Clock = utc_now,
    tz: tzinfo | None = None,
    streak_window: int | None = None,
    activity_limit: int | None = None,
) -> DashboardStats:
    """Read a user's history from *source* and aggregate it.

    Unset options fall back to ``STATS_TIMEZONE``, ``STREAK_ATTEMPT_WINDOW``
    and ``RECENT_ACTIVITY_LIMIT``. Read errors are not caught here.
    """
    tz = tz or ZoneInfo(settings.STATS_TIMEZONE)
    if streak_window is None:
        streak_window = settings.STREAK_ATTEMPT_WINDOW
    if activity_limit is None:
        activity_limit = settings.RECENT_ACTIVITY_LIMIT

    attempts = list(source.attempts_for(user_id))
    progress_rows = list(source.progress_for(user_id))
    catalog = list(source.lesson_catalog())

    today = _as_aware(clock()).astimezone(tz).date()
    logger.debug(
        "Aggregating stats for %s: %d attempts, %d progress rows, %d lessons (today=%s)",
        user_id, len(attempts), len(progress_rows), len(catalog), today,
    )

    return DashboardStats(
        completed_lessons=sum(1 for p in progress_rows if p.status == "completed"),
        total_lessons=len(catalog),
        total_problems=len(attempts),
        accuracy=compute_accuracy(attempts),
        streak=compute_streak(attempts, today, tz, streak_window),
        lesson_progress=compute_lesson_progress(progress_rows, catalog),
        weekly_accuracy=compute_weekly_accuracy(attempts, today, tz),
        recent_activity=compute_recent_activity(attempts, activity_limit),
    )
