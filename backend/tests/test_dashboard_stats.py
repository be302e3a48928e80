"""Unit tests for the dashboard stats aggregator.

Everything runs against an in-memory StatsSource and a pinned clock; no
database involved.
"""

import uuid
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.exc import OperationalError

from webculus.schemas.dashboard import AttemptRecord, LessonRecord, ProgressRecord
from webculus.services.dashboard_stats import (
    build_dashboard_stats,
    compute_accuracy,
    compute_lesson_progress,
    compute_recent_activity,
    compute_streak,
    compute_weekly_accuracy,
)

UTC = timezone.utc
TODAY = date(2024, 1, 3)  # a Wednesday
NOW = datetime(2024, 1, 3, 15, 30, tzinfo=UTC)
USER = uuid.uuid4()


class FakeStatsSource:
    """In-memory StatsSource."""

    def __init__(self, attempts=(), progress=(), lessons=()):
        self.attempts = list(attempts)
        self.progress = list(progress)
        self.lessons = list(lessons)

    def attempts_for(self, user_id):
        return self.attempts

    def progress_for(self, user_id):
        return self.progress

    def lesson_catalog(self):
        return self.lessons


class BrokenStatsSource(FakeStatsSource):
    def progress_for(self, user_id):
        raise OperationalError("SELECT ...", {}, Exception("connection refused"))


def attempt(day: date, correct: bool = True, hour: int = 12, **kwargs) -> AttemptRecord:
    return AttemptRecord(
        practice_id=kwargs.pop("practice_id", 1),
        is_correct=correct,
        attempted_at=datetime(day.year, day.month, day.day, hour, tzinfo=UTC),
        **kwargs,
    )


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


# ── accuracy ──────────────────────────────────────────────────────────────────


def test_accuracy_empty_is_zero():
    assert compute_accuracy([]) == 0


def test_accuracy_rounds_to_nearest_percent():
    attempts = [attempt(TODAY, True), attempt(TODAY, False), attempt(TODAY, True)]
    assert compute_accuracy(attempts) == 67


def test_accuracy_rounds_halves_up():
    attempts = [attempt(TODAY, True)] + [attempt(TODAY, False)] * 39  # 2.5%
    assert compute_accuracy(attempts) == 3


@pytest.mark.parametrize("correct,total", [(0, 1), (1, 1), (3, 7), (7, 7), (0, 12), (11, 12)])
def test_accuracy_within_bounds(correct, total):
    attempts = [attempt(TODAY, i < correct) for i in range(total)]
    assert 0 <= compute_accuracy(attempts) <= 100


# ── streak ────────────────────────────────────────────────────────────────────


def test_streak_empty_is_zero():
    assert compute_streak([], TODAY, UTC) == 0


def test_streak_attempt_today_starts_streak():
    assert compute_streak([attempt(TODAY)], TODAY, UTC) == 1


def test_streak_requires_attempt_today():
    attempts = [attempt(days_ago(1)), attempt(days_ago(2))]
    assert compute_streak(attempts, TODAY, UTC) == 0


def test_streak_stops_at_first_gap():
    attempts = [attempt(days_ago(n)) for n in (0, 1, 2, 4)]
    assert compute_streak(attempts, TODAY, UTC) == 3


def test_streak_counts_days_not_attempts():
    attempts = [attempt(TODAY, hour=h) for h in (8, 9, 10)] + [attempt(days_ago(1))]
    assert compute_streak(attempts, TODAY, UTC) == 2


def test_streak_ignores_input_order():
    attempts = [attempt(days_ago(n)) for n in (2, 0, 1)]
    assert compute_streak(attempts, TODAY, UTC) == 3


def test_streak_window_limits_scanned_attempts():
    # 40 days in a row, one attempt per day
    attempts = [attempt(days_ago(n)) for n in range(40)]
    assert compute_streak(attempts, TODAY, UTC, window=30) == 30
    assert compute_streak(attempts, TODAY, UTC, window=None) == 40
    assert compute_streak(attempts, TODAY, UTC, window=0) == 40
    assert compute_streak(attempts, TODAY, UTC, window=-1) == 40


def test_streak_uses_local_day_boundaries():
    tokyo = ZoneInfo("Asia/Tokyo")
    # 2024-01-02 20:00 UTC is already 2024-01-03 05:00 in Tokyo
    late = AttemptRecord(is_correct=True, attempted_at=datetime(2024, 1, 2, 20, tzinfo=UTC))
    assert compute_streak([late], TODAY, tokyo) == 1
    assert compute_streak([late], TODAY, UTC) == 0


def test_streak_treats_naive_timestamps_as_utc():
    naive = AttemptRecord(is_correct=True, attempted_at=datetime(2024, 1, 3, 1, 0))
    assert compute_streak([naive], TODAY, UTC) == 1


# ── weekly accuracy ───────────────────────────────────────────────────────────


@pytest.mark.parametrize("n", [0, 1, 5, 50])
def test_weekly_accuracy_always_has_seven_days(n):
    attempts = [attempt(days_ago(i % 10), i % 2 == 0) for i in range(n)]
    assert len(compute_weekly_accuracy(attempts, TODAY, UTC)) == 7


def test_weekly_accuracy_is_chronological_ending_today():
    series = compute_weekly_accuracy([], TODAY, UTC)
    # 2023-12-28 is a Thursday, 2024-01-03 a Wednesday
    assert [d.day for d in series] == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]
    assert all(d.accuracy == 0 for d in series)


def test_weekly_accuracy_buckets_per_day():
    attempts = [
        attempt(TODAY, True),
        attempt(TODAY, False),
        attempt(days_ago(1), True),
        attempt(days_ago(6), False),
        attempt(days_ago(7), True),  # outside the window
    ]
    series = compute_weekly_accuracy(attempts, TODAY, UTC)
    assert series[-1].accuracy == 50
    assert series[-2].accuracy == 100
    assert series[0].accuracy == 0
    assert [d.accuracy for d in series[1:5]] == [0, 0, 0, 0]


# ── lesson progress ───────────────────────────────────────────────────────────


def test_lesson_progress_uses_catalog_titles():
    catalog = [LessonRecord(id=1, title="Linear Equations"), LessonRecord(id=2, title="Inequalities")]
    rows = [
        ProgressRecord(lesson_id=2, status="in_progress", completion_percentage=40),
        ProgressRecord(lesson_id=1, status="completed", completion_percentage=100),
    ]
    entries = compute_lesson_progress(rows, catalog)
    assert [(e.name, e.completed_percentage) for e in entries] == [
        ("Inequalities", 40),
        ("Linear Equations", 100),
    ]


def test_lesson_progress_keeps_rows_for_deleted_lessons():
    rows = [
        ProgressRecord(lesson_id=99, status="in_progress", completion_percentage=55),
        ProgressRecord(lesson_id=None, status="completed", completion_percentage=None),
    ]
    entries = compute_lesson_progress(rows, [LessonRecord(id=1, title="Linear Equations")])
    assert [(e.name, e.completed_percentage) for e in entries] == [("Unknown", 55), ("Unknown", 0)]


def test_lesson_progress_empty():
    assert compute_lesson_progress([], []) == []


# ── recent activity ───────────────────────────────────────────────────────────


def test_recent_activity_returns_ten_newest_descending():
    base = datetime(2024, 1, 1, tzinfo=UTC)
    attempts = [
        AttemptRecord(practice_id=i, is_correct=bool(i % 2), attempted_at=base + timedelta(hours=i))
        for i in range(15)
    ]
    shuffled = attempts[7:] + attempts[:7]

    activity = compute_recent_activity(shuffled, limit=10)

    assert len(activity) == 10
    expected = sorted(attempts, key=lambda a: a.attempted_at, reverse=True)[:10]
    assert [a.attempted_at for a in activity] == [a.attempted_at for a in expected]


def test_recent_activity_labels_and_defaults():
    attempts = [
        attempt(TODAY, True, hour=10, topic="Elimination", lesson_title="Linear Equations"),
        attempt(TODAY, False, hour=9),
    ]
    first, second = compute_recent_activity(attempts)
    assert (first.lesson_title, first.topic, first.score, first.status) == (
        "Linear Equations", "Elimination", "Correct", "Completed",
    )
    assert (second.lesson_title, second.topic, second.score) == ("Unknown", "Unknown", "Incorrect")


def test_recent_activity_does_not_deduplicate_problems():
    attempts = [attempt(TODAY, hour=h, practice_id=7) for h in (8, 9, 10)]
    assert len(compute_recent_activity(attempts)) == 3


# ── build_dashboard_stats ─────────────────────────────────────────────────────


def test_build_with_no_history():
    stats = build_dashboard_stats(FakeStatsSource(), USER, clock=lambda: NOW, tz=UTC)
    assert stats.completed_lessons == 0
    assert stats.total_lessons == 0
    assert stats.total_problems == 0
    assert stats.accuracy == 0
    assert stats.streak == 0
    assert stats.lesson_progress == []
    assert stats.recent_activity == []
    assert len(stats.weekly_accuracy) == 7


def test_build_end_to_end_scenario():
    source = FakeStatsSource(
        attempts=[
            attempt(date(2024, 1, 1), True),
            attempt(date(2024, 1, 2), False),
            attempt(date(2024, 1, 3), True),
        ],
        progress=[
            ProgressRecord(lesson_id=1, status="completed", completion_percentage=100),
            ProgressRecord(lesson_id=2, status="in_progress", completion_percentage=50),
        ],
        lessons=[
            LessonRecord(id=1, title="Linear Equations"),
            LessonRecord(id=2, title="Linear Inequalities"),
            LessonRecord(id=3, title="Non-Linear Systems"),
        ],
    )

    stats = build_dashboard_stats(source, USER, clock=lambda: NOW, tz=UTC)

    assert stats.accuracy == 67
    assert stats.streak == 3
    assert stats.weekly_accuracy[-1].accuracy == 100
    assert stats.weekly_accuracy[-2].accuracy == 0
    assert stats.completed_lessons == 1
    assert stats.total_lessons == 3
    assert stats.total_problems == 3
    assert [e.name for e in stats.lesson_progress] == ["Linear Equations", "Linear Inequalities"]


def test_build_is_idempotent_and_leaves_inputs_alone():
    attempts = [attempt(days_ago(n), n % 3 != 0) for n in (3, 0, 1, 5)]
    source = FakeStatsSource(attempts=attempts, lessons=[LessonRecord(id=1, title="L")])
    before = list(source.attempts)

    first = build_dashboard_stats(source, USER, clock=lambda: NOW, tz=UTC)
    second = build_dashboard_stats(source, USER, clock=lambda: NOW, tz=UTC)

    assert first.model_dump() == second.model_dump()
    assert source.attempts == before


def test_build_uses_the_injected_clock():
    source = FakeStatsSource(attempts=[attempt(TODAY)])
    tomorrow = NOW + timedelta(days=1)
    assert build_dashboard_stats(source, USER, clock=lambda: NOW, tz=UTC).streak == 1
    assert build_dashboard_stats(source, USER, clock=lambda: tomorrow, tz=UTC).streak == 0


def test_build_respects_activity_limit():
    source = FakeStatsSource(attempts=[attempt(TODAY, hour=h) for h in range(12)])
    stats = build_dashboard_stats(source, USER, clock=lambda: NOW, tz=UTC, activity_limit=4)
    assert len(stats.recent_activity) == 4


def test_build_propagates_read_failures():
    with pytest.raises(OperationalError):
        build_dashboard_stats(BrokenStatsSource(attempts=[attempt(TODAY)]), USER, clock=lambda: NOW, tz=UTC)


def test_serialises_with_camel_case_keys():
    stats = build_dashboard_stats(FakeStatsSource(), USER, clock=lambda: NOW, tz=UTC)
    payload = stats.model_dump(by_alias=True)
    assert {"completedLessons", "totalLessons", "totalProblems", "weeklyAccuracy",
            "lessonProgress", "recentActivity", "accuracy", "streak"} <= payload.keys()
