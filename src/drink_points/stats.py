"""User statistics snapshot, history summarizer and leaderboard ranking."""

from __future__ import annotations

import calendar
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LEADERBOARD_SIZE = 50
POINTS_PER_LEVEL = 100

LeaderboardPeriod = Literal["daily", "weekly", "monthly", "all"]


class RecordSummary(BaseModel):
    """Per-record breakdown used by time-of-day and category badges."""

    model_config = ConfigDict(frozen=True)

    category: str
    hour: int = Field(ge=0, le=23)
    brand_name: str | None = None


class UserStatsSnapshot(BaseModel):
    """Read-only aggregate of a user's activity.

    Must be read after the triggering consumption record is written.
    """

    model_config = ConfigDict(frozen=True)

    total_points: int = 0
    total_consumptions: int = 0
    consecutive_days: int = 0
    unique_product_count: int = 0
    total_volume_ml: int = 0
    days_since_joined: int = 0
    weekly_rank: int | None = None
    monthly_rank: int | None = None
    favorite_category: str | None = None
    recent_records: list[RecordSummary] = Field(default_factory=list)


class ConsumptionRecord(BaseModel):
    """A stored consumption row, as fetched by the caller."""

    brand_name: str
    category: str
    volume_ml: int
    quantity: int = 1
    created_at: datetime


def consecutive_days(dates: Iterable[date | datetime]) -> int:
    """Length of the run of back-to-back days ending at the latest date."""
    days = sorted({d.date() if isinstance(d, datetime) else d for d in dates}, reverse=True)
    if not days:
        return 0

    streak = 1
    current = days[0]
    for previous in days[1:]:
        if current - previous != timedelta(days=1):
            break
        streak += 1
        current = previous
    return streak


def summarize_history(
    records: Iterable[ConsumptionRecord],
    *,
    total_points: int,
    joined_at: datetime | None,
    now: datetime | None = None,
    weekly_rank: int | None = None,
    monthly_rank: int | None = None,
    tz: tzinfo | None = None,
) -> UserStatsSnapshot:
    """Build a UserStatsSnapshot from consumption rows.

    Args:
        records: The user's consumption rows, including the one just written.
        total_points: Running point total from the user's profile.
        joined_at: Profile creation time. None counts as joined today.
        now: Evaluation time, defaults to the current UTC time.
        weekly_rank: Current weekly leaderboard position, if ranked.
        monthly_rank: Current monthly leaderboard position, if ranked.
        tz: Timezone for calendar days and hours. Defaults to each
            timestamp's own timezone.

    Returns:
        UserStatsSnapshot ready for badge evaluation.
    """
    rows = list(records)
    now = now or datetime.now(timezone.utc)
    local_times = [_localize(row.created_at, tz) for row in rows]

    categories = Counter(row.category for row in rows)
    favorite = categories.most_common(1)[0][0] if categories else None

    return UserStatsSnapshot(
        total_points=total_points,
        total_consumptions=len(rows),
        consecutive_days=consecutive_days(local_times),
        unique_product_count=len({row.brand_name for row in rows}),
        total_volume_ml=sum(row.volume_ml * row.quantity for row in rows),
        days_since_joined=_days_between(joined_at, now),
        weekly_rank=weekly_rank,
        monthly_rank=monthly_rank,
        favorite_category=favorite,
        recent_records=[
            RecordSummary(category=row.category, hour=ts.hour, brand_name=row.brand_name)
            for row, ts in zip(rows, local_times)
        ],
    )


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(tz)


def _days_between(start: datetime | None, end: datetime) -> int:
    if start is None:
        return 0
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = start.replace(tzinfo=None)
        end = end.replace(tzinfo=None)
    return max(0, (end - start) // timedelta(days=1))


class PointRecord(BaseModel):
    """Points earned by one consumption, as fetched for the leaderboard."""

    user_id: str
    points_earned: int
    created_at: datetime


class RankEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    user_id: str
    points: int


def leaderboard_since(period: LeaderboardPeriod, now: datetime | None = None) -> datetime | None:
    """Start of the leaderboard window, or None for all time.

    Daily starts at midnight of ``now``'s day, weekly seven days back and
    monthly one calendar month back.
    """
    now = now or datetime.now(timezone.utc)
    if period == "daily":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "weekly":
        return now - timedelta(days=7)
    if period == "monthly":
        year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
        day = min(now.day, calendar.monthrange(year, month)[1])
        return now.replace(year=year, month=month, day=day)
    if period == "all":
        return None
    raise ValueError(f"Unknown leaderboard period: {period}")


def rank_users(
    records: Iterable[PointRecord],
    *,
    since: datetime | None = None,
    limit: int | None = LEADERBOARD_SIZE,
) -> list[RankEntry]:
    """Sum points per user over records at or after ``since`` and rank them.

    Highest total first. Equal totals keep the order in which users first
    appear in ``records``.
    """
    totals: dict[str, int] = {}
    for record in records:
        if since is not None and record.created_at < since:
            continue
        totals[record.user_id] = totals.get(record.user_id, 0) + record.points_earned
    return _ranked(totals, limit)


def rank_totals(totals: Mapping[str, int], *, limit: int | None = LEADERBOARD_SIZE) -> list[RankEntry]:
    """Rank users by running point total. Users without points are left out."""
    return _ranked({user_id: points for user_id, points in totals.items() if points > 0}, limit)


def user_rank(rankings: Iterable[RankEntry], user_id: str) -> int | None:
    return next((entry.rank for entry in rankings if entry.user_id == user_id), None)


def user_level(total_points: int) -> int:
    return max(total_points, 0) // POINTS_PER_LEVEL + 1


def _ranked(totals: Mapping[str, int], limit: int | None) -> list[RankEntry]:
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        RankEntry(rank=index, user_id=user_id, points=points)
        for index, (user_id, points) in enumerate(ordered, start=1)
    ]
