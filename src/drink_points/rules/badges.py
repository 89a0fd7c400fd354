"""Badge definitions and evaluation."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

from drink_points.stats import UserStatsSnapshot

logger = logging.getLogger(__name__)

Condition = Callable[[UserStatsSnapshot], bool]

NIGHT_OWL_HOUR = 22
DAY_DRINKER_HOUR = 15
HYDRATION_CATEGORIES = frozenset({"water"})
# Tea is logged as soft_drink, so it is recognised by brand name.
TEA_BRANDS = frozenset({"伊右衛門", "サントリー烏龍茶"})
TEA_NAME = re.compile(r"茶|\btea\b", re.IGNORECASE)


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    name_ja: str
    description: str
    icon: str
    condition: Condition


class BadgeGrant(BaseModel):
    """A badge the caller should insert for the user."""

    model_config = ConfigDict(frozen=True)

    badge_id: str
    earned_at: datetime


def _count_records(stats: UserStatsSnapshot, predicate: Callable[[int, str], bool]) -> int:
    return sum(1 for record in stats.recent_records if predicate(record.hour, record.category))


def _night_owl(stats: UserStatsSnapshot) -> bool:
    return _count_records(stats, lambda hour, _: hour >= NIGHT_OWL_HOUR) >= 10


def _day_drinker(stats: UserStatsSnapshot) -> bool:
    return _count_records(stats, lambda hour, _: hour < DAY_DRINKER_HOUR) >= 5


def _is_tea(brand_name: str | None) -> bool:
    if not brand_name:
        return False
    return brand_name in TEA_BRANDS or TEA_NAME.search(brand_name) is not None


def _hydration(stats: UserStatsSnapshot) -> bool:
    return any(
        record.category in HYDRATION_CATEGORIES or _is_tea(record.brand_name)
        for record in stats.recent_records
    )


def _ranked_within(rank: int | None, limit: int) -> bool:
    return rank is not None and 1 <= rank <= limit


DEFAULT_BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        "first_drink", "First Drink", "はじめての一杯", "Log your first drink", "🍺",
        lambda s: s.total_consumptions >= 1,
    ),
    BadgeDefinition(
        "3days_streak", "3-Day Streak", "3日連続", "Log drinks 3 days in a row", "🔥",
        lambda s: s.consecutive_days >= 3,
    ),
    BadgeDefinition(
        "perfect_week", "Perfect Week", "パーフェクトウィーク", "Log drinks 7 days in a row", "🎯",
        lambda s: s.consecutive_days >= 7,
    ),
    BadgeDefinition(
        "explorer", "Explorer", "探検家", "Try 5 different products", "🗾",
        lambda s: s.unique_product_count >= 5,
    ),
    BadgeDefinition(
        "variety", "Variety", "バラエティ飲み", "Try 10 different products", "🌈",
        lambda s: s.unique_product_count >= 10,
    ),
    BadgeDefinition(
        "beginner", "Beginner", "ビギナー", "Reach 100 points", "🌟",
        lambda s: s.total_points >= 100,
    ),
    BadgeDefinition(
        "expert", "Expert", "エキスパート", "Reach 500 points", "⭐",
        lambda s: s.total_points >= 500,
    ),
    BadgeDefinition(
        "legend", "Legend", "レジェンド", "Reach 1000 points", "👑",
        lambda s: s.total_points >= 1000,
    ),
    BadgeDefinition(
        "champion", "Champion", "チャンピオン", "Rank first in the weekly ranking", "🏆",
        lambda s: _ranked_within(s.weekly_rank, 1),
    ),
    BadgeDefinition(
        "top10", "Top 10", "トップ10", "Reach the weekly top 10", "🎖️",
        lambda s: _ranked_within(s.weekly_rank, 10),
    ),
    BadgeDefinition(
        "night_owl", "Night Owl", "ナイトオウル", "Log 10 drinks after 22:00", "🌙",
        _night_owl,
    ),
    BadgeDefinition(
        "day_drinker", "Day Drinker", "昼飲みの達人", "Log 5 drinks before 15:00", "☀️",
        _day_drinker,
    ),
    BadgeDefinition(
        "hydration", "Hydration Master", "水分補給マスター", "Log water or tea", "💧",
        _hydration,
    ),
    BadgeDefinition(
        "volume_king", "Volume King", "ボリュームキング", "Drink 10 liters in total", "🍻",
        lambda s: s.total_volume_ml >= 10000,
    ),
    BadgeDefinition(
        "anniversary", "Anniversary", "アニバーサリー", "30 days since joining", "🎂",
        lambda s: s.days_since_joined >= 30,
    ),
)


class BadgeEngine:
    """Evaluates a fixed table of badge definitions against a snapshot."""

    def __init__(self, definitions: Sequence[BadgeDefinition] | None = None):
        self.definitions: tuple[BadgeDefinition, ...] = tuple(
            DEFAULT_BADGES if definitions is None else definitions
        )
        seen: set[str] = set()
        for definition in self.definitions:
            if definition.id in seen:
                raise ValueError(f"Duplicate badge id: {definition.id}")
            seen.add(definition.id)

    def get(self, badge_id: str) -> BadgeDefinition | None:
        return next((d for d in self.definitions if d.id == badge_id), None)

    def evaluate(self, stats: UserStatsSnapshot, already_held: Iterable[str] = ()) -> list[str]:
        """Return ids of badges newly earned, in table order.

        A condition that raises is logged and treated as not met; the
        remaining definitions are still evaluated.
        """
        held = set(already_held)
        earned: list[str] = []
        for definition in self.definitions:
            if definition.id in held:
                continue
            try:
                met = bool(definition.condition(stats))
            except Exception:
                logger.exception("badge condition failed: %s", definition.id)
                continue
            if met:
                earned.append(definition.id)
        return earned


def evaluate_badges(
    stats: UserStatsSnapshot,
    already_held: Iterable[str] = (),
    definitions: Sequence[BadgeDefinition] | None = None,
) -> list[str]:
    """Evaluate badge definitions (the default table unless given)."""

    return BadgeEngine(definitions).evaluate(stats, already_held)


def grant_badges(badge_ids: Iterable[str], earned_at: datetime | None = None) -> list[BadgeGrant]:
    """Package newly earned badge ids as grant records."""

    timestamp = earned_at or datetime.now(timezone.utc)
    return [BadgeGrant(badge_id=badge_id, earned_at=timestamp) for badge_id in badge_ids]
