"""Point and badge rules."""

from drink_points.rules.badges import (
    DEFAULT_BADGES,
    BadgeDefinition,
    BadgeEngine,
    BadgeGrant,
    evaluate_badges,
    grant_badges,
)
from drink_points.rules.points import DEFAULT_RULES, PointAward, PointRules, compute_award

__all__ = [
    "DEFAULT_BADGES",
    "DEFAULT_RULES",
    "BadgeDefinition",
    "BadgeEngine",
    "BadgeGrant",
    "PointAward",
    "PointRules",
    "compute_award",
    "evaluate_badges",
    "grant_badges",
]
