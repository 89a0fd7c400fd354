"""Point formula for captured drinks."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

from drink_points.intake.types import DrinkObservation


def _default_multipliers() -> dict[str, float]:
    return {
        "draft_beer": 1.2,
        "highball": 1.3,
        "sour": 1.1,
        "gin_soda": 1.4,
        "non_alcohol": 0.8,
        "water": 0.5,
        "soft_drink": 0.5,
        "other": 1.0,
    }


@dataclass(frozen=True)
class PointRules:
    base_points: int = 10
    category_multipliers: dict[str, float] = field(default_factory=_default_multipliers)
    default_multiplier: float = 1.0
    large_volume_ml: int = 500
    large_volume_bonus: float = 1.5
    confidence_threshold: float = 0.8
    confidence_bonus: float = 1.1

    def multiplier_for(self, category: str) -> float:
        return self.category_multipliers.get(category, self.default_multiplier)


DEFAULT_RULES = PointRules()


class PointAward(BaseModel):
    """Breakdown of the points earned by one observation."""

    model_config = ConfigDict(frozen=True)

    base_points: int
    category_multiplier: float
    volume_bonus: float
    confidence_bonus: float
    quantity: int
    final_points: int = Field(ge=0)

    @classmethod
    def zero(cls, quantity: int) -> "PointAward":
        return cls(
            base_points=0,
            category_multiplier=1.0,
            volume_bonus=1.0,
            confidence_bonus=1.0,
            quantity=quantity,
            final_points=0,
        )


def compute_award(observation: DrinkObservation, rules: PointRules | None = None) -> PointAward:
    """Compute the point award for an observation.

    Only target-brand drinks earn points; that check runs before anything
    else so no bonus can lift a non-target drink above zero.
    """
    if not observation.is_target_brand:
        return PointAward.zero(observation.quantity)

    rules = rules or DEFAULT_RULES
    category_multiplier = rules.multiplier_for(observation.category)
    volume_bonus = rules.large_volume_bonus if observation.volume_ml >= rules.large_volume_ml else 1.0
    confidence_bonus = (
        rules.confidence_bonus if observation.confidence > rules.confidence_threshold else 1.0
    )

    raw = (
        Decimal(rules.base_points)
        * _decimal(category_multiplier)
        * _decimal(volume_bonus)
        * _decimal(confidence_bonus)
        * Decimal(observation.quantity)
    )
    final_points = max(0, int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))

    return PointAward(
        base_points=rules.base_points,
        category_multiplier=category_multiplier,
        volume_bonus=volume_bonus,
        confidence_bonus=confidence_bonus,
        quantity=observation.quantity,
        final_points=final_points,
    )


def _decimal(value: float) -> Decimal:
    # str() keeps 1.1 as 1.1 instead of its binary expansion.
    return Decimal(str(value))
