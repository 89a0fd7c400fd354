"""Data models for intake output."""

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

DrinkCategory = Literal[
    "draft_beer",
    "highball",
    "sour",
    "gin_soda",
    "non_alcohol",
    "water",
    "soft_drink",
    "other",
]
DRINK_CATEGORIES: tuple[str, ...] = get_args(DrinkCategory)


class DrinkObservation(BaseModel):
    """Canonical description of one captured drink."""

    model_config = ConfigDict(frozen=True)

    brand_name: str
    category: DrinkCategory
    volume_ml: int = Field(gt=0)
    quantity: int = Field(ge=1)
    confidence: float = Field(ge=0.0, le=1.0)
    is_target_brand: bool
    warnings: list[str] = Field(default_factory=list)


class IntakeError(BaseModel):
    """A classification that cannot be turned into an observation."""

    model_config = ConfigDict(frozen=True)

    code: Literal["unclassifiable"] = "unclassifiable"
    reason: str | None = None
