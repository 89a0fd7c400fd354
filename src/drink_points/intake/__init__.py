"""Intake adapter: raw classifier output to DrinkObservation."""

from drink_points.intake.engine import IntakeAdapter, IntakeConfig, normalize_classification
from drink_points.intake.types import DRINK_CATEGORIES, DrinkCategory, DrinkObservation, IntakeError

__all__ = [
    "DRINK_CATEGORIES",
    "DrinkCategory",
    "DrinkObservation",
    "IntakeAdapter",
    "IntakeConfig",
    "IntakeError",
    "normalize_classification",
]
