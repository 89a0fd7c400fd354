"""drink-points: Earn loyalty points and badges from drink photos."""

from drink_points.core import CaptureResult, capture, classify, score_capture
from drink_points.intake import DrinkObservation, IntakeError, normalize_classification
from drink_points.rules import PointAward, compute_award, evaluate_badges
from drink_points.schema import ClassificationResult
from drink_points.stats import UserStatsSnapshot

__version__ = "0.1.0"

__all__ = [
    "capture",
    "classify",
    "compute_award",
    "evaluate_badges",
    "normalize_classification",
    "score_capture",
    "CaptureResult",
    "ClassificationResult",
    "DrinkObservation",
    "IntakeError",
    "PointAward",
    "UserStatsSnapshot",
    "__version__",
]
