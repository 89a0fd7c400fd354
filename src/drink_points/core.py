"""Core capture pipeline: classify, normalize, score."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from PIL import Image
from pydantic import BaseModel

from drink_points.catalog import ProductCatalog
from drink_points.characters import character_for_category
from drink_points.intake import DrinkObservation, IntakeAdapter, IntakeConfig, IntakeError
from drink_points.providers.base import BaseProvider
from drink_points.rules import PointAward, PointRules, compute_award
from drink_points.schema import ClassificationResult

ImageInput = str | Path | Image.Image


@lru_cache(maxsize=1)
def default_catalog() -> ProductCatalog:
    return ProductCatalog()


class CaptureResult(BaseModel):
    """Outcome of scoring one captured drink."""

    observation: DrinkObservation
    award: PointAward
    character_id: str | None = None

    @property
    def points(self) -> int:
        return self.award.final_points


def _build_gemini_provider(api_key: str | None) -> BaseProvider:
    from drink_points.providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key)


def _select_provider(provider: str | None, api_key: str | None) -> BaseProvider:
    provider_name = (provider or os.getenv("DRINK_POINTS_PROVIDER", "gemini")).strip().lower()
    if provider_name == "gemini":
        return _build_gemini_provider(api_key)
    raise ValueError(f"Unsupported provider: {provider_name}")


def classify(
    image: ImageInput,
    *,
    api_key: str | None = None,
    provider: str | None = None,
) -> ClassificationResult:
    """Classify the drink in a photo.

    Args:
        image: Image input - file path (str), Path object, or PIL Image.
        api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
        provider: Provider name. Defaults to `DRINK_POINTS_PROVIDER` env var,
            then `gemini`.

    Returns:
        ClassificationResult. Fields will be None if not recognized.
    """
    engine = _select_provider(provider, api_key)
    return engine.classify(image)


def classify_with_metadata(
    image: ImageInput,
    *,
    api_key: str | None = None,
    provider: str | None = None,
) -> tuple[ClassificationResult, dict[str, str]]:
    """Classify a drink and return provider metadata."""

    engine = _select_provider(provider, api_key)
    result = engine.classify(image)
    metadata = engine.get_classification_metadata() or {}
    return result, metadata


def score_capture(
    raw: Any,
    *,
    intake_config: IntakeConfig | None = None,
    catalog: ProductCatalog | None = None,
    rules: PointRules | None = None,
) -> CaptureResult | IntakeError:
    """Normalize a raw classification and compute its award.

    Non-target drinks score zero and unlock no character. An unclassifiable
    result is returned as-is so the caller can ask for manual selection.
    The packaged catalog fills in categories unless another is given.
    """
    observation = IntakeAdapter(config=intake_config, catalog=catalog or default_catalog()).normalize(raw)
    if isinstance(observation, IntakeError):
        return observation

    award = compute_award(observation, rules)
    character_id = character_for_category(observation.category) if observation.is_target_brand else None
    return CaptureResult(observation=observation, award=award, character_id=character_id)


def capture(
    image: ImageInput,
    *,
    api_key: str | None = None,
    provider: str | None = None,
    intake_config: IntakeConfig | None = None,
    catalog: ProductCatalog | None = None,
    rules: PointRules | None = None,
) -> CaptureResult | IntakeError:
    """Classify a drink photo and score it."""

    result = classify(image, api_key=api_key, provider=provider)
    return score_capture(result, intake_config=intake_config, catalog=catalog, rules=rules)
