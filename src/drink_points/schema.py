"""Data models for drink-points."""

from pydantic import BaseModel


class ClassificationResult(BaseModel):
    """Raw drink classification returned by a vision provider.

    Every field is optional: providers only fill what they could read from the
    image. Values are not validated beyond their JSON type here, the intake
    adapter applies defaults and bounds.
    """

    brand_name: str | None = None
    product_type: str | None = None
    container: str | None = None
    volume_ml: float | None = None
    quantity: int | None = None
    confidence: float | None = None
    is_target_brand: bool | None = None
    error_message: str | None = None
