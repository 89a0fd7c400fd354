"""Gemini provider implementation."""

import logging
import os
from pathlib import Path

from google import genai
from google.genai import errors, types
from PIL import Image

from drink_points.catalog import ProductCatalog
from drink_points.exceptions import AuthenticationError, ImageError, RateLimitError
from drink_points.intake.types import DRINK_CATEGORIES
from drink_points.providers.base import BaseProvider, ImageInput
from drink_points.schema import ClassificationResult

logger = logging.getLogger(__name__)

NON_TARGET_EXAMPLES = (
    "Coca-Cola, Ayataka, Sokenbicha, Aquarius, I LOHAS, Georgia",
    "Asahi Super Dry, Clear Asahi, Wilkinson, Mitsuya Cider, Wonda",
    "Kirin Ichiban Shibori, Tanrei, Gogo no Kocha, Nama-cha, Fire",
    "Sapporo Black Label, Yebisu",
    "Ito En Oi Ocha, Pepsi",
)

CLASSIFICATION_PROMPT = """Analyze this drink image and classify the beverage.
Return a JSON object with these fields (use null for missing information):

{{
  "brand_name": "Exact product name as printed",
  "product_type": "One of: {categories}",
  "container": "One of: mug, glass, can, bottle",
  "volume_ml": "Estimated volume in ml",
  "quantity": "Number of drinks in the image",
  "confidence": "Classification confidence between 0 and 1",
  "is_target_brand": "true if the product is in the target brand list below",
  "error_message": "Short reason when the image is not a target-brand drink, else null"
}}

Target brand products:
{products}

These are other manufacturers' products and are NOT target brands:
{non_target}

Important:
- If the image does not show a drink, set product_type to "other"
- If the image is blurry, lower the confidence
- Identify the manufacturer carefully before setting is_target_brand
- Return valid JSON only, no additional text"""


def build_prompt(catalog: ProductCatalog) -> str:
    return CLASSIFICATION_PROMPT.format(
        categories=", ".join(DRINK_CATEGORIES),
        products="\n".join(f"- {name}" for name in catalog.active_brand_names()),
        non_target="\n".join(f"- {line}" for line in NON_TARGET_EXAMPLES),
    )


class GeminiProvider(BaseProvider):
    """Gemini Vision API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        *,
        catalog: ProductCatalog | None = None,
        client=None,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use. Falls back to DRINK_POINTS_MODEL env var.
            catalog: Target-brand catalog listed in the prompt.
            client: Preconfigured genai client, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.model = model or os.getenv("DRINK_POINTS_MODEL", "gemini-2.0-flash")
        self.catalog = catalog or ProductCatalog()
        if client is not None:
            self.api_key = api_key
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    def _load_image(self, image: ImageInput) -> Image.Image:
        """Load image from various input types."""
        if isinstance(image, Image.Image):
            return image

        path = Path(image) if isinstance(image, str) else image
        if not path.exists():
            raise ImageError(f"Image file not found: {path}")

        try:
            return Image.open(path)
        except Exception as e:
            raise ImageError(f"Failed to open image: {e}") from e

    def classify(self, image: ImageInput) -> ClassificationResult:
        """Classify a drink image using Gemini Vision.

        Raises:
            ImageError: If image cannot be loaded or the response is unusable
            RateLimitError: If API rate limit is exceeded
            AuthenticationError: If API key is invalid
        """
        pil_image = self._load_image(image)

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[pil_image, build_prompt(self.catalog)],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=ClassificationResult,
                    temperature=0.3,
                ),
            )
            return ClassificationResult.model_validate_json(response.text)

        except errors.ClientError as e:
            message = str(e).lower()
            if "rate" in message or "quota" in message:
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if "auth" in message or "key" in message:
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise
        except Exception as e:
            logger.exception("gemini classification failed")
            raise ImageError(f"Failed to classify image: {e}") from e

    def get_classification_metadata(self) -> dict[str, str]:
        return {"provider": "gemini", "model": self.model}
