"""Base provider interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image

from drink_points.schema import ClassificationResult

ImageInput = str | Path | Image.Image


class BaseProvider(ABC):
    """Abstract base class for drink classifiers."""

    @abstractmethod
    def classify(self, image: ImageInput) -> ClassificationResult:
        """Classify the drink shown in an image.

        Args:
            image: Image input (file path, Path object, or PIL Image)

        Returns:
            ClassificationResult with whatever the classifier could read
        """
        pass

    def get_classification_metadata(self) -> dict[str, str]:
        """Return provider-specific classification metadata."""
        return {}
