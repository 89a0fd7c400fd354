"""Providers for drink-points."""

from drink_points.providers.base import BaseProvider
from drink_points.providers.gemini import GeminiProvider

__all__ = ["BaseProvider", "GeminiProvider"]
