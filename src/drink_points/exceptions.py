"""Custom exceptions for drink-points."""


class DrinkPointsError(Exception):
    """Base exception for drink-points."""

    pass


class AuthenticationError(DrinkPointsError):
    """Raised when API key is invalid or missing."""

    pass


class RateLimitError(DrinkPointsError):
    """Raised when API rate limit is exceeded."""

    pass


class ImageError(DrinkPointsError):
    """Raised when image cannot be read or is invalid."""

    pass


class UnclassifiableError(DrinkPointsError):
    """Raised when a classification has neither a brand name nor a category.

    Callers should fall back to manual product selection.
    """

    pass
