"""Product catalog v1."""

from drink_points.catalog.data.v1.products import PRODUCTS

__all__ = ["PRODUCTS"]
