"""Target-brand product catalog."""

from drink_points.catalog.repository import Product, ProductCatalog

__all__ = ["Product", "ProductCatalog"]
