"""Catalog repository for target-brand products."""

from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from importlib import import_module
from importlib.resources import files


@dataclass(frozen=True)
class Product:
    brand_name: str
    category: str
    aliases: tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True

    def names(self) -> tuple[str, ...]:
        return (self.brand_name, *self.aliases)


class ProductCatalog:
    """Loads the promoted product family from packaged catalog data."""

    def __init__(self, version: str = "v1"):
        self.version = version
        self.products: list[Product] = self._load_products()
        self._index = self._build_index()

    def active_products(self) -> list[Product]:
        return [product for product in self.products if product.is_active]

    def active_brand_names(self) -> list[str]:
        return [product.brand_name for product in self.active_products()]

    def find(self, brand_name: str | None) -> Product | None:
        """Return the active product whose name or alias matches, if any."""
        if not brand_name:
            return None
        return self._index.get(normalize_brand(brand_name))

    def is_target(self, brand_name: str | None) -> bool:
        return self.find(brand_name) is not None

    def _build_index(self) -> dict[str, Product]:
        index: dict[str, Product] = {}
        for product in self.active_products():
            for name in product.names():
                index.setdefault(normalize_brand(name), product)
        return index

    def _load_products(self) -> list[Product]:
        try:
            module = import_module(f"drink_points.catalog.data.{self.version}.products")
            data = module.PRODUCTS
        except ModuleNotFoundError:
            path = files("drink_points.catalog.data").joinpath(self.version, "products.json")
            data = json.loads(path.read_text(encoding="utf-8"))
        return [
            Product(
                brand_name=item["brand_name"],
                category=item["category"],
                aliases=tuple(item.get("aliases", ())),
                is_active=item.get("is_active", True),
            )
            for item in data
        ]


def normalize_brand(value: str) -> str:
    text = unicodedata.normalize("NFKC", value).lower().strip()
    text = re.sub(r"[\s・\-_'’.]+", "", text)
    return text
