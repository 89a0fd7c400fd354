"""Validate product catalog consistency.

Checks:
1. Python sources and JSON mirrors are identical.
2. Every product category is a known drink category.
3. No brand name or alias resolves to two different products.
"""

from __future__ import annotations

import json
import re
import runpy
import unicodedata
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
DATA_ROOT = ROOT / "src" / "drink_points" / "catalog" / "data"
CATEGORIES = {
    "draft_beer",
    "highball",
    "sour",
    "gin_soda",
    "non_alcohol",
    "water",
    "soft_drink",
    "other",
}


def normalize_brand(value: str) -> str:
    text = unicodedata.normalize("NFKC", value).lower().strip()
    return re.sub(r"[\s・\-_'’.]+", "", text)


def fail(message: str) -> None:
    print(f"[catalog-check] ERROR: {message}")
    raise SystemExit(1)


def load_python_products(path: Path) -> list[dict]:
    namespace = runpy.run_path(str(path))
    if "PRODUCTS" not in namespace or not isinstance(namespace["PRODUCTS"], list):
        fail(f"Missing or invalid constant 'PRODUCTS' in {path}")
    return namespace["PRODUCTS"]


def load_json(path: Path) -> list[dict]:
    if not path.exists():
        fail(f"Missing JSON file: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        fail(f"JSON file must contain a list: {path}")
    return data


def validate_categories(products: list[dict]) -> None:
    for product in products:
        if product.get("category") not in CATEGORIES:
            fail(f"Unknown category for {product.get('brand_name')!r}: {product.get('category')!r}")


def validate_names(products: list[dict]) -> None:
    seen: dict[str, str] = {}
    for product in products:
        brand = product.get("brand_name")
        if not isinstance(brand, str) or not brand.strip():
            fail(f"Invalid product entry: {product}")
        for name in [brand, *product.get("aliases", [])]:
            signature = normalize_brand(name)
            if signature in seen and seen[signature] != brand:
                fail(f"Name {name!r} matches both {seen[signature]!r} and {brand!r}")
            seen[signature] = brand


def iter_catalog_versions() -> list[Path]:
    versions = [
        path
        for path in sorted(DATA_ROOT.iterdir())
        if path.is_dir() and (path / "products.py").exists() and (path / "products.json").exists()
    ]
    if not versions:
        fail(f"No catalog versions found under {DATA_ROOT}")
    return versions


def main() -> int:
    for version_dir in iter_catalog_versions():
        products_py = load_python_products(version_dir / "products.py")
        products_json = load_json(version_dir / "products.json")
        if products_py != products_json:
            fail(f"{version_dir.name}/products.py and products.json are out of sync.")
        validate_categories(products_py)
        validate_names(products_py)

    print("[catalog-check] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
