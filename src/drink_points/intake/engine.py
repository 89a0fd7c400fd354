"""Intake adapter for raw drink classifications."""

from __future__ import annotations

import logging
import math
import os
import re
import unicodedata
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel

from drink_points.catalog import ProductCatalog
from drink_points.exceptions import UnclassifiableError
from drink_points.intake.types import DRINK_CATEGORIES, DrinkCategory, DrinkObservation, IntakeError

logger = logging.getLogger(__name__)

# Accepted spellings per canonical field, first match wins.
_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "brand_name": ("brand_name", "brandName"),
    "category": ("product_type", "category", "productType"),
    "volume_ml": ("volume_ml", "volumeMl"),
    "quantity": ("quantity",),
    "confidence": ("confidence",),
    "is_target_brand": ("is_target_brand", "isTargetBrand"),
}

_CATEGORY_ALIASES: dict[str, DrinkCategory] = {
    "softdrink": "soft_drink",
    "soft": "soft_drink",
    "tea": "soft_drink",
    "coffee": "soft_drink",
    "juice": "soft_drink",
    "beer": "draft_beer",
    "draft": "draft_beer",
    "draught_beer": "draft_beer",
    "lager": "draft_beer",
    "hi_ball": "highball",
    "whisky_highball": "highball",
    "chuhai": "sour",
    "lemon_sour": "sour",
    "gin": "gin_soda",
    "gin_and_soda": "gin_soda",
    "non_alcoholic": "non_alcohol",
    "nonalcoholic": "non_alcohol",
    "alcohol_free": "non_alcohol",
    "mineral_water": "water",
    "生ビール": "draft_beer",
    "ビール": "draft_beer",
    "ハイボール": "highball",
    "サワー": "sour",
    "チューハイ": "sour",
    "ジンソーダ": "gin_soda",
    "ノンアル": "non_alcohol",
    "ノンアルコール": "non_alcohol",
    "水": "water",
    "お茶": "soft_drink",
    "ソフトドリンク": "soft_drink",
}

_FALSE_STRINGS = {"false", "0", "no", "off"}


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class IntakeConfig:
    default_volume_ml: int = 350
    min_volume_ml: int = 50
    max_volume_ml: int = 3000
    default_quantity: int = 1
    min_quantity: int = 1
    max_quantity: int = 10
    default_confidence: float = 0.5
    unknown_brand_name: str = "unknown"
    placeholder_brand_names: tuple[str, ...] = ("不明", "unknown", "n/a", "none")

    @classmethod
    def from_env(cls) -> "IntakeConfig":
        return cls(
            default_volume_ml=_safe_int(os.getenv("INTAKE_DEFAULT_VOLUME_ML"), 350),
            max_volume_ml=_safe_int(os.getenv("INTAKE_MAX_VOLUME_ML"), 3000),
            max_quantity=_safe_int(os.getenv("INTAKE_MAX_QUANTITY"), 10),
        )


class IntakeAdapter:
    """Defaulting and clamping boundary between classifiers and the rule engine."""

    def __init__(self, config: IntakeConfig | None = None, catalog: ProductCatalog | None = None):
        self.config = config or IntakeConfig()
        self.catalog = catalog
        self._placeholders = {name.lower() for name in self.config.placeholder_brand_names}

    def normalize(self, raw: Any) -> DrinkObservation | IntakeError:
        """Normalize a raw classification.

        Args:
            raw: A ClassificationResult, or any mapping with the same keys
                (camelCase spellings are accepted too).

        Returns:
            DrinkObservation, or IntakeError when the result names neither
            a brand nor a category.
        """
        fields = _as_mapping(raw)
        warnings: list[str] = []

        brand_name = self._brand_name(fields)
        category_raw = _pick_text(fields, "category")
        if brand_name is None and category_raw is None:
            logger.debug("classification has no brand and no category: %r", fields)
            return IntakeError(reason="no_brand_or_category")

        category = self._category(category_raw, brand_name, warnings)
        if brand_name is None:
            brand_name = self.config.unknown_brand_name
            warnings.append("brand_name_missing")

        volume_ml = self._bounded_int(
            fields,
            "volume_ml",
            default=self.config.default_volume_ml,
            low=self.config.min_volume_ml,
            high=self.config.max_volume_ml,
            warnings=warnings,
        )
        quantity = self._bounded_int(
            fields,
            "quantity",
            default=self.config.default_quantity,
            low=self.config.min_quantity,
            high=self.config.max_quantity,
            warnings=warnings,
        )
        confidence = self._confidence(fields, warnings)
        is_target_brand = self._is_target_brand(fields, warnings)

        if warnings:
            logger.debug("intake adjusted %s: %s", brand_name, ", ".join(warnings))

        return DrinkObservation(
            brand_name=brand_name,
            category=category,
            volume_ml=volume_ml,
            quantity=quantity,
            confidence=confidence,
            is_target_brand=is_target_brand,
            warnings=warnings,
        )

    def normalize_or_raise(self, raw: Any) -> DrinkObservation:
        result = self.normalize(raw)
        if isinstance(result, IntakeError):
            raise UnclassifiableError(result.reason or result.code)
        return result

    def _brand_name(self, fields: Mapping[str, Any]) -> str | None:
        value = _pick_text(fields, "brand_name")
        if value is None or value.lower() in self._placeholders:
            return None
        return value

    def _category(
        self,
        raw: str | None,
        brand_name: str | None,
        warnings: list[str],
    ) -> DrinkCategory:
        if raw is None:
            product = self.catalog.find(brand_name) if self.catalog else None
            if product is not None and product.category in DRINK_CATEGORIES:
                warnings.append("category_from_catalog")
                return product.category  # type: ignore[return-value]
            warnings.append("category_missing")
            return "other"

        key = _normalize_category(raw)
        if key in DRINK_CATEGORIES:
            return key  # type: ignore[return-value]
        if key in _CATEGORY_ALIASES:
            return _CATEGORY_ALIASES[key]
        warnings.append("category_unmapped")
        return "other"

    @staticmethod
    def _bounded_int(
        fields: Mapping[str, Any],
        name: str,
        *,
        default: int,
        low: int,
        high: int,
        warnings: list[str],
    ) -> int:
        number = _as_number(_pick(fields, name))
        if number is None:
            warnings.append(f"{name}_defaulted")
            return default
        value = _round_half_up(number)
        if value < low or value > high:
            warnings.append(f"{name}_clamped")
            return max(low, min(high, value))
        return value

    def _confidence(self, fields: Mapping[str, Any], warnings: list[str]) -> float:
        number = _as_number(_pick(fields, "confidence"))
        if number is None:
            warnings.append("confidence_defaulted")
            return self.config.default_confidence
        if number < 0.0 or number > 1.0:
            warnings.append("confidence_clamped")
            return max(0.0, min(1.0, number))
        return number

    @staticmethod
    def _is_target_brand(fields: Mapping[str, Any], warnings: list[str]) -> bool:
        value = _pick(fields, "is_target_brand")
        if value is None:
            warnings.append("is_target_brand_inferred")
            return True
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_STRINGS
        if isinstance(value, (int, float)):
            return value != 0
        return True


def normalize_classification(
    raw: Any,
    *,
    catalog: ProductCatalog | None = None,
    default_volume_ml: int = 350,
    min_volume_ml: int = 50,
    max_volume_ml: int = 3000,
    default_quantity: int = 1,
    max_quantity: int = 10,
    default_confidence: float = 0.5,
) -> DrinkObservation | IntakeError:
    """Normalize a raw classification using the default intake rules."""

    adapter = IntakeAdapter(
        config=IntakeConfig(
            default_volume_ml=default_volume_ml,
            min_volume_ml=min_volume_ml,
            max_volume_ml=max_volume_ml,
            default_quantity=default_quantity,
            max_quantity=max_quantity,
            default_confidence=default_confidence,
        ),
        catalog=catalog,
    )
    return adapter.normalize(raw)


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    if isinstance(raw, Mapping):
        return raw
    raise TypeError(f"Unsupported classification type: {type(raw).__name__}")


def _pick(fields: Mapping[str, Any], name: str) -> Any:
    for key in _FIELD_KEYS[name]:
        value = fields.get(key)
        if value is not None:
            return value
    return None


def _pick_text(fields: Mapping[str, Any], name: str) -> str | None:
    # Blank values fall through to the next spelling.
    for key in _FIELD_KEYS[name]:
        value = fields.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _normalize_category(value: str) -> str:
    text = unicodedata.normalize("NFKC", value).lower().strip()
    text = re.sub(r"[\s\-]+", "_", text)
    return text.strip("_")
