"""Tests for the intake adapter."""

import pytest

from drink_points import ClassificationResult, DrinkObservation, IntakeError, normalize_classification
from drink_points.catalog import ProductCatalog
from drink_points.exceptions import UnclassifiableError
from drink_points.intake import IntakeAdapter, IntakeConfig


def test_normalize_full_result():
    raw = ClassificationResult(
        brand_name="金麦",
        product_type="draft_beer",
        volume_ml=350,
        quantity=2,
        confidence=0.92,
        is_target_brand=True,
    )

    result = normalize_classification(raw)

    assert isinstance(result, DrinkObservation)
    assert result.brand_name == "金麦"
    assert result.category == "draft_beer"
    assert result.volume_ml == 350
    assert result.quantity == 2
    assert result.confidence == 0.92
    assert result.is_target_brand is True
    assert result.warnings == []


def test_missing_fields_use_defaults():
    result = normalize_classification({"brand_name": "翠", "product_type": "gin_soda"})

    assert isinstance(result, DrinkObservation)
    assert result.volume_ml == 350
    assert result.quantity == 1
    assert result.confidence == 0.5
    assert result.is_target_brand is True
    assert {
        "volume_ml_defaulted",
        "quantity_defaulted",
        "confidence_defaulted",
        "is_target_brand_inferred",
    } <= set(result.warnings)


def test_explicit_false_target_brand_is_kept():
    result = normalize_classification(
        {"brand_name": "Super Dry", "product_type": "draft_beer", "is_target_brand": False}
    )

    assert result.is_target_brand is False


def test_string_false_target_brand():
    result = normalize_classification(
        {"brandName": "Super Dry", "category": "draft_beer", "isTargetBrand": "false"}
    )

    assert result.is_target_brand is False


@pytest.mark.parametrize(
    ("volume", "expected"),
    [(-100, 50), (0, 50), (10, 50), (5000, 3000), (500, 500)],
)
def test_volume_is_clamped(volume, expected):
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "volume_ml": volume}
    )

    assert result.volume_ml == expected
    if volume != expected:
        assert "volume_ml_clamped" in result.warnings


@pytest.mark.parametrize(("quantity", "expected"), [(0, 1), (-3, 1), (25, 10), (4, 4)])
def test_quantity_is_clamped(quantity, expected):
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "quantity": quantity}
    )

    assert result.quantity == expected


def test_confidence_is_clamped():
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "confidence": 1.7}
    )

    assert result.confidence == 1.0
    assert "confidence_clamped" in result.warnings


def test_non_numeric_values_count_as_missing():
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "volume_ml": "a pint", "quantity": True}
    )

    assert result.volume_ml == 350
    assert result.quantity == 1


def test_numeric_strings_are_parsed():
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "volume_ml": " 500 ", "confidence": "0.9"}
    )

    assert result.volume_ml == 500
    assert result.confidence == 0.9


def test_unknown_category_maps_to_other():
    result = normalize_classification({"brand_name": "Mystery", "product_type": "kombucha"})

    assert result.category == "other"
    assert "category_unmapped" in result.warnings


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("softdrink", "soft_drink"),
        ("Soft Drink", "soft_drink"),
        ("Draft-Beer", "draft_beer"),
        ("non-alcoholic", "non_alcohol"),
        ("ハイボール", "highball"),
        ("GIN_SODA", "gin_soda"),
    ],
)
def test_category_aliases(raw, expected):
    result = normalize_classification({"brand_name": "x", "product_type": raw})

    assert result.category == expected


def test_no_brand_and_no_category_is_unclassifiable():
    result = normalize_classification({"volume_ml": 350, "confidence": 0.9})

    assert isinstance(result, IntakeError)
    assert result.code == "unclassifiable"


def test_placeholder_brand_and_empty_category_is_unclassifiable():
    result = normalize_classification({"brand_name": "不明", "product_type": "  "})

    assert isinstance(result, IntakeError)


def test_category_without_brand_uses_unknown_brand():
    result = normalize_classification({"product_type": "highball"})

    assert isinstance(result, DrinkObservation)
    assert result.brand_name == "unknown"
    assert result.category == "highball"
    assert "brand_name_missing" in result.warnings


def test_brand_without_category_is_other():
    result = normalize_classification({"brand_name": "Mystery Drink"})

    assert result.category == "other"
    assert "category_missing" in result.warnings


def test_brand_without_category_uses_catalog():
    adapter = IntakeAdapter(catalog=ProductCatalog())

    result = adapter.normalize({"brand_name": "角ハイ"})

    assert result.category == "highball"
    assert "category_from_catalog" in result.warnings


def test_custom_config_bounds():
    adapter = IntakeAdapter(config=IntakeConfig(default_volume_ml=500, max_quantity=3))

    result = adapter.normalize({"brand_name": "金麦", "product_type": "draft_beer", "quantity": 6})

    assert result.volume_ml == 500
    assert result.quantity == 3


def test_normalize_or_raise():
    adapter = IntakeAdapter()

    with pytest.raises(UnclassifiableError):
        adapter.normalize_or_raise({})

    assert adapter.normalize_or_raise({"product_type": "water"}).category == "water"


def test_unsupported_input_type_raises():
    with pytest.raises(TypeError):
        normalize_classification(["not", "a", "mapping"])


def test_observation_is_immutable():
    result = normalize_classification({"brand_name": "金麦", "product_type": "draft_beer"})

    with pytest.raises(Exception):
        result.quantity = 5


def test_blank_product_type_falls_back_to_category():
    result = normalize_classification({"product_type": "", "category": "highball"})

    assert isinstance(result, DrinkObservation)
    assert result.category == "highball"
    assert result.brand_name == "unknown"


def test_blank_brand_name_falls_back_to_camel_case_key():
    result = normalize_classification({"brand_name": "  ", "brandName": "翠", "category": "gin_soda"})

    assert result.brand_name == "翠"


@pytest.mark.parametrize(("quantity", "expected"), [(2.5, 3), (3.5, 4), (1.49, 1)])
def test_fractional_quantity_rounds_half_up(quantity, expected):
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "quantity": quantity}
    )

    assert result.quantity == expected


def test_fractional_volume_rounds_half_up():
    result = normalize_classification(
        {"brand_name": "金麦", "product_type": "draft_beer", "volume_ml": 350.5}
    )

    assert result.volume_ml == 351
