"""Tests for the HTTP API."""

import base64
import json
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from api.index import app
from drink_points import ClassificationResult
from drink_points.cli import main
from drink_points.exceptions import RateLimitError


@pytest.fixture
def client():
    return TestClient(app)


def _png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (16, 16), color="gold").save(buffer, format="PNG")
    return buffer.getvalue()


def _mock_classifier(mocker, result: ClassificationResult):
    return mocker.patch(
        "api.index.classify_with_metadata",
        return_value=(result, {"provider": "gemini", "model": "test-model"}),
    )


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_analyze_json_body(client, mocker):
    _mock_classifier(
        mocker,
        ClassificationResult(
            brand_name="ザ・プレミアム・モルツ",
            product_type="draft_beer",
            volume_ml=350,
            quantity=1,
            confidence=0.9,
            is_target_brand=True,
        ),
    )
    image = base64.b64encode(_png_bytes()).decode()

    response = client.post("/analyze", json={"imageBase64": f"data:image/png;base64,{image}"})

    assert response.status_code == 200
    body = response.json()
    assert body["points"] == 13
    assert body["award"]["categoryMultiplier"] == 1.2
    assert body["observation"]["category"] == "draft_beer"
    assert body["characterId"] == "premol"
    assert body["metadata"]["provider"] == "gemini"


def test_analyze_multipart_non_target(client, mocker):
    _mock_classifier(
        mocker,
        ClassificationResult(
            brand_name="Super Dry",
            product_type="draft_beer",
            is_target_brand=False,
            error_message="not a target brand product",
        ),
    )

    response = client.post("/analyze", files={"image": ("drink.png", _png_bytes(), "image/png")})

    assert response.status_code == 200
    body = response.json()
    assert body["points"] == 0
    assert body["characterId"] is None
    assert body["errorMessage"] == "not a target brand product"


def test_analyze_unclassifiable_returns_422(client, mocker):
    _mock_classifier(mocker, ClassificationResult(confidence=0.1))
    image = base64.b64encode(_png_bytes()).decode()

    response = client.post("/analyze", json={"imageBase64": image})

    assert response.status_code == 422
    assert response.json()["detail"] == "unclassifiable"


def test_analyze_rate_limited(client, mocker):
    mocker.patch("api.index.classify_with_metadata", side_effect=RateLimitError("quota"))
    image = base64.b64encode(_png_bytes()).decode()

    response = client.post("/analyze", json={"imageBase64": image})

    assert response.status_code == 429


def test_analyze_rejects_bad_base64(client):
    response = client.post("/analyze", json={"imageBase64": "not base64!!"})

    assert response.status_code == 400


def test_analyze_rejects_unsupported_content_type(client):
    response = client.post("/analyze", files={"image": ("drink.gif", b"GIF89a", "image/gif")})

    assert response.status_code == 400


def test_score_manual_selection(client):
    response = client.post(
        "/score",
        json={"brandName": "翠", "category": "gin_soda", "volumeMl": 700, "quantity": 2},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["points"] == 42
    assert "confidence_defaulted" in body["warnings"]


def test_score_empty_body_is_unclassifiable(client):
    response = client.post("/score", json={})

    assert response.status_code == 422
    assert response.json()["detail"] == "unclassifiable"


def test_score_fractional_quantity_rounds_half_up(client):
    response = client.post("/score", json={"brandName": "金麦", "category": "draft_beer", "quantity": 2.5})

    assert response.status_code == 200
    assert response.json()["observation"]["quantity"] == 3


def test_score_malformed_body_is_invalid_request(client):
    response = client.post("/score", json={"brandName": "金麦", "quantity": "lots"})

    assert response.status_code == 400
    assert response.json()["detail"] == "invalid_request"


def test_badge_definitions(client):
    response = client.get("/badges")

    assert response.status_code == 200
    assert len(response.json()) == 15
    assert response.json()[0]["id"] == "first_drink"
    assert "nameJa" in response.json()[0]


def test_evaluate_badges(client):
    response = client.post(
        "/badges/evaluate",
        json={
            "stats": {"totalPoints": 1000, "totalConsumptions": 1},
            "alreadyHeld": ["beginner"],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["newBadges"] == ["first_drink", "expert", "legend"]
    assert [grant["badgeId"] for grant in body["grants"]] == body["newBadges"]


def test_evaluate_badges_reads_camel_case_records(client):
    response = client.post(
        "/badges/evaluate",
        json={
            "stats": {
                "totalConsumptions": 1,
                "recentRecords": [{"category": "soft_drink", "hour": 9, "brandName": "伊右衛門"}],
            },
            "alreadyHeld": ["first_drink"],
        },
    )

    assert response.status_code == 200
    assert response.json()["newBadges"] == ["hydration"]
    assert "earnedAt" in response.json()["grants"][0]


def test_catalog_products(client):
    response = client.get("/catalog/v1/products")

    assert response.status_code == 200
    assert response.json()["total"] == len(response.json()["products"])
    assert "brandName" in response.json()["products"][0]


def test_catalog_unknown_version(client):
    response = client.get("/catalog/v99/products")

    assert response.status_code == 404


def test_cli_and_api_score_brand_only_result_alike(client, mocker, capsys):
    classification = ClassificationResult(brand_name="角ハイ", confidence=0.9)
    _mock_classifier(mocker, classification)
    mocker.patch("drink_points.cli.classify", return_value=classification)
    image = base64.b64encode(_png_bytes()).decode()

    api_body = client.post("/analyze", json={"imageBase64": image}).json()
    assert main(["photo.jpg", "--json"]) == 0
    cli_body = json.loads(capsys.readouterr().out)

    assert api_body["points"] == cli_body["award"]["final_points"] == 14
    assert api_body["observation"]["category"] == cli_body["observation"]["category"] == "highball"
    assert api_body["characterId"] == cli_body["character_id"] == "kakuhai"
