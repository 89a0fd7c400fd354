"""Tests for the Gemini provider."""

from types import SimpleNamespace

import pytest
from PIL import Image

from drink_points.catalog import ProductCatalog
from drink_points.exceptions import AuthenticationError, ImageError
from drink_points.providers.gemini import GeminiProvider, build_prompt


class MockClient:
    def __init__(self, text=None, error=None):
        self.calls = []
        client = self

        class Models:
            @staticmethod
            def generate_content(model, contents, config):
                client.calls.append((model, contents, config))
                if error is not None:
                    raise error
                return SimpleNamespace(text=text)

        self.models = Models()


def test_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        GeminiProvider()


def test_prompt_lists_catalog_and_categories():
    prompt = build_prompt(ProductCatalog())

    assert "角ハイボール" in prompt
    assert "gin_soda" in prompt
    assert "soft_drink" in prompt


def test_classify_parses_response():
    client = MockClient(
        text=(
            '{"brand_name":"こだわり酒場のレモンサワー","product_type":"sour","container":"can",'
            '"volume_ml":350,"quantity":1,"confidence":0.88,"is_target_brand":true,"error_message":null}'
        )
    )
    provider = GeminiProvider(client=client, model="test-model")

    result = provider.classify(Image.new("RGB", (20, 20), color="white"))

    assert result.brand_name == "こだわり酒場のレモンサワー"
    assert result.product_type == "sour"
    assert result.is_target_brand is True
    assert client.calls[0][0] == "test-model"
    assert provider.get_classification_metadata() == {"provider": "gemini", "model": "test-model"}


def test_classify_wraps_failures():
    provider = GeminiProvider(client=MockClient(error=RuntimeError("boom")))

    with pytest.raises(ImageError):
        provider.classify(Image.new("RGB", (20, 20)))


def test_missing_image_file_raises(tmp_path):
    provider = GeminiProvider(client=MockClient(text="{}"))

    with pytest.raises(ImageError):
        provider.classify(tmp_path / "missing.jpg")
