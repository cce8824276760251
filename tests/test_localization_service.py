"""Tests for the LLM-backed localization service."""

import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from creative_export.clients.llm import LLMClient
from creative_export.errors import UpstreamError
from creative_export.models import LocalizedCopy, LocalizedProductCopy
from creative_export.services.localization import BrandVoice, LocalizationService

SOURCE = LocalizedCopy(headline="Summer Sale", body_copy="Up to 50% off", cta_text="Shop Now")


class FakeLLM:
    def __init__(self, response: str):
        self.response = response
        self.prompts: list[tuple[str, str, str]] = []

    def call(self, system_prompt: str, user_message: str, label: str = "") -> str:
        self.prompts.append((system_prompt, user_message, label))
        return self.response


def service_for(response: str) -> tuple[LocalizationService, FakeLLM]:
    llm = FakeLLM(response)
    return LocalizationService(llm, BrandVoice("Acme", tone="Playful", personality=["bold"])), llm


class TestLocalizationService:
    """Test prompt building and response parsing."""

    def test_translate_copy(self) -> None:
        service, llm = service_for(
            'Sure! {"headline": "Sommerschlussverkauf", "bodyCopy": "Bis zu 50% Rabatt", "ctaText": "Jetzt kaufen"}'
        )
        copy, products = service.translate("de", SOURCE)

        assert copy == LocalizedCopy("Sommerschlussverkauf", "Bis zu 50% Rabatt", "Jetzt kaufen")
        assert products is None
        _, prompt, label = llm.prompts[0]
        assert "German (de)" in prompt
        assert "Tone: Playful" in prompt
        assert label == "LOCALIZE_de"

    def test_missing_fields_stay_empty(self) -> None:
        service, _ = service_for('{"headline": "Soldes d\'été"}')
        copy, _ = service.translate("fr", SOURCE)
        assert copy.headline == "Soldes d'été"
        assert copy.body_copy is None

    @pytest.mark.parametrize("response", ["no json here", "{broken", '{"unrelated": 1}', "[1, 2]"])
    def test_bad_responses(self, response: str) -> None:
        service, _ = service_for(response)
        with pytest.raises(UpstreamError):
            service.translate("de", SOURCE)

    def test_product_ids_restored_by_position(self) -> None:
        """Test that rewritten product IDs are replaced with the originals."""
        products = [
            LocalizedProductCopy("gid://shopify/Product/123456789", "Running Shoes", "Nike", "Shop Now"),
            LocalizedProductCopy("gid://shopify/Product/987654321", "Rain Jacket", "Acme", "Shop Now"),
        ]
        response = json.dumps(
            {
                "copy": {"headline": "Sommerschlussverkauf"},
                "products": [
                    {"productId": "123", "title": "Laufschuhe", "vendor": "Nike", "ctaText": "Jetzt kaufen"},
                    {"productId": "987", "title": "Regenjacke", "vendor": "", "ctaText": "Jetzt kaufen"},
                ],
            }
        )
        service, llm = service_for(response)

        copy, product_copies = service.translate("de", SOURCE, products)

        assert copy.headline == "Sommerschlussverkauf"
        assert [p.product_id for p in product_copies] == [p.product_id for p in products]
        assert product_copies[0].title == "Laufschuhe"
        assert product_copies[1].vendor == "Acme"
        assert "gid://shopify/Product/123456789" in llm.prompts[0][1]


class TestLLMClient:
    """Test the OpenAI wrapper with the SDK client replaced."""

    def make_client(self, create) -> LLMClient:
        client = LLMClient(api_key="sk-test", model="test-model")
        client._client = SimpleNamespace(responses=SimpleNamespace(create=create))
        return client

    def test_call_tracks_tokens(self) -> None:
        def create(**kwargs):
            assert kwargs["model"] == "test-model"
            return SimpleNamespace(
                output_text=' {"headline": "Hallo"} \n',
                usage=SimpleNamespace(input_tokens=12, output_tokens=5),
            )

        client = self.make_client(create)
        assert client.call("system", "user", label="LOCALIZE_de") == '{"headline": "Hallo"}'
        client.call("system", "user")
        assert client.get_token_totals() == (24, 10)

    def test_provider_error_wrapped(self) -> None:
        def create(**kwargs):
            raise OpenAIError("rate limited")

        with pytest.raises(UpstreamError, match="openai"):
            self.make_client(create).call("system", "user")
