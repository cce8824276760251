"""Localization service - transcreate ad copy with an LLM."""

import json
import logging
from dataclasses import dataclass, field

from ..clients.llm import LLMClient
from ..errors import UpstreamError
from ..localization.runner import TranslationBackend, TranslationResult
from ..models.localization import LocalizedCopy, LocalizedProductCopy, get_language

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert multilingual advertising copywriter. You transcreate
ad copy for a target market instead of translating it literally.

Rules:
- Adapt idioms, humor and cultural references.
- Preserve the brand voice (playful stays playful, formal stays formal).
- Keep length similar: headlines stay punchy, body copy grows at most 20%.
- Adapt CTAs to what works in the target market ("Shop Now" -> "Jetzt kaufen").
- Never translate brand names or product names.

Return ONLY a JSON object:
{"headline": "...", "bodyCopy": "...", "ctaText": "..."}
"""

PRODUCT_SYSTEM_PROMPT = """You are an expert multilingual advertising copywriter localizing
product ad copy for dynamic product ads.

Rules:
- Always translate the descriptive parts of product titles; keep brand names as-is.
- Always translate CTAs naturally for the target market.
- Titles should not grow more than 20% in length.

Return ONLY a JSON object:
{"copy": {"headline": "...", "bodyCopy": "...", "ctaText": "..."},
 "products": [{"productId": "...", "title": "...", "vendor": "...", "ctaText": "..."}]}
"""


@dataclass
class BrandVoice:
    """Brand profile fields that steer the tone of translations."""

    name: str
    industry: str = "General"
    tone: str = "Professional"
    personality: list[str] = field(default_factory=list)


class LocalizationService(TranslationBackend):
    """Translate campaign and product copy into one language per call."""

    def __init__(self, llm: LLMClient, brand: BrandVoice):
        self.llm = llm
        self.brand = brand

    def translate(
        self,
        language_code: str,
        copy: LocalizedCopy,
        products: list[LocalizedProductCopy] | None = None,
    ) -> TranslationResult:
        language = get_language(language_code)
        language_name = language.name if language else language_code

        if products:
            prompt = self._build_product_prompt(language_code, language_name, copy, products)
            response = self.llm.call(PRODUCT_SYSTEM_PROMPT, prompt, label=f"LOCALIZE_{language_code}")
            data = self._parse_response(response)
            return self._copy_from(data.get("copy") or {}, copy), self._products_from(data, products)

        prompt = self._build_prompt(language_code, language_name, copy)
        response = self.llm.call(SYSTEM_PROMPT, prompt, label=f"LOCALIZE_{language_code}")
        return self._copy_from(self._parse_response(response), copy), None

    def _brand_lines(self) -> str:
        return "\n".join([
            f"Brand: {self.brand.name}",
            f"Industry: {self.brand.industry}",
            f"Tone: {self.brand.tone}",
            f"Personality: {', '.join(self.brand.personality) or 'Professional'}",
        ])

    def _build_prompt(self, code: str, language_name: str, copy: LocalizedCopy) -> str:
        return (
            f"Localize the following advertising copy to {language_name} ({code}).\n\n"
            f"{self._brand_lines()}\n\n"
            "Copy to localize:\n"
            f'- Headline: "{copy.headline or ""}"\n'
            f'- Body copy: "{copy.body_copy or ""}"\n'
            f'- CTA text: "{copy.cta_text or ""}"'
        )

    def _build_product_prompt(
        self,
        code: str,
        language_name: str,
        copy: LocalizedCopy,
        products: list[LocalizedProductCopy],
    ) -> str:
        payload = json.dumps([p.to_dict() for p in products], indent=2, ensure_ascii=False)
        return (
            f"Localize the following product ad copy to {language_name} ({code}).\n\n"
            f"{self._brand_lines()}\n\n"
            "Campaign copy (also translate this):\n"
            f"- Headline: {copy.headline or ''}\n"
            f"- Body copy: {copy.body_copy or ''}\n"
            f"- CTA: {copy.cta_text or ''}\n\n"
            f"Products to localize:\n{payload}\n\n"
            'Return JSON with both "copy" (headline, bodyCopy, ctaText) and "products" array.'
        )

    def _parse_response(self, response: str) -> dict:
        """Extract the JSON object from the model output."""
        start = response.find("{")
        end = response.rfind("}") + 1
        if start == -1 or end == 0:
            raise UpstreamError("translation", "No JSON object found in response")
        try:
            data = json.loads(response[start:end])
        except json.JSONDecodeError as e:
            raise UpstreamError("translation", f"Failed to parse JSON response: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError("translation", "Response JSON is not an object")
        return data

    def _copy_from(self, data: dict, source: LocalizedCopy) -> LocalizedCopy:
        """Missing fields are left None so the exporter falls back per field."""
        translated = LocalizedCopy.from_dict(data)
        if not any((translated.headline, translated.body_copy, translated.cta_text)) and any(
            (source.headline, source.body_copy, source.cta_text)
        ):
            raise UpstreamError("translation", "Response contained no copy fields")
        return translated

    def _products_from(
        self, data: dict, products: list[LocalizedProductCopy]
    ) -> list[LocalizedProductCopy]:
        """Parse product copies and restore the original IDs by position.

        Models often truncate or rewrite long product IDs.
        """
        items = data.get("products") or []
        result = []
        for i, item in enumerate(items[: len(products)]):
            translated = LocalizedProductCopy.from_dict(item)
            result.append(
                LocalizedProductCopy(
                    product_id=products[i].product_id,
                    title=translated.title or products[i].title,
                    vendor=translated.vendor or products[i].vendor,
                    cta_text=translated.cta_text or products[i].cta_text,
                )
            )
        if len(result) < len(products):
            logger.warning(f"Expected {len(products)} product copies, got {len(result)}")
        return result
