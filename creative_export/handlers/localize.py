"""AWS Lambda handler for copy localization."""

import json

from ..clients.llm import LLMClient
from ..config import DEFAULT_LANGUAGE, OPENAI_API_KEY
from ..errors import CreativeExportError
from ..localization import request_translation, translate_pending
from ..localization.runner import TranslationBackend
from ..models.localization import LocalizationState, LocalizedCopy, LocalizedProductCopy
from ..services.localization import BrandVoice, LocalizationService
from .http import error_response, parse_body, response


def handler(event, context, backend: TranslationBackend | None = None):
    """
    Translate campaign copy (and optionally product copy) into target languages.

    Input payload:
    {
        "copy": {"headline": "...", "bodyCopy": "...", "ctaText": "..."},
        "products": [{"productId": "...", "title": "...", "vendor": "...", "ctaText": "..."}],
        "brandProfile": {"name": "...", "industry": "...", "tone": "...", "personality": [...]},
        "targetLanguages": ["de", "fr"]
    }

    Output: translations keyed by language code; failed languages carry an error.
    """
    try:
        body = parse_body(event)
    except json.JSONDecodeError:
        return response(400, {"error": "Invalid JSON body"})

    if not body.get("copy") or not body.get("targetLanguages"):
        return response(400, {"error": "copy and targetLanguages are required"})

    try:
        copy = LocalizedCopy.from_dict(body["copy"])
        products = [LocalizedProductCopy.from_dict(p) for p in body.get("products") or []] or None

        state = LocalizationState()
        for code in body["targetLanguages"]:
            state = request_translation(state, code)

        if backend is None:
            profile = body.get("brandProfile") or {}
            backend = LocalizationService(
                LLMClient(api_key=OPENAI_API_KEY),
                BrandVoice(
                    name=profile.get("name", ""),
                    industry=profile.get("industry") or "General",
                    tone=profile.get("tone") or "Professional",
                    personality=profile.get("personality") or [],
                ),
            )

        print(f"Localizing into {len(state.pending_languages())} languages...", flush=True)
        state, errors = translate_pending(state, backend, copy, products)
    except CreativeExportError as e:
        return error_response(e)

    translations: dict[str, dict] = {}
    for code in state.selected_languages:
        if code == DEFAULT_LANGUAGE:
            continue
        if code in errors:
            translations[code] = {"error": str(errors[code])}
            continue
        translation = state.translations[code]
        translations[code] = translation.copy.to_dict() if translation.copy else {}
        if translation.product_copies is not None:
            translations[code] = {
                "copy": translations[code],
                "products": [p.to_dict() for p in translation.product_copies],
            }

    # Determine response status
    if errors and len(errors) == len(translations):
        status_code = 502
    elif errors:
        status_code = 207  # Multi-Status (partial success)
    else:
        status_code = 200

    return response(status_code, {"translations": translations})
