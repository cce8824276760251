"""Translation state machine.

Every function takes a LocalizationState and returns a new one. On any
error the input state is left untouched.
"""

import logging
from dataclasses import replace

from ..config import DEFAULT_LANGUAGE
from ..errors import InvalidTransitionError, ValidationError
from ..models.localization import (
    LanguageTranslation,
    LocalizationState,
    LocalizedCopy,
    LocalizedProductCopy,
    TranslationStatus,
    get_language,
)

logger = logging.getLogger(__name__)

# Allowed moves. A full re-request (-> PENDING) is handled by request_translation.
TRANSITIONS: dict[TranslationStatus, set[TranslationStatus]] = {
    TranslationStatus.PENDING: {TranslationStatus.TRANSLATING},
    TranslationStatus.TRANSLATING: {TranslationStatus.DONE, TranslationStatus.ERROR},
    TranslationStatus.ERROR: {TranslationStatus.PENDING},
    TranslationStatus.DONE: set(),
}

ACTIVE_STATUSES = {TranslationStatus.PENDING, TranslationStatus.TRANSLATING}


def transition(
    translation: LanguageTranslation | None,
    language_code: str,
    target: TranslationStatus,
    **payload,
) -> LanguageTranslation:
    """Validate one move of a single language's state machine."""
    if translation is None:
        raise InvalidTransitionError(language_code, "unselected", target.value)
    if target not in TRANSITIONS[translation.status]:
        raise InvalidTransitionError(language_code, translation.status.value, target.value)
    return replace(translation, status=target, **payload)


def compute_is_translating(translations: dict[str, LanguageTranslation]) -> bool:
    return any(t.status in ACTIVE_STATUSES for t in translations.values())


def _with_translation(
    state: LocalizationState, translation: LanguageTranslation
) -> LocalizationState:
    translations = {**state.translations, translation.language_code: translation}
    return replace(
        state,
        translations=translations,
        is_translating=compute_is_translating(translations),
    )


def request_translation(state: LocalizationState, language_code: str) -> LocalizationState:
    """Select a language and (re)set its translation to pending.

    The default language always uses the manifest's native copy, so
    requesting it leaves the state unchanged.
    """
    if language_code == DEFAULT_LANGUAGE:
        return state
    if get_language(language_code) is None:
        raise ValidationError(f"Unsupported language code: {language_code}")

    selected = state.selected_languages
    if language_code not in selected:
        selected = (*selected, language_code)

    translation = LanguageTranslation(language_code, TranslationStatus.PENDING)
    return _with_translation(replace(state, selected_languages=selected), translation)


def begin_translating(state: LocalizationState, language_code: str) -> LocalizationState:
    """pending -> translating."""
    translation = transition(
        state.translations.get(language_code), language_code, TranslationStatus.TRANSLATING
    )
    return _with_translation(state, translation)


def complete_translation(
    state: LocalizationState,
    language_code: str,
    copy: LocalizedCopy,
    product_copies: list[LocalizedProductCopy] | None = None,
) -> LocalizationState:
    """translating -> done, storing the translated payload."""
    translation = transition(
        state.translations.get(language_code),
        language_code,
        TranslationStatus.DONE,
        copy=copy,
        product_copies=tuple(product_copies) if product_copies is not None else None,
    )
    return _with_translation(state, translation)


def fail_translation(
    state: LocalizationState, language_code: str, reason: str
) -> LocalizationState:
    """translating -> error. The reason is logged, not stored."""
    translation = transition(
        state.translations.get(language_code), language_code, TranslationStatus.ERROR
    )
    logger.warning(f"Translation to '{language_code}' failed: {reason}")
    return _with_translation(state, translation)


def retry_translation(state: LocalizationState, language_code: str) -> LocalizationState:
    """error -> pending."""
    translation = transition(
        state.translations.get(language_code), language_code, TranslationStatus.PENDING
    )
    return _with_translation(state, translation)


def remove_language(state: LocalizationState, language_code: str) -> LocalizationState:
    """Deselect a language and drop its translation. The default cannot be removed."""
    if language_code == DEFAULT_LANGUAGE:
        raise ValidationError(f"Cannot remove the default language '{DEFAULT_LANGUAGE}'")
    if language_code not in state.selected_languages:
        return state

    translations = {k: v for k, v in state.translations.items() if k != language_code}
    preview = None if state.preview_language == language_code else state.preview_language
    return replace(
        state,
        selected_languages=tuple(c for c in state.selected_languages if c != language_code),
        translations=translations,
        preview_language=preview,
        is_translating=compute_is_translating(translations),
    )


def set_preview_language(
    state: LocalizationState, language_code: str | None
) -> LocalizationState:
    """Preview a selected language, or None for the native copy."""
    if language_code is not None and language_code not in state.selected_languages:
        raise ValidationError(f"Language '{language_code}' is not selected")
    return replace(state, preview_language=language_code)
