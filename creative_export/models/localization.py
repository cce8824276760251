"""Localization state models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..config import DEFAULT_LANGUAGE


class TranslationStatus(Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class SupportedLanguage:
    code: str
    name: str
    native_name: str


SUPPORTED_LANGUAGES: list[SupportedLanguage] = [
    SupportedLanguage("en", "English", "English"),
    SupportedLanguage("de", "German", "Deutsch"),
    SupportedLanguage("fr", "French", "Français"),
    SupportedLanguage("es", "Spanish", "Español"),
    SupportedLanguage("it", "Italian", "Italiano"),
    SupportedLanguage("nl", "Dutch", "Nederlands"),
    SupportedLanguage("pt", "Portuguese", "Português"),
    SupportedLanguage("pl", "Polish", "Polski"),
    SupportedLanguage("sv", "Swedish", "Svenska"),
    SupportedLanguage("da", "Danish", "Dansk"),
    SupportedLanguage("no", "Norwegian", "Norsk"),
    SupportedLanguage("fi", "Finnish", "Suomi"),
    SupportedLanguage("cs", "Czech", "Čeština"),
    SupportedLanguage("ja", "Japanese", "日本語"),
    SupportedLanguage("ko", "Korean", "한국어"),
    SupportedLanguage("zh", "Chinese", "中文"),
    SupportedLanguage("ar", "Arabic", "العربية"),
    SupportedLanguage("tr", "Turkish", "Türkçe"),
    SupportedLanguage("ru", "Russian", "Русский"),
    SupportedLanguage("hi", "Hindi", "हिन्दी"),
]


def get_language(code: str) -> SupportedLanguage | None:
    """Look up a supported language by code."""
    for language in SUPPORTED_LANGUAGES:
        if language.code == code:
            return language
    return None


@dataclass(frozen=True)
class LocalizedCopy:
    """Campaign copy in one language. Missing fields fall back to native copy."""

    headline: str | None = None
    body_copy: str | None = None
    cta_text: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocalizedCopy":
        return cls(
            headline=data.get("headline"),
            body_copy=data.get("bodyCopy"),
            cta_text=data.get("ctaText"),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("headline", self.headline),
                ("bodyCopy", self.body_copy),
                ("ctaText", self.cta_text),
            )
            if value is not None
        }


@dataclass(frozen=True)
class LocalizedProductCopy:
    product_id: str
    title: str
    vendor: str
    cta_text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocalizedProductCopy":
        return cls(
            product_id=str(data.get("productId", "")),
            title=data.get("title", ""),
            vendor=data.get("vendor", ""),
            cta_text=data.get("ctaText", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "productId": self.product_id,
            "title": self.title,
            "vendor": self.vendor,
            "ctaText": self.cta_text,
        }


@dataclass(frozen=True)
class LanguageTranslation:
    """Translation of the creative's copy into one language."""

    language_code: str
    status: TranslationStatus = TranslationStatus.PENDING
    copy: LocalizedCopy | None = None
    product_copies: tuple[LocalizedProductCopy, ...] | None = None


def _default_translations() -> dict[str, LanguageTranslation]:
    return {
        DEFAULT_LANGUAGE: LanguageTranslation(DEFAULT_LANGUAGE, TranslationStatus.DONE),
    }


@dataclass(frozen=True)
class LocalizationState:
    """Per-creative localization progress.

    Every code in `selected_languages` has an entry in `translations`. The
    default language is always first and always done.
    """

    selected_languages: tuple[str, ...] = (DEFAULT_LANGUAGE,)
    translations: dict[str, LanguageTranslation] = field(default_factory=_default_translations)
    preview_language: str | None = None
    is_translating: bool = False

    def status_of(self, language_code: str) -> TranslationStatus | None:
        translation = self.translations.get(language_code)
        return translation.status if translation else None

    def done_languages(self) -> list[str]:
        """Selected languages ready for export, in selection order."""
        return [
            code
            for code in self.selected_languages
            if code == DEFAULT_LANGUAGE
            or self.status_of(code) == TranslationStatus.DONE
        ]

    def pending_languages(self) -> list[str]:
        return [
            code
            for code in self.selected_languages
            if self.status_of(code) == TranslationStatus.PENDING
        ]
