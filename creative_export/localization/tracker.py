"""Thread-safe translation tracker.

Each language owns its own lock, so completion callbacks for different
languages never contend. The registry lock only guards selection changes.
"""

import threading

from ..config import DEFAULT_LANGUAGE
from ..errors import InvalidTransitionError, ValidationError
from ..models.localization import (
    LanguageTranslation,
    LocalizationState,
    LocalizedCopy,
    LocalizedProductCopy,
    TranslationStatus,
)
from .state import compute_is_translating, request_translation, transition


class TranslationTracker:
    def __init__(self, state: LocalizationState | None = None):
        state = state or LocalizationState()
        self._order: list[str] = list(state.selected_languages)
        self._entries: dict[str, LanguageTranslation] = dict(state.translations)
        self._locks: dict[str, threading.Lock] = {code: threading.Lock() for code in self._order}
        self._registry_lock = threading.Lock()
        self.preview_language = state.preview_language

    def request(self, language_code: str):
        """Select a language and reset it to pending."""
        with self._registry_lock:
            snapshot = LocalizationState(
                selected_languages=tuple(self._order),
                translations=dict(self._entries),
            )
            updated = request_translation(snapshot, language_code)
            if language_code == DEFAULT_LANGUAGE:
                return

            # Entry and selection become visible together
            lock = self._locks.setdefault(language_code, threading.Lock())
            with lock:
                self._entries[language_code] = updated.translations[language_code]
                if language_code not in self._order:
                    self._order.append(language_code)

    def mark_translating(self, language_code: str):
        """pending -> translating."""
        self._move(language_code, TranslationStatus.TRANSLATING)

    def mark_done(
        self,
        language_code: str,
        copy: LocalizedCopy,
        product_copies: list[LocalizedProductCopy] | None = None,
    ):
        """translating -> done."""
        self._move(
            language_code,
            TranslationStatus.DONE,
            copy=copy,
            product_copies=tuple(product_copies) if product_copies is not None else None,
        )

    def mark_error(self, language_code: str):
        """translating -> error."""
        self._move(language_code, TranslationStatus.ERROR)

    def retry(self, language_code: str):
        """error -> pending."""
        self._move(language_code, TranslationStatus.PENDING)

    def _move(self, language_code: str, target: TranslationStatus, **payload):
        lock = self._locks.get(language_code)
        if lock is None:
            raise InvalidTransitionError(language_code, "unselected", target.value)
        with lock:
            current = self._entries.get(language_code)
            self._entries[language_code] = transition(current, language_code, target, **payload)

    def remove(self, language_code: str):
        if language_code == DEFAULT_LANGUAGE:
            raise ValidationError(f"Cannot remove the default language '{DEFAULT_LANGUAGE}'")
        with self._registry_lock:
            if language_code not in self._locks:
                return
            with self._locks[language_code]:
                self._order.remove(language_code)
                self._entries.pop(language_code, None)
                del self._locks[language_code]
            if self.preview_language == language_code:
                self.preview_language = None

    def snapshot(self) -> LocalizationState:
        """Consistent-enough copy of the current state for display or export."""
        with self._registry_lock:
            order = tuple(self._order)
            entries = {code: self._entries[code] for code in order}
        return LocalizationState(
            selected_languages=order,
            translations=entries,
            preview_language=self.preview_language,
            is_translating=compute_is_translating(entries),
        )

    def get_stats(self) -> dict[str, int]:
        """Get counts by status."""
        stats = {status.value: 0 for status in TranslationStatus}
        for translation in self.snapshot().translations.values():
            stats[translation.status.value] += 1
        return stats

    def get(self, language_code: str) -> LanguageTranslation | None:
        return self._entries.get(language_code)

