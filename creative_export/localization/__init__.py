"""Localization pipeline: state machine, tracker and runner."""

from .runner import Localizer, TranslationBackend, translate_pending
from .state import (
    begin_translating,
    complete_translation,
    fail_translation,
    remove_language,
    request_translation,
    retry_translation,
    set_preview_language,
)
from .tracker import TranslationTracker

__all__ = [
    "Localizer",
    "TranslationBackend",
    "TranslationTracker",
    "begin_translating",
    "complete_translation",
    "fail_translation",
    "remove_language",
    "request_translation",
    "retry_translation",
    "set_preview_language",
    "translate_pending",
]
