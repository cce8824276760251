"""Dispatch translation work for every pending language."""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..config import TRANSLATION_WORKERS
from ..errors import UpstreamError
from ..models.localization import LocalizationState, LocalizedCopy, LocalizedProductCopy
from .tracker import TranslationTracker

logger = logging.getLogger(__name__)

TranslationResult = tuple[LocalizedCopy, list[LocalizedProductCopy] | None]


class TranslationBackend(ABC):
    """External collaborator that translates copy into one language."""

    @abstractmethod
    def translate(
        self,
        language_code: str,
        copy: LocalizedCopy,
        products: list[LocalizedProductCopy] | None = None,
    ) -> TranslationResult:
        """Return translated (copy, product_copies) or raise UpstreamError."""
        pass


class Localizer:
    """Run a backend for all pending languages of a tracker concurrently.

    Partial failure is normal: failed languages end in `error`, the rest in
    `done`, and the per-language errors are returned to the caller.
    """

    def __init__(self, backend: TranslationBackend, max_workers: int = TRANSLATION_WORKERS):
        self.backend = backend
        self.max_workers = max_workers

    def run(
        self,
        tracker: TranslationTracker,
        copy: LocalizedCopy,
        products: list[LocalizedProductCopy] | None = None,
    ) -> dict[str, UpstreamError]:
        pending = tracker.snapshot().pending_languages()
        if not pending:
            return {}

        for code in pending:
            tracker.mark_translating(code)

        errors: dict[str, UpstreamError] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self.backend.translate, code, copy, products): code
                for code in pending
            }
            for future in as_completed(futures):
                code = futures[future]
                try:
                    translated_copy, product_copies = future.result()
                except UpstreamError as e:
                    errors[code] = e
                except Exception as e:
                    errors[code] = UpstreamError("translation", str(e))
                else:
                    tracker.mark_done(code, translated_copy, product_copies)
                    logger.info(f"Translated to '{code}'")
                    continue

                tracker.mark_error(code)
                logger.warning(f"Translation to '{code}' failed: {errors[code]}")

        return errors


def translate_pending(
    state: LocalizationState,
    backend: TranslationBackend,
    copy: LocalizedCopy,
    products: list[LocalizedProductCopy] | None = None,
    max_workers: int = TRANSLATION_WORKERS,
) -> tuple[LocalizationState, dict[str, UpstreamError]]:
    """Translate every pending language of `state`; return the new state and errors."""
    tracker = TranslationTracker(state)
    errors = Localizer(backend, max_workers=max_workers).run(tracker, copy, products)
    return tracker.snapshot(), errors
