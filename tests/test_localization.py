"""Tests for the localization state machine, tracker and runner."""

import threading

import pytest

from creative_export.errors import InvalidTransitionError, UpstreamError, ValidationError
from creative_export.localization import (
    Localizer,
    TranslationBackend,
    TranslationTracker,
    begin_translating,
    complete_translation,
    fail_translation,
    remove_language,
    request_translation,
    retry_translation,
    set_preview_language,
    translate_pending,
)
from creative_export.models import LocalizationState, LocalizedCopy, LocalizedProductCopy, TranslationStatus

SOURCE = LocalizedCopy(headline="Summer Sale", body_copy="Up to 50% off", cta_text="Shop Now")


class TestStateMachine:
    """Test the pure transition functions."""

    def test_initial_state(self) -> None:
        """Test that the default language is selected and done."""
        state = LocalizationState()
        assert state.selected_languages == ("en",)
        assert state.status_of("en") == TranslationStatus.DONE
        assert not state.is_translating

    def test_full_lifecycle(self) -> None:
        """Test pending -> translating -> done and the is_translating flag."""
        state = request_translation(LocalizationState(), "de")
        assert state.selected_languages == ("en", "de")
        assert state.status_of("de") == TranslationStatus.PENDING
        assert state.is_translating

        state = begin_translating(state, "de")
        assert state.status_of("de") == TranslationStatus.TRANSLATING
        assert state.is_translating

        state = complete_translation(state, "de", LocalizedCopy(headline="Sommer"))
        assert state.status_of("de") == TranslationStatus.DONE
        assert state.translations["de"].copy.headline == "Sommer"
        assert not state.is_translating

    def test_is_translating_while_other_language_pending(self) -> None:
        """Test that the flag stays set until every language settles."""
        state = request_translation(LocalizationState(), "de")
        state = request_translation(state, "fr")
        state = begin_translating(state, "de")
        state = complete_translation(state, "de", LocalizedCopy(headline="Sommer"))
        assert state.is_translating

    def test_complete_without_begin_fails(self) -> None:
        """Test that completing a pending language is an invalid transition."""
        state = request_translation(LocalizationState(), "de")
        with pytest.raises(InvalidTransitionError):
            complete_translation(state, "de", LocalizedCopy(headline="Sommer"))
        assert state.status_of("de") == TranslationStatus.PENDING

    def test_begin_twice_fails(self) -> None:
        state = begin_translating(request_translation(LocalizationState(), "de"), "de")
        with pytest.raises(InvalidTransitionError):
            begin_translating(state, "de")

    def test_unselected_language_fails(self) -> None:
        with pytest.raises(InvalidTransitionError):
            begin_translating(LocalizationState(), "fr")

    def test_default_language_is_immutable(self) -> None:
        """Test that the default language cannot be moved or removed."""
        state = LocalizationState()
        assert request_translation(state, "en") is state
        with pytest.raises(InvalidTransitionError):
            begin_translating(state, "en")
        with pytest.raises(ValidationError):
            remove_language(state, "en")

    def test_unsupported_language_rejected(self) -> None:
        with pytest.raises(ValidationError):
            request_translation(LocalizationState(), "xx")

    def test_fail_and_retry(self) -> None:
        """Test translating -> error -> pending."""
        state = begin_translating(request_translation(LocalizationState(), "ja"), "ja")
        state = fail_translation(state, "ja", "backend timeout")
        assert state.status_of("ja") == TranslationStatus.ERROR
        assert not state.is_translating

        state = retry_translation(state, "ja")
        assert state.status_of("ja") == TranslationStatus.PENDING
        assert state.is_translating

    def test_done_only_resets_by_rerequest(self, german_done) -> None:
        """Test that done can only go back to pending via a full re-request."""
        with pytest.raises(InvalidTransitionError):
            begin_translating(german_done, "de")
        state = request_translation(german_done, "de")
        assert state.status_of("de") == TranslationStatus.PENDING
        assert state.translations["de"].copy is None
        assert state.selected_languages == ("en", "de")

    def test_remove_language(self, german_done) -> None:
        """Test that removal drops the selection, entry and preview."""
        state = set_preview_language(german_done, "de")
        state = remove_language(state, "de")
        assert state.selected_languages == ("en",)
        assert "de" not in state.translations
        assert state.preview_language is None

    def test_preview_requires_selection(self) -> None:
        with pytest.raises(ValidationError):
            set_preview_language(LocalizationState(), "de")

    def test_every_selected_language_has_entry(self, german_done) -> None:
        """Test the selection/translations invariant across operations."""
        state = request_translation(german_done, "fr")
        state = remove_language(state, "de")
        assert set(state.selected_languages) == set(state.translations)


class TestTranslationTracker:
    """Test the thread-safe tracker."""

    def test_concurrent_completions(self) -> None:
        """Test that completion callbacks for different languages do not interfere."""
        codes = ["de", "fr", "es", "it", "nl", "pt", "pl", "sv", "da", "fi"]
        tracker = TranslationTracker()
        for code in codes:
            tracker.request(code)
            tracker.mark_translating(code)

        barrier = threading.Barrier(len(codes))

        def complete(code: str) -> None:
            barrier.wait()
            tracker.mark_done(code, LocalizedCopy(headline=f"headline-{code}"))

        threads = [threading.Thread(target=complete, args=(code,)) for code in codes]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        state = tracker.snapshot()
        assert tracker.get_stats()["done"] == len(codes) + 1
        assert not state.is_translating
        assert all(state.translations[c].copy.headline == f"headline-{c}" for c in codes)

    def test_snapshot_during_requests(self) -> None:
        """Test that snapshots taken while languages are added always see their entries."""
        codes = ["de", "fr", "es", "it", "nl", "pt", "pl", "sv"]
        tracker = TranslationTracker()
        stop = threading.Event()
        failures: list[Exception] = []

        def read() -> None:
            while not stop.is_set():
                try:
                    state = tracker.snapshot()
                except Exception as e:
                    failures.append(e)
                    return
                if set(state.selected_languages) != set(state.translations):
                    failures.append(AssertionError(state.selected_languages))
                    return

        reader = threading.Thread(target=read)
        reader.start()
        try:
            for _ in range(200):
                for code in codes:
                    tracker.request(code)
                for code in codes:
                    tracker.remove(code)
        finally:
            stop.set()
            reader.join()

        assert failures == []

    def test_invalid_transition_leaves_state(self) -> None:
        tracker = TranslationTracker()
        tracker.request("de")
        with pytest.raises(InvalidTransitionError):
            tracker.mark_done("de", LocalizedCopy(headline="x"))
        assert tracker.get("de").status == TranslationStatus.PENDING

    def test_remove_and_retry(self) -> None:
        tracker = TranslationTracker()
        tracker.request("de")
        tracker.mark_translating("de")
        tracker.mark_error("de")
        tracker.retry("de")
        assert tracker.get("de").status == TranslationStatus.PENDING
        tracker.remove("de")
        assert tracker.snapshot().selected_languages == ("en",)


class FakeBackend(TranslationBackend):
    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.calls: list[str] = []

    def translate(self, language_code, copy, products=None):
        self.calls.append(language_code)
        if language_code in self.failing:
            raise UpstreamError("translation", f"{language_code} unavailable")
        translated = LocalizedCopy(headline=f"[{language_code}] {copy.headline}")
        product_copies = None
        if products:
            product_copies = [
                LocalizedProductCopy(p.product_id, f"[{language_code}] {p.title}", p.vendor, p.cta_text)
                for p in products
            ]
        return translated, product_copies


class TestLocalizer:
    """Test dispatching translations to a backend."""

    def test_partial_failure_is_displayable(self) -> None:
        """Test that one failing language does not fail the batch."""
        state = LocalizationState()
        for code in ("de", "fr", "es"):
            state = request_translation(state, code)

        state, errors = translate_pending(state, FakeBackend(failing={"fr"}), SOURCE)

        assert set(errors) == {"fr"}
        assert isinstance(errors["fr"], UpstreamError)
        assert state.status_of("de") == TranslationStatus.DONE
        assert state.status_of("es") == TranslationStatus.DONE
        assert state.status_of("fr") == TranslationStatus.ERROR
        assert state.translations["de"].copy.headline == "[de] Summer Sale"
        assert not state.is_translating
        assert state.done_languages() == ["en", "de", "es"]

    def test_unexpected_backend_error_is_wrapped(self) -> None:
        """Test that arbitrary backend exceptions surface as UpstreamError."""

        class Broken(TranslationBackend):
            def translate(self, language_code, copy, products=None):
                raise RuntimeError("boom")

        state = request_translation(LocalizationState(), "de")
        state, errors = translate_pending(state, Broken(), SOURCE)
        assert isinstance(errors["de"], UpstreamError)
        assert state.status_of("de") == TranslationStatus.ERROR

    def test_only_pending_languages_dispatched(self, german_done) -> None:
        """Test that done languages are not re-translated."""
        backend = FakeBackend()
        state = request_translation(german_done, "it")
        translate_pending(state, backend, SOURCE)
        assert backend.calls == ["it"]

    def test_product_copies_stored(self) -> None:
        products = [LocalizedProductCopy("gid://shopify/Product/1", "Running Shoes", "Nike", "Shop Now")]
        tracker = TranslationTracker()
        tracker.request("de")
        errors = Localizer(FakeBackend()).run(tracker, SOURCE, products)
        assert errors == {}
        copies = tracker.get("de").product_copies
        assert copies[0].title == "[de] Running Shoes"
        assert copies[0].product_id == "gid://shopify/Product/1"

    def test_nothing_pending(self) -> None:
        assert Localizer(FakeBackend()).run(TranslationTracker(), SOURCE) == {}
