"""Export coordinator: derive one artifact per size x language."""

import logging
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from typing import Any

from ..config import DEFAULT_LANGUAGE, MAX_EXPORT_COLORS
from ..css import color_string, generate_color_css
from ..errors import ValidationError
from ..font_resolver import build_font_face_css
from ..models.export import Artifact, ExportSession
from ..models.layer import Layout
from ..models.localization import LocalizationState, LocalizedCopy
from ..models.manifest import CreativeManifest, validate
from ..models.palette import BrandPalette
from ..utils import fill_placeholders, find_placeholders
from .layers import apply_modifications

logger = logging.getLogger(__name__)

LayoutSource = Callable[[str, str], Layout]


class ExportCoordinator:
    """Config-driven export of a creative into size/language bundles.

    `layout_source(template_path, size)` supplies the base layout of each size.
    """

    def __init__(
        self,
        layout_source: LayoutSource,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.layout_source = layout_source
        self.clock = clock

    def export_bundle(
        self,
        session: ExportSession,
        manifest: CreativeManifest,
        localization: LocalizationState,
        fonts: dict[str, str],
        palette: BrandPalette | None = None,
    ) -> list[Artifact]:
        """Produce every artifact, then mark the session exported."""
        artifacts = list(self.iter_artifacts(session, manifest, localization, fonts, palette))
        session.mark_exported(self.clock())
        logger.info(f"Exported {len(artifacts)} artifacts for {session.template_path}")
        return artifacts

    def iter_artifacts(
        self,
        session: ExportSession,
        manifest: CreativeManifest,
        localization: LocalizationState,
        fonts: dict[str, str],
        palette: BrandPalette | None = None,
    ) -> Iterator[Artifact]:
        """Yield artifacts one at a time without touching the session.

        All validation happens before the first artifact is yielded, so a
        caller may stop between artifacts without leaving partial state.
        """
        # 1. Validate the whole request up front
        violations = []
        if session.is_exported:
            violations.append("session has already been exported")
        if not session.selected_sizes:
            violations.append("at least one size must be selected")
        violations.extend(validate(manifest, palette))
        if violations:
            raise ValidationError(violations)

        # 2. Resolve per-language values and base layouts
        languages = localization.done_languages()
        skipped = [c for c in localization.selected_languages if c not in languages]
        if skipped:
            logger.warning(f"Skipping languages not ready for export: {', '.join(skipped)}")

        colors = self._resolve_colors(session, manifest, palette)
        values_by_language = {
            code: self._resolve_values(session, manifest, localization, code, colors)
            for code in languages
        }
        base_layouts = {
            size: self.layout_source(session.template_path, size)
            for size in session.selected_sizes
        }

        font_css = build_font_face_css(fonts)
        color_css = generate_color_css(colors)

        # 3. Build artifacts: sizes outer, languages inner
        for size in session.selected_sizes:
            layout = apply_modifications(base_layouts[size], session.layer_modifications, size)
            for code in languages:
                copy, dynamic_values = values_by_language[code]
                translation = localization.translations.get(code)
                yield Artifact(
                    size=size,
                    language=code,
                    layout=layout,
                    copy=copy,
                    dynamic_values=dynamic_values,
                    fonts=dict(fonts),
                    font_css=font_css,
                    colors=tuple(colors),
                    color_css=color_css,
                    product_copies=(translation.product_copies or ()) if translation else (),
                )

    def _resolve_colors(
        self,
        session: ExportSession,
        manifest: CreativeManifest,
        palette: BrandPalette | None,
    ) -> list[str]:
        """Session colors, else the brand palette, else the manifest scheme."""
        colors = session.dynamic_values.get("colors")
        if isinstance(colors, str):
            colors = [c.strip() for c in colors.split("|") if c.strip()]
        if not colors:
            if palette is not None:
                colors = palette.colors
            else:
                scheme = manifest.color_scheme
                colors = [c for c in (scheme.primary, scheme.secondary, scheme.accent) if c]
        return list(colors)[:MAX_EXPORT_COLORS]

    def _native_copy(self, session: ExportSession, manifest: CreativeManifest) -> LocalizedCopy:
        values = session.dynamic_values
        return LocalizedCopy(
            headline=manifest.copy.headline or values.get("headline"),
            body_copy=manifest.copy.body_copy or values.get("bodyCopy"),
            cta_text=manifest.copy.cta_text or values.get("ctaText"),
        )

    def _resolve_values(
        self,
        session: ExportSession,
        manifest: CreativeManifest,
        localization: LocalizationState,
        language_code: str,
        colors: list[str],
    ) -> tuple[LocalizedCopy, dict[str, Any]]:
        """Pick localized copy field by field, then fill template placeholders."""
        native = self._native_copy(session, manifest)
        localized = None
        if language_code != DEFAULT_LANGUAGE:
            translation = localization.translations.get(language_code)
            localized = translation.copy if translation else None

        copy = LocalizedCopy(
            headline=(localized and localized.headline) or native.headline,
            body_copy=(localized and localized.body_copy) or native.body_copy,
            cta_text=(localized and localized.cta_text) or native.cta_text,
        )

        values: dict[str, Any] = {
            **session.dynamic_values,
            **copy.to_dict(),
            "colors": color_string(colors),
            "language": language_code,
            "conceptName": manifest.concept_name,
        }
        if manifest.hero_image_prompt:
            values.setdefault("heroImagePrompt", manifest.hero_image_prompt)

        resolved = fill_placeholders(values, values)
        unresolved = find_placeholders(resolved)
        if unresolved:
            raise ValidationError(
                [f"unresolved placeholder '{{{{{name}}}}}' for language '{language_code}'"
                 for name in sorted(unresolved)]
            )
        return copy, resolved
