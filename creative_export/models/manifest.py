"""Creative manifest model."""

from dataclasses import dataclass, field, replace
from typing import Any

from .palette import BrandPalette, validate_palette


@dataclass(frozen=True)
class ColorScheme:
    """Manifest color roles."""

    primary: str
    secondary: str
    accent: str
    background: str


@dataclass(frozen=True)
class Typography:
    """Headline and body font styles."""

    headline_style: str
    body_style: str


@dataclass(frozen=True)
class CopyOverrides:
    """Optional copy set on the manifest by chat updates."""

    headline: str | None = None
    body_copy: str | None = None
    cta_text: str | None = None


@dataclass(frozen=True)
class CreativeManifest:
    """Canonical description of one creative's visual and copy content.

    Instances are immutable. Use `with_updates` to replace whole sub-objects.
    """

    concept_name: str
    visual_style: str
    color_scheme: ColorScheme
    typography: Typography
    layout_suggestion: str
    animation_ideas: tuple[str, ...] = ()
    mood_keywords: tuple[str, ...] = ()
    hero_image_prompt: str | None = None
    copy: CopyOverrides = field(default_factory=CopyOverrides)

    def with_updates(self, **changes: Any) -> "CreativeManifest":
        """Return a new manifest with the given top-level fields replaced."""
        for name in ("animation_ideas", "mood_keywords"):
            if name in changes:
                changes[name] = tuple(changes[name])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CreativeManifest":
        """Ingest a camelCase payload.

        The deprecated `imageDirection` field is folded into `heroImagePrompt`
        here and nowhere else.
        """
        colors = data.get("colorScheme") or {}
        typography = data.get("typography") or {}
        hero_image_prompt = data.get("heroImagePrompt") or data.get("imageDirection")

        return cls(
            concept_name=data.get("conceptName", ""),
            visual_style=data.get("visualStyle", ""),
            color_scheme=ColorScheme(
                primary=colors.get("primary", ""),
                secondary=colors.get("secondary", ""),
                accent=colors.get("accent", ""),
                background=colors.get("background", ""),
            ),
            typography=Typography(
                headline_style=typography.get("headlineStyle", ""),
                body_style=typography.get("bodyStyle", ""),
            ),
            layout_suggestion=data.get("layoutSuggestion", ""),
            animation_ideas=tuple(data.get("animationIdeas") or ()),
            mood_keywords=tuple(data.get("moodKeywords") or ()),
            hero_image_prompt=hero_image_prompt,
            copy=CopyOverrides(
                headline=data.get("headline"),
                body_copy=data.get("bodyCopy"),
                cta_text=data.get("ctaText"),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "conceptName": self.concept_name,
            "visualStyle": self.visual_style,
            "colorScheme": {
                "primary": self.color_scheme.primary,
                "secondary": self.color_scheme.secondary,
                "accent": self.color_scheme.accent,
                "background": self.color_scheme.background,
            },
            "typography": {
                "headlineStyle": self.typography.headline_style,
                "bodyStyle": self.typography.body_style,
            },
            "layoutSuggestion": self.layout_suggestion,
            "animationIdeas": list(self.animation_ideas),
            "moodKeywords": list(self.mood_keywords),
        }
        if self.hero_image_prompt:
            data["heroImagePrompt"] = self.hero_image_prompt
        for key, value in (
            ("headline", self.copy.headline),
            ("bodyCopy", self.copy.body_copy),
            ("ctaText", self.copy.cta_text),
        ):
            if value is not None:
                data[key] = value
        return data


def validate(manifest: CreativeManifest, palette: BrandPalette | None = None) -> list[str]:
    """Check manifest invariants. Returns a list of violations (empty when valid)."""
    violations: list[str] = []

    if palette is not None:
        violations.extend(validate_palette(palette))

    if not manifest.typography.headline_style:
        violations.append("typography.headlineStyle is required")
    if not manifest.typography.body_style:
        violations.append("typography.bodyStyle is required")

    for name, values in (
        ("animationIdeas", manifest.animation_ideas),
        ("moodKeywords", manifest.mood_keywords),
    ):
        for i, value in enumerate(values):
            if not value or not value.strip():
                violations.append(f"{name}[{i}] is empty")

    return violations
