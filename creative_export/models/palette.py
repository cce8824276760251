"""Brand palette model."""

from dataclasses import dataclass, replace

MAX_EXTRA_COLORS = 2


@dataclass(frozen=True)
class BrandPalette:
    """Brand colors: three core roles plus up to two extra colors."""

    primary: str
    secondary: str
    accent: str
    extra_colors: tuple[str, ...] = ()

    def with_primary(
        self,
        primary: str | None = None,
        secondary: str | None = None,
        accent: str | None = None,
    ) -> "BrandPalette":
        """Edit the core colors. Never touches extra_colors."""
        return replace(
            self,
            primary=primary if primary is not None else self.primary,
            secondary=secondary if secondary is not None else self.secondary,
            accent=accent if accent is not None else self.accent,
        )

    def with_extra_color(self, index: int, color: str) -> "BrandPalette":
        """Set one extra color slot (0 or 1). Never touches the core colors."""
        if not 0 <= index < MAX_EXTRA_COLORS:
            raise IndexError(f"Extra color index must be 0-{MAX_EXTRA_COLORS - 1}, got {index}")
        extra = list(self.extra_colors)
        if index < len(extra):
            extra[index] = color
        else:
            extra.append(color)
        return replace(self, extra_colors=tuple(extra))

    def with_extra_colors(self, colors: list[str]) -> "BrandPalette":
        """Replace the extra colors, keeping at most two."""
        return replace(self, extra_colors=tuple(colors[:MAX_EXTRA_COLORS]))

    @property
    def colors(self) -> list[str]:
        """All colors in role order."""
        return [self.primary, self.secondary, self.accent, *self.extra_colors]


def validate_palette(palette: BrandPalette) -> list[str]:
    """Check the extra color count invariant."""
    if len(palette.extra_colors) > MAX_EXTRA_COLORS:
        return [
            f"palette.extraColors has {len(palette.extra_colors)} entries, max {MAX_EXTRA_COLORS}"
        ]
    return []
