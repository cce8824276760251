"""Color utility CSS injected into exported bundles."""

COLOR_ROLES = ("primary", "secondary", "accent")


def generate_color_css(colors: list[str] | tuple[str, ...]) -> str:
    """Render .color-<role>, .bg-<role> and .border-<role> classes plus CSS variables."""
    pairs = list(zip(COLOR_ROLES, colors))
    if not pairs:
        return ""

    variables = "\n".join(f"  --color-{role}: {color};" for role, color in pairs)
    lines = [f":root {{\n{variables}\n}}"]
    for role, color in pairs:
        lines.append(f".color-{role} {{ color: {color}; }}")
        lines.append(f".bg-{role} {{ background-color: {color}; }}")
        lines.append(f".border-{role} {{ border-color: {color}; }}")
    return "\n".join(lines)


def color_string(colors: list[str] | tuple[str, ...]) -> str:
    """Pipe-joined color list as consumed by the ad player."""
    return "|".join(colors)
