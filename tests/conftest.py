"""Shared fixtures."""

import json
from pathlib import Path

import pytest

from creative_export.localization import begin_translating, complete_translation, request_translation
from creative_export.models import (
    ColorScheme,
    CopyOverrides,
    CreativeManifest,
    Layer,
    Layout,
    LocalizationState,
    LocalizedCopy,
    Typography,
)


INDEX_HTML = """<html>
<head><title>Ad</title></head>
<body>
  <script>
    var dynamicData = {};
    grid8player.dynamicData = dynamicData;
  </script>
</body>
</html>
"""


@pytest.fixture
def manifest() -> CreativeManifest:
    return CreativeManifest(
        concept_name="Summer Splash",
        visual_style="Bold and bright",
        color_scheme=ColorScheme("#FF5370", "#13A4FB", "#FFD64F", "#FFFFFF"),
        typography=Typography("Exo ExtraBold", "Inter Regular"),
        layout_suggestion="Hero image left, copy right",
        animation_ideas=("Logo fades in", "CTA pulses"),
        mood_keywords=("fresh", "playful"),
        hero_image_prompt="A beach at noon",
        copy=CopyOverrides(headline="Summer Sale", body_copy="Up to 50% off", cta_text="Shop Now"),
    )


@pytest.fixture
def base_layouts() -> dict[str, Layout]:
    def layout(size: str) -> Layout:
        return Layout(
            size=size,
            layers=(
                Layer("logo", x=0, y=0, scale=1.0, width=100, height=40),
                Layer("headline", x=20, y=60, width=200, height=50, kind="text"),
                Layer("cta", x=20, y=180, width=120, height=36),
            ),
        )

    return {"300x250": layout("300x250"), "728x90": layout("728x90")}


@pytest.fixture
def german_done() -> LocalizationState:
    state = request_translation(LocalizationState(), "de")
    state = begin_translating(state, "de")
    return complete_translation(
        state, "de", LocalizedCopy(headline="Sommerschlussverkauf", cta_text="Jetzt kaufen")
    )


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A template library with one template and two sizes."""
    for size, (w, h) in {"300x250": (300, 250), "728x90": (728, 90)}.items():
        size_dir = tmp_path / "summer" / size
        size_dir.mkdir(parents=True)
        manifest = {
            "settings": {
                "width": w,
                "height": h,
                "dynamicValues": [
                    {"id": "1", "name": "s0_headline", "defaultValue": "Placeholder"},
                    {"id": "2", "name": "s0_ctaText", "defaultValue": "Click"},
                    {"id": "3", "name": "s0_logoUrl", "defaultValue": ""},
                ],
            },
            "layers": [
                {
                    "name": "Logo",
                    "guid": "a1",
                    "fileType": "png",
                    "isDynamic": True,
                    "shots": [
                        {"index": 0, "pos": {"x": 10, "y": 10}, "size": {"w": 100, "h": 40, "initW": 100, "initH": 40}},
                        {"index": 1, "pos": {"x": 12, "y": 10}, "size": {"w": 100, "h": 40}},
                    ],
                },
                {
                    "name": "headline",
                    "guid": "a2",
                    "fileType": "text",
                    "shots": [{"index": 0, "pos": {"x": 20, "y": 60}, "size": {"w": 200, "h": 50}}],
                },
            ],
        }
        (size_dir / "manifest.js").write_text(f"window.manifest = {json.dumps(manifest)};", encoding="utf-8")
        (size_dir / "index.html").write_text(INDEX_HTML, encoding="utf-8")
        (size_dir / ".DS_Store").write_text("", encoding="utf-8")

    # Size without index.html is not exportable
    (tmp_path / "summer" / "160x600").mkdir()
    (tmp_path / "summer" / "160x600" / "manifest.js").write_text("window.manifest = {};", encoding="utf-8")
    return tmp_path
