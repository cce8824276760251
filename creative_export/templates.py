"""Template library: ad templates stored as `<root>/<template>/<size>/manifest.js`."""

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any

from .config import TEMPLATES_DIR
from .css import color_string
from .errors import NotFoundError, ValidationError
from .models.export import AdSize, Artifact
from .models.layer import Layer, Layout

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.js"
INDEX_FILE = "index.html"

_MANIFEST_RE = re.compile(r"window\.manifest\s*=\s*(\{.*\})\s*;?\s*$", re.DOTALL)
_PLAYER_DATA_RE = re.compile(r"grid8player\.dynamicData\s*=\s*dynamicData;")

SIZE_NAMES: dict[str, str] = {
    "300x250": "Medium Rectangle",
    "728x90": "Leaderboard",
    "160x600": "Wide Skyscraper",
    "300x600": "Half Page",
    "320x50": "Mobile Banner",
    "320x100": "Large Mobile Banner",
    "970x250": "Billboard",
    "970x90": "Large Leaderboard",
    "1080x1080": "Social Square",
}

# Export field -> manifest dynamic value name
DYNAMIC_VALUE_FIELDS: dict[str, str] = {
    "headline": "s0_headline",
    "bodyCopy": "s0_bodycopy",
    "ctaText": "s0_ctaText",
    "imageUrl": "s0_imageUrl",
    "logoUrl": "s0_logoUrl",
}


def get_size_name(size_id: str) -> str:
    return SIZE_NAMES.get(size_id, size_id)


def parse_manifest_js(content: str) -> dict[str, Any]:
    """Parse `window.manifest = {...};` into a dict."""
    match = _MANIFEST_RE.search(content.strip())
    if not match:
        raise ValidationError("Invalid manifest.js format: could not find window.manifest assignment")
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Failed to parse manifest.js: {e}") from e


def serialize_manifest(manifest: dict[str, Any]) -> str:
    return f"window.manifest = {json.dumps(manifest, indent=2, ensure_ascii=False)};"


def _layer_kind(layer: dict[str, Any]) -> str:
    if layer.get("isGroup"):
        return "group"
    if layer.get("fileType") == "text":
        return "text"
    if layer.get("fileType") == "svg":
        return "shape"
    return "image"


def layout_from_manifest(manifest: dict[str, Any], size: str) -> Layout:
    """Build a Layout from the first shot of every manifest layer."""
    layers = []
    for raw in manifest.get("layers") or []:
        shots = raw.get("shots") or [{}]
        pos = shots[0].get("pos") or {}
        dims = shots[0].get("size") or {}
        layers.append(
            Layer(
                name=raw["name"],
                x=pos.get("x", 0),
                y=pos.get("y", 0),
                width=dims.get("w", 0),
                height=dims.get("h", 0),
                kind=_layer_kind(raw),
                is_dynamic=bool(raw.get("isDynamic")),
            )
        )
    return Layout(size=size, layers=tuple(layers))


def apply_artifact(manifest: dict[str, Any], artifact: Artifact) -> dict[str, Any]:
    """Return a copy of a template manifest with an artifact's values and layout applied."""
    result = copy.deepcopy(manifest)

    dynamic_values = (result.get("settings") or {}).get("dynamicValues") or []
    by_name = {dv.get("name"): dv for dv in dynamic_values}
    for field_name, manifest_name in DYNAMIC_VALUE_FIELDS.items():
        value = artifact.dynamic_values.get(field_name)
        if isinstance(value, str) and value and manifest_name in by_name:
            by_name[manifest_name]["defaultValue"] = value

    resolved = {layer.name.lower(): layer for layer in artifact.layout.layers}
    for raw in result.get("layers") or []:
        layer = resolved.get(raw.get("name", "").lower())
        shots = raw.get("shots")
        if layer is None or not shots:
            continue
        first = shots[0]
        dx = layer.x - (first.get("pos") or {}).get("x", 0)
        dy = layer.y - (first.get("pos") or {}).get("y", 0)
        for shot in shots:
            pos = shot.setdefault("pos", {"x": 0, "y": 0})
            pos["x"] = pos.get("x", 0) + dx
            pos["y"] = pos.get("y", 0) + dy
            if layer.scale != 1:
                dims = shot.setdefault("size", {})
                for key in ("w", "h", "initW", "initH"):
                    if key in dims:
                        dims[key] *= layer.scale

    return result


def render_index_html(html: str, artifact: Artifact) -> str:
    """Inject the brand colors into the player data and inline the font and color CSS."""
    if artifact.colors:
        colors = color_string(artifact.colors)
        html = _PLAYER_DATA_RE.sub(
            lambda m: f'dynamicData["colors"] = "{colors}";\n      {m.group(0)}',
            html,
            count=1,
        )

    css = "\n\n".join(filter(None, [artifact.font_css, artifact.color_css]))
    if css and "</head>" in html:
        html = html.replace("</head>", f"<style>\n{css}\n</style>\n</head>", 1)
    return html


class TemplateLibrary:
    """Read ad templates from disk."""

    def __init__(self, root: str | Path = TEMPLATES_DIR):
        self.root = Path(root)

    def _template_dir(self, template_path: str) -> Path:
        template_dir = (self.root / template_path).resolve()
        if self.root.resolve() not in template_dir.parents or not template_dir.is_dir():
            raise NotFoundError(f"Template not found: {template_path}")
        return template_dir

    def _size_dir(self, template_path: str, size: str) -> Path:
        template_dir = self._template_dir(template_path)
        size_dir = (template_dir / size).resolve()
        if size_dir.parent != template_dir or not size_dir.is_dir():
            raise NotFoundError(f"Size '{size}' not found in template {template_path}")
        return size_dir

    def list_sizes(self, template_path: str) -> list[AdSize]:
        """Sizes that have both a manifest.js and an index.html."""
        template_dir = self._template_dir(template_path)
        sizes = []
        for entry in sorted(template_dir.iterdir()):
            if not entry.is_dir() or entry.name.startswith("."):
                continue
            if (entry / MANIFEST_FILE).exists() and (entry / INDEX_FILE).exists():
                sizes.append(
                    AdSize(
                        id=entry.name,
                        name=get_size_name(entry.name),
                        dimensions=entry.name.replace("x", " × "),
                    )
                )
        return sizes

    def load_manifest(self, template_path: str, size: str) -> dict[str, Any]:
        path = self._size_dir(template_path, size) / MANIFEST_FILE
        if not path.exists():
            raise NotFoundError(f"Size '{size}' not found in template {template_path}")
        return parse_manifest_js(path.read_text(encoding="utf-8"))

    def load_layout(self, template_path: str, size: str) -> Layout:
        return layout_from_manifest(self.load_manifest(template_path, size), size)

    def size_files(self, template_path: str, size: str) -> list[Path]:
        """Static files of a size directory (everything except hidden files and dirs)."""
        size_dir = self._size_dir(template_path, size)
        return [
            p for p in sorted(size_dir.iterdir())
            if p.is_file() and not p.name.startswith(".")
        ]

    def render_manifest(self, template_path: str, artifact: Artifact) -> str:
        manifest = self.load_manifest(template_path, artifact.size)
        return serialize_manifest(apply_artifact(manifest, artifact))
