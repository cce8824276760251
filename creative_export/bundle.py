"""Package artifacts into a zip bundle."""

import base64
import binascii
import io
import logging
import re
import zipfile
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import requests
from PIL import Image, UnidentifiedImageError

from .errors import UpstreamError, ValidationError
from .models.export import Artifact
from .templates import INDEX_FILE, MANIFEST_FILE, TemplateLibrary, render_index_html, serialize_manifest

logger = logging.getLogger(__name__)

_IMAGE_DATA_URI_RE = re.compile(r"^data:image/[^;]+;base64,(.+)$", re.DOTALL)

# Dynamic value -> file name inside each bundle folder
IMAGE_FIELDS = {
    "imageUrl": "dynamicimage.png",
    "logoUrl": "logo.png",
}


def to_png(image_data: bytes) -> bytes:
    """Re-encode any image Pillow can read as PNG."""
    try:
        img = Image.open(io.BytesIO(image_data))
    except UnidentifiedImageError as e:
        raise ValidationError("Unrecognized image data") from e

    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")

    output = io.BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()


def load_image(url: str, template_root: Path | None = None) -> bytes | None:
    """Load an image from a data URI, a local template path or a remote URL."""
    if not url or not url.strip():
        return None

    if url.startswith("data:"):
        match = _IMAGE_DATA_URI_RE.match(url)
        if not match:
            raise ValidationError(f"Invalid image data URI: {url[:50]}")
        try:
            return to_png(base64.b64decode(match.group(1)))
        except binascii.Error as e:
            raise ValidationError("Invalid base64 image payload") from e

    if url.startswith("/") and template_root is not None:
        path = template_root / url.lstrip("/")
        if not path.exists():
            logger.warning(f"Local image not found: {path}")
            return None
        return to_png(path.read_bytes())

    try:
        response = requests.get(url, timeout=30)
        response.raise_for_status()
    except requests.RequestException as e:
        raise UpstreamError("image", str(e)) from e
    return to_png(response.content)


def folder_for(artifact: Artifact, multi_language: bool) -> str:
    """`<lang>/<size>` when several languages are exported, else `<size>`."""
    return f"{artifact.language}/{artifact.size}" if multi_language else artifact.size


def write_bundle(
    artifacts: list[Artifact],
    template_path: str | None = None,
    library: TemplateLibrary | None = None,
    image_loader: Callable[[str], bytes | None] = load_image,
) -> bytes:
    """Build the zip for a list of artifacts.

    With a template library, each folder gets the template's static files and
    a resolved manifest.js. Without one, manifest.js holds the artifact data.
    """
    multi_language = len({a.language for a in artifacts}) > 1
    images: dict[str, bytes | None] = {}

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for artifact in artifacts:
            folder = folder_for(artifact, multi_language)
            written = set()

            # Dynamic images replace same-named template files
            for field_name, file_name in IMAGE_FIELDS.items():
                url = artifact.dynamic_values.get(field_name)
                if not isinstance(url, str) or not url:
                    continue
                if url not in images:
                    images[url] = image_loader(url)
                if images[url] is not None:
                    archive.writestr(f"{folder}/{file_name}", images[url])
                    written.add(file_name)

            if library is not None and template_path:
                for path in library.size_files(template_path, artifact.size):
                    if path.name in written or path.name == MANIFEST_FILE:
                        continue
                    if path.name == INDEX_FILE:
                        html = render_index_html(path.read_text(encoding="utf-8"), artifact)
                        archive.writestr(f"{folder}/{INDEX_FILE}", html)
                        continue
                    archive.writestr(f"{folder}/{path.name}", path.read_bytes())
                manifest_js = library.render_manifest(template_path, _with_local_images(artifact, written))
            else:
                manifest_js = serialize_manifest(_artifact_manifest(artifact, written))

            archive.writestr(f"{folder}/{MANIFEST_FILE}", manifest_js)
            archive.writestr(f"{folder}/fonts.css", "\n\n".join(filter(None, [artifact.font_css, artifact.color_css])))

    logger.info(f"Bundle finalized: {len(artifacts)} artifacts, {buffer.tell()} bytes")
    return buffer.getvalue()


def _local_image_values(artifact: Artifact, written: set[str]) -> dict:
    values = dict(artifact.dynamic_values)
    for field_name, file_name in IMAGE_FIELDS.items():
        if file_name in written:
            values[field_name] = file_name
    return values


def _with_local_images(artifact: Artifact, written: set[str]) -> Artifact:
    """Point image fields at the files bundled next to the manifest."""
    return replace(artifact, dynamic_values=_local_image_values(artifact, written))


def _artifact_manifest(artifact: Artifact, written: set[str]) -> dict:
    return {
        "size": artifact.size,
        "language": artifact.language,
        "dynamicValues": _local_image_values(artifact, written),
        "colors": list(artifact.colors),
        "fonts": sorted(artifact.fonts),
        "layers": [
            {
                "name": layer.name,
                "pos": {"x": layer.x, "y": layer.y},
                "scale": layer.scale,
                "size": {"w": layer.scaled_width, "h": layer.scaled_height},
            }
            for layer in artifact.layout.layers
        ],
        "productCopies": [p.to_dict() for p in artifact.product_copies],
    }
