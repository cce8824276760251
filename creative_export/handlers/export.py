"""AWS Lambda handler for creative export."""

import base64
import json
import time

from ..clients.storage import BundleStorage
from ..bundle import write_bundle
from ..config import DEFAULT_LANGUAGE, EXPORT_BUCKET, TEMPLATES_DIR
from ..engine.exporter import ExportCoordinator
from ..errors import CreativeExportError, ValidationError
from ..font_resolver import resolve_fonts
from ..models.export import ExportRequest, ExportSession
from ..models.localization import (
    LanguageTranslation,
    LocalizationState,
    LocalizedCopy,
    LocalizedProductCopy,
    TranslationStatus,
)
from ..models.manifest import CreativeManifest
from ..models.palette import BrandPalette
from ..templates import TemplateLibrary
from ..utils import to_slug, today_date
from .http import error_response, parse_body, response


def localization_from_payload(localizations: dict[str, dict]) -> LocalizationState:
    """Treat every supplied localization as a finished translation."""
    state = LocalizationState()
    selected = list(state.selected_languages)
    translations = dict(state.translations)

    for code, payload in localizations.items():
        if code in (DEFAULT_LANGUAGE, "default"):
            continue
        if "error" in payload:
            status, copy, products = TranslationStatus.ERROR, None, None
        else:
            status = TranslationStatus.DONE
            copy = LocalizedCopy.from_dict(payload.get("copy") or payload)
            products = tuple(LocalizedProductCopy.from_dict(p) for p in payload.get("products") or [])
        selected.append(code)
        translations[code] = LanguageTranslation(code, status, copy, products)

    return LocalizationState(selected_languages=tuple(selected), translations=translations)


def palette_from_payload(data: dict | None) -> BrandPalette | None:
    if not data:
        return None
    return BrandPalette(
        primary=data.get("primary", ""),
        secondary=data.get("secondary", ""),
        accent=data.get("accent", ""),
        extra_colors=tuple(data.get("extraColors") or ()),
    )


def handler(event, context, library: TemplateLibrary | None = None, storage: BundleStorage | None = None):
    """
    AWS Lambda handler - triggered by SQS or HTTP.

    Input payload:
    {
        "templatePath": "summer-sale",
        "sizes": ["300x250", "728x90"],
        "dynamicValues": {"headline": "...", "imageUrl": "data:image/png;base64,..."},
        "layerModifications": [{"layerName": "logo", "scaleFactor": 1.2}],
        "manifest": {...creative manifest...},
        "palette": {"primary": "#...", "secondary": "#...", "accent": "#...", "extraColors": []},
        "localizations": {"de": {"headline": "...", "bodyCopy": "...", "ctaText": "..."}},
        "styleSheet": "@font-face { ... }"
    }

    Output: zip bundle URL (or base64 body when no bucket is configured).
    """
    try:
        body = parse_body(event)
    except json.JSONDecodeError:
        return response(400, {"error": "Invalid JSON body"})

    if not body.get("templatePath") or not body.get("manifest"):
        return response(400, {"error": "Missing 'templatePath' or 'manifest' field"})

    library = library or TemplateLibrary(TEMPLATES_DIR)

    try:
        request = ExportRequest.from_dict(body)
        session = ExportSession.from_request(request)
        manifest = CreativeManifest.from_dict(body["manifest"])
        localization = localization_from_payload(body.get("localizations") or {})
        fonts = resolve_fonts(body.get("styleSheet") or "")
        print(
            f"Exporting {request.template_path}: {len(session.selected_sizes)} sizes, "
            f"{len(localization.done_languages())} languages, {len(fonts)} fonts",
            flush=True,
        )

        coordinator = ExportCoordinator(library.load_layout)
        artifacts = coordinator.export_bundle(
            session, manifest, localization, fonts, palette_from_payload(body.get("palette"))
        )
        zip_bytes = write_bundle(artifacts, request.template_path, library)

        result = {
            "templatePath": request.template_path,
            "artifacts": [a.name for a in artifacts],
            "exportedAt": session.exported_at.isoformat(),
        }

        bucket_storage = storage or (BundleStorage(EXPORT_BUCKET) if EXPORT_BUCKET else None)
        if bucket_storage is not None:
            key = f"exports/{today_date()}/{to_slug(request.template_path)}-export-{int(time.time() * 1000)}.zip"
            result["url"] = bucket_storage.upload(key, zip_bytes)
        else:
            result["bundle"] = base64.b64encode(zip_bytes).decode("ascii")

        return response(200, result)

    except (ValueError, KeyError) as e:
        return error_response(ValidationError(f"Invalid export request: {e}"))
    except CreativeExportError as e:
        print(f"ERROR: {e}", flush=True)
        return error_response(e)


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m creative_export.handlers.export <request.json>")
        sys.exit(1)

    with open(sys.argv[1], encoding="utf-8") as f:
        result = handler({"body": f.read()}, None)
    print(json.dumps(json.loads(result["body"]), indent=2)[:2000])
