"""Extract embedded fonts from style-sheet text and render them back as CSS.

Parsing walks the text once: blocks are delimited with `str.find` on the
`@font-face` marker and every pattern below is applied to a single block, so
payload bytes are never rescanned for a neighbouring block.
"""

import logging
import re
from collections.abc import Iterable, Iterator

from .models.fonts import FontResource

logger = logging.getLogger(__name__)

FONT_FACE_MARKER = "@font-face"

_FAMILY_RE = re.compile(r"font-family\s*:\s*(?:'([^']+)'|\"([^\"]+)\"|([^;'\"}]+))")
_DATA_URI_RE = re.compile(r"url\(\s*['\"]?data:([^;,'\"]*)(?:;[^;,'\"]*)*;base64,")
_PAYLOAD_RE = re.compile(r"[A-Za-z0-9+/=_-]*")


def _split_blocks(text: str) -> Iterator[str]:
    """Yield the text between consecutive @font-face markers."""
    start = text.find(FONT_FACE_MARKER)
    while start != -1:
        body_start = start + len(FONT_FACE_MARKER)
        end = text.find(FONT_FACE_MARKER, body_start)
        yield text[body_start:] if end == -1 else text[body_start:end]
        start = end


def _parse_family(block: str) -> str | None:
    match = _FAMILY_RE.search(block)
    if not match:
        return None
    family = next(group for group in match.groups() if group is not None).strip()
    return family or None


def _parse_payload(block: str) -> tuple[str, str] | None:
    """Return (mime_type, base64 payload) for the first data URI in a block."""
    match = _DATA_URI_RE.search(block)
    if not match:
        return None
    payload = _PAYLOAD_RE.match(block, match.end()).group(0)
    if not payload:
        return None
    mime_type = match.group(1) or "font/woff2"
    return mime_type, payload


def iter_font_faces(style_sheet: str) -> Iterator[FontResource]:
    """Yield a FontResource for every well-formed @font-face block.

    Blocks missing either a family name or a base64 data URI are skipped.
    """
    skipped = 0
    for block in _split_blocks(style_sheet):
        family = _parse_family(block)
        parsed = _parse_payload(block)
        if family is None or parsed is None:
            skipped += 1
            continue
        mime_type, payload = parsed
        yield FontResource(family=family, payload=payload, mime_type=mime_type)

    if skipped:
        logger.debug(f"Skipped {skipped} incomplete @font-face blocks")


def resolve_font_resources(style_sheet: str) -> dict[str, FontResource]:
    """Map family -> FontResource. Later declarations win."""
    return {font.family: font for font in iter_font_faces(style_sheet)}


def resolve_fonts(style_sheet: str) -> dict[str, str]:
    """Map family -> base64 payload. Later declarations win."""
    return {font.family: font.payload for font in iter_font_faces(style_sheet)}


def build_font_face_css(fonts: dict[str, str] | Iterable[FontResource]) -> str:
    """Render @font-face rules that embed every font as a data URI."""
    if isinstance(fonts, dict):
        resources = [FontResource(family, payload) for family, payload in fonts.items()]
    else:
        resources = list(fonts)

    rules = []
    for font in resources:
        family = font.family.replace("'", "\\'")
        rules.append(
            "@font-face {\n"
            f"  font-family: '{family}';\n"
            f"  src: url('{font.data_uri}');\n"
            "  font-display: swap;\n"
            "}"
        )
    return "\n\n".join(rules)
