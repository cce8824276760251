"""Data models."""

from .export import AdSize, Artifact, ExportRequest, ExportSession
from .fonts import FontResource
from .layer import Layer, LayerModification, Layout, PositionDelta
from .localization import (
    LanguageTranslation,
    LocalizationState,
    LocalizedCopy,
    LocalizedProductCopy,
    TranslationStatus,
)
from .manifest import ColorScheme, CopyOverrides, CreativeManifest, Typography, validate
from .palette import BrandPalette, validate_palette
from .product import Product

__all__ = [
    "AdSize",
    "Artifact",
    "BrandPalette",
    "ColorScheme",
    "CopyOverrides",
    "CreativeManifest",
    "ExportRequest",
    "ExportSession",
    "FontResource",
    "LanguageTranslation",
    "Layer",
    "LayerModification",
    "Layout",
    "LocalizationState",
    "LocalizedCopy",
    "LocalizedProductCopy",
    "PositionDelta",
    "Product",
    "TranslationStatus",
    "Typography",
    "validate",
    "validate_palette",
]
