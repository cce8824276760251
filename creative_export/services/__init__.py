"""Business logic services."""

from .localization import BrandVoice, LocalizationService
from .shopify_auth import ShopifyAuthService

__all__ = ["BrandVoice", "LocalizationService", "ShopifyAuthService"]
