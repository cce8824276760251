"""API clients for external services."""

from .llm import LLMClient
from .shopify import ShopifyClient
from .storage import BundleStorage

__all__ = ["LLMClient", "ShopifyClient", "BundleStorage"]
