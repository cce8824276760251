"""Shopify OAuth flow backed by the handshake store."""

import hashlib
import hmac
import logging
import re
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

from ..clients.shopify import ShopifyClient
from ..config import (
    SHOPIFY_API_KEY,
    SHOPIFY_API_SECRET,
    SHOPIFY_REDIRECT_URI,
    SHOPIFY_SCOPES,
)
from ..errors import NotFoundError, ValidationError
from ..state_store import HandshakeStore

logger = logging.getLogger(__name__)

SHOP_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.myshopify\.com$")


@dataclass
class AuthorizationRequest:
    auth_url: str
    state: str
    shop: str


@dataclass
class ShopConnection:
    shop: str
    access_token: str


def clean_shop_domain(shop: str) -> str:
    """Strip scheme and trailing slash, then validate the *.myshopify.com domain."""
    cleaned = re.sub(r"^https?://", "", shop.strip()).rstrip("/")
    if not SHOP_DOMAIN_RE.match(cleaned):
        raise ValidationError("Invalid shop domain. Use format: your-store.myshopify.com")
    return cleaned


def compute_hmac(params: dict[str, str], secret: str) -> str:
    """sha256 HMAC over the sorted query parameters, excluding `hmac` itself."""
    message = "&".join(
        f"{key}={value}" for key, value in sorted(params.items()) if key != "hmac"
    )
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def verify_hmac(params: dict[str, str], secret: str) -> bool:
    received = params.get("hmac")
    if not received or not secret:
        return False
    return hmac.compare_digest(received, compute_hmac(params, secret))


class ShopifyAuthService:
    """Begin and complete the OAuth redirect for one store connection."""

    def __init__(
        self,
        store: HandshakeStore,
        api_key: str = SHOPIFY_API_KEY,
        api_secret: str = SHOPIFY_API_SECRET,
        redirect_uri: str = SHOPIFY_REDIRECT_URI,
        scopes: str = SHOPIFY_SCOPES,
        client_factory=ShopifyClient,
    ):
        self.store = store
        self.api_key = api_key
        self.api_secret = api_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.client_factory = client_factory

    def begin(self, shop: str) -> AuthorizationRequest:
        """Mint a state token, store it and build the authorize URL."""
        if not self.api_key:
            raise ValidationError("Shopify integration not configured")

        cleaned = clean_shop_domain(shop)
        state = secrets.token_hex(16)
        self.store.store_state(state, cleaned)

        query = urlencode({
            "client_id": self.api_key,
            "scope": self.scopes,
            "redirect_uri": self.redirect_uri,
            "state": state,
        })
        return AuthorizationRequest(
            auth_url=f"https://{cleaned}/admin/oauth/authorize?{query}",
            state=state,
            shop=cleaned,
        )

    def complete(self, params: dict[str, str]) -> ShopConnection:
        """Consume the state token, verify the callback and exchange the code."""
        code, shop, state = params.get("code"), params.get("shop"), params.get("state")
        if not code or not shop or not state:
            raise ValidationError("Missing required parameters: code, shop, state")

        stored_shop = self.store.retrieve_state(state)
        if stored_shop is None or stored_shop != shop:
            logger.warning(f"State mismatch for shop {shop}")
            raise NotFoundError("Invalid or expired state")

        if "hmac" in params and not verify_hmac(params, self.api_secret):
            raise ValidationError("HMAC verification failed")

        client = self.client_factory(shop)
        token = client.exchange_code(self.api_key, self.api_secret, code)
        return ShopConnection(shop=shop, access_token=token)
