"""AWS Lambda handlers for the Shopify OAuth redirect and catalog sync."""

import json

from ..clients.shopify import ShopifyClient
from ..errors import CreativeExportError
from ..services.shopify_auth import ShopifyAuthService, clean_shop_domain
from ..state_store import HandshakeStore, InMemoryHandshakeStore
from .http import error_response, parse_body, query_params, response

# Shared across warm invocations of a single instance
_store: HandshakeStore = InMemoryHandshakeStore()


def auth_handler(event, context, service: ShopifyAuthService | None = None):
    """GET ?shop=mystore.myshopify.com -> {"authUrl", "state"}."""
    shop = query_params(event).get("shop")
    if not shop:
        return response(400, {"error": "Missing 'shop' parameter"})

    service = service or ShopifyAuthService(_store)
    try:
        request = service.begin(shop)
    except CreativeExportError as e:
        return error_response(e)

    return response(200, {"authUrl": request.auth_url, "state": request.state})


def callback_handler(event, context, service: ShopifyAuthService | None = None):
    """GET ?code=...&shop=...&state=...&hmac=... -> connected shop."""
    service = service or ShopifyAuthService(_store)
    try:
        connection = service.complete(query_params(event))
    except CreativeExportError as e:
        print(f"Shopify callback failed: {e}", flush=True)
        return error_response(e)

    print(f"Connected shop {connection.shop}", flush=True)
    return response(200, {
        "shop": connection.shop,
        "accessToken": connection.access_token,
        "connected": True,
    })


def sync_handler(event, context, client_factory=ShopifyClient):
    """
    Fetch the store catalog and return it as localization input.

    Input payload:
    {"shop": "mystore.myshopify.com", "accessToken": "...", "ctaText": "Shop Now"}

    Output: products plus their source-language product copies, ready to be
    passed as "products" to the localize handler.
    """
    try:
        body = parse_body(event)
    except json.JSONDecodeError:
        return response(400, {"error": "Invalid JSON body"})

    if not body.get("shop") or not body.get("accessToken"):
        return response(400, {"error": "Missing 'shop' or 'accessToken' field"})

    cta_text = body.get("ctaText") or "Shop Now"
    try:
        client = client_factory(clean_shop_domain(body["shop"]), access_token=body["accessToken"])
        products = list(client.fetch_products())
    except CreativeExportError as e:
        print(f"Shopify sync failed: {e}", flush=True)
        return error_response(e)

    print(f"Synced {len(products)} products from {client.shop}", flush=True)
    return response(200, {
        "products": [
            {
                "id": p.id,
                "title": p.title,
                "vendor": p.vendor,
                "handle": p.handle,
                "price": p.price,
                "currency": p.currency,
                "imageUrls": p.image_urls,
            }
            for p in products
        ],
        "productCopies": [p.to_copy(cta_text).to_dict() for p in products],
    })
