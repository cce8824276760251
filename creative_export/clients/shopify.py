"""Shopify Admin API client (OAuth token exchange and product catalog)."""

import time
from collections.abc import Iterator

import requests

from ..config import SHOPIFY_API_VERSION
from ..errors import UpstreamError
from ..models.product import Product

PRODUCTS_QUERY = """
query getProducts($cursor: String) {
  products(first: 50, after: $cursor) {
    edges {
      node {
        id
        title
        vendor
        handle
        priceRange { minVariantPrice { amount currencyCode } }
        images(first: 5) { edges { node { url } } }
      }
    }
    pageInfo { hasNextPage endCursor }
  }
}
"""


class ShopifyClient:
    """Client for one Shopify store."""

    def __init__(self, shop: str, access_token: str | None = None, timeout: float = 30):
        self.shop = shop
        self.access_token = access_token
        self.timeout = timeout
        self.base_url = f"https://{shop}/admin"

    def _get_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["X-Shopify-Access-Token"] = self.access_token
        return headers

    def _post_with_retry(self, url: str, payload: dict, max_retries: int = 5) -> requests.Response:
        """POST with exponential backoff on 429 errors."""
        response = None
        for attempt in range(max_retries):
            try:
                response = requests.post(
                    url, json=payload, headers=self._get_headers(), timeout=self.timeout
                )
            except requests.RequestException as e:
                raise UpstreamError("shopify", str(e)) from e

            if response.status_code == 429:
                time.sleep(2 ** attempt)
                continue

            return response

        return response

    def exchange_code(self, api_key: str, api_secret: str, code: str) -> str:
        """Exchange an OAuth authorization code for an access token."""
        response = self._post_with_retry(
            f"{self.base_url}/oauth/access_token",
            {"client_id": api_key, "client_secret": api_secret, "code": code},
        )
        if not response.ok:
            raise UpstreamError("shopify", f"Token exchange failed ({response.status_code}): {response.text}")

        token = response.json().get("access_token")
        if not token:
            raise UpstreamError("shopify", "Token exchange returned no access_token")
        self.access_token = token
        return token

    def fetch_products(self, max_pages: int = 20) -> Iterator[Product]:
        """Page through the GraphQL products query."""
        url = f"{self.base_url}/api/{SHOPIFY_API_VERSION}/graphql.json"
        cursor = None

        for _ in range(max_pages):
            response = self._post_with_retry(
                url, {"query": PRODUCTS_QUERY, "variables": {"cursor": cursor}}
            )
            if not response.ok:
                raise UpstreamError("shopify", f"Products query failed ({response.status_code})")

            data = response.json()
            if data.get("errors"):
                raise UpstreamError("shopify", str(data["errors"]))

            products = data["data"]["products"]
            for edge in products["edges"]:
                yield self._to_product(edge["node"])

            page_info = products["pageInfo"]
            if not page_info.get("hasNextPage"):
                return
            cursor = page_info.get("endCursor")

    def _to_product(self, node: dict) -> Product:
        price = (node.get("priceRange") or {}).get("minVariantPrice") or {}
        return Product(
            id=node["id"],
            title=node.get("title", ""),
            vendor=node.get("vendor") or "",
            handle=node.get("handle") or "",
            price=float(price.get("amount") or 0),
            currency=price.get("currencyCode") or "USD",
            image_urls=[e["node"]["url"] for e in (node.get("images") or {}).get("edges", [])],
        )
