"""Tests for the Shopify OAuth flow and catalog client."""

from urllib.parse import parse_qs, urlparse

import pytest

from creative_export.clients import shopify as shopify_client
from creative_export.clients.shopify import ShopifyClient
from creative_export.errors import NotFoundError, UpstreamError, ValidationError
from creative_export.services.shopify_auth import (
    ShopifyAuthService,
    clean_shop_domain,
    compute_hmac,
    verify_hmac,
)
from creative_export.state_store import InMemoryHandshakeStore

SHOP = "my-shop.myshopify.com"
SECRET = "shpss_secret"


class FakeClient:
    exchanged: list[str] = []

    def __init__(self, shop: str):
        self.shop = shop

    def exchange_code(self, api_key: str, api_secret: str, code: str) -> str:
        FakeClient.exchanged.append(code)
        return f"token-for-{code}"


@pytest.fixture
def service() -> ShopifyAuthService:
    FakeClient.exchanged = []
    return ShopifyAuthService(
        InMemoryHandshakeStore(),
        api_key="key",
        api_secret=SECRET,
        redirect_uri="https://app.example.com/callback",
        scopes="read_products",
        client_factory=FakeClient,
    )


def signed(params: dict[str, str]) -> dict[str, str]:
    return {**params, "hmac": compute_hmac(params, SECRET)}


class TestShopDomain:
    def test_clean(self) -> None:
        assert clean_shop_domain(" https://my-shop.myshopify.com/ ") == SHOP

    @pytest.mark.parametrize("shop", ["", "my-shop.example.com", "-bad.myshopify.com", "a b.myshopify.com"])
    def test_invalid(self, shop: str) -> None:
        with pytest.raises(ValidationError):
            clean_shop_domain(shop)


class TestHmac:
    def test_verify(self) -> None:
        params = signed({"code": "abc", "shop": SHOP, "state": "s", "timestamp": "1"})
        assert verify_hmac(params, SECRET)

    def test_tampered(self) -> None:
        params = signed({"code": "abc", "shop": SHOP, "state": "s"})
        params["code"] = "xyz"
        assert not verify_hmac(params, SECRET)

    def test_missing(self) -> None:
        assert not verify_hmac({"code": "abc"}, SECRET)


class TestShopifyAuthService:
    """Test begin/complete of the OAuth redirect."""

    def test_begin_builds_url(self, service) -> None:
        request = service.begin("https://my-shop.myshopify.com")
        url = urlparse(request.auth_url)
        query = parse_qs(url.query)

        assert url.netloc == SHOP
        assert url.path == "/admin/oauth/authorize"
        assert query["client_id"] == ["key"]
        assert query["state"] == [request.state]
        assert len(request.state) == 32
        assert service.store.peek(request.state) == SHOP

    def test_begin_requires_configuration(self) -> None:
        with pytest.raises(ValidationError):
            ShopifyAuthService(InMemoryHandshakeStore(), api_key="").begin(SHOP)

    def test_complete(self, service) -> None:
        state = service.begin(SHOP).state
        connection = service.complete(signed({"code": "abc", "shop": SHOP, "state": state}))
        assert connection.shop == SHOP
        assert connection.access_token == "token-for-abc"

    def test_state_is_single_use(self, service) -> None:
        """Test that replaying a callback fails after the first success."""
        state = service.begin(SHOP).state
        params = signed({"code": "abc", "shop": SHOP, "state": state})
        service.complete(params)
        with pytest.raises(NotFoundError):
            service.complete(params)
        assert FakeClient.exchanged == ["abc"]

    def test_shop_mismatch(self, service) -> None:
        state = service.begin(SHOP).state
        with pytest.raises(NotFoundError):
            service.complete({"code": "abc", "shop": "other.myshopify.com", "state": state})

    def test_bad_hmac_rejected(self, service) -> None:
        state = service.begin(SHOP).state
        params = {"code": "abc", "shop": SHOP, "state": state, "hmac": "00" * 32}
        with pytest.raises(ValidationError):
            service.complete(params)
        assert FakeClient.exchanged == []

    def test_missing_params(self, service) -> None:
        with pytest.raises(ValidationError):
            service.complete({"shop": SHOP})


class FakeResponse:
    def __init__(self, status_code: int, payload: dict | None = None):
        self.status_code = status_code
        self.payload = payload or {}
        self.text = str(self.payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> dict:
        return self.payload


def product_page(ids: list[str], has_next: bool) -> dict:
    return {
        "data": {
            "products": {
                "edges": [
                    {
                        "node": {
                            "id": pid,
                            "title": f"Product {pid}",
                            "vendor": "Acme",
                            "handle": f"product-{pid}",
                            "priceRange": {"minVariantPrice": {"amount": "19.90", "currencyCode": "EUR"}},
                            "images": {"edges": [{"node": {"url": f"https://cdn.example.com/{pid}.jpg"}}]},
                        }
                    }
                    for pid in ids
                ],
                "pageInfo": {"hasNextPage": has_next, "endCursor": "cursor-1" if has_next else None},
            }
        }
    }


class TestShopifyClient:
    """Test the Admin API client with requests patched out."""

    def test_fetch_products_pages(self, monkeypatch) -> None:
        pages = [FakeResponse(200, product_page(["1", "2"], True)), FakeResponse(200, product_page(["3"], False))]
        sent = []

        def fake_post(url, json=None, headers=None, timeout=None):
            sent.append(json)
            return pages.pop(0)

        monkeypatch.setattr(shopify_client.requests, "post", fake_post)

        products = list(ShopifyClient(SHOP, access_token="tok").fetch_products())

        assert [p.id for p in products] == ["1", "2", "3"]
        assert products[0].price == 19.90
        assert products[0].currency == "EUR"
        assert products[0].image_urls == ["https://cdn.example.com/1.jpg"]
        assert products[0].to_copy().product_id == "1"
        assert products[0].to_copy("Buy").cta_text == "Buy"
        assert sent[1]["variables"] == {"cursor": "cursor-1"}

    def test_retries_on_rate_limit(self, monkeypatch) -> None:
        responses = [FakeResponse(429), FakeResponse(200, {"access_token": "tok"})]
        monkeypatch.setattr(shopify_client.requests, "post", lambda *a, **kw: responses.pop(0))
        monkeypatch.setattr(shopify_client.time, "sleep", lambda seconds: None)

        assert ShopifyClient(SHOP).exchange_code("key", SECRET, "abc") == "tok"

    def test_exchange_failure(self, monkeypatch) -> None:
        monkeypatch.setattr(shopify_client.requests, "post", lambda *a, **kw: FakeResponse(400))
        with pytest.raises(UpstreamError):
            ShopifyClient(SHOP).exchange_code("key", SECRET, "abc")
