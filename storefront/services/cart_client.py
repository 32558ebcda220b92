# storefront/services/cart_client.py
from storefront.domain.schemas import ApiResult, Cart, Credentials
from storefront.services.api_client import ApiClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartClient:
    """Typowane endpointy /cart/*. Serwer jest wlascicielem koszyka, klient tylko go odbija."""

    def __init__(self, api: ApiClient):
        self.api = api

    def fetch_cart(self, credentials: Credentials) -> Cart:
        body = self.api.get("/cart", credentials)
        return self.api.parse(Cart, body.get("cart") or {}, "/cart")

    def add(self, product_id: int, quantity: int, credentials: Credentials) -> ApiResult:
        body = self.api.post(
            "/cart/add", credentials, json={"product_id": product_id, "quantity": quantity}
        )
        return ApiResult.from_body(body)

    def update(self, product_id: int, quantity: int, credentials: Credentials) -> ApiResult:
        body = self.api.put(
            "/cart/update", credentials, json={"product_id": product_id, "quantity": quantity}
        )
        return ApiResult.from_body(body)

    def remove(self, product_id: int, credentials: Credentials) -> ApiResult:
        body = self.api.delete("/cart/remove", credentials, json={"product_id": product_id})
        return ApiResult.from_body(body)

    def clear(self, credentials: Credentials) -> ApiResult:
        return ApiResult.from_body(self.api.delete("/cart/clear", credentials))

    def count(self, credentials: Credentials) -> int:
        body = self.api.get("/cart/count", credentials)
        count = body.get("count")
        return count if isinstance(count, int) else 0
