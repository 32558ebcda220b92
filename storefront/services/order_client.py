# storefront/services/order_client.py
from pydantic import TypeAdapter

from storefront.domain.errors import NetworkError
from storefront.domain.schemas import Credentials, Order, OrderReceipt, ShippingInfo
from storefront.services.api_client import ApiClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_ORDER_LIST = TypeAdapter(list[Order])


class OrderClient:
    """Typowane endpointy /order/* - czesc klienta i czesc admina."""

    def __init__(self, api: ApiClient):
        self.api = api

    #klient
    def place(
        self,
        shipping_info: ShippingInfo,
        payment_method: str,
        shipping_method: str,
        credentials: Credentials,
    ) -> OrderReceipt | None:
        """
        success == true oznacza, ze zamowienie istnieje, a koszyk jest pusty.
        Brak lub bledne dane zamowienia w odpowiedzi to tylko brak potwierdzenia (None).
        """
        body = self.api.post(
            "/order/place",
            credentials,
            json={
                "shipping_info": shipping_info.to_wire(),
                "payment_method": payment_method,
                "shipping_method": shipping_method,
            },
        )
        order = body.get("order")
        if not isinstance(order, dict):
            logger.warning("/order/place: zamowienie zlozone, ale odpowiedz bez danych zamowienia")
            return None
        try:
            return self.api.parse(
                OrderReceipt,
                {
                    "order_number": order.get("order_number"),
                    "total_amount": order.get("total_amount"),
                    "order_id": order.get("id"),
                },
                "/order/place",
            )
        except NetworkError:
            return None

    def list_orders(self, credentials: Credentials) -> list[Order]:
        body = self.api.get("/order/list", credentials)
        return self._parse_list(body, "/order/list")

    def get_order(self, order_id: int, credentials: Credentials) -> Order:
        path = f"/order/view/{order_id}"
        return self.api.parse(Order, self.api.get(path, credentials).get("order"), path)

    def update_payment(self, order_id: int, payment_status: str, credentials: Credentials) -> dict:
        body = self.api.post(
            f"/order/update-payment/{order_id}",
            credentials,
            json={"payment_status": payment_status},
        )
        return body.get("order") or {}

    def cancel(self, order_id: int, credentials: Credentials) -> dict:
        return self.api.post(f"/order/cancel/{order_id}", credentials).get("order") or {}

    #admin
    def admin_list(self, credentials: Credentials) -> list[Order]:
        body = self.api.get("/order/admin-list", credentials)
        return self._parse_list(body, "/order/admin-list")

    def admin_get(self, order_id: int, credentials: Credentials) -> Order:
        path = f"/order/admin-view/{order_id}"
        return self.api.parse(Order, self.api.get(path, credentials).get("order"), path)

    def admin_update(
        self,
        order_id: int,
        status: str,
        payment_status: str,
        credentials: Credentials,
    ) -> dict:
        body = self.api.post(
            f"/order/admin-update/{order_id}",
            credentials,
            json={"status": status, "payment_status": payment_status},
        )
        return body.get("order") or {}

    def _parse_list(self, body: dict, path: str) -> list[Order]:
        return self.api.parse(_ORDER_LIST, body.get("orders") or [], path)
