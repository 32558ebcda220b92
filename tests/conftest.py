from dataclasses import dataclass
from unittest.mock import Mock
from urllib.parse import urlparse

import pytest

from storefront.domain.order_status import OrderStatusMachine
from storefront.domain.schemas import Credentials, Order, UserRef
from storefront.main import create_storefront
from storefront.repos.session_repo import SessionRepo
from storefront.services.invoice_service import InvoiceService
from storefront.services.notification_service import CartChannel

BASE_URL = "http://api.test"

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, body=_NO_JSON):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._body


@dataclass
class Call:
    method: str
    path: str
    headers: dict
    json: dict | None


class FakeSession:
    """Zastepuje requests.Session: trasy (metoda, sciezka) -> odpowiedz, wyjatek albo funkcja."""

    def __init__(self):
        self.routes = {}
        self.calls: list[Call] = []

    def route(self, method: str, path: str, body=_NO_JSON, status: int = 200, error=None, handler=None):
        if error is not None:
            self.routes[(method, path)] = error
        elif handler is not None:
            self.routes[(method, path)] = handler
        else:
            self.routes[(method, path)] = FakeResponse(status, body)

    def request(self, method, url, headers=None, json=None, timeout=None):
        path = urlparse(url).path
        self.calls.append(Call(method, path, headers or {}, json))
        target = self.routes.get((method, path))
        if target is None:
            return FakeResponse(404, {"success": False, "message": f"No route {method} {path}"})
        if isinstance(target, Exception):
            raise target
        if callable(target):
            return target(json)
        return target

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]


# =====================================================
# DANE
# =====================================================
def cart_item(product_id: int, quantity: int, price, weight=0, name=None) -> dict:
    return {
        "id": product_id * 10,
        "product_id": product_id,
        "quantity": quantity,
        "price_at_addition": str(price),
        "added_at": "2025-03-01 09:00:00",
        "product": {
            "id": product_id,
            "name": name or f"Product {product_id}",
            "price": str(price),
            "weight": weight,
        },
    }


def cart_body(*items: dict, total_price=None) -> dict:
    cart = {"id": 1, "user_id": 7, "items": list(items)}
    if total_price is not None:
        cart["total_price"] = total_price
    return {"success": True, "cart": cart}


def order_data(order_id: int = 1, status="pending", payment_status="pending", total="265000", **extra) -> dict:
    data = {
        "id": order_id,
        "order_number": f"ORD-20250301-{order_id:06d}",
        "status": status,
        "payment_status": payment_status,
        "payment_method": "bank_transfer",
        "shipping_method": "standard",
        "shipping_cost": "15000",
        "total_amount": total,
        "total_weight": 1500,
        "shipping_info": {
            "fullName": "Budi Santoso",
            "email": "budi@example.com",
            "phone": "08123456789",
            "address": "Jl. Merdeka 1",
            "city": "Jakarta",
            "postalCode": "10110",
        },
        "items": [
            {"product_id": 1, "product_name": "Kopi", "price": "100000", "quantity": 2, "weight": 500},
            {"product_id": 2, "product_name": "Teh", "price": "50000", "quantity": 1, "weight": 500},
        ],
        "created_at": "2025-03-01 10:00:00",
    }
    data.update(extra)
    return data


def make_order(**kwargs) -> Order:
    return Order.model_validate(order_data(**kwargs))


SHIPPING_FORM = {
    "full_name": "Budi Santoso",
    "email": "budi@example.com",
    "phone": "08123456789",
    "address": "Jl. Merdeka 1",
    "city": "Jakarta",
    "postal_code": "10110",
}


# =====================================================
# FIXTURES
# =====================================================
@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def channel():
    return CartChannel()


@pytest.fixture
def events(channel):
    received = []
    channel.subscribe(received.append)
    return received


@pytest.fixture
def printer():
    return Mock()


@pytest.fixture
def app(session, channel, tmp_path, printer):
    return create_storefront(
        base_url=BASE_URL,
        session=session,
        channel=channel,
        session_repo=SessionRepo(tmp_path / "session.json"),
        state_machine=OrderStatusMachine(enforce_transitions=True, customer_can_mark_paid=True),
        invoices=InvoiceService(printer=printer),
    )


@pytest.fixture
def credentials():
    return Credentials(token="tok-123", user=UserRef(id=7, username="budi", email="budi@example.com"))


@pytest.fixture
def admin_credentials():
    return Credentials(token="tok-admin", user=UserRef(id=1, username="admin", role="admin"))


@pytest.fixture
def anonymous():
    return Credentials()
