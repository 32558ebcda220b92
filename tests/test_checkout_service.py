from decimal import Decimal

import pytest
import requests

from storefront.domain.errors import NetworkError, ServerLogicError, ValidationError
from storefront.domain.schemas import Cart, CartChangeKind, ShippingInfo
from storefront.services.checkout_service import shipping_cost
from tests.conftest import SHIPPING_FORM, cart_body, cart_item

PLACED = {
    "success": True,
    "message": "Order placed successfully",
    "order": {"id": 42, "order_number": "ORD-20250301-ABC123", "total_amount": 265000},
}


@pytest.fixture
def cart():
    body = cart_body(cart_item(1, 2, 100000, weight=500), cart_item(2, 1, 50000, weight=500))
    return Cart.model_validate(body["cart"])


class TestSummary:
    def test_standard_shipping_total(self, app, cart):
        summary = app.checkout.summary(cart, "standard")

        assert summary.subtotal == Decimal("250000")
        assert summary.shipping_cost == Decimal("15000")
        assert summary.total == Decimal("265000")
        assert summary.total_weight == 1500

    def test_shipping_cost_table(self):
        assert shipping_cost("express") == Decimal("35000")
        assert shipping_cost("same_day") == Decimal("75000")

    def test_unknown_shipping_method(self, app, cart):
        with pytest.raises(ValidationError):
            app.checkout.summary(cart, "drone")


class TestPlaceOrder:
    def test_places_order_and_broadcasts_once(self, app, session, credentials, cart, events):
        session.route("POST", "/order/place", PLACED)

        receipt = app.checkout.place_order(SHIPPING_FORM, "bank_transfer", "standard", credentials, cart=cart)

        assert receipt.order_number == "ORD-20250301-ABC123"
        assert receipt.total_amount == Decimal("265000")
        assert receipt.order_id == 42
        assert [e.kind for e in events] == [CartChangeKind.ORDER_PLACED]

        sent = session.calls[0].json
        assert sent["shipping_method"] == "standard"
        assert sent["payment_method"] == "bank_transfer"
        assert sent["shipping_info"]["fullName"] == "Budi Santoso"
        assert sent["shipping_info"]["postalCode"] == "10110"

    def test_missing_fields_fail_without_request(self, app, session, credentials, cart, events):
        form = {**SHIPPING_FORM, "phone": "", "city": "  "}

        with pytest.raises(ValidationError) as exc:
            app.checkout.place_order(form, "bank_transfer", "standard", credentials, cart=cart)

        assert exc.value.fields == ["phone", "city"]
        assert "phone" in exc.value.message
        assert session.calls == []
        assert events == []

    def test_empty_cart_fails_without_request(self, app, session, credentials, events):
        with pytest.raises(ValidationError, match="empty"):
            app.checkout.place_order(SHIPPING_FORM, "bank_transfer", "standard", credentials, cart=Cart.empty())
        assert session.calls == []

    def test_unsupported_payment_method(self, app, session, credentials, cart):
        with pytest.raises(ValidationError):
            app.checkout.place_order(SHIPPING_FORM, "credit_card", "standard", credentials, cart=cart)
        assert session.calls == []

    def test_server_rejection_leaves_cart_untouched(self, app, session, credentials, cart, events):
        session.route("GET", "/cart/count", {"success": True, "count": 3})
        session.route("POST", "/order/place", {"success": False, "message": "Insufficient stock"}, status=400)
        before = app.cart.count(credentials)

        with pytest.raises(ServerLogicError, match="Insufficient stock"):
            app.checkout.place_order(ShippingInfo(**SHIPPING_FORM), "bank_transfer", "standard", credentials, cart=cart)

        assert app.cart.count(credentials) == before
        assert events == []

    def test_network_failure_does_not_broadcast(self, app, session, credentials, cart, events):
        session.route("GET", "/cart/count", {"success": True, "count": 3})
        session.route("POST", "/order/place", error=requests.ConnectionError("connection reset"))
        before = app.cart.count(credentials)

        with pytest.raises(NetworkError):
            app.checkout.place_order(SHIPPING_FORM, "bank_transfer", "express", credentials, cart=cart)

        assert app.cart.count(credentials) == before
        assert events == []

    def test_order_total_is_subtotal_plus_shipping(self, app, session, credentials, cart):
        summary = app.checkout.summary(cart, "same_day")
        assert summary.total == summary.subtotal + Decimal("75000")

    def test_placed_order_without_receipt_still_empties_cart(self, app, session, credentials, cart, events):
        session.route("POST", "/order/place", {"success": True, "message": "Order placed successfully"})

        receipt = app.checkout.place_order(SHIPPING_FORM, "bank_transfer", "standard", credentials, cart=cart)

        assert receipt is None
        assert [e.kind for e in events] == [CartChangeKind.ORDER_PLACED]

    def test_malformed_receipt_still_empties_cart(self, app, session, credentials, cart, events):
        session.route("POST", "/order/place", {"success": True, "order": {"id": "abc"}})

        assert app.checkout.place_order(SHIPPING_FORM, "bank_transfer", "standard", credentials, cart=cart) is None
        assert len(events) == 1
