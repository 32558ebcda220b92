from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaError

from storefront.domain.order_status import OrderStatus, PaymentStatus
from storefront.domain.schemas import Cart, Credentials, Order, ShippingInfo, UserRef
from tests.conftest import cart_body, cart_item, order_data


class TestCart:
    def test_total_price_is_derived_from_items(self):
        cart = Cart.model_validate(cart_body(cart_item(1, 2, 100000), cart_item(2, 1, 50000))["cart"])

        assert cart.subtotal == Decimal("250000")
        assert cart.total_price == Decimal("250000")
        assert cart.total_quantity == 3

    def test_mismatched_server_total_is_replaced(self):
        body = cart_body(cart_item(1, 2, 100000), total_price="999")
        cart = Cart.model_validate(body["cart"])

        assert cart.total_price == Decimal("200000")

    def test_total_weight_multiplies_quantity(self):
        cart = Cart.model_validate(cart_body(cart_item(1, 3, 1000, weight=250))["cart"])
        assert cart.total_weight == 750

    def test_quantity_below_one_is_rejected(self):
        with pytest.raises(SchemaError):
            Cart.model_validate(cart_body(cart_item(1, 0, 1000))["cart"])

    def test_empty_cart(self):
        cart = Cart.empty()
        assert cart.is_empty
        assert cart.total_price == Decimal("0")
        assert cart.find(1) is None

    def test_missing_product_uses_placeholder_name(self):
        item = cart_item(1, 1, 1000)
        item["product"] = None
        cart = Cart.model_validate(cart_body(item)["cart"])
        assert cart.items[0].name == "Unknown Product"
        assert cart.items[0].weight == 0


class TestShippingInfo:
    def test_reads_camel_case_wire_names(self):
        info = ShippingInfo.model_validate({"fullName": "Ana", "postalCode": "40111"})
        assert info.full_name == "Ana"
        assert info.postal_code == "40111"

    def test_to_wire_uses_camel_case(self):
        wire = ShippingInfo(full_name="Ana", postal_code="40111").to_wire()
        assert wire["fullName"] == "Ana"
        assert wire["postalCode"] == "40111"
        assert "full_name" not in wire

    def test_missing_fields_ignores_whitespace(self):
        info = ShippingInfo(full_name="  ", email="a@b.c", phone="1", address="x", city="y")
        assert info.missing_fields() == ["full_name", "postal_code"]


class TestOrder:
    def test_parses_backend_payload(self):
        order = Order.model_validate(order_data())

        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING
        assert order.total_amount == Decimal("265000")
        assert order.subtotal == Decimal("250000")
        assert order.created_at.year == 2025
        assert len(order.items) == 2
        assert order.items[0].line_total == Decimal("200000")

    def test_empty_shipping_info_list_becomes_none(self):
        order = Order.model_validate(order_data(shipping_info=[]))
        assert order.shipping_info is None

    def test_customer_name_falls_back_to_email(self):
        order = Order.model_validate(order_data(shipping_info=None, user={"email": "x@y.z"}))
        assert order.customer_name == "x@y.z"
        assert Order.model_validate(order_data(shipping_info=None)).customer_name == "N/A"

    def test_order_is_immutable(self):
        order = Order.model_validate(order_data())
        with pytest.raises(SchemaError):
            order.status = OrderStatus.SHIPPED

    def test_revenue_requires_delivered_and_paid(self):
        assert Order.model_validate(order_data(status="delivered", payment_status="paid")).counts_as_revenue
        assert not Order.model_validate(order_data(status="cancelled", payment_status="paid")).counts_as_revenue
        assert not Order.model_validate(order_data(status="delivered", payment_status="pending")).counts_as_revenue


class TestCredentials:
    def test_authentication_and_role(self):
        assert not Credentials().is_authenticated
        user = Credentials(token="t", user=UserRef(id=1, role="admin"))
        assert user.is_authenticated
        assert user.is_admin
        assert user.auth_header() == {"Authorization": "Bearer t"}
