# storefront/services/checkout_service.py
from decimal import Decimal

from storefront.domain.errors import ValidationError
from storefront.domain.schemas import (
    Cart,
    CheckoutSummary,
    Credentials,
    OrderReceipt,
    PaymentMethod,
    ShippingInfo,
    ShippingMethod,
)
from storefront.services.cart_service import CartSynchronizer
from storefront.services.order_client import OrderClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# stala tabela, nie negocjowana z serwerem
SHIPPING_COSTS: dict[ShippingMethod, Decimal] = {
    ShippingMethod.STANDARD: Decimal(15000),
    ShippingMethod.EXPRESS: Decimal(35000),
    ShippingMethod.SAME_DAY: Decimal(75000),
}

FIELD_LABELS = {
    "full_name": "full name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "city": "city",
    "postal_code": "postal code",
}


def parse_shipping_method(value) -> ShippingMethod:
    try:
        return ShippingMethod(value)
    except ValueError:
        raise ValidationError(f"Unknown shipping method '{value}'", fields=["shipping_method"]) from None


def parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(f"Unknown payment method '{value}'", fields=["payment_method"]) from None


def shipping_cost(method) -> Decimal:
    return SHIPPING_COSTS[parse_shipping_method(method)]


def total_weight(cart: Cart) -> int:
    """Suma waga x ilosc, tylko informacyjnie (podsumowanie i zapis na zamowieniu)."""
    return cart.total_weight


class CheckoutService:
    """
    Zamiana aktualnego koszyka w niezmienne zamowienie.

    1. Walidacja danych wysylki po stronie klienta (bez zapytania)
    2. Wyliczenie podsumowania (subtotal, koszt wysylki, waga)
    3. POST /order/place - serwer tworzy Order + OrderItems i oproznia koszyk
    4. Lokalnie koszyk pusty + jeden sygnal CartChanged
    Przy bledzie koszyk zostaje nietkniety i nic nie jest rozglaszane.
    """

    def __init__(self, order_client: OrderClient, cart_sync: CartSynchronizer):
        self.order_client = order_client
        self.cart_sync = cart_sync

    def summary(self, cart: Cart, shipping_method=ShippingMethod.STANDARD) -> CheckoutSummary:
        method = parse_shipping_method(shipping_method)
        cost = SHIPPING_COSTS[method]
        subtotal = cart.subtotal
        return CheckoutSummary(
            subtotal=subtotal,
            shipping_method=method,
            shipping_cost=cost,
            total=subtotal + cost,
            total_weight=total_weight(cart),
            total_quantity=cart.total_quantity,
        )

    def validate(self, shipping_info: ShippingInfo, cart: Cart | None = None) -> None:
        missing = shipping_info.missing_fields()
        if missing:
            labels = ", ".join(FIELD_LABELS[f] for f in missing)
            raise ValidationError(
                f"Please fill in all required shipping information ({labels}).",
                fields=missing,
            )
        if cart is not None and cart.is_empty:
            raise ValidationError("Your cart is empty.", fields=["cart"])

    def place_order(
        self,
        shipping_info: ShippingInfo | dict,
        payment_method,
        shipping_method,
        credentials: Credentials,
        cart: Cart | None = None,
    ) -> OrderReceipt | None:
        if isinstance(shipping_info, dict):
            shipping_info = ShippingInfo.model_validate(shipping_info)

        # walidacje - zadna nie wysyla zapytania
        self.validate(shipping_info, cart)
        payment = parse_payment_method(payment_method)
        method = parse_shipping_method(shipping_method)

        if cart is not None:
            expected = self.summary(cart, method)
            logger.info(
                f"Skladanie zamowienia: {expected.total_quantity} szt., "
                f"subtotal {expected.subtotal}, wysylka {method.value} {expected.shipping_cost}, "
                f"waga {expected.total_weight} g"
            )

        receipt = self.order_client.place(shipping_info, payment.value, method.value, credentials)
        if receipt is not None:
            logger.info(f"Zamowienie {receipt.order_number} zlozone, suma {receipt.total_amount}")
        else:
            logger.info("Zamowienie zlozone bez potwierdzenia w odpowiedzi")

        # koszyk oproznil serwer - tu tylko sygnal dla pozostalych widokow
        self.cart_sync.mark_emptied()
        return receipt
