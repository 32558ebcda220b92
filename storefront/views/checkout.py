# storefront/views/checkout.py
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
from storefront.services.checkout_service import CheckoutService, parse_shipping_method
from storefront.services.notification_service import CartChannel
from storefront.utils.formatting import format_currency, format_weight
from storefront.views.base import View
from storefront.views.navigation import Navigator

SUCCESS_PATH = "/ordersuccess"


class CheckoutPage(View):
    """
    Formularz zamowienia. Przy bledzie formularz i koszyk zostaja bez zmian,
    uzytkownik poprawia dane i probuje ponownie.
    """

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        channel: CartChannel,
        cart_sync: CartSynchronizer,
        checkout: CheckoutService,
    ):
        super().__init__(credentials, navigator, channel)
        self.cart_sync = cart_sync
        self.checkout = checkout
        self.cart: Cart | None = None
        self.shipping_info: dict[str, str] = {name: "" for name in ShippingInfo.model_fields}
        self.shipping_method = ShippingMethod.STANDARD
        self.payment_method = PaymentMethod.BANK_TRANSFER
        self.processing = False
        self.load()

    def load(self) -> None:
        if not self._require_login():
            return
        cart = self._run(self.cart_sync.load_cart, self.credentials)
        if cart is None:
            return
        self.cart = cart
        if cart.is_empty:
            self.error = "Your cart is empty."
            self.navigator.go("/shop")

    def refresh(self) -> None:
        # sygnal z wlasnego zamowienia nie moze przeladowac strony w trakcie skladania
        if not self.processing:
            self.load()

    #formularz
    def update_field(self, name: str, value: str) -> None:
        if name not in self.shipping_info:
            raise KeyError(name)
        self.shipping_info[name] = value

    def select_shipping(self, method) -> None:
        chosen = self._run(parse_shipping_method, method)
        if chosen is not None:
            self.shipping_method = chosen

    @property
    def summary(self) -> CheckoutSummary | None:
        if self.cart is None:
            return None
        return self.checkout.summary(self.cart, self.shipping_method)

    def summary_display(self) -> dict[str, str]:
        summary = self.summary
        if summary is None:
            return {}
        return {
            "subtotal": format_currency(summary.subtotal),
            "shipping": format_currency(summary.shipping_cost),
            "total": format_currency(summary.total),
            "weight": format_weight(summary.total_weight),
        }

    #akcja
    def place_order(self) -> OrderReceipt | None:
        if self.processing or not self._require_login():
            return None

        self.processing = True
        try:
            receipt = self._run(
                self.checkout.place_order,
                ShippingInfo.model_validate(self.shipping_info),
                self.payment_method,
                self.shipping_method,
                self.credentials,
                cart=self.cart,
            )
        finally:
            self.processing = False

        # _run czysci error na starcie - error ustawiony = zamowienie nie powstalo
        if self.error is not None:
            return None

        self.cart = Cart.empty()
        # potwierdzenie tylko w stanie nawigacji, nic na dysku; brak potwierdzenia = widok bez danych
        self.navigator.go(SUCCESS_PATH, state=receipt)
        self.close()
        return receipt


class OrderSuccessView(View):
    """Potwierdzenie zamowienia. Brak stanu nawigacji (np. po przeladowaniu) = brak danych, nie blad."""

    def __init__(self, credentials: Credentials, navigator: Navigator):
        super().__init__(credentials, navigator)
        state = navigator.state
        self.receipt: OrderReceipt | None = state if isinstance(state, OrderReceipt) else None

    @property
    def has_data(self) -> bool:
        return self.receipt is not None

    @property
    def total_display(self) -> str:
        return format_currency(self.receipt.total_amount if self.receipt else 0)

    def go_to_orders(self) -> None:
        self.navigator.go("/orders", replace=True)
