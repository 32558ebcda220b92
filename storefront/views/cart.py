# storefront/views/cart.py
import threading
from typing import Callable

from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import Cart, Credentials
from storefront.services.cart_service import CartSynchronizer
from storefront.services.notification_service import CartChannel
from storefront.utils.formatting import format_currency
from storefront.views.base import View
from storefront.views.navigation import Navigator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartBadge(View):
    """Licznik w nawigacji - lekkie /cart/count, ponawiane na kazdy sygnal."""

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        channel: CartChannel,
        cart_sync: CartSynchronizer,
    ):
        super().__init__(credentials, navigator, channel)
        self.cart_sync = cart_sync
        self.count = 0
        self.refresh()

    def refresh(self) -> None:
        # badge nie przekierowuje na login, bez tokenu po prostu 0
        if not self.credentials.is_authenticated:
            self.count = 0
            return
        try:
            self.count = self.cart_sync.count(self.credentials)
            self.error = None
        except StorefrontError as e:
            logger.warning(f"Nie udalo sie pobrac licznika koszyka: {e.message}")
            self.error = e.message


class CartPage(View):
    """
    Strona koszyka. Mutacje nie poprawiaja lokalnego stanu - po sygnale z kanalu
    strona pobiera caly koszyk od nowa. Kazde pobranie dostaje numer; odpowiedz
    starsza niz juz pokazana jest odrzucana, wiec wolne odswiezenie po wczesniejszym
    kliknieciu nie nadpisze nowszego koszyka.
    """

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        channel: CartChannel,
        cart_sync: CartSynchronizer,
    ):
        # numeracja pobran gotowa przed subskrypcja kanalu
        self._sequence = 0
        self._applied = 0
        self._sequence_lock = threading.Lock()
        super().__init__(credentials, navigator, channel)
        self.cart_sync = cart_sync
        self.cart: Cart | None = None
        self.load()

    def load(self) -> None:
        if not self._require_login():
            return
        with self._sequence_lock:
            self._sequence += 1
            ticket = self._sequence

        cart = self._run(self.cart_sync.load_cart, self.credentials)
        if cart is None:
            return

        with self._sequence_lock:
            if ticket < self._applied:
                logger.info(f"Odrzucono nieaktualny koszyk (zapytanie {ticket}, pokazane {self._applied})")
                return
            self._applied = ticket
            self.cart = cart

    def refresh(self) -> None:
        self.load()

    #widok
    @property
    def subtotal_display(self) -> str:
        return format_currency(self.cart.subtotal if self.cart else 0)

    def lines(self) -> list[dict]:
        if self.cart is None:
            return []
        return [
            {
                "product_id": item.product_id,
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": format_currency(item.price_at_addition),
                "line_total": format_currency(item.line_total),
                "can_decrement": item.quantity > 1,
            }
            for item in self.cart.items
        ]

    def can_decrement(self, product_id: int) -> bool:
        item = self.cart.find(product_id) if self.cart else None
        return item is not None and item.quantity > 1

    #akcje
    def increment(self, product_id: int) -> None:
        item = self.cart.find(product_id) if self.cart else None
        if item is not None:
            self.set_quantity(product_id, item.quantity + 1)

    def decrement(self, product_id: int) -> None:
        # przycisk "-" jest wylaczony przy ilosci 1
        if self.can_decrement(product_id):
            self.set_quantity(product_id, self.cart.find(product_id).quantity - 1)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        if self._require_login():
            self._run(self.cart_sync.update_quantity, product_id, quantity, self.credentials)

    def remove(self, product_id: int, confirm: Callable[[], bool]) -> None:
        if self._require_login():
            self._run(self.cart_sync.remove_item, product_id, self.credentials, confirm)

    def proceed_to_checkout(self) -> None:
        if self.cart is None or self.cart.is_empty:
            self.error = "Your cart is empty."
            return
        self.navigator.go("/checkout")
