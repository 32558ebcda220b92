# storefront/services/cart_service.py
from typing import Callable

from storefront.domain.errors import ValidationError
from storefront.domain.schemas import ApiResult, Cart, CartChangeKind, CartChanged, Credentials
from storefront.services.cart_client import CartClient
from storefront.services.lock_service import LockService
from storefront.services.notification_service import CartChannel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartSynchronizer:
    """
    Odczyt i mutacje koszyka + rozgloszenie zmian
    query (load_cart, count) tylko odczyt z serwera
    commands (add, update, remove, clear) - kazda udana mutacja wysyla DOKLADNIE jeden
    sygnal CartChanged, odbiorcy pobieraja koszyk od nowa (bez lokalnego patchowania)
    """

    def __init__(
        self,
        cart_client: CartClient,
        channel: CartChannel,
        lock_service: LockService,
    ):
        self.client = cart_client
        self.channel = channel
        self.lock_service = lock_service

    #query - odczyt
    def load_cart(self, credentials: Credentials) -> Cart:
        cart = self.client.fetch_cart(credentials)
        logger.info(f"Koszyk pobrany: {len(cart.items)} pozycji, suma {cart.total_price}")
        return cart

    def count(self, credentials: Credentials) -> int:
        return self.client.count(credentials)

    #commands
    def add_item(self, product_id: int, quantity: int, credentials: Credentials) -> ApiResult:
        # brak laczenia po stronie klienta - serwer zwieksza ilosc albo tworzy pozycje
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", fields=["quantity"])

        with self.lock_service.hold_cart_item(product_id):
            logger.info(f"Dodaje produkt {product_id} x{quantity} do koszyka")
            result = self.client.add(product_id, quantity, credentials)

        self._broadcast(CartChangeKind.ADDED, product_id)
        return result

    def update_quantity(
        self,
        product_id: int,
        new_quantity: int,
        credentials: Credentials,
    ) -> ApiResult:
        # ponizej 1 nie schodzimy, clamp przed wyslaniem zapytania
        quantity = max(1, int(new_quantity))
        if quantity != new_quantity:
            logger.info(f"Ilosc {new_quantity} dla produktu {product_id} podniesiona do {quantity}")

        with self.lock_service.hold_cart_item(product_id):
            result = self.client.update(product_id, quantity, credentials)

        self._broadcast(CartChangeKind.UPDATED, product_id)
        return result

    def remove_item(
        self,
        product_id: int,
        credentials: Credentials,
        confirm: Callable[[], bool],
    ) -> ApiResult | None:
        """Usuniecie wymaga jawnego potwierdzenia; odmowa = brak zapytania i brak sygnalu."""
        if not confirm():
            logger.info(f"Usuniecie produktu {product_id} anulowane przez uzytkownika")
            return None

        with self.lock_service.hold_cart_item(product_id):
            logger.info(f"Usuwanie produktu {product_id} z koszyka")
            result = self.client.remove(product_id, credentials)

        self._broadcast(CartChangeKind.REMOVED, product_id)
        return result

    def clear(self, credentials: Credentials) -> ApiResult:
        logger.info("Czyszczenie koszyka")
        result = self.client.clear(credentials)
        self._broadcast(CartChangeKind.CLEARED)
        return result

    def mark_emptied(self) -> Cart:
        """Serwer oproznil koszyk przy skladaniu zamowienia - lokalnie koszyk jest pusty."""
        self._broadcast(CartChangeKind.ORDER_PLACED)
        return Cart.empty()

    def _broadcast(self, kind: CartChangeKind, product_id: int | None = None) -> None:
        self.channel.notify(CartChanged(kind=kind, product_id=product_id))
