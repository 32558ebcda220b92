# storefront/services/notification_service.py
import threading
from typing import Callable

from storefront.domain.schemas import CartChanged
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[CartChanged], None]


class Subscription:
    """Uchwyt subskrypcji - widok musi go zwolnic przy zamknieciu (inaczej wyciek)."""

    def __init__(self, channel: "CartChannel", listener: Listener):
        self._channel = channel
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._channel.unsubscribe(self._listener)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.unsubscribe()


class CartChannel:
    """
    Kanal "koszyk sie zmienil" wspolny dla calego procesu.
    Kazdy komponent moze go podniesc, kazdy odbiorca sam decyduje co pobrac ponownie.
    """

    def __init__(self):
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Subscription:
        with self._lock:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify(self, event: CartChanged) -> None:
        with self._lock:
            listeners = list(self._listeners)

        logger.info(f"[CART] {event.kind.value} product={event.product_id} -> {len(listeners)} odbiorcow")
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # blad jednego odbiorcy nie moze zablokowac pozostalych ani mutacji
                logger.exception(f"Odbiorca {listener!r} nie obsluzyl {event.kind.value}")


#kanal procesowy, uzywany domyslnie przez create_storefront()
cart_channel = CartChannel()
