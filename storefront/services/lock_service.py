# storefront/services/lock_service.py
import threading
from contextlib import contextmanager

from storefront.domain.errors import ConflictError
from storefront.utils.settings import LOCK_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class LockService:
    """
    -sekwencjonowanie mutacji per encja (pozycja koszyka, zamowienie): PUT/POST
     dla tego samego elementu wychodza i wracaja po kolei
    -kolejnosc odswiezen (GET po sygnale) pilnuje widok, nie lock - patrz CartPage
    -locki w procesie, klucz jak w redisie: "cart-item:{id}", "order:{id}"
    -wpis znika, gdy nikt lokiem nie trzyma ani na niego nie czeka
    """

    def __init__(self, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout
        # klucz -> [lock, liczba trzymajacych + czekajacych]
        self._locks: dict[str, list] = {}
        self._registry = threading.Lock()

    @staticmethod
    def cart_item_key(product_id: int) -> str:
        return f"cart-item:{product_id}"

    @staticmethod
    def order_key(order_id: int) -> str:
        return f"order:{order_id}"

    def _checkout(self, key: str) -> threading.Lock:
        with self._registry:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: str) -> None:
        with self._registry:
            entry = self._locks.get(key)
            if entry is None:
                return
            entry[1] -= 1
            if entry[1] <= 0:
                del self._locks[key]

    @property
    def tracked_keys(self) -> list[str]:
        with self._registry:
            return list(self._locks)

    def acquire(self, key: str, timeout: float | None = None) -> bool:
        wait = self.timeout if timeout is None else timeout
        logger.debug(f"Acquire lock {key}")
        lock = self._checkout(key)
        #timeout < 0 = czekaj bez limitu
        acquired = lock.acquire(timeout=wait if wait >= 0 else -1)
        if not acquired:
            self._checkin(key)
        return acquired

    def release(self, key: str) -> None:
        logger.debug(f"Release lock {key}")
        with self._registry:
            entry = self._locks.get(key)
        if entry is None:
            raise RuntimeError(f"Lock {key} is not held")
        entry[0].release()
        self._checkin(key)

    def is_locked(self, key: str) -> bool:
        with self._registry:
            entry = self._locks.get(key)
        return entry is not None and entry[0].locked()

    @contextmanager
    def hold(self, key: str, timeout: float | None = None):
        if not self.acquire(key, timeout):
            logger.warning(f"Lock {key} zajety dluzej niz timeout")
            raise ConflictError("A previous update is still in progress. Please try again.")
        try:
            yield
        finally:
            self.release(key)

    def hold_cart_item(self, product_id: int):
        return self.hold(self.cart_item_key(product_id))

    def hold_order(self, order_id: int):
        return self.hold(self.order_key(order_id))
