# storefront/services/order_service.py
from storefront.domain.errors import InvalidTransitionError
from storefront.domain.order_status import Actor, OrderStatus, OrderStatusMachine, PaymentStatus
from storefront.domain.schemas import Credentials, Order
from storefront.services.lock_service import LockService
from storefront.services.order_client import OrderClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis domeny zamowien po stronie klienta.
    Kazda zmiana statusu przechodzi przez OrderStatusMachine zanim pojdzie na serwer,
    a zapytania dla jednego zamowienia sa sekwencjonowane lockiem "order:{id}".
    """

    def __init__(
        self,
        order_client: OrderClient,
        state_machine: OrderStatusMachine,
        lock_service: LockService,
    ):
        self.client = order_client
        self.state_machine = state_machine
        self.lock_service = lock_service

    # =====================================================
    # CUSTOMER
    # =====================================================
    def list_orders(self, credentials: Credentials) -> list[Order]:
        return self.client.list_orders(credentials)

    def get_order(self, order_id: int, credentials: Credentials) -> Order:
        return self.client.get_order(order_id, credentials)

    def update_payment(self, order: Order, payment_status, credentials: Credentials) -> Order:
        """
        Klient zmienia tylko payment_status swojego zamowienia.
        Serwer przy "paid" na oczekujacym zamowieniu sam przestawia status na processing,
        wiec przyjmujemy to, co odeslal.
        """
        status, payment = self.state_machine.check(
            order, Actor.CUSTOMER, payment_status=payment_status
        )

        with self.lock_service.hold_order(order.id):
            logger.info(
                f"Zamowienie {order.order_number}: platnosc {order.payment_status.value} -> {payment.value}"
            )
            fields = self.client.update_payment(order.id, payment.value, credentials)

        return self._adopt(order, fields, status, payment)

    def cancel(self, order: Order, credentials: Credentials) -> Order:
        if not self.state_machine.can_customer_cancel(order):
            raise InvalidTransitionError("Only pending orders can be cancelled", fields=["status"])

        with self.lock_service.hold_order(order.id):
            logger.info(f"Anulowanie zamowienia {order.order_number}")
            fields = self.client.cancel(order.id, credentials)

        return self._adopt(order, fields, OrderStatus.CANCELLED, PaymentStatus.FAILED)

    # =====================================================
    # ADMIN
    # =====================================================
    def admin_list(self, credentials: Credentials) -> list[Order]:
        return self.client.admin_list(credentials)

    def admin_get(self, order_id: int, credentials: Credentials) -> Order:
        return self.client.admin_get(order_id, credentials)

    def admin_update(
        self,
        order: Order,
        credentials: Credentials,
        status=None,
        payment_status=None,
    ) -> Order:
        """Admin ustawia obie osie jednym wywolaniem (brakujaca os = obecna wartosc)."""
        new_status, new_payment = self.state_machine.check(
            order, Actor.ADMIN, status=status, payment_status=payment_status
        )

        with self.lock_service.hold_order(order.id):
            logger.info(
                f"Admin: zamowienie {order.order_number} "
                f"{order.status.value}/{order.payment_status.value} -> "
                f"{new_status.value}/{new_payment.value}"
            )
            fields = self.client.admin_update(
                order.id, new_status.value, new_payment.value, credentials
            )

        return self._adopt(order, fields, new_status, new_payment)

    @staticmethod
    def _adopt(order: Order, fields: dict, status: OrderStatus, payment: PaymentStatus) -> Order:
        # serwer jest zrodlem prawdy dla obu statusow, reszta zamowienia sie nie zmienia
        try:
            status, payment = (
                OrderStatus(fields.get("status", status)),
                PaymentStatus(fields.get("payment_status", payment)),
            )
        except ValueError:
            logger.warning(f"Nieznany status w odpowiedzi dla {order.order_number}: {fields}")
        return order.model_copy(update={"status": status, "payment_status": payment})
