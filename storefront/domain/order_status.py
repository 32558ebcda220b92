# storefront/domain/order_status.py
"""
Maszyna stanow zamowienia - dwie niezalezne osie: status realizacji i status platnosci.

    status:          pending -> processing -> shipped -> delivered
                     pending | processing -> cancelled
    payment_status:  pending -> paid
                     pending -> failed

Admin ustawia obie osie jednym wywolaniem, klient moze zmienic tylko payment_status
swojego zamowienia (i anulowac zamowienie oczekujace).
"""
from enum import Enum
from typing import TYPE_CHECKING

from storefront.domain.errors import InvalidTransitionError
from storefront.utils.settings import CUSTOMER_CAN_MARK_PAID, ENFORCE_STATUS_TRANSITIONS

if TYPE_CHECKING:
    from storefront.domain.schemas import Order


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class Actor(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


STATUS_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: set(),
    PaymentStatus.FAILED: set(),
}

# osie, ktore dana rola moze w ogole zmieniac
ACTOR_FIELDS: dict[Actor, set[str]] = {
    Actor.ADMIN: {"status", "payment_status"},
    Actor.CUSTOMER: {"payment_status"},
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def is_revenue(status: OrderStatus, payment_status: PaymentStatus) -> bool:
    """Przychod liczy sie tylko dla zamowien dostarczonych I oplaconych."""
    return status == OrderStatus.DELIVERED and payment_status == PaymentStatus.PAID


def _parse(enum_cls, value, field: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidTransitionError(
            f"Invalid {field} '{value}'. Allowed values: {allowed}", fields=[field]
        ) from None


class OrderStatusMachine:
    """
    Jawne tablice przejsc per rola. Ustawienie pola na obecna wartosc to no-op
    i jest zawsze dozwolone. enforce_transitions=False przywraca stare zachowanie:
    admin moze ustawic dowolna kombinacje z dowolnego stanu.
    """

    def __init__(
        self,
        enforce_transitions: bool = ENFORCE_STATUS_TRANSITIONS,
        customer_can_mark_paid: bool = CUSTOMER_CAN_MARK_PAID,
    ):
        self.enforce_transitions = enforce_transitions
        self.customer_can_mark_paid = customer_can_mark_paid

    #pojedyncze krawedzie
    def can_transition_status(self, current: OrderStatus, target: OrderStatus) -> bool:
        if current == target or not self.enforce_transitions:
            return True
        return target in STATUS_TRANSITIONS[current]

    def can_transition_payment(self, current: PaymentStatus, target: PaymentStatus) -> bool:
        if current == target or not self.enforce_transitions:
            return True
        return target in PAYMENT_TRANSITIONS[current]

    #opcje dla UI (dropdowny w panelu admina, przycisk platnosci klienta)
    def allowed_statuses(self, order: "Order", actor: Actor) -> list[OrderStatus]:
        if "status" not in ACTOR_FIELDS[actor]:
            return [order.status]
        return [s for s in OrderStatus if self.can_transition_status(order.status, s)]

    def allowed_payment_statuses(self, order: "Order", actor: Actor) -> list[PaymentStatus]:
        options = [
            p for p in PaymentStatus if self.can_transition_payment(order.payment_status, p)
        ]
        if actor == Actor.CUSTOMER and not self.customer_can_mark_paid:
            options = [p for p in options if p != PaymentStatus.PAID or p == order.payment_status]
        return options

    def can_customer_update_payment(self, order: "Order") -> bool:
        # miekka bramka UI - serwer tego nie pilnuje
        return order.payment_status == PaymentStatus.PENDING

    def can_customer_cancel(self, order: "Order") -> bool:
        return order.status == OrderStatus.PENDING

    def check(
        self,
        order: "Order",
        actor: Actor,
        status=None,
        payment_status=None,
    ) -> tuple[OrderStatus, PaymentStatus]:
        """
        Waliduje zmiane i zwraca docelowa pare (status, payment_status).
        Rzuca InvalidTransitionError zanim cokolwiek zostanie wyslane do serwera.
        """
        actor = Actor(actor)
        target_status = _parse(OrderStatus, status, "status")
        target_payment = _parse(PaymentStatus, payment_status, "payment_status")

        if target_status is None and target_payment is None:
            raise InvalidTransitionError("Nothing to update", fields=["status", "payment_status"])

        if (
            target_status is not None
            and target_status != order.status
            and "status" not in ACTOR_FIELDS[actor]
        ):
            raise InvalidTransitionError(
                "Customers may only update the payment status of an order", fields=["status"]
            )

        if target_status is not None and not self.can_transition_status(order.status, target_status):
            raise InvalidTransitionError(
                f"Order {order.order_number}: status cannot change from "
                f"{order.status.value} to {target_status.value}",
                fields=["status"],
            )

        if target_payment is not None:
            if not self.can_transition_payment(order.payment_status, target_payment):
                raise InvalidTransitionError(
                    f"Order {order.order_number}: payment status cannot change from "
                    f"{order.payment_status.value} to {target_payment.value}",
                    fields=["payment_status"],
                )
            if (
                actor == Actor.CUSTOMER
                and target_payment == PaymentStatus.PAID
                and order.payment_status != PaymentStatus.PAID
                and not self.customer_can_mark_paid
            ):
                raise InvalidTransitionError(
                    "Payment confirmation by customers is disabled", fields=["payment_status"]
                )

        return (
            target_status if target_status is not None else order.status,
            target_payment if target_payment is not None else order.payment_status,
        )

    def apply(self, order: "Order", actor: Actor, status=None, payment_status=None) -> "Order":
        new_status, new_payment = self.check(order, actor, status, payment_status)
        return order.model_copy(update={"status": new_status, "payment_status": new_payment})
