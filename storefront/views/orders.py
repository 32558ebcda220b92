# storefront/views/orders.py
from abc import ABC, abstractmethod
from typing import Callable

from storefront.domain.errors import ValidationError
from storefront.domain.order_status import PaymentStatus
from storefront.domain.schemas import Credentials, Order
from storefront.services.invoice_service import InvoiceService
from storefront.services.notification_service import CartChannel
from storefront.services.order_service import OrderService
from storefront.services.stats_service import filter_orders
from storefront.utils.formatting import format_currency
from storefront.views.base import View
from storefront.views.navigation import Navigator


class OrderListView(View, ABC):
    """Wspolna czesc listy zamowien klienta i admina: kolekcja, filtry, wybrane zamowienie."""

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        order_service: OrderService,
        invoices: InvoiceService,
        channel: CartChannel | None = None,
    ):
        super().__init__(credentials, navigator, channel)
        self.order_service = order_service
        self.invoices = invoices
        self.orders: list[Order] = []
        self.selected: Order | None = None
        self.search = ""
        self.status_filter = "all"
        self.payment_filter = "all"
        self.period = "all"

    def refresh(self) -> None:
        self.load()

    @abstractmethod
    def load(self) -> None:
        """Pobiera kolekcje zamowien (klienta albo admina)."""

    @property
    def visible(self) -> list[Order]:
        try:
            return filter_orders(
                self.orders,
                search=self.search,
                status=self.status_filter,
                payment_status=self.payment_filter,
                period=self.period,
            )
        except ValidationError as e:
            self.error = e.message
            return []

    def find(self, order_id: int) -> Order | None:
        if self.selected is not None and self.selected.id == order_id:
            return self.selected
        return next((o for o in self.orders if o.id == order_id), None)

    def _replace(self, updated: Order) -> None:
        self.orders = [updated if o.id == updated.id else o for o in self.orders]
        if self.selected is not None and self.selected.id == updated.id:
            self.selected = updated

    def print_invoice(self, order_id: int) -> bool:
        order = self.find(order_id)
        if order is None:
            return False
        return self.invoices.print_invoice(order)

    @staticmethod
    def total_display(order: Order) -> str:
        return format_currency(order.total_amount)


class OrdersPage(OrderListView):
    """Zamowienia klienta: lista, szczegoly, oplacenie, anulowanie."""

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        channel: CartChannel,
        order_service: OrderService,
        invoices: InvoiceService,
    ):
        super().__init__(credentials, navigator, order_service, invoices, channel)
        self.load()

    def load(self) -> None:
        if not self._require_login():
            return
        orders = self._run(self.order_service.list_orders, self.credentials)
        if orders is not None:
            self.orders = orders

    def view(self, order_id: int) -> Order | None:
        if not self._require_login():
            return None
        order = self._run(self.order_service.get_order, order_id, self.credentials)
        if order is not None:
            self.selected = order
        return order

    def can_pay(self, order: Order) -> bool:
        return self.order_service.state_machine.can_customer_update_payment(order)

    def can_cancel(self, order: Order) -> bool:
        return self.order_service.state_machine.can_customer_cancel(order)

    def pay(self, order_id: int, payment_status=PaymentStatus.PAID) -> Order | None:
        order = self.find(order_id)
        if order is None or not self._require_login():
            return None
        updated = self._run(self.order_service.update_payment, order, payment_status, self.credentials)
        if updated is not None:
            self._replace(updated)
        return updated

    def cancel(self, order_id: int, confirm: Callable[[], bool]) -> Order | None:
        order = self.find(order_id)
        if order is None or not self._require_login() or not confirm():
            return None
        updated = self._run(self.order_service.cancel, order, self.credentials)
        if updated is not None:
            self._replace(updated)
        return updated
