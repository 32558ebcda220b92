# storefront/views/admin.py
from storefront.domain.order_status import Actor, OrderStatus, PaymentStatus
from storefront.domain.schemas import Credentials, DashboardStats, Order, OrderStats
from storefront.services.invoice_service import InvoiceService
from storefront.services.order_service import OrderService
from storefront.services.stats_service import StatsService, order_stats
from storefront.utils.formatting import format_currency
from storefront.views.base import View
from storefront.views.navigation import Navigator
from storefront.views.orders import OrderListView

HOME_PATH = "/"


def _require_admin(view: View) -> bool:
    if not view._require_login():
        return False
    # uzytkownik znany i nie-admin: od razu na strone glowna
    if view.credentials.user is not None and not view.credentials.is_admin:
        view.error = "Access denied. Admin privileges required."
        view.navigator.go(HOME_PATH)
        return False
    return True


class OrderManagementPage(OrderListView):
    """
    Zarzadzanie zamowieniami przez admina. Statystyki sa liczone od zera
    z aktualnej kolekcji, wiec zawsze zgadzaja sie z lista po kazdej zmianie.
    """

    def __init__(
        self,
        credentials: Credentials,
        navigator: Navigator,
        order_service: OrderService,
        invoices: InvoiceService,
    ):
        super().__init__(credentials, navigator, order_service, invoices)
        self.load()

    def load(self) -> None:
        if not _require_admin(self):
            return
        orders = self._run(self.order_service.admin_list, self.credentials)
        if orders is not None:
            self.orders = orders

    @property
    def stats(self) -> OrderStats:
        return order_stats(self.orders)

    @property
    def revenue_display(self) -> str:
        return format_currency(self.stats.revenue)

    def view(self, order_id: int) -> Order | None:
        if not _require_admin(self):
            return None
        order = self._run(self.order_service.admin_get, order_id, self.credentials)
        if order is not None:
            self.selected = order
        return order

    def status_options(self, order: Order) -> list[OrderStatus]:
        return self.order_service.state_machine.allowed_statuses(order, Actor.ADMIN)

    def payment_options(self, order: Order) -> list[PaymentStatus]:
        return self.order_service.state_machine.allowed_payment_statuses(order, Actor.ADMIN)

    def update(self, order_id: int, status=None, payment_status=None) -> Order | None:
        order = self.find(order_id)
        if order is None or not _require_admin(self):
            return None
        updated = self._run(
            self.order_service.admin_update,
            order,
            self.credentials,
            status=status,
            payment_status=payment_status,
        )
        if updated is not None:
            self._replace(updated)
        return updated


class DashboardPage(View):
    def __init__(self, credentials: Credentials, navigator: Navigator, stats_service: StatsService):
        super().__init__(credentials, navigator)
        self.stats_service = stats_service
        self.data: DashboardStats | None = None
        self.load()

    def load(self) -> None:
        if not _require_admin(self):
            return
        data = self._run(self.stats_service.load_dashboard, self.credentials)
        # wszystko albo nic: przy bledzie stare dane zostaja, pojawia sie banner
        if data is not None:
            self.data = data

    def refresh(self) -> None:
        self.load()

    @property
    def revenue_display(self) -> str:
        return format_currency(self.data.total_revenue if self.data else 0)
