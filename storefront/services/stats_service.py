# storefront/services/stats_service.py
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

from storefront.domain.errors import ValidationError
from storefront.domain.order_status import OrderStatus, PaymentStatus
from storefront.domain.schemas import Credentials, DashboardStats, Order, OrderStats, RecentOrder
from storefront.services.api_client import ApiClient
from storefront.services.order_client import OrderClient
from storefront.utils.settings import RECENT_ORDERS_LIMIT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PERIODS = ("all", "today", "week", "month")


# =====================================================
# AGREGACJE - czyste funkcje, liczone od zera przy kazdej zmianie kolekcji
# =====================================================
def revenue(orders: Iterable[Order]) -> Decimal:
    """Tylko zamowienia delivered + paid. Anulowane nigdy, nawet jesli oplacone."""
    return sum((o.total_amount for o in orders if o.counts_as_revenue), Decimal("0"))


def order_stats(orders: Iterable[Order]) -> OrderStats:
    orders = list(orders)
    counts = {status.value: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status.value] += 1
    return OrderStats(**counts, total_orders=len(orders), revenue=revenue(orders))


def _newest_first(orders: Iterable[Order]) -> list[Order]:
    # stabilne sortowanie, zamowienia bez daty na koncu
    return sorted(
        orders,
        key=lambda o: (o.created_at is not None, o.created_at.timestamp() if o.created_at else 0),
        reverse=True,
    )


def recent_orders(orders: Iterable[Order], limit: int = RECENT_ORDERS_LIMIT) -> list[RecentOrder]:
    return [
        RecentOrder(
            id=o.id,
            order_number=o.order_number,
            customer=o.customer_name,
            status=o.status,
            total_amount=o.total_amount,
            created_at=o.created_at,
        )
        for o in _newest_first(orders)[:limit]
    ]


def _within_period(created_at: datetime | None, period: str, now: datetime | None) -> bool:
    if period == "all":
        return True
    if created_at is None:
        return False
    if now is None:
        now = datetime.now(created_at.tzinfo)

    if period == "today":
        return created_at.date() == now.date()
    if period == "week":
        return now - timedelta(days=7) <= created_at <= now
    return (created_at.year, created_at.month) == (now.year, now.month)


def filter_orders(
    orders: Iterable[Order],
    search: str = "",
    status: str = "all",
    payment_status: str = "all",
    period: str = "all",
    now: datetime | None = None,
) -> list[Order]:
    """Filtr listy zamowien: numer / imie z wysylki / email, status, platnosc, okres."""
    if period not in PERIODS:
        raise ValidationError(f"Unknown period '{period}'", fields=["period"])
    try:
        if status != "all":
            status = OrderStatus(status)
        if payment_status != "all":
            payment_status = PaymentStatus(payment_status)
    except ValueError as e:
        raise ValidationError(str(e), fields=["status", "payment_status"]) from None

    needle = search.strip().lower()
    result = []
    for order in orders:
        haystack = [
            order.order_number,
            order.shipping_info.full_name if order.shipping_info else "",
            (order.user.email or "") if order.user else "",
        ]
        if needle and not any(needle in h.lower() for h in haystack):
            continue
        if status != "all" and order.status != status:
            continue
        if payment_status != "all" and order.payment_status != payment_status:
            continue
        if not _within_period(order.created_at, period, now):
            continue
        result.append(order)
    return result


class StatsService:
    """
    Dashboard admina: uzytkownicy, produkty i zamowienia pobierane rownolegle.
    Wszystko albo nic - blad jednego zapytania to blad calej paczki.
    """

    def __init__(self, api: ApiClient, order_client: OrderClient, recent_limit: int = RECENT_ORDERS_LIMIT):
        self.api = api
        self.order_client = order_client
        self.recent_limit = recent_limit

    def load_dashboard(self, credentials: Credentials) -> DashboardStats:
        logger.info("Ladowanie danych dashboardu")
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="dashboard") as pool:
            users_f = pool.submit(self.api.get, "/user/list", credentials)
            products_f = pool.submit(self.api.get, "/product/list", credentials)
            orders_f = pool.submit(self.order_client.admin_list, credentials)

            # result() rzuca pierwszy blad - reszta wynikow jest odrzucana
            users = users_f.result().get("users") or []
            products = products_f.result().get("products") or []
            orders = orders_f.result()

        stats = order_stats(orders)
        logger.info(
            f"Dashboard: {len(users)} uzytkownikow, {len(products)} produktow, "
            f"{stats.total_orders} zamowien, przychod {stats.revenue}"
        )
        return DashboardStats(
            total_users=len(users),
            total_products=len(products),
            total_orders=stats.total_orders,
            total_revenue=stats.revenue,
            order_stats=stats,
            recent_orders=recent_orders(orders, self.recent_limit),
        )
