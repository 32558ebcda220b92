# storefront/main.py
import argparse
import json
import sys
from dataclasses import dataclass

import requests

from storefront.domain.errors import StorefrontError, ValidationError
from storefront.domain.order_status import OrderStatusMachine
from storefront.domain.schemas import Cart, Credentials, Order, ShippingInfo
from storefront.repos.session_repo import SessionRepo
from storefront.services.api_client import ApiClient
from storefront.services.cart_client import CartClient
from storefront.services.cart_service import CartSynchronizer
from storefront.services.checkout_service import CheckoutService
from storefront.services.invoice_service import InvoiceService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import CartChannel, cart_channel
from storefront.services.order_client import OrderClient
from storefront.services.order_service import OrderService
from storefront.services.stats_service import StatsService
from storefront.utils.formatting import format_currency, format_datetime, format_weight
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Storefront:
    api: ApiClient
    channel: CartChannel
    locks: LockService
    cart: CartSynchronizer
    checkout: CheckoutService
    orders: OrderService
    stats: StatsService
    invoices: InvoiceService
    session_repo: SessionRepo

    @property
    def credentials(self) -> Credentials:
        return self.session_repo.load()


def create_storefront(
    base_url: str | None = None,
    session: requests.Session | None = None,
    channel: CartChannel | None = None,
    session_repo: SessionRepo | None = None,
    state_machine: OrderStatusMachine | None = None,
    invoices: InvoiceService | None = None,
) -> Storefront:
    """Sklada wszystkie serwisy na jednym ApiClient i jednym kanale koszyka."""
    api = ApiClient(base_url=base_url, session=session)
    channel = channel if channel is not None else cart_channel
    locks = LockService()

    order_client = OrderClient(api)
    cart_sync = CartSynchronizer(CartClient(api), channel, locks)

    return Storefront(
        api=api,
        channel=channel,
        locks=locks,
        cart=cart_sync,
        checkout=CheckoutService(order_client, cart_sync),
        orders=OrderService(order_client, state_machine or OrderStatusMachine(), locks),
        stats=StatsService(api, order_client),
        invoices=invoices or InvoiceService(),
        session_repo=session_repo or SessionRepo(),
    )


# =====================================================
# WYPISYWANIE
# =====================================================
def _print_cart(cart: Cart) -> None:
    if cart.is_empty:
        print("Your cart is empty.")
        return
    for item in cart.items:
        print(
            f"  #{item.product_id:<5} {item.name:<30} {item.quantity:>3} x "
            f"{format_currency(item.price_at_addition):>12} = {format_currency(item.line_total)}"
        )
    print(f"Items: {cart.total_quantity}  Weight: {format_weight(cart.total_weight)}")
    print(f"Subtotal: {format_currency(cart.subtotal)}")


def _print_order_row(order: Order) -> None:
    print(
        f"  {order.order_number:<24} {order.status.value:<10} {order.payment_status.value:<8} "
        f"{format_currency(order.total_amount):>14}  {format_datetime(order.created_at)}"
    )


def _print_order(order: Order) -> None:
    _print_order_row(order)
    if order.shipping_info is not None:
        info = order.shipping_info
        print(f"  Ship to: {info.full_name}, {info.address}, {info.city} {info.postal_code}")
    for item in order.items:
        print(f"    {item.product_name} x{item.quantity} {format_currency(item.line_total)}")
    print(f"  Shipping: {format_currency(order.shipping_cost)}  Total: {format_currency(order.total_amount)}")


def _confirm(args, question: str):
    def ask() -> bool:
        if args.yes:
            return True
        return input(f"{question} [y/N] ").strip().lower() in ("y", "yes")
    return ask


# =====================================================
# KOMENDY
# =====================================================
def cmd_session(app: Storefront, args) -> None:
    if args.action == "clear":
        app.session_repo.clear()
        print("Logged out.")
        return
    try:
        credentials = app.session_repo.save(args.token, json.loads(args.user))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid user data: {e}", fields=["user"]) from None
    print(f"Logged in as {credentials.user.username or credentials.user.email}.")


def cmd_cart(app: Storefront, args) -> None:
    credentials = app.credentials
    if args.action == "add":
        result = app.cart.add_item(args.product_id, args.quantity, credentials)
        print(result.message or "Added to cart.")
    elif args.action == "update":
        app.cart.update_quantity(args.product_id, args.quantity, credentials)
    elif args.action == "remove":
        if app.cart.remove_item(args.product_id, credentials, _confirm(args, "Remove this item?")) is None:
            print("Nothing removed.")
            return
    _print_cart(app.cart.load_cart(credentials))


def cmd_checkout(app: Storefront, args) -> None:
    credentials = app.credentials
    cart = app.cart.load_cart(credentials)
    shipping_info = ShippingInfo(
        full_name=args.full_name,
        email=args.email,
        phone=args.phone,
        address=args.address,
        city=args.city,
        postal_code=args.postal_code,
    )
    summary = app.checkout.summary(cart, args.shipping)
    print(
        f"Subtotal {format_currency(summary.subtotal)} + shipping {format_currency(summary.shipping_cost)} "
        f"= {format_currency(summary.total)} ({format_weight(summary.total_weight)})"
    )
    receipt = app.checkout.place_order(shipping_info, args.payment, args.shipping, credentials, cart=cart)
    if receipt is None:
        print("Order placed. Check your orders for the details.")
        return
    print(f"Order {receipt.order_number} placed. Total: {format_currency(receipt.total_amount)}")


def cmd_orders(app: Storefront, args) -> None:
    credentials = app.credentials
    if args.action == "list":
        for order in app.orders.list_orders(credentials):
            _print_order_row(order)
        return

    order = app.orders.get_order(args.order_id, credentials)
    if args.action == "pay":
        order = app.orders.update_payment(order, args.payment_status, credentials)
    elif args.action == "cancel":
        if not _confirm(args, f"Cancel order {order.order_number}?")():
            print("Order not cancelled.")
            return
        order = app.orders.cancel(order, credentials)
    elif args.action == "invoice":
        if not app.invoices.print_invoice(order):
            print("Could not open the invoice.")
    _print_order(order)


def cmd_admin(app: Storefront, args) -> None:
    credentials = app.credentials
    if args.action == "dashboard":
        data = app.stats.load_dashboard(credentials)
        print(f"Users: {data.total_users}  Products: {data.total_products}  Orders: {data.total_orders}")
        print(f"Revenue: {format_currency(data.total_revenue)}")
        stats = data.order_stats
        print(
            f"Pending {stats.pending} / Processing {stats.processing} / Shipped {stats.shipped} / "
            f"Delivered {stats.delivered} / Cancelled {stats.cancelled}"
        )
        for recent in data.recent_orders:
            print(
                f"  {recent.order_number:<24} {recent.customer:<24} {recent.status.value:<10} "
                f"{format_currency(recent.total_amount)}"
            )
        return

    order = app.orders.admin_get(args.order_id, credentials)
    order = app.orders.admin_update(
        order, credentials, status=args.status, payment_status=args.payment_status
    )
    _print_order(order)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storefront", description="Storefront API client")
    parser.add_argument("--api-url", default=None, help="Backend base URL (default: STOREFRONT_API_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    session_parser = subparsers.add_parser("session", help="Manage the stored session")
    session_sub = session_parser.add_subparsers(dest="action", required=True)
    set_token = session_sub.add_parser("set-token", help="Store a token and user")
    set_token.add_argument("token")
    set_token.add_argument("--user", required=True, help='User JSON, e.g. {"id": 1, "role": "user"}')
    session_sub.add_parser("clear", help="Remove the stored session")

    cart_parser = subparsers.add_parser("cart", help="Cart operations")
    cart_sub = cart_parser.add_subparsers(dest="action", required=True)
    cart_sub.add_parser("show")
    add = cart_sub.add_parser("add")
    add.add_argument("product_id", type=int)
    add.add_argument("--quantity", type=int, default=1)
    update = cart_sub.add_parser("update")
    update.add_argument("product_id", type=int)
    update.add_argument("quantity", type=int)
    remove = cart_sub.add_parser("remove")
    remove.add_argument("product_id", type=int)
    remove.add_argument("--yes", action="store_true")

    checkout = subparsers.add_parser("checkout", help="Place an order from the cart")
    checkout.add_argument("--full-name", required=True)
    checkout.add_argument("--email", required=True)
    checkout.add_argument("--phone", required=True)
    checkout.add_argument("--address", required=True)
    checkout.add_argument("--city", required=True)
    checkout.add_argument("--postal-code", required=True)
    checkout.add_argument("--shipping", default="standard", choices=["standard", "express", "same_day"])
    checkout.add_argument("--payment", default="bank_transfer", choices=["bank_transfer"])

    orders_parser = subparsers.add_parser("orders", help="Customer orders")
    orders_sub = orders_parser.add_subparsers(dest="action", required=True)
    orders_sub.add_parser("list")
    for name in ("view", "pay", "cancel", "invoice"):
        sub = orders_sub.add_parser(name)
        sub.add_argument("order_id", type=int)
        if name == "pay":
            sub.add_argument("--payment-status", default="paid", choices=["paid", "failed"])
        if name == "cancel":
            sub.add_argument("--yes", action="store_true")

    admin_parser = subparsers.add_parser("admin", help="Admin operations")
    admin_sub = admin_parser.add_subparsers(dest="action", required=True)
    admin_sub.add_parser("dashboard")
    admin_update = admin_sub.add_parser("update")
    admin_update.add_argument("order_id", type=int)
    admin_update.add_argument("--status", default=None)
    admin_update.add_argument("--payment-status", default=None)

    return parser


COMMANDS = {
    "session": cmd_session,
    "cart": cmd_cart,
    "checkout": cmd_checkout,
    "orders": cmd_orders,
    "admin": cmd_admin,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    app = create_storefront(base_url=args.api_url)
    try:
        COMMANDS[args.command](app, args)
    except StorefrontError as e:
        logger.debug(f"{args.command} nie powiodlo sie: {type(e).__name__}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
