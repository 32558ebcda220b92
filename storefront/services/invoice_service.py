# storefront/services/invoice_service.py
import tempfile
import webbrowser
from html import escape
from pathlib import Path
from typing import Callable

from storefront.domain.schemas import Order
from storefront.utils.formatting import format_currency, format_datetime, format_weight
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; }
.header { text-align: center; margin-bottom: 30px; }
.section { margin-bottom: 20px; border-top: 1px solid #eee; padding-top: 10px; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; font-size: 14px; }
th, td { border: 1px solid #ddd; padding: 10px; text-align: left; }
th { background-color: #f5f5f5; }
.total { font-weight: bold; font-size: 1.2em; }
"""


def render_invoice(order: Order) -> str:
    info = order.shipping_info
    rows = "".join(
        f"<tr><td>{escape(item.product_name)}</td><td>{item.quantity}</td>"
        f"<td>{format_weight(item.weight)}</td>"
        f"<td>{format_currency(item.price)}</td><td>{format_currency(item.line_total)}</td></tr>"
        for item in order.items
    )
    shipping = ""
    if info is not None:
        shipping = (
            f"<div class='section'><h3>Shipping</h3>"
            f"<p>{escape(info.full_name)}<br/>{escape(info.email)} / {escape(info.phone)}<br/>"
            f"{escape(info.address)}, {escape(info.city)} {escape(info.postal_code)}</p></div>"
        )
    method = order.shipping_method.value if order.shipping_method else "-"

    return (
        f"<html><head><title>Invoice {escape(order.order_number)}</title>"
        f"<style>{_STYLE}</style></head><body>"
        f"<div class='header'><h1>INVOICE</h1><h2>{escape(order.order_number)}</h2></div>"
        f"<div class='section'><h3>Order Details</h3>"
        f"<p><strong>Date:</strong> {format_datetime(order.created_at)}</p>"
        f"<p><strong>Status:</strong> {order.status.value}</p>"
        f"<p><strong>Payment Status:</strong> {order.payment_status.value}</p>"
        f"<p><strong>Shipping Method:</strong> {method}</p>"
        f"<p><strong>Total Weight:</strong> {format_weight(order.total_weight)}</p></div>"
        f"{shipping}"
        f"<table><tr><th>Product</th><th>Qty</th><th>Weight</th><th>Price</th><th>Total</th></tr>"
        f"{rows}</table>"
        f"<table class='summary'>"
        f"<tr><td>Subtotal</td><td>{format_currency(order.subtotal)}</td></tr>"
        f"<tr><td>Shipping</td><td>{format_currency(order.shipping_cost)}</td></tr>"
        f"<tr><td class='total'>Total</td><td class='total'>{format_currency(order.total_amount)}</td></tr>"
        f"</table></body></html>"
    )


def open_in_browser(title: str, document: str) -> None:
    path = Path(tempfile.gettempdir()) / f"{title}.html"
    path.write_text(document, encoding="utf-8")
    if not webbrowser.open(path.as_uri()):
        raise RuntimeError(f"No browser available to open {path}")


class InvoiceService:
    """
    Drukowanie faktury to operacja poboczna: blad (brak przegladarki, zablokowane okno)
    jest logowany i nie rusza stanu zamowienia ani koszyka.
    """

    def __init__(self, printer: Callable[[str, str], None] = open_in_browser):
        self.printer = printer

    def print_invoice(self, order: Order) -> bool:
        document = render_invoice(order)
        try:
            self.printer(f"invoice-{order.order_number}", document)
        except Exception as e:
            logger.warning(f"Nie udalo sie wydrukowac faktury {order.order_number}: {e}")
            return False
        logger.info(f"Faktura {order.order_number} wyslana do druku")
        return True
