# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from storefront.domain.order_status import OrderStatus, PaymentStatus, is_revenue
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_timestamp(value):
    # backend zwraca "2025-01-31 10:15:00" zamiast ISO z "T"
    if isinstance(value, str) and value and " " in value.strip():
        return value.strip().replace(" ", "T", 1)
    return value or None


def _none_to_zero(value):
    return 0 if value in (None, "") else value


def _to_grams(value):
    if value in (None, ""):
        return 0
    try:
        return int(Decimal(str(value)))
    except InvalidOperation:
        raise ValueError(f"invalid weight: {value!r}") from None


Timestamp = Annotated[datetime | None, BeforeValidator(_parse_timestamp)]
Grams = Annotated[int, BeforeValidator(_to_grams)]
Money = Annotated[Decimal, BeforeValidator(_none_to_zero)]


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"


class UserRef(BaseModel):
    """Uzytkownik z sesji albo z listy zamowien admina."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    username: str | None = None
    email: str | None = None
    role: str = "user"


class Credentials(BaseModel):
    """Jawnie przekazywany kontekst uwierzytelnienia (token + zalogowany uzytkownik)."""

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    user: UserRef | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ApiResult(BaseModel):
    """Koperta odpowiedzi {success, message?, ...payload}."""

    success: bool
    message: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_body(cls, body: dict) -> "ApiResult":
        payload = {k: v for k, v in body.items() if k not in ("success", "message")}
        return cls(success=bool(body.get("success")), message=body.get("message"), payload=payload)


# =====================================================
# CART
# =====================================================
class ProductRef(BaseModel):
    """Slaba referencja do produktu - tylko do wyswietlania."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    name: str = "Unknown Product"
    price: Decimal | None = None
    image: str | None = None
    unit: str | None = None
    weight: Grams = 0
    stock: int | None = None


class CartItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    product_id: int
    quantity: int = Field(..., ge=1)
    price_at_addition: Decimal
    added_at: Timestamp = None
    product: ProductRef | None = None

    @property
    def line_total(self) -> Decimal:
        return self.price_at_addition * self.quantity

    @property
    def weight(self) -> int:
        return self.product.weight if self.product else 0

    @property
    def name(self) -> str:
        return self.product.name if self.product else "Unknown Product"


class Cart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    user_id: int | None = None
    items: list[CartItem] = Field(default_factory=list)
    total_price: Decimal | None = None

    @model_validator(mode="after")
    def _derive_total(self):
        derived = self.subtotal
        if self.total_price is None:
            self.total_price = derived
        elif Decimal(self.total_price) != derived:
            logger.warning(
                f"Suma koszyka z serwera ({self.total_price}) rozna od wyliczonej ({derived}), "
                f"uzywam wyliczonej"
            )
            self.total_price = derived
        return self

    @classmethod
    def empty(cls) -> "Cart":
        return cls(items=[])

    @property
    def subtotal(self) -> Decimal:
        return sum((i.line_total for i in self.items), Decimal("0"))

    @property
    def total_quantity(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def total_weight(self) -> int:
        return sum(i.weight * i.quantity for i in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: int) -> CartItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)


class CartChangeKind(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"
    ORDER_PLACED = "order_placed"


class CartChanged(BaseModel):
    """Sygnal "koszyk sie zmienil". product_id = None gdy zmienil sie caly koszyk."""

    model_config = ConfigDict(frozen=True)

    kind: CartChangeKind
    product_id: int | None = None


# =====================================================
# ORDER
# =====================================================
REQUIRED_SHIPPING_FIELDS = ("full_name", "email", "phone", "address", "city", "postal_code")


class ShippingInfo(BaseModel):
    """Dane wysylki zapisane w momencie zamowienia, bez powiazania z profilem uzytkownika."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = Field("", alias="postalCode")
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        return "" if value is None else str(value)

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_SHIPPING_FIELDS if not getattr(self, f).strip()]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class OrderItem(BaseModel):
    """Snapshot pozycji - nazwa, cena i waga skopiowane przy skladaniu zamowienia."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    product_id: int | None = None
    product_name: str = ""
    product_image: str | None = None
    price: Decimal = Decimal("0")
    quantity: int = 1
    weight: Grams = 0

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Order(BaseModel):
    """
    Niezmienny rekord historyczny. Zmieniaja sie tylko status i payment_status,
    zawsze przez OrderStatusMachine (ktora zwraca nowa kopie).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    order_number: str
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    shipping_info: ShippingInfo | None = None
    payment_method: str | None = None
    shipping_method: ShippingMethod | None = None
    shipping_cost: Money = Decimal("0")
    total_amount: Money = Decimal("0")
    total_weight: Grams = 0
    items: tuple[OrderItem, ...] = ()
    items_count: int | None = None
    user: UserRef | None = None
    created_at: Timestamp = None
    updated_at: Timestamp = None

    @field_validator("shipping_info", mode="before")
    @classmethod
    def _empty_shipping_info(cls, value):
        # PHP json_decode zwraca [] dla pustych danych
        return value if isinstance(value, (dict, ShippingInfo)) else None

    @property
    def subtotal(self) -> Decimal:
        return self.total_amount - self.shipping_cost

    @property
    def counts_as_revenue(self) -> bool:
        return is_revenue(self.status, self.payment_status)

    @property
    def customer_name(self) -> str:
        if self.shipping_info and self.shipping_info.full_name:
            return self.shipping_info.full_name
        if self.user and self.user.email:
            return self.user.email
        return "N/A"


class OrderReceipt(BaseModel):
    """Potwierdzenie przekazywane do widoku sukcesu przez stan nawigacji."""

    model_config = ConfigDict(frozen=True)

    order_number: str
    total_amount: Decimal
    order_id: int


# =====================================================
# CHECKOUT / STATS
# =====================================================
class CheckoutSummary(BaseModel):
    subtotal: Decimal
    shipping_method: ShippingMethod
    shipping_cost: Decimal
    total: Decimal
    total_weight: int
    total_quantity: int


class OrderStats(BaseModel):
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    total_orders: int = 0
    revenue: Decimal = Decimal("0")

    def count(self, status: OrderStatus) -> int:
        return getattr(self, status.value)


class RecentOrder(BaseModel):
    """Okrojona projekcja zamowienia na dashboard."""

    id: int
    order_number: str
    customer: str
    status: OrderStatus
    total_amount: Decimal
    created_at: datetime | None = None


class DashboardStats(BaseModel):
    total_users: int
    total_products: int
    total_orders: int
    total_revenue: Decimal
    order_stats: OrderStats
    recent_orders: list[RecentOrder]
