"""Storefront Data Models"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Money:
    """Decimal amount with an ISO 4217 currency code"""
    amount: Decimal
    currency_code: str

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currency_code": self.currency_code}


@dataclass(frozen=True)
class LineItem:
    """Flat view of one cart line"""
    line_id: Optional[str]  # None only for optimistic placeholders
    merchandise_id: str
    quantity: int
    unit_price: Decimal
    currency_code: str
    product_title: str = ""
    product_handle: str = ""
    variant_title: str = ""
    image_url: Optional[str] = None
    image_alt: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "line_id": self.line_id,
            "merchandise_id": self.merchandise_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "currency_code": self.currency_code,
            "line_total": str(self.line_total),
            "product_title": self.product_title,
            "product_handle": self.product_handle,
            "variant_title": self.variant_title,
            "image_url": self.image_url,
            "image_alt": self.image_alt,
        }


@dataclass
class CartSnapshot:
    """A remote cart resource as returned by a gateway"""
    id: str
    checkout_url: Optional[str]
    lines: list[LineItem] = field(default_factory=list)
    total_quantity: int = 0
    subtotal: Optional[Money] = None
    total: Optional[Money] = None


@dataclass(frozen=True)
class CartView:
    """
    Derived view of the cart.

    Always a projection of the latest successful remote response;
    totals are computed from the lines, never stored.
    """
    handle: Optional[str] = None
    checkout_url: Optional[str] = None
    items: tuple[LineItem, ...] = ()
    default_currency: str = "USD"

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot, default_currency: str = "USD") -> "CartView":
        return cls(
            handle=snapshot.id,
            checkout_url=snapshot.checkout_url,
            items=tuple(snapshot.lines),
            default_currency=default_currency,
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def currency_code(self) -> str:
        if self.items:
            return self.items[0].currency_code
        return self.default_currency

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict:
        return {
            "handle": self.handle,
            "checkout_url": self.checkout_url,
            "items": [item.to_dict() for item in self.items],
            "item_count": self.item_count,
            "subtotal": str(self.subtotal),
            "currency_code": self.currency_code,
        }


@dataclass
class CartLineInput:
    """Line to add to a cart"""
    merchandise_id: str
    quantity: int = 1

    def to_graphql(self) -> dict:
        return {"merchandiseId": self.merchandise_id, "quantity": self.quantity}


@dataclass
class CartLineUpdateInput:
    """New quantity for an existing cart line"""
    id: str
    quantity: int

    def to_graphql(self) -> dict:
        return {"id": self.id, "quantity": self.quantity}


@dataclass
class LineDisplay:
    """Display metadata a caller already knows about a variant it adds"""
    product_title: str = ""
    product_handle: str = ""
    variant_title: str = ""
    image_url: Optional[str] = None
    image_alt: str = ""


# ==================== Catalog ====================


@dataclass
class ProductImage:
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class ProductVariant:
    id: str
    title: str
    price: Optional[Money]
    available_for_sale: bool = True
    selected_options: list[dict] = field(default_factory=list)


@dataclass
class ProductOption:
    id: str
    name: str
    values: list[str] = field(default_factory=list)


@dataclass
class Product:
    """Catalog product"""
    id: str
    title: str
    handle: str
    description: str = ""
    description_html: Optional[str] = None
    min_price: Optional[Money] = None
    max_price: Optional[Money] = None
    images: list[ProductImage] = field(default_factory=list)
    variants: list[ProductVariant] = field(default_factory=list)
    options: list[ProductOption] = field(default_factory=list)

    @property
    def image(self) -> Optional[ProductImage]:
        return self.images[0] if self.images else None
