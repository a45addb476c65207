"""Request and response models for the cart API"""

from pydantic import BaseModel
from typing import Optional

from storefront.models import LineItem
from storefront.pricing import format_price
from storefront.sync import CartSynchronizer, CartResult


class CartItemModel(BaseModel):
    """Line item as shown to the visitor"""
    line_id: Optional[str] = None
    merchandise_id: str
    quantity: int
    unit_price: str
    currency_code: str
    line_total: str
    formatted_price: str
    formatted_total: str
    product_title: str
    product_handle: str
    variant_title: str
    image_url: Optional[str] = None
    image_alt: str = ""

    @classmethod
    def from_item(cls, item: LineItem) -> "CartItemModel":
        return cls(
            line_id=item.line_id,
            merchandise_id=item.merchandise_id,
            quantity=item.quantity,
            unit_price=str(item.unit_price),
            currency_code=item.currency_code,
            line_total=str(item.line_total),
            formatted_price=format_price(item.unit_price, item.currency_code),
            formatted_total=format_price(item.line_total, item.currency_code),
            product_title=item.product_title,
            product_handle=item.product_handle,
            variant_title=item.variant_title,
            image_url=item.image_url,
            image_alt=item.image_alt,
        )


class CartErrorModel(BaseModel):
    kind: str
    message: str
    user_errors: list[dict] = []


class CartStateResponse(BaseModel):
    """Cart state for the presentation layer"""
    ok: bool = True
    cart_id: Optional[str] = None
    checkout_url: Optional[str] = None
    items: list[CartItemModel] = []
    pending_items: list[CartItemModel] = []
    item_count: int = 0
    subtotal: str = "0"
    formatted_subtotal: str = ""
    currency_code: str
    status: str
    last_error: Optional[CartErrorModel] = None

    @classmethod
    def from_cart(cls, cart: CartSynchronizer, result: Optional[CartResult] = None) -> "CartStateResponse":
        view = cart.view
        placeholders = [item for item in cart.pending_items if item.line_id is None]
        return cls(
            ok=result.ok if result else True,
            cart_id=view.handle,
            checkout_url=view.checkout_url,
            items=[CartItemModel.from_item(item) for item in view.items],
            pending_items=[CartItemModel.from_item(item) for item in placeholders],
            item_count=view.item_count,
            subtotal=str(view.subtotal),
            formatted_subtotal=format_price(view.subtotal, view.currency_code),
            currency_code=view.currency_code,
            status=cart.status.value,
            last_error=CartErrorModel(**cart.last_error.to_dict()) if cart.last_error else None,
        )


class AddItemRequest(BaseModel):
    """Variant to add; price and display fields are optional hints"""
    merchandise_id: str
    quantity: int = 1
    unit_price: Optional[str] = None
    currency_code: Optional[str] = None
    product_title: str = ""
    product_handle: str = ""
    variant_title: str = ""
    image_url: Optional[str] = None
    image_alt: str = ""


class UpdateItemRequest(BaseModel):
    """New quantity for a line; 0 or less removes it"""
    quantity: int
