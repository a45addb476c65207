"""Cart models for the REST proxy"""

from pydantic import BaseModel, Field
from typing import Optional

from storefront.models import Money, CartSnapshot, LineItem


class MoneyModel(BaseModel):
    """Decimal amount as a string plus currency code"""
    amount: str
    currency_code: str

    @classmethod
    def from_money(cls, money: Optional[Money]) -> Optional["MoneyModel"]:
        if money is None:
            return None
        return cls(amount=str(money.amount), currency_code=money.currency_code)


class ImageModel(BaseModel):
    url: str
    alt_text: Optional[str] = None


class Merchandise(BaseModel):
    """Product variant on a cart line"""
    id: str
    title: str
    price: MoneyModel
    product_title: str
    product_handle: str
    image: Optional[ImageModel] = None


class CartLine(BaseModel):
    """Line in a shopping cart"""
    id: str
    quantity: int
    merchandise: Merchandise

    @classmethod
    def from_item(cls, item: LineItem) -> "CartLine":
        return cls(
            id=item.line_id,
            quantity=item.quantity,
            merchandise=Merchandise(
                id=item.merchandise_id,
                title=item.variant_title,
                price=MoneyModel(amount=str(item.unit_price), currency_code=item.currency_code),
                product_title=item.product_title,
                product_handle=item.product_handle,
                image=ImageModel(url=item.image_url, alt_text=item.image_alt) if item.image_url else None,
            ),
        )


class Cart(BaseModel):
    """Shopping cart"""
    id: str
    checkout_url: Optional[str] = None
    total_quantity: int = 0
    lines: list[CartLine] = []
    subtotal: Optional[MoneyModel] = None
    total: Optional[MoneyModel] = None

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot) -> "Cart":
        return cls(
            id=snapshot.id,
            checkout_url=snapshot.checkout_url,
            total_quantity=snapshot.total_quantity,
            lines=[CartLine.from_item(line) for line in snapshot.lines],
            subtotal=MoneyModel.from_money(snapshot.subtotal),
            total=MoneyModel.from_money(snapshot.total),
        )


class CartLineRequest(BaseModel):
    """Variant and quantity to add"""
    merchandise_id: str = Field(min_length=1, description="The variant GID")
    quantity: int = Field(default=1, gt=0)


class CartLineUpdateRequest(BaseModel):
    """New quantity for a cart line; 0 removes it"""
    id: str = Field(min_length=1, description="The cart line ID")
    quantity: int = Field(ge=0)


class CreateCartRequest(BaseModel):
    """Request to create a cart, optionally with lines"""
    lines: list[CartLineRequest] = []


class AddLinesRequest(BaseModel):
    """Request to add lines to a cart"""
    lines: list[CartLineRequest] = Field(min_length=1)


class UpdateLinesRequest(BaseModel):
    """Request to update cart line quantities"""
    lines: list[CartLineUpdateRequest] = Field(min_length=1)


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None
