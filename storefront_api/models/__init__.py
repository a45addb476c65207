# Storefront API Models

from .cart import (
    MoneyModel,
    Cart,
    CartLine,
    CartLineRequest,
    CartLineUpdateRequest,
    CreateCartRequest,
    AddLinesRequest,
    UpdateLinesRequest,
    CartResponse,
)
from .product import ProductModel, ProductListResponse, ProductHandlesResponse

__all__ = [
    "MoneyModel",
    "Cart",
    "CartLine",
    "CartLineRequest",
    "CartLineUpdateRequest",
    "CreateCartRequest",
    "AddLinesRequest",
    "UpdateLinesRequest",
    "CartResponse",
    "ProductModel",
    "ProductListResponse",
    "ProductHandlesResponse",
]
