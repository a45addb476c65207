"""Product models for the REST proxy"""

from pydantic import BaseModel
from typing import Optional

from storefront.models import Product
from .cart import MoneyModel


class ProductImageModel(BaseModel):
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ProductVariantModel(BaseModel):
    id: str
    title: str
    price: Optional[MoneyModel] = None
    available_for_sale: bool = True
    selected_options: list[dict] = []


class ProductOptionModel(BaseModel):
    id: str
    name: str
    values: list[str] = []


class ProductModel(BaseModel):
    """Product in the catalog"""
    id: str
    title: str
    handle: str
    description: str = ""
    description_html: Optional[str] = None
    price: Optional[MoneyModel] = None
    max_price: Optional[MoneyModel] = None
    image: Optional[ProductImageModel] = None
    images: list[ProductImageModel] = []
    variants: list[ProductVariantModel] = []
    options: list[ProductOptionModel] = []

    @classmethod
    def from_product(cls, product: Product) -> "ProductModel":
        images = [
            ProductImageModel(url=i.url, alt_text=i.alt_text, width=i.width, height=i.height)
            for i in product.images
        ]
        return cls(
            id=product.id,
            title=product.title,
            handle=product.handle,
            description=product.description,
            description_html=product.description_html,
            price=MoneyModel.from_money(product.min_price),
            max_price=MoneyModel.from_money(product.max_price),
            image=images[0] if images else None,
            images=images,
            variants=[
                ProductVariantModel(
                    id=v.id,
                    title=v.title,
                    price=MoneyModel.from_money(v.price),
                    available_for_sale=v.available_for_sale,
                    selected_options=v.selected_options,
                )
                for v in product.variants
            ],
            options=[
                ProductOptionModel(id=o.id, name=o.name, values=o.values)
                for o in product.options
            ],
        )


class ProductListResponse(BaseModel):
    """Response from product listing"""
    products: list[ProductModel]
    count: int


class ProductHandlesResponse(BaseModel):
    handles: list[str]
