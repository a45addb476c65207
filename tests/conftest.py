"""Pytest configuration and fixtures"""
import asyncio
from decimal import Decimal
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from storefront.errors import DomainError, StaleHandleError, UserError
from storefront.gateway import CartGateway
from storefront.handle_store import MemoryHandleStore
from storefront.models import (
    CartSnapshot,
    CartLineInput,
    CartLineUpdateInput,
    LineItem,
    Money,
    Product,
    ProductImage,
    ProductVariant,
)
from storefront.sync import CartSynchronizer


VARIANTS = {
    "V1": ("Nano Tee", "nano-tee", "Small", Decimal("10.00")),
    "V2": ("Field Cap", "field-cap", "One size", Decimal("5.50")),
    "V3": ("Trail Pack", "trail-pack", "Default Title", Decimal("749.95")),
}


class FakeGateway(CartGateway):
    """
    In-memory cart backend.

    Merges repeated merchandise into one line like the real platform,
    records every call, and can fail or hold the next call.
    """

    def __init__(self):
        self.carts: dict[str, list[dict]] = {}
        self.calls: list[tuple] = []
        self.fail_next: Optional[Exception] = None
        self.hold: Optional[asyncio.Event] = None
        self._cart_seq = 0
        self._line_seq = 0

    def call_names(self) -> list[str]:
        return [name for name, *_ in self.calls]

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if self.hold is not None:
            await self.hold.wait()
        else:
            await asyncio.sleep(0)
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def _snapshot(self, cart_id: str) -> CartSnapshot:
        lines = []
        for entry in self.carts[cart_id]:
            title, handle, variant_title, price = VARIANTS[entry["merchandise_id"]]
            lines.append(LineItem(
                line_id=entry["id"],
                merchandise_id=entry["merchandise_id"],
                quantity=entry["quantity"],
                unit_price=price,
                currency_code="USD",
                product_title=title,
                product_handle=handle,
                variant_title=variant_title,
            ))
        subtotal = sum((line.line_total for line in lines), Decimal("0"))
        return CartSnapshot(
            id=cart_id,
            checkout_url=f"https://shop.example.com/cart/c/{cart_id.rsplit('/', 1)[-1]}",
            lines=lines,
            total_quantity=sum(line.quantity for line in lines),
            subtotal=Money(subtotal, "USD"),
            total=Money(subtotal, "USD"),
        )

    def _merge(self, cart_id: str, lines: list[CartLineInput]) -> None:
        entries = self.carts[cart_id]
        for line in lines:
            if line.merchandise_id not in VARIANTS:
                raise DomainError(
                    "cartLinesAdd failed: The merchandise does not exist",
                    user_errors=[UserError("The merchandise does not exist", ["lines", "0", "merchandiseId"], "INVALID")],
                )
            existing = next((e for e in entries if e["merchandise_id"] == line.merchandise_id), None)
            if existing:
                existing["quantity"] += line.quantity
            else:
                self._line_seq += 1
                entries.append({
                    "id": f"gid://shopify/CartLine/{self._line_seq}?cart=abc",
                    "merchandise_id": line.merchandise_id,
                    "quantity": line.quantity,
                })

    def _require(self, handle: str) -> list[dict]:
        if handle not in self.carts:
            raise StaleHandleError(handle)
        return self.carts[handle]

    async def create_cart(self, lines: list[CartLineInput]) -> CartSnapshot:
        await self._enter("create_cart", lines)
        self._cart_seq += 1
        cart_id = f"gid://shopify/Cart/c{self._cart_seq}?key=secret"
        self.carts[cart_id] = []
        self._merge(cart_id, lines)
        return self._snapshot(cart_id)

    async def add_lines(self, handle: str, lines: list[CartLineInput]) -> CartSnapshot:
        await self._enter("add_lines", handle, lines)
        self._require(handle)
        self._merge(handle, lines)
        return self._snapshot(handle)

    async def update_lines(self, handle: str, lines: list[CartLineUpdateInput]) -> CartSnapshot:
        await self._enter("update_lines", handle, lines)
        entries = self._require(handle)
        for line in lines:
            entry = next((e for e in entries if e["id"] == line.id), None)
            if entry is None:
                raise DomainError(
                    "cartLinesUpdate failed: The merchandise line does not exist",
                    user_errors=[UserError("The merchandise line does not exist", ["lines", "0", "id"])],
                )
            entry["quantity"] = line.quantity
        self.carts[handle] = [e for e in entries if e["quantity"] > 0]
        return self._snapshot(handle)

    async def remove_lines(self, handle: str, line_ids: list[str]) -> CartSnapshot:
        await self._enter("remove_lines", handle, line_ids)
        entries = self._require(handle)
        self.carts[handle] = [e for e in entries if e["id"] not in line_ids]
        return self._snapshot(handle)

    async def get_cart(self, handle: str) -> Optional[CartSnapshot]:
        await self._enter("get_cart", handle)
        if handle not in self.carts:
            return None
        return self._snapshot(handle)


@pytest.fixture
def gateway():
    """Fake remote cart backend"""
    return FakeGateway()


@pytest.fixture
def store():
    """In-memory handle store"""
    return MemoryHandleStore()


@pytest.fixture
def cart(gateway, store):
    """Synchronizer with no stored handle"""
    return CartSynchronizer(gateway=gateway, store=store)


@pytest.fixture
def sample_product():
    """Catalog product with one variant"""
    return Product(
        id="gid://shopify/Product/1",
        title="Nano Tee",
        handle="nano-tee",
        description="Soft cotton tee",
        min_price=Money(Decimal("10.00"), "USD"),
        max_price=Money(Decimal("12.00"), "USD"),
        images=[ProductImage(url="https://cdn.shopify.com/tee.jpg", alt_text="Tee")],
        variants=[
            ProductVariant(
                id="V1",
                title="Small",
                price=Money(Decimal("10.00"), "USD"),
                selected_options=[{"name": "Size", "value": "Small"}],
            )
        ],
    )


@pytest.fixture
def mock_catalog(sample_product):
    """Catalog returning the sample product"""
    catalog = AsyncMock()
    catalog.get_products.return_value = [sample_product]

    async def by_handle(handle):
        return sample_product if handle == sample_product.handle else None

    catalog.get_product_by_handle.side_effect = by_handle
    catalog.get_all_product_handles.return_value = [sample_product.handle]
    return catalog


@pytest.fixture
def shopify_cart():
    """Raw Storefront API cart payload"""
    return {
        "id": "gid://shopify/Cart/c1?key=secret",
        "checkoutUrl": "https://shop.example.com/cart/c/c1",
        "totalQuantity": 3,
        "cost": {
            "subtotalAmount": {"amount": "25.5", "currencyCode": "USD"},
            "totalAmount": {"amount": "27.80", "currencyCode": "USD"},
        },
        "lines": {
            "edges": [
                {
                    "node": {
                        "id": "gid://shopify/CartLine/1",
                        "quantity": 2,
                        "merchandise": {
                            "id": "gid://shopify/ProductVariant/11",
                            "title": "Small",
                            "price": {"amount": "10.0", "currencyCode": "USD"},
                            "product": {
                                "title": "Nano Tee",
                                "handle": "nano-tee",
                                "images": {
                                    "edges": [
                                        {"node": {"url": "https://cdn.shopify.com/tee.jpg", "altText": None}}
                                    ]
                                },
                            },
                        },
                    }
                },
                {
                    "node": {
                        "id": "gid://shopify/CartLine/2",
                        "quantity": 1,
                        "merchandise": {
                            "id": "gid://shopify/ProductVariant/22",
                            "title": "One size",
                            "priceV2": {"amount": "5.50", "currencyCode": "USD"},
                            "product": {
                                "title": "Field Cap",
                                "handle": "field-cap",
                                "images": {"edges": []},
                            },
                        },
                    }
                },
            ]
        },
    }
