"""Product catalog queries"""

import logging
from typing import Optional

from .client import StorefrontClient
from .models import Product
from .normalize import normalize_product
from . import queries

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Read-only access to the store's products"""

    def __init__(self, client: StorefrontClient):
        self.client = client

    async def get_products(self, first: int = 20) -> list[Product]:
        """Fetch the first products in the store"""
        data = await self.client.execute(queries.GET_PRODUCTS, {"first": first})
        edges = (data.get("products") or {}).get("edges") or []
        return [normalize_product(edge["node"]) for edge in edges]

    async def get_product_by_handle(self, handle: str) -> Optional[Product]:
        """Fetch a single product by its URL handle"""
        data = await self.client.execute(queries.GET_PRODUCT_BY_HANDLE, {"handle": handle})
        node = data.get("product")
        if not node:
            logger.debug(f"Product not found: {handle}")
            return None
        return normalize_product(node)

    async def get_all_product_handles(self, first: int = 100) -> list[str]:
        """Fetch product handles, e.g. for sitemap or page generation"""
        data = await self.client.execute(queries.GET_ALL_HANDLES, {"first": first})
        edges = (data.get("products") or {}).get("edges") or []
        return [edge["node"]["handle"] for edge in edges]
