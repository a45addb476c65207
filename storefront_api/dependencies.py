"""Shared service instances for the REST proxy routes"""

from typing import Optional
from fastapi import Depends

from storefront.client import StorefrontClient
from storefront.catalog import ProductCatalog
from storefront.config import settings
from storefront.gateway import GraphQLCartGateway

storefront_client: Optional[StorefrontClient] = None


def get_storefront_client() -> StorefrontClient:
    """Get or create the Storefront API client"""
    global storefront_client
    if storefront_client is None:
        storefront_client = StorefrontClient.from_settings(settings)
    return storefront_client


def get_cart_gateway(
    client: StorefrontClient = Depends(get_storefront_client),
) -> GraphQLCartGateway:
    return GraphQLCartGateway(client, lines_limit=settings.cart_lines_limit)


def get_catalog(
    client: StorefrontClient = Depends(get_storefront_client),
) -> ProductCatalog:
    return ProductCatalog(client)
