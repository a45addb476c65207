# Storefront core: Storefront API client, cart gateways and cart synchronizer

from .client import StorefrontClient
from .catalog import ProductCatalog
from .gateway import CartGateway, GraphQLCartGateway, RestCartGateway
from .handle_store import HandleStore, MemoryHandleStore, FileHandleStore
from .models import (
    Money,
    LineItem,
    LineDisplay,
    CartView,
    CartSnapshot,
    CartLineInput,
    CartLineUpdateInput,
    Product,
)
from .sync import CartSynchronizer, CartResult, ErrorInfo, ErrorKind, SyncStatus

__all__ = [
    "StorefrontClient",
    "ProductCatalog",
    "CartGateway",
    "GraphQLCartGateway",
    "RestCartGateway",
    "HandleStore",
    "MemoryHandleStore",
    "FileHandleStore",
    "Money",
    "LineItem",
    "LineDisplay",
    "CartView",
    "CartSnapshot",
    "CartLineInput",
    "CartLineUpdateInput",
    "Product",
    "CartSynchronizer",
    "CartResult",
    "ErrorInfo",
    "ErrorKind",
    "SyncStatus",
]
