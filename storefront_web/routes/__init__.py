# Web Storefront Routes

from .cart import router as cart_router
from .pages import router as pages_router

__all__ = ["cart_router", "pages_router"]
