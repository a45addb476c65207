"""Storefront pages"""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates

from storefront.catalog import ProductCatalog
from storefront.config import settings
from storefront.pricing import format_price

from ..core.session import ShopSession
from ..dependencies import get_catalog, get_shop_session, issue_session_cookie

router = APIRouter(tags=["Pages"])

templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=templates_dir)
templates.env.filters["price"] = format_price


@router.get("/")
async def home(request: Request, catalog: ProductCatalog = Depends(get_catalog)):
    """Product grid"""
    products = await catalog.get_products(first=settings.products_page_size)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.app_name, "products": products},
    )


@router.get("/products/{handle}")
async def product_detail(
    handle: str,
    request: Request,
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Product detail page"""
    product = await catalog.get_product_by_handle(handle)
    if not product:
        return templates.TemplateResponse(
            request,
            "404.html",
            {"title": "Page not found"},
            status_code=404,
        )
    return templates.TemplateResponse(
        request,
        "product.html",
        {"title": product.title, "product": product},
    )


@router.get("/cart")
async def cart_page(request: Request, session: ShopSession = Depends(get_shop_session)):
    """Cart page"""
    if session.cart.needs_refresh:
        await session.cart.refresh()
    response = templates.TemplateResponse(
        request,
        "cart.html",
        {"title": "Your cart", "cart": session.cart},
    )
    issue_session_cookie(response, session)
    return response
