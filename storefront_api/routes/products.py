"""Product API routes for the REST proxy"""

from fastapi import APIRouter, HTTPException, Query, Depends

from storefront.catalog import ProductCatalog
from storefront.config import settings

from ..dependencies import get_catalog
from ..models.product import ProductModel, ProductListResponse, ProductHandlesResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: int = Query(settings.products_page_size, ge=1, le=100, description="Number of products to return"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """List products from the store"""
    products = await catalog.get_products(first=limit)
    return ProductListResponse(
        products=[ProductModel.from_product(p) for p in products],
        count=len(products),
    )


@router.get("/handles", response_model=ProductHandlesResponse)
async def list_product_handles(catalog: ProductCatalog = Depends(get_catalog)):
    """List product handles (URL slugs)"""
    return ProductHandlesResponse(handles=await catalog.get_all_product_handles())


@router.get("/{handle}", response_model=ProductModel)
async def get_product(
    handle: str,
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Get a single product by its URL handle"""
    product = await catalog.get_product_by_handle(handle)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductModel.from_product(product)
