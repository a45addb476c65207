"""Cart API routes for the web storefront"""

from fastapi import APIRouter, Depends, Response

from storefront.models import LineDisplay
from storefront.sync import CartResult, ErrorKind

from ..core.session import ShopSession
from ..dependencies import get_shop_session
from ..models import CartStateResponse, AddItemRequest, UpdateItemRequest

router = APIRouter(prefix="/api/cart", tags=["Cart"])

ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CREATE_FAILED: 422,
    ErrorKind.MUTATION_FAILED: 422,
    ErrorKind.FETCH_FAILED: 502,
    ErrorKind.TRANSPORT: 502,
}


def _respond(session: ShopSession, result: CartResult, response: Response) -> CartStateResponse:
    if not result.ok and result.error:
        response.status_code = ERROR_STATUS[result.error.kind]
    return CartStateResponse.from_cart(session.cart, result)


@router.get("", response_model=CartStateResponse)
async def get_cart(
    response: Response,
    session: ShopSession = Depends(get_shop_session),
):
    """
    Get the visitor's cart.

    A cart restored from storage is fetched from the store on first read.
    """
    if session.cart.needs_refresh:
        result = await session.cart.refresh()
        return _respond(session, result, response)
    return CartStateResponse.from_cart(session.cart)


@router.post("/items", response_model=CartStateResponse)
async def add_item(
    request: AddItemRequest,
    response: Response,
    session: ShopSession = Depends(get_shop_session),
):
    """Add a variant to the cart, creating the cart on first add"""
    result = await session.cart.add_item(
        request.merchandise_id,
        quantity=request.quantity,
        unit_price=request.unit_price,
        currency_code=request.currency_code,
        display=LineDisplay(
            product_title=request.product_title,
            product_handle=request.product_handle,
            variant_title=request.variant_title,
            image_url=request.image_url,
            image_alt=request.image_alt,
        ),
    )
    return _respond(session, result, response)


@router.patch("/items/{line_id:path}", response_model=CartStateResponse)
async def update_item(
    line_id: str,
    request: UpdateItemRequest,
    response: Response,
    session: ShopSession = Depends(get_shop_session),
):
    """Change a line's quantity; 0 or less removes the line"""
    result = await session.cart.update_quantity(line_id, request.quantity)
    return _respond(session, result, response)


@router.delete("/items/{line_id:path}", response_model=CartStateResponse)
async def remove_item(
    line_id: str,
    response: Response,
    session: ShopSession = Depends(get_shop_session),
):
    """Remove a line from the cart"""
    result = await session.cart.remove_item(line_id)
    return _respond(session, result, response)


@router.delete("", response_model=CartStateResponse)
async def clear_cart(
    response: Response,
    session: ShopSession = Depends(get_shop_session),
):
    """Forget the cart (the store expires abandoned carts on its own)"""
    result = await session.cart.clear()
    return _respond(session, result, response)
