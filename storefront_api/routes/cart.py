"""Cart API routes for the REST proxy"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Body

from storefront.errors import DomainError, StaleHandleError
from storefront.gateway import CartGateway
from storefront.models import CartLineInput, CartLineUpdateInput, CartSnapshot

from ..dependencies import get_cart_gateway
from ..models.cart import (
    Cart,
    CreateCartRequest,
    AddLinesRequest,
    UpdateLinesRequest,
    CartResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _rejected(error: DomainError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "message": str(error),
            "user_errors": [e.to_dict() for e in error.user_errors],
        },
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Cart not found")


def _respond(snapshot: CartSnapshot, message: Optional[str] = None) -> CartResponse:
    return CartResponse(cart=Cart.from_snapshot(snapshot), message=message)


@router.post("", response_model=CartResponse, status_code=201)
async def create_cart(
    request: Optional[CreateCartRequest] = Body(None),
    gateway: CartGateway = Depends(get_cart_gateway),
):
    """Create a new cart, optionally with initial lines"""
    lines = [
        CartLineInput(merchandise_id=line.merchandise_id, quantity=line.quantity)
        for line in (request.lines if request else [])
    ]
    try:
        snapshot = await gateway.create_cart(lines)
    except DomainError as e:
        raise _rejected(e)

    logger.info(f"Created cart {snapshot.id} with {len(lines)} line(s)")
    return _respond(snapshot, message="Cart created")


@router.post("/{cart_id:path}/lines", response_model=CartResponse)
async def add_lines(
    cart_id: str,
    request: AddLinesRequest,
    gateway: CartGateway = Depends(get_cart_gateway),
):
    """Add one or more product variants to the cart"""
    lines = [
        CartLineInput(merchandise_id=line.merchandise_id, quantity=line.quantity)
        for line in request.lines
    ]
    try:
        snapshot = await gateway.add_lines(cart_id, lines)
    except StaleHandleError:
        raise _not_found()
    except DomainError as e:
        raise _rejected(e)

    return _respond(snapshot, message=f"Added {sum(l.quantity for l in lines)} item(s) to cart")


@router.put("/{cart_id:path}/lines", response_model=CartResponse)
async def update_lines(
    cart_id: str,
    request: UpdateLinesRequest,
    gateway: CartGateway = Depends(get_cart_gateway),
):
    """Update the quantity of existing line items"""
    lines = [CartLineUpdateInput(id=line.id, quantity=line.quantity) for line in request.lines]
    try:
        snapshot = await gateway.update_lines(cart_id, lines)
    except StaleHandleError:
        raise _not_found()
    except DomainError as e:
        raise _rejected(e)

    return _respond(snapshot, message="Cart updated")


@router.delete("/{cart_id:path}/lines/{line_id:path}", response_model=CartResponse)
async def remove_line(
    cart_id: str,
    line_id: str,
    gateway: CartGateway = Depends(get_cart_gateway),
):
    """Remove a line item from the cart"""
    try:
        snapshot = await gateway.remove_lines(cart_id, [line_id])
    except StaleHandleError:
        raise _not_found()
    except DomainError as e:
        raise _rejected(e)

    return _respond(snapshot, message="Item removed")


@router.get("/{cart_id:path}", response_model=CartResponse)
async def get_cart(
    cart_id: str,
    gateway: CartGateway = Depends(get_cart_gateway),
):
    """Get cart by ID"""
    snapshot = await gateway.get_cart(cart_id)
    if snapshot is None:
        raise _not_found()
    return _respond(snapshot)
