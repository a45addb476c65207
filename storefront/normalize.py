"""
Response normalization

Flattens the Storefront API's nested connection shapes
(edges -> node) into the dataclasses in models.py.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Any

from .errors import UserError, StorefrontError
from .models import (
    Money,
    LineItem,
    CartSnapshot,
    Product,
    ProductImage,
    ProductVariant,
    ProductOption,
)


def _nodes(connection: Optional[dict]) -> list[dict]:
    """Unwrap a GraphQL connection into its nodes"""
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or [] if edge.get("node")]


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise StorefrontError(f"Invalid amount in response: {value!r}") from e


def parse_money(node: Optional[dict]) -> Optional[Money]:
    """Parse a MoneyV2 object"""
    if not node:
        return None
    return Money(amount=_decimal(node["amount"]), currency_code=node["currencyCode"])


def parse_user_errors(payload: Optional[dict]) -> list[UserError]:
    if not payload:
        return []
    return [
        UserError(
            message=e.get("message", ""),
            field=e.get("field"),
            code=e.get("code"),
        )
        for e in payload.get("userErrors") or []
    ]


def normalize_line(node: dict) -> LineItem:
    """Flatten one CartLine node"""
    variant = node.get("merchandise") or {}
    product = variant.get("product") or {}
    images = _nodes(product.get("images"))
    image = images[0] if images else None
    price = parse_money(variant.get("price") or variant.get("priceV2"))
    if price is None:
        raise StorefrontError(f"Cart line {node.get('id')} has no price")

    return LineItem(
        line_id=node["id"],
        merchandise_id=variant.get("id", ""),
        quantity=int(node["quantity"]),
        unit_price=price.amount,
        currency_code=price.currency_code,
        product_title=product.get("title", ""),
        product_handle=product.get("handle", ""),
        variant_title=variant.get("title", ""),
        image_url=image.get("url") if image else None,
        image_alt=(image.get("altText") if image else None) or product.get("title", ""),
    )


def normalize_cart(cart: dict) -> CartSnapshot:
    """
    Transform a Storefront API cart into a CartSnapshot.

    Line order is preserved as returned by the platform.
    """
    try:
        lines = [normalize_line(node) for node in _nodes(cart.get("lines"))]
        cost = cart.get("cost") or {}
        return CartSnapshot(
            id=cart["id"],
            checkout_url=cart.get("checkoutUrl"),
            lines=lines,
            total_quantity=cart.get("totalQuantity", sum(line.quantity for line in lines)),
            subtotal=parse_money(cost.get("subtotalAmount")),
            total=parse_money(cost.get("totalAmount")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StorefrontError(f"Unexpected cart shape: {e}") from e


def normalize_product(node: dict) -> Product:
    """Transform a Storefront API product node into a Product"""
    price_range = node.get("priceRange") or {}
    return Product(
        id=node["id"],
        title=node.get("title", ""),
        handle=node.get("handle", ""),
        description=node.get("description") or "",
        description_html=node.get("descriptionHtml"),
        min_price=parse_money(price_range.get("minVariantPrice")),
        max_price=parse_money(price_range.get("maxVariantPrice")),
        images=[
            ProductImage(
                url=image["url"],
                alt_text=image.get("altText"),
                width=image.get("width"),
                height=image.get("height"),
            )
            for image in _nodes(node.get("images"))
        ],
        variants=[
            ProductVariant(
                id=variant["id"],
                title=variant.get("title", ""),
                price=parse_money(variant.get("price") or variant.get("priceV2")),
                available_for_sale=variant.get("availableForSale", True),
                selected_options=variant.get("selectedOptions") or [],
            )
            for variant in _nodes(node.get("variants"))
        ],
        options=[
            ProductOption(id=option["id"], name=option["name"], values=option.get("values") or [])
            for option in node.get("options") or []
        ],
    )


# ==================== REST proxy shape ====================


def _proxy_money(node: Optional[dict]) -> Optional[Money]:
    if not node:
        return None
    return Money(amount=_decimal(node["amount"]), currency_code=node["currency_code"])


def cart_from_proxy(cart: dict) -> CartSnapshot:
    """Parse the REST proxy's cart JSON back into a CartSnapshot"""
    try:
        lines = []
        for line in cart.get("lines") or []:
            merchandise = line["merchandise"]
            price = _proxy_money(merchandise["price"])
            image = merchandise.get("image") or {}
            lines.append(LineItem(
                line_id=line["id"],
                merchandise_id=merchandise["id"],
                quantity=int(line["quantity"]),
                unit_price=price.amount,
                currency_code=price.currency_code,
                product_title=merchandise.get("product_title") or "",
                product_handle=merchandise.get("product_handle") or "",
                variant_title=merchandise.get("title") or "",
                image_url=image.get("url"),
                image_alt=image.get("alt_text") or merchandise.get("product_title") or "",
            ))
        return CartSnapshot(
            id=cart["id"],
            checkout_url=cart.get("checkout_url"),
            lines=lines,
            total_quantity=cart.get("total_quantity", 0),
            subtotal=_proxy_money(cart.get("subtotal")),
            total=_proxy_money(cart.get("total")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise StorefrontError(f"Unexpected proxy cart shape: {e}") from e
