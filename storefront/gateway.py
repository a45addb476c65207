"""
Remote cart gateways

Each gateway exposes the same five cart operations and returns
CartSnapshot objects, whatever the wire format underneath:

- GraphQLCartGateway talks to the Storefront GraphQL API directly
- RestCartGateway talks to the REST proxy (storefront_api)
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Optional, Any
from urllib.parse import quote

import httpx

from .client import StorefrontClient
from .errors import (
    UserError,
    DomainError,
    StaleHandleError,
    TransportError,
    StorefrontError,
)
from .models import CartSnapshot, CartLineInput, CartLineUpdateInput
from .normalize import normalize_cart, parse_user_errors, cart_from_proxy
from . import queries

logger = logging.getLogger(__name__)

MISSING_CART = re.compile(r"(does not exist|not found)", re.IGNORECASE)


class CartGateway(ABC):
    """Remote cart operations"""

    @abstractmethod
    async def create_cart(self, lines: list[CartLineInput]) -> CartSnapshot:
        ...

    @abstractmethod
    async def add_lines(self, handle: str, lines: list[CartLineInput]) -> CartSnapshot:
        ...

    @abstractmethod
    async def update_lines(self, handle: str, lines: list[CartLineUpdateInput]) -> CartSnapshot:
        ...

    @abstractmethod
    async def remove_lines(self, handle: str, line_ids: list[str]) -> CartSnapshot:
        ...

    @abstractmethod
    async def get_cart(self, handle: str) -> Optional[CartSnapshot]:
        """Fetch a cart; None when the handle no longer resolves"""
        ...


def _is_missing_cart(errors: list[UserError]) -> bool:
    for error in errors:
        fields = error.field or []
        if "cartId" in fields and MISSING_CART.search(error.message):
            return True
    return False


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise TransportError(
            f"Proxy returned invalid JSON ({response.status_code})",
            status_code=response.status_code,
            body=response.text,
        ) from e


class GraphQLCartGateway(CartGateway):
    """Cart gateway over the Storefront GraphQL API"""

    def __init__(self, client: StorefrontClient, lines_limit: int = 100):
        self.client = client
        self.lines_limit = lines_limit

    async def _mutate(
        self,
        document: str,
        root: str,
        variables: dict[str, Any],
        handle: Optional[str] = None,
    ) -> CartSnapshot:
        variables = {**variables, "linesFirst": self.lines_limit}
        data = await self.client.execute(document, variables)
        payload = data.get(root) or {}

        user_errors = parse_user_errors(payload)
        if user_errors:
            if handle and _is_missing_cart(user_errors):
                raise StaleHandleError(handle)
            messages = ", ".join(e.message for e in user_errors)
            logger.warning(f"{root} rejected: {messages}")
            raise DomainError(f"{root} failed: {messages}", user_errors=user_errors)

        cart = payload.get("cart")
        if cart is None:
            if handle:
                raise StaleHandleError(handle)
            raise StorefrontError(f"{root} returned no cart")

        return normalize_cart(cart)

    async def create_cart(self, lines: list[CartLineInput]) -> CartSnapshot:
        return await self._mutate(
            queries.CART_CREATE,
            "cartCreate",
            {"input": {"lines": [line.to_graphql() for line in lines]}},
        )

    async def add_lines(self, handle: str, lines: list[CartLineInput]) -> CartSnapshot:
        return await self._mutate(
            queries.CART_LINES_ADD,
            "cartLinesAdd",
            {"cartId": handle, "lines": [line.to_graphql() for line in lines]},
            handle=handle,
        )

    async def update_lines(self, handle: str, lines: list[CartLineUpdateInput]) -> CartSnapshot:
        return await self._mutate(
            queries.CART_LINES_UPDATE,
            "cartLinesUpdate",
            {"cartId": handle, "lines": [line.to_graphql() for line in lines]},
            handle=handle,
        )

    async def remove_lines(self, handle: str, line_ids: list[str]) -> CartSnapshot:
        return await self._mutate(
            queries.CART_LINES_REMOVE,
            "cartLinesRemove",
            {"cartId": handle, "lineIds": list(line_ids)},
            handle=handle,
        )

    async def get_cart(self, handle: str) -> Optional[CartSnapshot]:
        data = await self.client.execute(
            queries.GET_CART,
            {"cartId": handle, "linesFirst": self.lines_limit},
        )
        cart = data.get("cart")
        if cart is None:
            return None
        return normalize_cart(cart)


class RestCartGateway(CartGateway):
    """Cart gateway over the REST proxy"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        handle: Optional[str] = None,
    ) -> Optional[dict]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers={"Accept": "application/json"},
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Proxy request failed: {method} {url} - {e}")
            raise TransportError(f"Proxy unreachable: {e}") from e

        if response.status_code == 404 and handle:
            return None

        if response.status_code == 400:
            payload = _json(response)
            detail = payload.get("detail") if isinstance(payload, dict) else payload
            if isinstance(detail, dict):
                user_errors = [
                    UserError(message=e.get("message", ""), field=e.get("field"), code=e.get("code"))
                    for e in detail.get("user_errors") or []
                ]
                raise DomainError(detail.get("message", "Cart mutation rejected"), user_errors=user_errors)
            raise DomainError(str(detail))

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise TransportError(
                f"Proxy error ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )

        return _json(response)

    async def _cart(self, method: str, path: str, body: Optional[dict] = None, handle: Optional[str] = None) -> CartSnapshot:
        data = await self._request(method, path, body=body, handle=handle)
        if data is None:
            raise StaleHandleError(handle)
        return cart_from_proxy(data.get("cart") if isinstance(data, dict) else None)

    async def create_cart(self, lines: list[CartLineInput]) -> CartSnapshot:
        body = {"lines": [{"merchandise_id": l.merchandise_id, "quantity": l.quantity} for l in lines]}
        return await self._cart("POST", "/api/cart", body=body)

    async def add_lines(self, handle: str, lines: list[CartLineInput]) -> CartSnapshot:
        body = {"lines": [{"merchandise_id": l.merchandise_id, "quantity": l.quantity} for l in lines]}
        return await self._cart("POST", f"/api/cart/{quote(handle, safe='')}/lines", body=body, handle=handle)

    async def update_lines(self, handle: str, lines: list[CartLineUpdateInput]) -> CartSnapshot:
        body = {"lines": [{"id": l.id, "quantity": l.quantity} for l in lines]}
        return await self._cart("PUT", f"/api/cart/{quote(handle, safe='')}/lines", body=body, handle=handle)

    async def remove_lines(self, handle: str, line_ids: list[str]) -> CartSnapshot:
        snapshot = None
        for line_id in line_ids:
            snapshot = await self._cart("DELETE", f"/api/cart/{quote(handle, safe='')}/lines/{quote(line_id, safe='')}", handle=handle)
        if snapshot is None:
            raise DomainError("No line ids given")
        return snapshot

    async def get_cart(self, handle: str) -> Optional[CartSnapshot]:
        data = await self._request("GET", f"/api/cart/{quote(handle, safe='')}", handle=handle)
        if data is None:
            return None
        return cart_from_proxy(data.get("cart") if isinstance(data, dict) else None)
