"""
Tests for the remote cart gateways
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from storefront import queries
from storefront.errors import DomainError, StaleHandleError, StorefrontError, TransportError
from storefront.gateway import GraphQLCartGateway, RestCartGateway
from storefront.models import CartLineInput, CartLineUpdateInput
from storefront_api.dependencies import get_cart_gateway
from storefront_api.main import app as api_app

CART_ID = "gid://shopify/Cart/c1?key=secret"


@pytest.fixture
def client():
    """Storefront client returning canned data"""
    return AsyncMock()


@pytest.fixture
def graphql_gateway(client):
    return GraphQLCartGateway(client, lines_limit=50)


class TestGraphQLCartGateway:
    """Tests for GraphQLCartGateway"""

    @pytest.mark.asyncio
    async def test_create_cart(self, graphql_gateway, client, shopify_cart):
        """Test cartCreate is sent with the lines and line limit."""
        client.execute.return_value = {"cartCreate": {"cart": shopify_cart, "userErrors": []}}

        snapshot = await graphql_gateway.create_cart([CartLineInput("gid://shopify/ProductVariant/11", 2)])

        client.execute.assert_awaited_once_with(
            queries.CART_CREATE,
            {
                "input": {"lines": [{"merchandiseId": "gid://shopify/ProductVariant/11", "quantity": 2}]},
                "linesFirst": 50,
            },
        )
        assert snapshot.id == CART_ID
        assert len(snapshot.lines) == 2

    @pytest.mark.asyncio
    async def test_add_lines(self, graphql_gateway, client, shopify_cart):
        """Test cartLinesAdd carries the cart id."""
        client.execute.return_value = {"cartLinesAdd": {"cart": shopify_cart, "userErrors": []}}

        await graphql_gateway.add_lines(CART_ID, [CartLineInput("gid://shopify/ProductVariant/22")])

        document, variables = client.execute.await_args.args
        assert document == queries.CART_LINES_ADD
        assert variables["cartId"] == CART_ID
        assert variables["lines"] == [{"merchandiseId": "gid://shopify/ProductVariant/22", "quantity": 1}]

    @pytest.mark.asyncio
    async def test_update_lines(self, graphql_gateway, client, shopify_cart):
        """Test cartLinesUpdate sends line ids and quantities."""
        client.execute.return_value = {"cartLinesUpdate": {"cart": shopify_cart, "userErrors": []}}

        await graphql_gateway.update_lines(CART_ID, [CartLineUpdateInput("gid://shopify/CartLine/1", 5)])

        document, variables = client.execute.await_args.args
        assert document == queries.CART_LINES_UPDATE
        assert variables["lines"] == [{"id": "gid://shopify/CartLine/1", "quantity": 5}]

    @pytest.mark.asyncio
    async def test_remove_lines(self, graphql_gateway, client, shopify_cart):
        """Test cartLinesRemove sends line ids."""
        client.execute.return_value = {"cartLinesRemove": {"cart": shopify_cart, "userErrors": []}}

        await graphql_gateway.remove_lines(CART_ID, ["gid://shopify/CartLine/2"])

        document, variables = client.execute.await_args.args
        assert document == queries.CART_LINES_REMOVE
        assert variables["lineIds"] == ["gid://shopify/CartLine/2"]

    @pytest.mark.asyncio
    async def test_user_errors_raise_domain_error(self, graphql_gateway, client):
        """Test userErrors on a mutation become a DomainError."""
        client.execute.return_value = {"cartLinesAdd": {
            "cart": None,
            "userErrors": [{"field": ["lines", "0", "merchandiseId"], "message": "The merchandise is out of stock", "code": "INVALID"}],
        }}

        with pytest.raises(DomainError) as exc_info:
            await graphql_gateway.add_lines(CART_ID, [CartLineInput("gid://shopify/ProductVariant/11")])

        assert exc_info.value.user_errors[0].message == "The merchandise is out of stock"

    @pytest.mark.asyncio
    async def test_missing_cart_user_error_is_stale(self, graphql_gateway, client):
        """Test a cartId 'does not exist' error marks the handle stale."""
        client.execute.return_value = {"cartLinesAdd": {
            "cart": None,
            "userErrors": [{"field": ["cartId"], "message": "The specified cart does not exist.", "code": "INVALID"}],
        }}

        with pytest.raises(StaleHandleError) as exc_info:
            await graphql_gateway.add_lines(CART_ID, [CartLineInput("gid://shopify/ProductVariant/11")])

        assert exc_info.value.handle == CART_ID

    @pytest.mark.asyncio
    async def test_null_cart_is_stale(self, graphql_gateway, client):
        """Test a null cart without errors marks the handle stale."""
        client.execute.return_value = {"cartLinesUpdate": {"cart": None, "userErrors": []}}

        with pytest.raises(StaleHandleError):
            await graphql_gateway.update_lines(CART_ID, [CartLineUpdateInput("gid://shopify/CartLine/1", 1)])

    @pytest.mark.asyncio
    async def test_create_without_cart(self, graphql_gateway, client):
        """Test a create that returns no cart is an error."""
        client.execute.return_value = {"cartCreate": None}

        with pytest.raises(StorefrontError):
            await graphql_gateway.create_cart([CartLineInput("gid://shopify/ProductVariant/11")])

    @pytest.mark.asyncio
    async def test_get_cart(self, graphql_gateway, client, shopify_cart):
        """Test fetching an existing cart."""
        client.execute.return_value = {"cart": shopify_cart}

        snapshot = await graphql_gateway.get_cart(CART_ID)

        client.execute.assert_awaited_once_with(queries.GET_CART, {"cartId": CART_ID, "linesFirst": 50})
        assert snapshot.total_quantity == 3

    @pytest.mark.asyncio
    async def test_get_missing_cart(self, graphql_gateway, client):
        """Test an unknown cart id returns None."""
        client.execute.return_value = {"cart": None}

        assert await graphql_gateway.get_cart(CART_ID) is None

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, graphql_gateway, client):
        """Test client failures reach the caller unchanged."""
        client.execute.side_effect = TransportError("Storefront API unreachable")

        with pytest.raises(TransportError):
            await graphql_gateway.get_cart(CART_ID)


class TestRestCartGateway:
    """Tests for RestCartGateway against a mock transport"""

    @pytest.mark.asyncio
    async def test_quotes_ids_in_path(self):
        """Test GID handles are percent-encoded into one path segment."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.raw_path.decode()
            return httpx.Response(404, json={"detail": "Cart not found"})

        gateway = RestCartGateway(
            "http://proxy.test/",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        assert await gateway.get_cart(CART_ID) is None
        assert seen["path"] == "/api/cart/gid%3A%2F%2Fshopify%2FCart%2Fc1%3Fkey%3Dsecret"

    @pytest.mark.asyncio
    async def test_not_found_on_mutation_is_stale(self):
        """Test a 404 on a mutation raises StaleHandleError."""
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(404, json={"detail": "Cart not found"})
            )),
        )

        with pytest.raises(StaleHandleError):
            await gateway.add_lines(CART_ID, [CartLineInput("V1")])

    @pytest.mark.asyncio
    async def test_rejection_carries_user_errors(self):
        """Test a 400 body becomes a DomainError with user errors."""
        body = {"detail": {
            "message": "cartLinesAdd failed: Out of stock",
            "user_errors": [{"message": "Out of stock", "field": ["lines"], "code": "INVALID"}],
        }}
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(400, json=body)
            )),
        )

        with pytest.raises(DomainError) as exc_info:
            await gateway.add_lines(CART_ID, [CartLineInput("V1")])

        assert exc_info.value.user_errors[0].code == "INVALID"

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Test a 502 from the proxy is a transport failure."""
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(502, json={"detail": "upstream"})
            )),
        )

        with pytest.raises(TransportError) as exc_info:
            await gateway.create_cart([CartLineInput("V1")])

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_unreachable_proxy(self):
        """Test connection errors raise TransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        gateway = RestCartGateway("http://proxy.test", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(TransportError):
            await gateway.get_cart(CART_ID)

    @pytest.mark.asyncio
    async def test_update_body(self):
        """Test update sends snake_case lines with PUT."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(404, json={"detail": "Cart not found"})

        gateway = RestCartGateway("http://proxy.test", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(StaleHandleError):
            await gateway.update_lines(CART_ID, [CartLineUpdateInput("gid://shopify/CartLine/1", 3)])

        assert seen == {"method": "PUT", "body": {"lines": [{"id": "gid://shopify/CartLine/1", "quantity": 3}]}}

    @pytest.mark.asyncio
    async def test_non_json_rejection_is_transport_error(self):
        """Test a 400 with an HTML body is a transport failure, not a crash."""
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(400, text="<html>Bad Request</html>")
            )),
        )

        with pytest.raises(TransportError) as exc_info:
            await gateway.add_lines(CART_ID, [CartLineInput("V1")])

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_json_success_is_transport_error(self):
        """Test a 200 with a non-JSON body is a transport failure."""
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(200, text="maintenance")
            )),
        )

        with pytest.raises(TransportError):
            await gateway.get_cart(CART_ID)

    @pytest.mark.asyncio
    async def test_body_without_cart(self):
        """Test a JSON body missing the cart is a storefront error."""
        gateway = RestCartGateway(
            "http://proxy.test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"detail": "ok"})
            )),
        )

        with pytest.raises(StorefrontError):
            await gateway.create_cart([CartLineInput("V1")])


class TestRestCartGatewayThroughProxy:
    """Tests for RestCartGateway against the REST proxy app"""

    @pytest.fixture
    def rest_gateway(self, gateway):
        api_app.dependency_overrides[get_cart_gateway] = lambda: gateway
        transport = httpx.ASGITransport(app=api_app)
        yield RestCartGateway("http://proxy.test", http_client=httpx.AsyncClient(transport=transport))
        api_app.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_cart_lifecycle(self, rest_gateway):
        """Test create, add, update, remove and get through the proxy."""
        created = await rest_gateway.create_cart([CartLineInput("V1")])
        assert created.id.startswith("gid://shopify/Cart/")

        added = await rest_gateway.add_lines(created.id, [CartLineInput("V1"), CartLineInput("V2")])
        assert [(l.merchandise_id, l.quantity) for l in added.lines] == [("V1", 2), ("V2", 1)]

        line_id = added.lines[0].line_id
        updated = await rest_gateway.update_lines(created.id, [CartLineUpdateInput(line_id, 4)])
        assert updated.lines[0].quantity == 4

        removed = await rest_gateway.remove_lines(created.id, [line_id])
        assert [l.merchandise_id for l in removed.lines] == ["V2"]

        fetched = await rest_gateway.get_cart(created.id)
        assert fetched.lines == removed.lines
        assert fetched.checkout_url == created.checkout_url

    @pytest.mark.asyncio
    async def test_unknown_cart(self, rest_gateway):
        """Test an unknown handle is reported as stale or missing."""
        assert await rest_gateway.get_cart("gid://shopify/Cart/nope") is None
        with pytest.raises(StaleHandleError):
            await rest_gateway.add_lines("gid://shopify/Cart/nope", [CartLineInput("V1")])

    @pytest.mark.asyncio
    async def test_rejected_variant(self, rest_gateway):
        """Test a rejected variant surfaces as DomainError."""
        created = await rest_gateway.create_cart([CartLineInput("V1")])

        with pytest.raises(DomainError) as exc_info:
            await rest_gateway.add_lines(created.id, [CartLineInput("UNKNOWN")])

        assert exc_info.value.user_errors[0].message == "The merchandise does not exist"
