"""
Storefront API Client

Async GraphQL client for the Shopify Storefront API.

Authentication modes:
- Tokenless: cart, products, collections, search (1,000 complexity limit)
- Token: X-Shopify-Storefront-Access-Token header, full API access
"""

import re
import json
import logging
from typing import Optional, Any

import httpx

from .config import Settings
from .errors import (
    ConfigurationError,
    TransportError,
    GraphQLError,
    ChannelLockedError,
)

logger = logging.getLogger(__name__)

CHANNEL_LOCKED = re.compile(r"channel is locked", re.IGNORECASE)


class StorefrontClient:
    """
    Client for the Storefront GraphQL endpoint.

    Usage:
        client = StorefrontClient.from_settings(settings)
        data = await client.execute(query, {"first": 10})
        await client.close()
    """

    def __init__(
        self,
        endpoint: str,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the storefront client.

        Args:
            endpoint: Full GraphQL endpoint URL
            access_token: Storefront access token, None for tokenless access
            timeout: Request timeout in seconds
            http_client: Preconfigured httpx client (tests inject a mock transport)
        """
        self.endpoint = endpoint
        self._access_token = access_token
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

        if access_token:
            logger.info("Storefront client using token authentication")
        else:
            logger.info("Storefront client using tokenless access")

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorefrontClient":
        """Create client from application settings"""
        if not settings.storefront_endpoint:
            raise ConfigurationError(
                "Missing SHOPIFY_STORE_URL. Add it to config/.env. "
                "See config/.env.example for reference."
            )
        return cls(
            endpoint=settings.storefront_endpoint,
            access_token=settings.shopify_storefront_access_token,
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._access_token:
            headers["X-Shopify-Storefront-Access-Token"] = self._access_token
        return headers

    def _channel_locked(self) -> ChannelLockedError:
        if self._access_token:
            hint = "Ensure the sales channel associated with your Storefront Access Token is active."
        else:
            hint = (
                "Either unlock the Online Store channel in Shopify Admin -> Settings -> Sales channels, "
                "or create a Storefront Access Token (Settings -> Apps -> Develop apps) and add it "
                "to config/.env as SHOPIFY_STOREFRONT_ACCESS_TOKEN."
            )
        return ChannelLockedError(f"Shopify sales channel is locked. {hint}")

    async def execute(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Operation variables

        Returns:
            The response's "data" object
        """
        try:
            response = await self._http_client.post(
                self.endpoint,
                headers=self._headers(),
                json={"query": query, "variables": variables or {}},
            )
        except httpx.HTTPError as e:
            logger.error(f"Storefront request failed: {e}")
            raise TransportError(f"Storefront API unreachable: {e}") from e

        if response.status_code >= 400:
            body = response.text
            if CHANNEL_LOCKED.search(body):
                raise self._channel_locked()
            logger.error(f"Storefront API error: {response.status_code} - {body}")
            raise TransportError(
                f"Storefront API error ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(
                "Storefront API returned invalid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e

        errors = result.get("errors")
        if errors:
            if any(CHANNEL_LOCKED.search(str(e.get("message", ""))) for e in errors):
                raise self._channel_locked()
            raise GraphQLError(
                f"Storefront GraphQL errors: {json.dumps(errors, indent=2)}",
                errors=errors,
            )

        return result.get("data") or {}
