"""Service instances for the web storefront (overridden in tests)"""

from typing import Optional
from fastapi import Depends, Request, Response

from storefront.catalog import ProductCatalog
from storefront.client import StorefrontClient
from storefront.config import settings
from storefront.gateway import GraphQLCartGateway

from .core.session import SessionManager, ShopSession

SESSION_COOKIE = "session_id"

storefront_client: Optional[StorefrontClient] = None
session_manager: Optional[SessionManager] = None


def get_storefront_client() -> StorefrontClient:
    """Get or create the Storefront API client"""
    global storefront_client
    if storefront_client is None:
        storefront_client = StorefrontClient.from_settings(settings)
    return storefront_client


def get_catalog(
    client: StorefrontClient = Depends(get_storefront_client),
) -> ProductCatalog:
    return ProductCatalog(client)


def get_session_manager() -> SessionManager:
    """Get or create the session manager"""
    global session_manager
    if session_manager is None:
        session_manager = SessionManager(
            gateway=GraphQLCartGateway(
                get_storefront_client(),
                lines_limit=settings.cart_lines_limit,
            ),
            store_dir=settings.handle_store_dir,
            storage_key=settings.cart_storage_key,
            default_currency=settings.default_currency,
            max_age_hours=settings.session_max_age_hours,
            cleanup_interval_seconds=settings.session_cleanup_interval_seconds,
        )
    return session_manager


def issue_session_cookie(response: Response, session: ShopSession) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        session.session_id,
        max_age=settings.session_max_age_hours * 3600,
        httponly=True,
        samesite="lax",
    )


def get_shop_session(
    request: Request,
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> ShopSession:
    """Resolve the visitor's session from its cookie, issuing one if needed"""
    session = manager.get_or_create_session(request.cookies.get(SESSION_COOKIE))
    issue_session_cookie(response, session)
    return session
