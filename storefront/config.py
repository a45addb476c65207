"""Storefront Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 3000

    # REST proxy
    api_host: str = "0.0.0.0"
    api_port: int = 3001

    # Shopify Storefront API
    shopify_store_url: Optional[str] = None  # e.g. my-store.myshopify.com
    shopify_storefront_access_token: Optional[str] = None  # omit for tokenless access
    shopify_api_version: str = "2026-01"
    request_timeout: float = 30.0

    # Cart
    cart_lines_limit: int = 100
    cart_storage_key: str = "storefront_cart"
    handle_store_dir: str = ".carts"
    default_currency: str = "USD"
    session_max_age_hours: int = 24
    session_cleanup_interval_seconds: int = 300

    # Catalog
    products_page_size: int = 20

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def store_domain(self) -> Optional[str]:
        """Store domain without scheme or trailing slash"""
        if not self.shopify_store_url:
            return None
        domain = self.shopify_store_url.strip()
        for scheme in ("https://", "http://"):
            if domain.startswith(scheme):
                domain = domain[len(scheme):]
        return domain.rstrip("/")

    @property
    def storefront_endpoint(self) -> Optional[str]:
        """GraphQL endpoint for the configured store and API version"""
        if not self.store_domain:
            return None
        return f"https://{self.store_domain}/api/{self.shopify_api_version}/graphql.json"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
