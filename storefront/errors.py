"""Storefront error types"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class UserError:
    """Validation error reported by the commerce platform on a mutation"""
    message: str
    field: Optional[list[str]] = None
    code: Optional[str] = None

    def to_dict(self) -> dict:
        return {"message": self.message, "field": self.field, "code": self.code}


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class ConfigurationError(StorefrontError):
    """Missing or invalid storefront configuration"""
    pass


class TransportError(StorefrontError):
    """Network failure or non-2xx response from the remote API"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GraphQLError(StorefrontError):
    """Top-level GraphQL errors returned with a 200 response"""

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class ChannelLockedError(StorefrontError):
    """The store's sales channel rejects Storefront API access"""
    pass


class DomainError(StorefrontError):
    """The platform rejected a cart mutation (e.g. unavailable variant)"""

    def __init__(self, message: str, user_errors: Optional[list[UserError]] = None):
        super().__init__(message)
        self.user_errors = user_errors or []


class StaleHandleError(StorefrontError):
    """The remote no longer recognizes a cart identifier"""

    def __init__(self, handle: str):
        super().__init__(f"Cart not found: {handle}")
        self.handle = handle
