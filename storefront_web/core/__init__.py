# Core modules

from .session import SessionManager, ShopSession

__all__ = ["SessionManager", "ShopSession"]
