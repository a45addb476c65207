"""Session management for storefront visitors"""

import uuid
import logging
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass

from storefront.gateway import CartGateway
from storefront.handle_store import FileHandleStore
from storefront.sync import CartSynchronizer, SyncStatus

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ShopSession:
    """One visitor's session and its cart"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    cart: CartSynchronizer

    def touch(self) -> None:
        self.updated_at = _now()


class SessionManager:
    """
    Manages visitor sessions.

    Each session gets its own synchronizer whose cart handle is kept in
    a file named after the session, so a returning visitor's cart is
    restored after a restart.
    """

    def __init__(
        self,
        gateway: CartGateway,
        store_dir: str,
        storage_key: str = "storefront_cart",
        default_currency: str = "USD",
        max_age_hours: int = 24,
        cleanup_interval_seconds: float = 300.0,
    ):
        self.gateway = gateway
        self.store_dir = store_dir
        self.storage_key = storage_key
        self.default_currency = default_currency
        self.max_age_hours = max_age_hours
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self.sessions: dict[str, ShopSession] = {}
        self._last_cleanup = _now()

    def _store_for(self, session_id: str) -> FileHandleStore:
        return FileHandleStore(self.store_dir, key=f"{self.storage_key}-{session_id}")

    def create_session(self, session_id: Optional[str] = None) -> ShopSession:
        """Create a session, restoring any cart stored under its id"""
        session_id = session_id or str(uuid.uuid4())
        now = _now()
        session = ShopSession(
            session_id=session_id,
            created_at=now,
            updated_at=now,
            cart=CartSynchronizer(
                gateway=self.gateway,
                store=self._store_for(session_id),
                default_currency=self.default_currency,
            ),
        )
        self.sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[ShopSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def get_or_create_session(self, session_id: Optional[str] = None) -> ShopSession:
        """Get existing session or create one; unknown valid ids are resumed"""
        if session_id and session_id in self.sessions:
            session = self.sessions[session_id]
            session.touch()
            return session

        self._maybe_cleanup()

        if session_id and _is_valid_id(session_id):
            logger.debug(f"Resuming session {session_id}")
            return self.create_session(session_id)

        return self.create_session()

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its stored cart handle"""
        session = self.sessions.pop(session_id, None)
        if session is None:
            return False
        session.cart.store.clear()
        return True

    def cleanup_old_sessions(self, max_age_hours: Optional[int] = None) -> int:
        """Drop idle sessions from memory; their stored handles are kept"""
        if max_age_hours is None:
            max_age_hours = self.max_age_hours
        now = _now()
        self._last_cleanup = now
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
            and session.cart.status == SyncStatus.IDLE
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        if old_sessions:
            logger.info(f"Dropped {len(old_sessions)} idle session(s)")
        return len(old_sessions)

    def _maybe_cleanup(self) -> None:
        elapsed = (_now() - self._last_cleanup).total_seconds()
        if elapsed >= self.cleanup_interval_seconds:
            self.cleanup_old_sessions()


def _is_valid_id(session_id: str) -> bool:
    try:
        return str(uuid.UUID(session_id)) == session_id
    except ValueError:
        return False
