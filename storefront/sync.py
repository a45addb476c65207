"""
Cart Synchronizer

Keeps one local cart view consistent with a remote cart resource:

1. Restores the cart handle from durable storage without a network call
2. Creates the remote cart on first add, then reuses its handle
3. Serializes add/update/remove so results merge in call order
4. Replaces the local lines wholesale with every remote response
5. Forgets the handle when the cart empties or the remote no longer knows it

Every operation resolves to a CartResult; nothing raises to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Callable, Awaitable, Union

from .errors import (
    UserError,
    StorefrontError,
    TransportError,
    ChannelLockedError,
    DomainError,
    StaleHandleError,
)
from .gateway import CartGateway
from .handle_store import HandleStore
from .models import (
    CartView,
    CartSnapshot,
    CartLineInput,
    CartLineUpdateInput,
    LineDisplay,
    LineItem,
)

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    """Synchronizer state"""
    IDLE = "idle"
    PENDING = "pending"


class SyncEvent(str, Enum):
    ENQUEUE = "enqueue"    # an operation was issued
    COMPLETE = "complete"  # an operation resolved, others still queued
    DRAIN = "drain"        # the last queued operation resolved


TRANSITIONS: dict[tuple[SyncStatus, SyncEvent], SyncStatus] = {
    (SyncStatus.IDLE, SyncEvent.ENQUEUE): SyncStatus.PENDING,
    (SyncStatus.PENDING, SyncEvent.ENQUEUE): SyncStatus.PENDING,
    (SyncStatus.PENDING, SyncEvent.COMPLETE): SyncStatus.PENDING,
    (SyncStatus.PENDING, SyncEvent.DRAIN): SyncStatus.IDLE,
}


class ErrorKind(str, Enum):
    """Error categories surfaced to the presentation layer"""
    VALIDATION = "validation"
    CREATE_FAILED = "create_failed"
    MUTATION_FAILED = "mutation_failed"
    FETCH_FAILED = "fetch_failed"
    TRANSPORT = "transport"
    NOT_FOUND = "not_found"


@dataclass
class ErrorInfo:
    kind: ErrorKind
    message: str
    user_errors: list[UserError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "user_errors": [e.to_dict() for e in self.user_errors],
        }


@dataclass
class CartResult:
    """Outcome of a synchronizer operation"""
    ok: bool
    view: CartView
    error: Optional[ErrorInfo] = None


Listener = Callable[["CartSynchronizer"], None]


class CartSynchronizer:
    """
    Owns the local cart state for one session.

    Mutations are queued: a call issued while another is pending waits for
    it to resolve and merge before it reads the handle. This keeps a second
    add from creating a second cart and stops an older response from being
    merged over a newer one.
    """

    def __init__(
        self,
        gateway: CartGateway,
        store: HandleStore,
        default_currency: str = "USD",
    ):
        self.gateway = gateway
        self.store = store
        self.default_currency = default_currency
        self.status = SyncStatus.IDLE
        self.last_error: Optional[ErrorInfo] = None
        self.needs_refresh = False

        self._view = CartView(default_currency=default_currency)
        self._lock = asyncio.Lock()
        self._queued = 0
        self._optimistic: list[LineItem] = []
        self._listeners: list[Listener] = []

        self.restore()

    # ==================== State ====================

    @property
    def view(self) -> CartView:
        return self._view

    @property
    def handle(self) -> Optional[str]:
        return self._view.handle

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self._view.items

    @property
    def item_count(self) -> int:
        return self._view.item_count

    @property
    def subtotal(self) -> Decimal:
        return self._view.subtotal

    @property
    def currency_code(self) -> str:
        return self._view.currency_code

    @property
    def checkout_url(self) -> Optional[str]:
        return self._view.checkout_url

    @property
    def pending_items(self) -> tuple[LineItem, ...]:
        """Authoritative lines followed by placeholders for adds in flight"""
        return self._view.items + tuple(self._optimistic)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change callback; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Cart listener failed")

    def _transition(self, event: SyncEvent) -> None:
        key = (self.status, event)
        if key not in TRANSITIONS:
            raise RuntimeError(f"Invalid cart transition: {self.status.value} on {event.value}")
        new_status = TRANSITIONS[key]
        if new_status != self.status:
            logger.debug(f"Cart status {self.status.value} -> {new_status.value}")
        self.status = new_status

    # ==================== Lifecycle ====================

    def restore(self) -> CartView:
        """
        Adopt a stored handle as an empty placeholder view.

        Does not touch the network; call refresh() to load the lines.
        """
        handle = self.store.load()
        if handle:
            logger.info(f"Restored cart handle {handle}")
            self._view = CartView(handle=handle, default_currency=self.default_currency)
            self.needs_refresh = True
        return self._view

    async def refresh(self) -> CartResult:
        """Fetch the remote cart for the current handle and merge it"""
        return await self._run(self._refresh)

    async def clear(self) -> CartResult:
        """Forget the cart locally; the platform expires abandoned carts itself"""

        async def operation() -> CartResult:
            self._forget()
            self.last_error = None
            return CartResult(ok=True, view=self._view)

        return await self._run(operation)

    # ==================== Mutations ====================

    async def add_item(
        self,
        merchandise_id: str,
        quantity: int = 1,
        unit_price: Union[Decimal, str, None] = None,
        currency_code: Optional[str] = None,
        display: Optional[LineDisplay] = None,
    ) -> CartResult:
        """
        Add a variant to the cart, creating the remote cart on first use.

        unit_price, currency_code and display only feed the optimistic
        placeholder shown while the call is pending.
        """
        if not isinstance(merchandise_id, str) or not merchandise_id:
            return self._reject("merchandise_id is required")
        if not _is_int(quantity) or quantity < 1:
            return self._reject(f"quantity must be a positive integer, got {quantity!r}")

        placeholder = None
        if unit_price is not None and currency_code:
            try:
                price = Decimal(str(unit_price))
            except InvalidOperation:
                return self._reject(f"Invalid unit price: {unit_price!r}")
            if not price.is_finite() or price < 0:
                return self._reject(f"Invalid unit price: {unit_price!r}")
            display = display or LineDisplay()
            placeholder = LineItem(
                line_id=None,
                merchandise_id=merchandise_id,
                quantity=quantity,
                unit_price=price,
                currency_code=currency_code,
                product_title=display.product_title,
                product_handle=display.product_handle,
                variant_title=display.variant_title,
                image_url=display.image_url,
                image_alt=display.image_alt,
            )

        line = CartLineInput(merchandise_id=merchandise_id, quantity=quantity)
        return await self._run(lambda: self._add(line), placeholder=placeholder)

    async def update_quantity(self, line_id: str, quantity: int) -> CartResult:
        """Set a line's quantity; zero or less removes the line"""
        if not isinstance(line_id, str) or not line_id:
            return self._reject("line_id is required")
        if not _is_int(quantity):
            return self._reject(f"quantity must be an integer, got {quantity!r}")
        return await self._run(lambda: self._update(line_id, quantity))

    async def remove_item(self, line_id: str) -> CartResult:
        """Remove a line from the cart"""
        if not isinstance(line_id, str) or not line_id:
            return self._reject("line_id is required")
        return await self._run(lambda: self._remove(line_id))

    # ==================== Internals ====================

    async def _run(
        self,
        operation: Callable[[], Awaitable[CartResult]],
        placeholder: Optional[LineItem] = None,
    ) -> CartResult:
        self._queued += 1
        if placeholder is not None:
            self._optimistic.append(placeholder)
        self._transition(SyncEvent.ENQUEUE)
        self._notify()

        try:
            async with self._lock:
                try:
                    return await operation()
                except Exception as e:
                    logger.error(f"Cart operation failed unexpectedly: {e}", exc_info=True)
                    return self._fail(e, ErrorKind.MUTATION_FAILED)
        finally:
            self._queued -= 1
            if placeholder is not None:
                self._optimistic.remove(placeholder)
            self._transition(SyncEvent.DRAIN if self._queued == 0 else SyncEvent.COMPLETE)
            self._notify()

    async def _add(self, line: CartLineInput) -> CartResult:
        handle = self._view.handle
        if handle is None:
            return await self._create(line)

        try:
            snapshot = await self.gateway.add_lines(handle, [line])
        except StaleHandleError:
            logger.info(f"Cart {handle} no longer exists, starting a new cart")
            self._forget()
            return await self._create(line)
        except StorefrontError as e:
            return self._fail(e, ErrorKind.MUTATION_FAILED)

        return self._apply(snapshot)

    async def _create(self, line: CartLineInput) -> CartResult:
        try:
            snapshot = await self.gateway.create_cart([line])
        except StorefrontError as e:
            return self._fail(e, ErrorKind.CREATE_FAILED)

        try:
            self.store.save(snapshot.id)
        except OSError as e:
            logger.error(f"Could not persist cart handle {snapshot.id}: {e}")
        logger.info(f"Created cart {snapshot.id}")
        return self._apply(snapshot)

    async def _update(self, line_id: str, quantity: int) -> CartResult:
        handle = self._view.handle
        if handle is None:
            return CartResult(ok=True, view=self._view)
        if quantity <= 0:
            return await self._remove(line_id)

        try:
            snapshot = await self.gateway.update_lines(
                handle, [CartLineUpdateInput(id=line_id, quantity=quantity)]
            )
        except StaleHandleError:
            return self._heal(handle)
        except StorefrontError as e:
            return self._fail(e, ErrorKind.MUTATION_FAILED)

        return self._apply(snapshot, forget_if_empty=True)

    async def _remove(self, line_id: str) -> CartResult:
        handle = self._view.handle
        if handle is None:
            return CartResult(ok=True, view=self._view)

        try:
            snapshot = await self.gateway.remove_lines(handle, [line_id])
        except StaleHandleError:
            return self._heal(handle)
        except StorefrontError as e:
            return self._fail(e, ErrorKind.MUTATION_FAILED)

        return self._apply(snapshot, forget_if_empty=True)

    async def _refresh(self) -> CartResult:
        handle = self._view.handle
        if handle is None:
            return CartResult(ok=True, view=self._view)

        try:
            snapshot = await self.gateway.get_cart(handle)
        except StorefrontError as e:
            return self._fail(e, ErrorKind.FETCH_FAILED)

        if snapshot is None:
            return self._heal(handle)
        return self._apply(snapshot)

    def _apply(self, snapshot: CartSnapshot, forget_if_empty: bool = False) -> CartResult:
        if forget_if_empty and not snapshot.lines:
            logger.info(f"Cart {snapshot.id} is empty, forgetting handle")
            self._forget()
        else:
            self._view = CartView.from_snapshot(snapshot, self.default_currency)
            self.needs_refresh = False
        self.last_error = None
        return CartResult(ok=True, view=self._view)

    def _forget(self) -> None:
        self.store.clear()
        self._view = CartView(default_currency=self.default_currency)
        self.needs_refresh = False

    def _heal(self, handle: str) -> CartResult:
        logger.info(f"Cart {handle} no longer exists upstream, resetting to an empty cart")
        self._forget()
        self.last_error = ErrorInfo(
            kind=ErrorKind.NOT_FOUND,
            message="Your previous cart has expired. A new cart will be started.",
        )
        return CartResult(ok=True, view=self._view)

    def _fail(self, error: Exception, kind: ErrorKind) -> CartResult:
        if isinstance(error, (TransportError, ChannelLockedError)):
            kind = ErrorKind.TRANSPORT
        user_errors = error.user_errors if isinstance(error, DomainError) else []
        logger.warning(f"Cart {kind.value}: {error}")
        self.last_error = ErrorInfo(kind=kind, message=str(error), user_errors=user_errors)
        return CartResult(ok=False, view=self._view, error=self.last_error)

    def _reject(self, message: str) -> CartResult:
        self.last_error = ErrorInfo(kind=ErrorKind.VALIDATION, message=message)
        self._notify()
        return CartResult(ok=False, view=self._view, error=self.last_error)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
