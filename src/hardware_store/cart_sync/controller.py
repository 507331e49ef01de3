import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, TypeVar

from hardware_store.cart_sync.models import CartLine, CartSnapshot
from hardware_store.cart_sync.store import CartStore
from hardware_store.core.exceptions import (
    BaseAPIException, NotFoundError, TransientError, UnauthorizedError, ValidationError
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Delta = Callable[[CartSnapshot], None]


@dataclass(frozen=True)
class SyncResult:
    """
    Outcome of one controller operation

    stale is set when an identity change superseded the operation; its
    outcome was discarded and the mirror was left alone.
    """
    operation: str
    error: Optional[BaseAPIException] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale

    @property
    def needs_auth(self) -> bool:
        return isinstance(self.error, UnauthorizedError)

    @property
    def is_transient(self) -> bool:
        return isinstance(self.error, TransientError)

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class _PendingOp:
    """An issued mutation whose delta is replayed until it settles"""

    __slots__ = ("name", "delta")

    def __init__(self, name: str, delta: Delta):
        self.name = name
        self.delta = delta


class CartController:
    """
    Cart Reconciliation Controller

    Keeps an optimistic local mirror of the persisted cart for the active
    identity.

    Flow per mutation:
    1. apply the delta to the mirror at once
    2. wait for the identity's lock, so mutations persist in issuance order
    3. persist, then reload the authoritative cart
    4. mirror = reloaded cart + deltas of mutations still queued

    clear_cart is the exception: it does not reload, and on failure restores
    the last confirmed snapshot directly.

    Every result carries the epoch it was issued in. reset() bumps the
    epoch, so responses for a previous identity are dropped.

    A mutation that is cancelled drops its delta, and the mirror falls back to
    the confirmed cart. Store failures of any kind come back as results.
    """

    def __init__(
        self,
        store: CartStore,
        timeout: float = 15.0,
        notify: Optional[Callable[[SyncResult], None]] = None,
    ):
        self._store = store
        self._timeout = timeout
        self._notify = notify
        self._epoch = 0
        self._identity: Optional[str] = None
        self._lock = asyncio.Lock()
        self._pending: List[_PendingOp] = []
        self._mirror = CartSnapshot()
        self._confirmed = CartSnapshot()

    # Read side

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def snapshot(self) -> CartSnapshot:
        """A copy of the mirror"""
        return self._mirror.copy()

    @property
    def confirmed(self) -> CartSnapshot:
        """A copy of the last cart state the store confirmed"""
        return self._confirmed.copy()

    @property
    def lines(self) -> List[CartLine]:
        return self.snapshot.lines

    @property
    def total_items(self) -> int:
        return self._mirror.total_items

    @property
    def total_price(self) -> int:
        return self._mirror.total_price

    @property
    def busy(self) -> bool:
        return bool(self._pending) or self._lock.locked()

    # Identity

    def reset(self, identity: Optional[str]) -> None:
        """
        Discard the mirror and adopt a new identity

        In-flight work keeps the old lock and pending list, and its results
        are discarded because the epoch moved on.
        """
        self._epoch += 1
        self._identity = identity
        self._lock = asyncio.Lock()
        self._pending = []
        self._mirror = CartSnapshot()
        self._confirmed = CartSnapshot()
        logger.debug(f"Cart mirror reset for {identity} (epoch {self._epoch})")

    # Operations

    async def load(self) -> SyncResult:
        """
        Replace the mirror with the store's cart for the active identity

        On failure the mirror is emptied and the error returned.
        """
        identity = self._identity
        if identity is None:
            self._mirror = CartSnapshot()
            return self._finish(SyncResult("load", UnauthorizedError("Sign in to view your cart")))

        epoch, lock, pending = self._epoch, self._lock, self._pending
        async with lock:
            if epoch != self._epoch:
                return SyncResult("load", stale=True)
            try:
                lines = await self._call(self._store.fetch_cart_lines(identity))
            except BaseAPIException as exc:
                if epoch != self._epoch:
                    return SyncResult("load", stale=True)
                logger.warning(f"Cart load failed for {identity}: {exc.message}")
                self._confirmed = CartSnapshot()
                self._mirror = self._replay(self._confirmed, pending)
                return self._finish(SyncResult("load", exc))

            if epoch != self._epoch:
                return SyncResult("load", stale=True)
            self._confirmed = CartSnapshot.from_lines(lines)
            self._mirror = self._replay(self._confirmed, pending)
            logger.info(f"Loaded cart for {identity}: {self._confirmed.total_items} items")
            return SyncResult("load")

    async def add_item(self, product_ref: str, quantity: int = 1) -> SyncResult:
        error = self._check_ref(product_ref) or self._check_quantity(quantity, minimum=1)
        if error:
            return self._finish(SyncResult("add_item", error))

        return await self._mutate(
            "add_item",
            delta=lambda cart: cart.increment(product_ref, quantity),
            persist=lambda identity: self._store.upsert_cart_line(
                identity, product_ref, quantity, increment=True
            ),
            not_found_ok=False,
        )

    async def update_quantity(self, product_ref: str, quantity: int) -> SyncResult:
        """quantity <= 0 behaves exactly like remove_item"""
        error = self._check_ref(product_ref) or self._check_quantity(quantity, minimum=None)
        if error:
            return self._finish(SyncResult("update_quantity", error))
        if quantity <= 0:
            return await self._remove("update_quantity", product_ref)

        return await self._mutate(
            "update_quantity",
            delta=lambda cart: cart.set_quantity(product_ref, quantity),
            persist=lambda identity: self._store.upsert_cart_line(
                identity, product_ref, quantity, increment=False
            ),
            not_found_ok=True,
        )

    async def remove_item(self, product_ref: str) -> SyncResult:
        error = self._check_ref(product_ref)
        if error:
            return self._finish(SyncResult("remove_item", error))
        return await self._remove("remove_item", product_ref)

    async def clear_cart(self) -> SyncResult:
        identity = self._identity
        if identity is None:
            return self._finish(SyncResult("clear_cart", UnauthorizedError("Sign in to clear your cart")))

        epoch, lock, pending = self._epoch, self._lock, self._pending
        op = _PendingOp("clear_cart", lambda cart: cart.clear())
        pending.append(op)
        self._mirror.clear()

        try:
            async with lock:
                if epoch != self._epoch:
                    return SyncResult("clear_cart", stale=True)
                try:
                    await self._call(self._store.delete_all_cart_lines(identity))
                except BaseAPIException as exc:
                    if epoch != self._epoch:
                        return SyncResult("clear_cart", stale=True)
                    # confirmed still holds the pre-clear cart
                    pending.remove(op)
                    logger.warning(f"Clear cart failed for {identity}, restoring: {exc.message}")
                    self._mirror = self._replay(self._confirmed, pending)
                    return self._finish(SyncResult("clear_cart", exc))

                if epoch != self._epoch:
                    return SyncResult("clear_cart", stale=True)
                pending.remove(op)
                self._confirmed = CartSnapshot()
                self._mirror = self._replay(self._confirmed, pending)
                logger.info(f"Cleared cart for {identity}")
                return SyncResult("clear_cart")
        finally:
            self._settle(op, pending, epoch)

    # Internals

    async def _remove(self, operation: str, product_ref: str) -> SyncResult:
        return await self._mutate(
            operation,
            delta=lambda cart: cart.remove(product_ref),
            persist=lambda identity: self._store.delete_cart_line(identity, product_ref),
            not_found_ok=True,
        )

    async def _mutate(
        self,
        operation: str,
        delta: Delta,
        persist: Callable[[str], Awaitable[object]],
        not_found_ok: bool,
    ) -> SyncResult:
        identity = self._identity
        if identity is None:
            return self._finish(SyncResult(operation, UnauthorizedError("Sign in to change your cart")))

        epoch, lock, pending = self._epoch, self._lock, self._pending
        op = _PendingOp(operation, delta)
        pending.append(op)
        delta(self._mirror)

        try:
            async with lock:
                if epoch != self._epoch:
                    return SyncResult(operation, stale=True)
                return await self._persist_and_reload(operation, identity, epoch, op, pending, persist, not_found_ok)
        finally:
            self._settle(op, pending, epoch)

    async def _persist_and_reload(
        self,
        operation: str,
        identity: str,
        epoch: int,
        op: _PendingOp,
        pending: List[_PendingOp],
        persist: Callable[[str], Awaitable[object]],
        not_found_ok: bool,
    ) -> SyncResult:
        error: Optional[BaseAPIException] = None
        persisted = False
        try:
            await self._call(persist(identity))
            persisted = True
        except NotFoundError as exc:
            if not_found_ok:
                # Nothing to change on the server; same end state as success
                persisted = True
            else:
                error = exc
        except BaseAPIException as exc:
            error = exc

        if epoch != self._epoch:
            return SyncResult(operation, stale=True)
        pending.remove(op)
        if error:
            logger.warning(f"{operation} failed for {identity}: {error.message}")

        try:
            lines = await self._call(self._store.fetch_cart_lines(identity))
        except BaseAPIException as reload_error:
            if epoch != self._epoch:
                return SyncResult(operation, stale=True)
            logger.warning(f"Reload after {operation} failed for {identity}: {reload_error.message}")
            fallback = self._confirmed.copy()
            if persisted:
                op.delta(fallback)
            self._confirmed = fallback
            self._mirror = self._replay(fallback, pending)
            return self._finish(SyncResult(operation, error or reload_error))

        if epoch != self._epoch:
            return SyncResult(operation, stale=True)
        self._confirmed = CartSnapshot.from_lines(lines)
        self._mirror = self._replay(self._confirmed, pending)
        return self._finish(SyncResult(operation, error))

    def _settle(self, op: _PendingOp, pending: List[_PendingOp], epoch: int) -> None:
        """
        Drop op if it never reached an outcome (cancelled caller)

        The mirror falls back to the last confirmed cart plus the deltas still
        queued, so an abandoned delta is never shown again.
        """
        if op not in pending:
            return
        pending.remove(op)
        if epoch == self._epoch:
            logger.info(f"{op.name} abandoned for {self._identity}; mirror reverted to confirmed cart")
            self._mirror = self._replay(self._confirmed, pending)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a store call; every failure comes back as a BaseAPIException"""
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except BaseAPIException:
            raise
        except asyncio.TimeoutError as exc:
            raise TransientError(f"Cart request timed out after {self._timeout:g}s") from exc
        except Exception as exc:
            logger.exception("Cart store call failed unexpectedly")
            raise TransientError(f"Cart request failed: {type(exc).__name__}") from exc

    @staticmethod
    def _replay(base: CartSnapshot, pending: List[_PendingOp]) -> CartSnapshot:
        mirror = base.copy()
        for op in pending:
            op.delta(mirror)
        return mirror

    def _finish(self, result: SyncResult) -> SyncResult:
        if not result.ok and not result.stale and self._notify is not None:
            self._notify(result)
        return result

    @staticmethod
    def _check_ref(product_ref) -> Optional[ValidationError]:
        if not isinstance(product_ref, str) or not product_ref.strip():
            return ValidationError(
                "Product reference is required",
                field_errors=[{"field": "product_ref", "message": "Must be a non-empty string"}],
            )
        return None

    @staticmethod
    def _check_quantity(quantity, minimum: Optional[int]) -> Optional[ValidationError]:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return ValidationError(
                "Quantity must be a whole number",
                field_errors=[{"field": "quantity", "message": "Must be an integer"}],
            )
        if minimum is not None and quantity < minimum:
            return ValidationError(
                f"Quantity must be at least {minimum}",
                field_errors=[{"field": "quantity", "message": f"Must be >= {minimum}"}],
            )
        return None
