import logging
from typing import Callable, Optional

from hardware_store.cart_sync.auth import AuthSession
from hardware_store.cart_sync.controller import CartController, SyncResult
from hardware_store.cart_sync.observer import IdentityTransitionObserver
from hardware_store.cart_sync.store import CartStore, HttpCartStore
from hardware_store.core.config import CartSyncConfig

logger = logging.getLogger(__name__)


class CartSession:
    """
    Application-root cart context

    Wires the store, controller and identity observer, and is handed to view
    code instead of module-level cart state. Use as an async context manager,
    or call start() and close() explicitly.

    Example:
        async with CartSession(auth, config=config.cart_sync) as cart:
            await cart.controller.add_item(product_id, 2)
    """

    def __init__(
        self,
        auth: AuthSession,
        store: Optional[CartStore] = None,
        config: Optional[CartSyncConfig] = None,
        notify: Optional[Callable[[SyncResult], None]] = None,
    ):
        self.config = config or CartSyncConfig()
        self.auth = auth
        self.store = store or HttpCartStore(
            self.config.api_base_url, timeout=self.config.request_timeout_seconds
        )
        self.controller = CartController(
            self.store, timeout=self.config.request_timeout_seconds, notify=notify
        )
        self.observer = IdentityTransitionObserver(self.controller)
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def start(self) -> Optional[SyncResult]:
        """Subscribe to identity events and load the current identity's cart"""
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_identity_change(self.observer.handle_event)
        return await self.observer.adopt(self.auth.get_current_identity())

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        # Observer and controller return to NoIdentity together, so a later
        # start() with the same identity loads again
        await self.observer.adopt(None)
        await self.store.aclose()
        logger.info("Cart session closed")

    async def __aenter__(self) -> "CartSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
