import logging
from typing import Optional

from hardware_store.cart_sync.auth import SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED
from hardware_store.cart_sync.controller import CartController, SyncResult

logger = logging.getLogger(__name__)


class IdentityTransitionObserver:
    """
    Keeps the cart mirror scoped to the active identity

    Transitions:
    - NoIdentity -> Identity(id), Identity(a) -> Identity(b): reset, then load
    - Identity(id) -> NoIdentity: reset only, no load
    - same identity (token refresh, repeated sign-in): nothing
    """

    def __init__(self, controller: CartController):
        self.controller = controller
        self._identity: Optional[str] = None

    @property
    def identity(self) -> Optional[str]:
        """None is the NoIdentity state"""
        return self._identity

    async def adopt(self, identity: Optional[str]) -> Optional[SyncResult]:
        """Move to identity; returns the load result when a load was needed"""
        if identity == self._identity:
            return None

        previous, self._identity = self._identity, identity
        self.controller.reset(identity)
        if identity is None:
            logger.info(f"Identity {previous} signed out; cart mirror discarded")
            return None

        logger.info(f"Identity changed {previous} -> {identity}; reloading cart")
        return await self.controller.load()

    async def handle_event(self, event: str, identity: Optional[str]) -> Optional[SyncResult]:
        """Callback for AuthSession.on_identity_change"""
        if event == SIGNED_OUT:
            return await self.adopt(None)
        if event == TOKEN_REFRESHED and identity == self._identity:
            return None
        if event in (SIGNED_IN, TOKEN_REFRESHED):
            return await self.adopt(identity)
        logger.warning(f"Ignoring unknown identity event {event!r}")
        return None
