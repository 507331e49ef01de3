from typing import Awaitable, Callable, List, Optional, Union
import inspect
import logging

logger = logging.getLogger(__name__)

SIGNED_IN = "signed-in"
SIGNED_OUT = "signed-out"
TOKEN_REFRESHED = "token-refreshed"
IDENTITY_EVENTS = (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED)

IdentityCallback = Callable[[str, Optional[str]], Union[None, Awaitable[None]]]


class AuthSession:
    """
    In-process identity source

    Holds the active identity and broadcasts identity events to subscribers.
    Credential checks belong to the auth provider; sign_in trusts the identity
    it is given. Callbacks may be plain functions or coroutine functions and
    are awaited in subscription order.
    """

    def __init__(self, identity: Optional[str] = None):
        self._identity = identity
        self._listeners: List[IdentityCallback] = []

    def get_current_identity(self) -> Optional[str]:
        return self._identity

    def on_identity_change(self, callback: IdentityCallback) -> Callable[[], None]:
        """Subscribe to identity events; returns the unsubscribe function"""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def sign_in(self, identity: str) -> None:
        if not identity:
            raise ValueError("identity is required")
        self._identity = identity
        logger.info(f"Signed in as {identity}")
        await self._emit(SIGNED_IN, identity)

    async def sign_out(self) -> None:
        previous = self._identity
        self._identity = None
        logger.info(f"Signed out {previous}")
        await self._emit(SIGNED_OUT, None)

    async def refresh_token(self) -> None:
        """Token rotation keeps the same identity"""
        if self._identity is None:
            return
        await self._emit(TOKEN_REFRESHED, self._identity)

    async def _emit(self, event: str, identity: Optional[str]) -> None:
        for callback in list(self._listeners):
            outcome = callback(event, identity)
            if inspect.isawaitable(outcome):
                await outcome
