"""
Client-side cart synchronization

An optimistic local cart mirror reconciled against the persisted cart, and
scoped to the signed-in identity.
"""

from hardware_store.cart_sync.auth import AuthSession
from hardware_store.cart_sync.controller import CartController, SyncResult
from hardware_store.cart_sync.models import CartLine, CartSnapshot
from hardware_store.cart_sync.observer import IdentityTransitionObserver
from hardware_store.cart_sync.session import CartSession
from hardware_store.cart_sync.store import CartStore, HttpCartStore

__all__ = [
    "AuthSession",
    "CartController",
    "CartLine",
    "CartSession",
    "CartSnapshot",
    "CartStore",
    "HttpCartStore",
    "IdentityTransitionObserver",
    "SyncResult",
]
