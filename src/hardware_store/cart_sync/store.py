from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
import logging

import httpx

from hardware_store.cart_sync.models import CartLine
from hardware_store.core.exceptions import (
    BaseAPIException, BusinessLogicError, ConflictError, ForbiddenError,
    NotFoundError, TransientError, UnauthorizedError, ValidationError
)

logger = logging.getLogger(__name__)


class CartStore(ABC):
    """
    Persisted Cart Store as seen by the client

    Implementations raise UnauthorizedError, NotFoundError or TransientError
    (other BaseAPIException subclasses for rejected input); they never leak
    transport exceptions.
    """

    @abstractmethod
    async def fetch_cart_lines(self, identity: str) -> List[CartLine]:
        """Every line for identity, joined with current catalog display fields"""

    @abstractmethod
    async def upsert_cart_line(
        self, identity: str, product_ref: str, quantity: int, increment: bool = True
    ) -> Optional[CartLine]:
        """
        Create or change the (identity, product_ref) row

        increment=True adds quantity to an existing row; increment=False sets it.
        """

    @abstractmethod
    async def delete_cart_line(self, identity: str, product_ref: str) -> None:
        pass

    @abstractmethod
    async def delete_all_cart_lines(self, identity: str) -> None:
        pass

    async def aclose(self) -> None:
        pass


class HttpCartStore(CartStore):
    """CartStore backed by the storefront's /cart REST endpoints"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._owns_client = client is None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """The HTTP client; an owned client is reopened after aclose()"""
        if self._client is None or (self._owns_client and self._client.is_closed):
            self._client = httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            )
        return self._client

    async def fetch_cart_lines(self, identity: str) -> List[CartLine]:
        payload = await self._request("GET", "cart", identity)
        with self._parsing("GET cart"):
            return [self._to_line(item) for item in payload["data"]["items"]]

    async def upsert_cart_line(
        self, identity: str, product_ref: str, quantity: int, increment: bool = True
    ) -> Optional[CartLine]:
        method = "POST" if increment else "PATCH"
        payload = await self._request(
            method, "cart", identity,
            json={"product_id": product_ref, "quantity": quantity},
            resource="Product" if increment else "Cart item",
            resource_id=product_ref,
        )
        with self._parsing(f"{method} cart"):
            # PATCH with quantity 0 answers with no line
            return self._to_line(payload["data"]) if payload.get("data") else None

    async def delete_cart_line(self, identity: str, product_ref: str) -> None:
        await self._request(
            "DELETE", "cart", identity,
            params={"product_id": product_ref},
            resource="Cart item", resource_id=product_ref,
        )

    async def delete_all_cart_lines(self, identity: str) -> None:
        await self._request("DELETE", "cart/clear", identity)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        identity: str,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        try:
            response = await self.client.request(
                method, path, headers={"X-User-Id": identity}, **kwargs
            )
        except httpx.TimeoutException as exc:
            logger.warning(f"{method} {path} timed out for {identity}: {exc}")
            raise TransientError("Cart request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning(f"{method} {path} failed for {identity}: {exc}")
            raise TransientError(f"Cart service unreachable: {exc}") from exc

        if not response.is_success:
            raise self._to_error(response, resource, resource_id)
        with self._parsing(f"{method} {path}"):
            payload = response.json()
        if not isinstance(payload, dict):
            logger.warning(f"{method} {path} answered {response.status_code} with a non-object body")
            raise TransientError("Malformed cart response")
        return payload

    @staticmethod
    @contextmanager
    def _parsing(what: str):
        """A 2xx body the client cannot read counts as a server failure"""
        try:
            yield
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Malformed response to {what}: {exc!r}")
            raise TransientError("Malformed cart response") from exc

    @staticmethod
    def _to_error(response: httpx.Response, resource: str, resource_id: Optional[str]) -> BaseAPIException:
        """Translate an error envelope into the shared exception taxonomy"""
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        error = error if isinstance(error, dict) else {}
        details = error.get("details") if isinstance(error.get("details"), dict) else {}
        message = error.get("message") or response.reason_phrase
        status = response.status_code

        if status == 401:
            return UnauthorizedError(message)
        if status == 403:
            return ForbiddenError(message)
        if status == 404:
            return NotFoundError(resource, resource_id)
        if status == 409:
            return ConflictError(message)
        if status == 422:
            return BusinessLogicError(message, rule=details.get("violated_rule"))
        if 400 <= status < 500:
            return ValidationError(message, field_errors=details.get("field_errors"))
        return TransientError(f"Cart service error ({status}): {message}")

    @staticmethod
    def _to_line(item: Dict[str, Any]) -> CartLine:
        return CartLine(
            product_ref=item["product_id"],
            quantity=int(item["quantity"]),
            unit_price=int(item.get("price") or 0),
            display_name=item.get("name") or "",
            image_ref=item.get("image"),
        )
