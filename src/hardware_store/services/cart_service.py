from typing import Optional
from hardware_store.core.config import StoreConfig
from hardware_store.core.exceptions import NotFoundError, ValidationError
from hardware_store.repositories.cart_repository import CartRepository
from hardware_store.repositories.product_repository import ProductRepository
from hardware_store.schemas.cart_schemas import CartLineResponse, CartResponse
import logging

logger = logging.getLogger(__name__)


class CartService:
    """
    Persisted cart business logic

    Responsibilities:
    - Scope every cart operation to the calling identity
    - Refuse lines for products that do not exist
    - Enforce the per-line quantity limit
    - Treat deletes as idempotent
    """

    def __init__(
        self,
        cart_repository: CartRepository,
        product_repository: ProductRepository,
        store_config: StoreConfig
    ):
        self.cart_repo = cart_repository
        self.product_repo = product_repository
        self.store_config = store_config

    def get_cart(self, user_id: str) -> CartResponse:
        """
        Return every line for the user with fresh display fields

        Prices come from the catalog at read time, never from what the client
        last saw.
        """
        rows = self.cart_repo.get_lines(user_id)
        cart = CartResponse(
            user_id=user_id,
            currency=self.store_config.currency,
            items=[self._to_line(row) for row in rows],
        )
        logger.info(f"Fetched cart for user {user_id}: {len(cart.items)} lines, {cart.total_items} items")
        return cart

    def add_item(self, user_id: str, product_id: str, quantity: int) -> CartLineResponse:
        """
        Add quantity of a product, creating the line if needed

        Business Rules:
        - The product must exist (a hard failure, unlike delete)
        - The resulting line quantity cannot exceed the configured maximum
        """
        self._check_quantity(quantity, minimum=1)
        if not self.product_repo.exists(product_id):
            raise NotFoundError("Product", product_id)

        row = self.cart_repo.add_quantity(
            user_id, product_id, quantity, self.store_config.max_quantity_per_item
        )
        logger.info(f"Added {quantity} x {product_id} to cart of user {user_id}")
        return self._to_line(row)

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[CartLineResponse]:
        """
        Overwrite a line's quantity; 0 removes the line

        Returns the updated line, or None when the line was removed.
        """
        self._check_quantity(quantity, minimum=0)

        if quantity == 0:
            if not self.cart_repo.delete_line(user_id, product_id):
                raise NotFoundError("Cart item", product_id)
            logger.info(f"Removed {product_id} from cart of user {user_id} (quantity 0)")
            return None

        if not self.cart_repo.set_quantity(user_id, product_id, quantity):
            raise NotFoundError("Cart item", product_id)

        logger.info(f"Set {product_id} to {quantity} in cart of user {user_id}")
        return self._to_line(self.cart_repo.get_line(user_id, product_id))

    def remove_item(self, user_id: str, product_id: str) -> bool:
        """Delete a line; deleting an absent line is a successful no-op"""
        removed = self.cart_repo.delete_line(user_id, product_id) > 0
        if removed:
            logger.info(f"Removed {product_id} from cart of user {user_id}")
        else:
            logger.debug(f"Remove of absent line {product_id} for user {user_id} ignored")
        return removed

    def clear_cart(self, user_id: str) -> int:
        count = self.cart_repo.clear(user_id)
        logger.info(f"Cleared cart of user {user_id} ({count} lines)")
        return count

    def _check_quantity(self, quantity: int, minimum: int) -> None:
        maximum = self.store_config.max_quantity_per_item
        if quantity < minimum or quantity > maximum:
            raise ValidationError(
                f"Quantity must be between {minimum} and {maximum}",
                field_errors=[{"field": "quantity", "message": "Out of range"}],
            )

    @staticmethod
    def _to_line(row) -> CartLineResponse:
        return CartLineResponse(
            product_id=row["product_id"],
            quantity=int(row["quantity"]),
            name=row["name"],
            price=int(row["price"]),
            image=row["image"] or "/placeholder.svg",
        )
