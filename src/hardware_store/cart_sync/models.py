import copy
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional


@dataclass
class CartLine:
    """
    One product in the client-side cart

    unit_price, display_name and image_ref are denormalized from the catalog
    and refreshed on every full reload. An optimistic placeholder line has
    unit_price 0 until the next reload fills it in.
    """
    product_ref: str
    quantity: int
    unit_price: int = 0
    display_name: str = ""
    image_ref: Optional[str] = None

    @property
    def subtotal(self) -> int:
        return self.quantity * self.unit_price


class CartSnapshot:
    """
    Ordered cart lines keyed by product_ref (at most one line per product)

    Used both as the local mirror and as the last confirmed server state.
    Equality is deep and order-sensitive.
    """

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: Dict[str, CartLine] = {}
        for line in lines or ():
            self.upsert_line(line)

    @classmethod
    def from_lines(cls, lines: Iterable[CartLine]) -> "CartSnapshot":
        return cls(copy.deepcopy(list(lines)))

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_price(self) -> int:
        return sum(line.subtotal for line in self._lines.values())

    def get(self, product_ref: str) -> Optional[CartLine]:
        return self._lines.get(product_ref)

    def upsert_line(self, line: CartLine) -> None:
        """Insert a line, or replace the existing one in place"""
        if line.quantity <= 0:
            self._lines.pop(line.product_ref, None)
            return
        self._lines[line.product_ref] = line

    def increment(self, product_ref: str, quantity: int) -> CartLine:
        """Add quantity to a line, inserting a placeholder line if absent"""
        line = self._lines.get(product_ref)
        if line is None:
            line = CartLine(product_ref=product_ref, quantity=quantity)
            self._lines[product_ref] = line
        else:
            line.quantity += quantity
        return line

    def set_quantity(self, product_ref: str, quantity: int) -> bool:
        """
        Overwrite a line's quantity; quantity <= 0 removes the line

        Returns False when there was no line to change.
        """
        if quantity <= 0:
            return self.remove(product_ref)
        line = self._lines.get(product_ref)
        if line is None:
            return False
        line.quantity = quantity
        return True

    def remove(self, product_ref: str) -> bool:
        return self._lines.pop(product_ref, None) is not None

    def clear(self) -> None:
        self._lines.clear()

    def copy(self) -> "CartSnapshot":
        return CartSnapshot.from_lines(self._lines.values())

    def as_dict(self) -> Dict[str, int]:
        """product_ref -> quantity, in line order"""
        return {ref: line.quantity for ref, line in self._lines.items()}

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __contains__(self, product_ref: object) -> bool:
        return product_ref in self._lines

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CartSnapshot):
            return NotImplemented
        return self.lines == other.lines

    def __repr__(self) -> str:
        return f"CartSnapshot({self.as_dict()!r})"
