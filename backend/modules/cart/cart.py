"""
Cart reducer.

A cart is a collection of line items keyed by product ID. Adding a product
that is already present increases its quantity by one instead of adding a
second line. A cart built from a list of lines (a client snapshot) merges
repeated product IDs by summing their quantities. Totals are derived on
every read and never stored.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from .models import CartItem, CartSummary

CENT = Decimal("0.01")
DEFAULT_FEE_RATE = Decimal("0.02")


def calculate_platform_fee(subtotal: Decimal, rate: Decimal = DEFAULT_FEE_RATE) -> Decimal:
    """Fee on a subtotal, rounded half-up to the cent."""
    return (subtotal * rate).quantize(CENT, rounding=ROUND_HALF_UP)


class Cart:
    """In-memory cart with quantity merging."""

    def __init__(self, items: Optional[Iterable[CartItem]] = None, fee_rate: Decimal = DEFAULT_FEE_RATE):
        self._items: dict[str, CartItem] = {}
        self._fee_rate = fee_rate
        for item in items or ():
            self.merge(item)

    def add(self, item: CartItem) -> None:
        """Add one unit of a product; the caller's quantity is ignored."""
        existing = self._items.get(item.product_id)
        if existing is None:
            self._items[item.product_id] = item.model_copy(update={"quantity": 1})
        else:
            self._items[item.product_id] = existing.model_copy(update={"quantity": existing.quantity + 1})

    def merge(self, item: CartItem) -> None:
        """Add a line with its own quantity, summing into an existing line."""
        existing = self._items.get(item.product_id)
        if existing is None:
            self._items[item.product_id] = item.model_copy()
        else:
            self._items[item.product_id] = existing.model_copy(
                update={"quantity": existing.quantity + item.quantity}
            )

    def remove(self, product_id: str) -> None:
        self._items.pop(product_id, None)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line. Unknown IDs are ignored."""
        if quantity <= 0:
            self.remove(product_id)
            return
        existing = self._items.get(product_id)
        if existing is not None:
            self._items[product_id] = existing.model_copy(update={"quantity": quantity})

    def clear(self) -> None:
        self._items.clear()

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal("0")).quantize(CENT)

    @property
    def platform_fee(self) -> Decimal:
        return calculate_platform_fee(self.subtotal, self._fee_rate)

    @property
    def total(self) -> Decimal:
        return self.subtotal

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._items

    def summary(self) -> CartSummary:
        subtotal = self.subtotal
        return CartSummary(
            items=self.items,
            item_count=self.item_count,
            subtotal=subtotal,
            platform_fee=calculate_platform_fee(subtotal, self._fee_rate),
            total=subtotal,
        )
