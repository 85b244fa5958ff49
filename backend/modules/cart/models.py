"""
Cart module data models.

Money is Decimal throughout; floats never enter price arithmetic.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_serializer

from modules.auth.models import CamelModel


class CartItem(CamelModel):
    """A line in the cart. Product ID is the line's key."""

    product_id: str = Field(..., min_length=1)
    name: str = ""
    price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(default=1, ge=1)
    image: Optional[str] = None
    seller_id: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @field_serializer("price")
    def _serialize_price(self, value: Decimal) -> str:
        return f"{value:.2f}"


class CartSummary(CamelModel):
    """Derived totals for a cart. The platform fee is charged to the seller."""

    items: list[CartItem]
    item_count: int
    subtotal: Decimal
    platform_fee: Decimal
    total: Decimal

    @field_serializer("subtotal", "platform_fee", "total")
    def _serialize_money(self, value: Decimal) -> str:
        return f"{value:.2f}"


class CartSummaryRequest(CamelModel):
    items: list[CartItem] = Field(default_factory=list, max_length=200)
