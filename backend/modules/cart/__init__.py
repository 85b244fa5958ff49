"""
Cart module.

Public API:
- Cart: Quantity-merging line-item reducer
- calculate_platform_fee: Seller-side marketplace fee
- CartItem, CartSummary: Line item and derived totals
"""

from .cart import Cart, calculate_platform_fee
from .models import CartItem, CartSummary, CartSummaryRequest

__all__ = [
    "Cart",
    "calculate_platform_fee",
    "CartItem",
    "CartSummary",
    "CartSummaryRequest",
]
