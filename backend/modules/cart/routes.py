"""
Cart API endpoints.

The cart itself lives on the client; the server only recomputes totals
so checkout never trusts client-side arithmetic.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import require_capability
from modules.auth.policy import Capability
from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .cart import Cart
from .models import CartSummary, CartSummaryRequest

router = APIRouter()


@router.post("/summary", response_model=CartSummary)
async def summarize_cart(
    request: CartSummaryRequest,
    user: AuthenticatedUser = Depends(require_capability(Capability.PLACE_ORDERS)),
    settings: Settings = Depends(get_settings),
) -> CartSummary:
    """Merge duplicate products and compute subtotal, platform fee and total."""
    return Cart(request.items, fee_rate=settings.platform_fee_rate).summary()
