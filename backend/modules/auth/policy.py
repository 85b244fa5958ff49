"""
Role-based authorization policy.

Every handler asks one question: does this role hold this capability?
ROLE_CAPABILITIES must cover every Role; the module refuses to import
otherwise, so adding a role without deciding its capabilities fails fast.
"""

from enum import Enum

from shared.models import AuthenticatedUser, Role

from .exceptions import InsufficientPermissionsError


class Capability(str, Enum):
    """Actions gated by role."""

    MODERATE_USERS = "moderate_users"
    MANAGE_PRODUCTS = "manage_products"
    OFFER_SERVICES = "offer_services"
    BOOK_SERVICES = "book_services"
    PLACE_ORDERS = "place_orders"
    MANAGE_PETS = "manage_pets"
    JOIN_VIDEO_CALLS = "join_video_calls"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.OWNER: frozenset({
        Capability.BOOK_SERVICES,
        Capability.PLACE_ORDERS,
        Capability.MANAGE_PETS,
        Capability.JOIN_VIDEO_CALLS,
    }),
    Role.LOVER: frozenset({
        Capability.OFFER_SERVICES,
        Capability.PLACE_ORDERS,
        Capability.JOIN_VIDEO_CALLS,
    }),
    Role.VET: frozenset({
        Capability.OFFER_SERVICES,
        Capability.PLACE_ORDERS,
        Capability.JOIN_VIDEO_CALLS,
    }),
    Role.GROOMER: frozenset({
        Capability.OFFER_SERVICES,
        Capability.PLACE_ORDERS,
        Capability.JOIN_VIDEO_CALLS,
    }),
    Role.SUPPLIER: frozenset({
        Capability.MANAGE_PRODUCTS,
    }),
    Role.ADMIN: frozenset(Capability),
}

_uncovered = set(Role) - set(ROLE_CAPABILITIES)
if _uncovered:
    raise RuntimeError(f"Roles without a capability entry: {sorted(r.value for r in _uncovered)}")


def capabilities_for(role: Role) -> frozenset[Capability]:
    return ROLE_CAPABILITIES[role]


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES[role]


def ensure_capability(user: AuthenticatedUser, capability: Capability) -> None:
    """
    Raises:
        InsufficientPermissionsError: If the user's role lacks the capability
    """
    if not has_capability(user.role, capability):
        raise InsufficientPermissionsError(capability.value, user.role.value)
