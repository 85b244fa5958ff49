"""
Users module.

Self-service profile management, onboarding role choice and contact
verification for the session user.

Public API:
- ProfileService: Profile operations
- Profile: The self-view of a user record
"""

from .models import (
    CapabilitiesResponse,
    ChooseRoleRequest,
    Profile,
    UpdateProfileRequest,
)
from .service import ProfileService

__all__ = [
    "ProfileService",
    "Profile",
    "UpdateProfileRequest",
    "ChooseRoleRequest",
    "CapabilitiesResponse",
]
