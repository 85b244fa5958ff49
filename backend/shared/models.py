"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Marketplace roles. Closed set; see modules.auth.policy for capabilities."""

    OWNER = "OWNER"
    LOVER = "LOVER"
    VET = "VET"
    GROOMER = "GROOMER"
    SUPPLIER = "SUPPLIER"
    ADMIN = "ADMIN"


DEFAULT_ROLE = Role.OWNER

# Roles a user may pick for themselves at registration or onboarding
SELF_SERVICE_ROLES = frozenset(
    {Role.OWNER, Role.LOVER, Role.VET, Role.GROOMER, Role.SUPPLIER}
)


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from session token claims and made available
    to route handlers via dependency injection. No database lookup is
    needed to build it.
    """

    id: str = Field(..., description="User ID")
    email: Optional[str] = Field(None, description="User's email address")
    name: Optional[str] = Field(None, description="Display name")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    role: Role = Field(default=DEFAULT_ROLE, description="Marketplace role")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
