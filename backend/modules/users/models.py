"""
Users module data models.

Profile views and the request bodies for profile edits, onboarding and
contact verification.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from modules.auth.models import CamelModel, User
from modules.auth.policy import Capability
from shared.models import Role


class Profile(CamelModel):
    """The full profile a user sees for themselves."""

    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    name: str
    image: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    role: Role
    role_locked: bool = False
    verified: bool = False
    email_verified: Optional[datetime] = None
    phone_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "Profile":
        return cls(
            id=user.id,
            email=user.email,
            phone=user.phone,
            name=user.name,
            image=user.avatar,
            bio=user.bio,
            city=user.city,
            role=user.role,
            role_locked=user.role_locked,
            verified=user.verified,
            email_verified=user.email_verified,
            phone_verified=user.phone_verified,
            created_at=user.created_at,
        )


class UpdateProfileRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    image: Optional[str] = Field(None, max_length=2048)
    bio: Optional[str] = Field(None, max_length=1000)
    city: Optional[str] = Field(None, max_length=100)


class ChooseRoleRequest(CamelModel):
    role: Role


class CapabilitiesResponse(CamelModel):
    role: Role
    capabilities: list[Capability]


class SendPhoneVerificationRequest(CamelModel):
    phone: str = Field(..., min_length=1)


class ConfirmCodeRequest(CamelModel):
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit verification code")


class VerificationSentResponse(CamelModel):
    success: bool = True
    message: str
    debug_code: Optional[str] = None


class VerificationConfirmedResponse(CamelModel):
    success: bool = True
    verified: bool = True
    message: str
