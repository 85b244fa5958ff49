"""Admin moderation data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from modules.auth.models import CamelModel, User
from shared.models import Role


class AdminUserView(CamelModel):
    """A user record as moderators see it."""

    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    name: str
    image: Optional[str] = None
    role: Role
    role_locked: bool
    verified: bool
    suspended: bool
    email_verified: Optional[datetime] = None
    phone_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "AdminUserView":
        return cls(
            id=user.id,
            email=user.email,
            phone=user.phone,
            name=user.name,
            image=user.avatar,
            role=user.role,
            role_locked=user.role_locked,
            verified=user.verified,
            suspended=user.suspended,
            email_verified=user.email_verified,
            phone_verified=user.phone_verified,
            created_at=user.created_at,
        )


class AdminUserListResponse(CamelModel):
    users: list[AdminUserView]
    total: int
    page: int
    page_size: int


class SuspendRequest(CamelModel):
    suspend: bool


class VerificationType(str, Enum):
    PROFILE = "profile"


class VerifyUserRequest(CamelModel):
    type: VerificationType = Field(default=VerificationType.PROFILE)


class ChangeRoleRequest(CamelModel):
    role: Role
