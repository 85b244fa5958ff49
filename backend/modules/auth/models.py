"""
Authentication module data models.

These models define the data structures used by the auth module and
exposed to other modules through the interface. Wire-facing models use
camelCase aliases because the web and native clients speak camelCase.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from shared.models import AuthenticatedUser, Role


class CamelModel(BaseModel):
    """Base for request/response bodies exchanged with the clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CodeKind(str, Enum):
    """Discriminates the purpose of a verification code."""

    EMAIL_VERIFY = "EMAIL_VERIFY"
    PHONE_VERIFY = "PHONE_VERIFY"
    PHONE_LOGIN_OTP = "PHONE_LOGIN_OTP"
    PHONE_LOGIN_TOKEN = "PHONE_LOGIN_TOKEN"
    MOBILE_LOGIN_TOKEN = "MOBILE_LOGIN_TOKEN"


class User(BaseModel):
    """
    A persisted user record.

    The password hash is excluded from serialization so a User can never
    leak it through a response body.
    """

    id: str = Field(..., description="User ID")
    email: Optional[str] = Field(None, description="Email address (unique)")
    phone: Optional[str] = Field(None, description="Normalized phone number (unique)")
    password_hash: Optional[str] = Field(None, exclude=True)
    name: str = Field(default="User", description="Display name")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    bio: Optional[str] = None
    city: Optional[str] = None
    role: Role = Field(default=Role.OWNER)
    role_locked: bool = Field(default=False, description="Role chosen; only admins may change it")
    verified: bool = Field(default=False, description="Profile verified by an admin")
    suspended: bool = Field(default=False)
    email_verified: Optional[datetime] = None
    phone_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public(self) -> "PublicUser":
        return PublicUser(
            id=self.id,
            email=self.email,
            name=self.name,
            role=self.role,
            image=self.avatar,
        )

    def to_session_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(
            id=self.id,
            email=self.email,
            name=self.name,
            avatar=self.avatar,
            role=self.role,
        )


class PublicUser(CamelModel):
    """The user projection returned by authentication endpoints."""

    id: str
    email: Optional[str] = None
    name: str
    role: Role
    image: Optional[str] = None


class VerificationCode(BaseModel):
    """A one-time code or login token."""

    id: str
    user_id: Optional[str] = None
    target: str = Field(..., description="Email, phone or user ID the code was issued for")
    code: str
    kind: CodeKind
    expires_at: datetime
    consumed: bool = False
    created_at: Optional[datetime] = None


class ExternalIdentity(BaseModel):
    """Identity asserted by an external provider (Google, Apple)."""

    provider: str
    subject: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class SessionGrant(BaseModel):
    """A freshly minted session and the user it belongs to."""

    user: PublicUser
    token: str


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=100)
    role: Role

    @model_validator(mode="after")
    def _require_contact(self) -> "RegisterRequest":
        if not self.email and not self.phone:
            raise ValueError("Either email or phone is required")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SendOtpRequest(CamelModel):
    phone: str = Field(..., min_length=1)


class OtpPurpose(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"


class VerifyOtpRequest(CamelModel):
    phone: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)
    purpose: OtpPurpose = OtpPurpose.LOGIN


class RedeemTokenRequest(CamelModel):
    token: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class GoogleTokenRequest(CamelModel):
    access_token: str = Field(..., min_length=1)
    id_token: Optional[str] = None


class AppleFullName(CamelModel):
    given_name: Optional[str] = None
    family_name: Optional[str] = None


class AppleUserHint(CamelModel):
    """Profile data the native Sign in with Apple sheet returns on first sign-in."""

    email: Optional[str] = None
    full_name: Optional[AppleFullName] = None

    def display_name(self) -> Optional[str]:
        if not self.full_name:
            return None
        parts = [p for p in (self.full_name.given_name, self.full_name.family_name) if p]
        return " ".join(parts) or None


class AppleTokenRequest(CamelModel):
    id_token: str = Field(..., min_length=1)
    user: Optional[AppleUserHint] = None


# ---------------------------------------------------------------------------
# Response bodies
# ---------------------------------------------------------------------------


class SessionResponse(CamelModel):
    success: bool = True
    user: PublicUser
    token: str
    redirect_to: Optional[str] = None


class RegisterResponse(CamelModel):
    message: str = "User created successfully"
    user: PublicUser


class OtpSentResponse(CamelModel):
    success: bool = True
    message: str
    debug_code: Optional[str] = None


class PhoneVerificationResponse(CamelModel):
    """
    Result of a phone OTP verification.

    Either carries a phone login token for an existing account, or
    signals that the verified number has no account yet.
    """

    success: bool = True
    verified: bool = True
    phone: Optional[str] = None
    phone_login_token: Optional[str] = None
    user: Optional[PublicUser] = None
    needs_signup: bool = False


class MobileHandoff(BaseModel):
    """One-time token handed to the native shell after external-browser OAuth."""

    user_id: str
    token: str
