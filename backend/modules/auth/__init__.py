"""
Authentication module.

Handles every sign-in channel (password, phone OTP, Google, Apple, mobile
OAuth handoff), session tokens, one-time codes and the role policy.

Public API:
- AuthService: Sign-in channels converging on one session
- SessionCodec: Mint and validate session tokens
- CodeIssuer: One-time codes and login tokens
- Capability, has_capability, ensure_capability: Role policy
- Auth exceptions: InvalidSessionError, AccountSuspendedError, etc.
"""

from .codes import CodeIssuer
from .exceptions import (
    AccountSuspendedError,
    ExpiredSessionError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    InvalidSessionError,
    MissingSessionError,
    NoAccountForTargetError,
    UpstreamAuthError,
    UserNotFoundError,
)
from .models import CodeKind, PublicUser, SessionGrant, User
from .policy import Capability, ROLE_CAPABILITIES, ensure_capability, has_capability
from .service import AuthService
from .session import SessionCodec

__all__ = [
    # Services
    "AuthService",
    "SessionCodec",
    "CodeIssuer",
    # Models
    "CodeKind",
    "User",
    "PublicUser",
    "SessionGrant",
    # Policy
    "Capability",
    "ROLE_CAPABILITIES",
    "has_capability",
    "ensure_capability",
    # Exceptions
    "MissingSessionError",
    "InvalidSessionError",
    "ExpiredSessionError",
    "InvalidCredentialsError",
    "InvalidOrExpiredCodeError",
    "NoAccountForTargetError",
    "AccountSuspendedError",
    "UpstreamAuthError",
    "UserNotFoundError",
    "InsufficientPermissionsError",
]
