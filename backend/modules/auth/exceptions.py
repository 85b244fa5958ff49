"""
Authentication module exceptions.

These exceptions are raised by the auth module and rendered by the API
error handlers with the status of their base class.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class MissingSessionError(AuthenticationError):
    """Raised when no session token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_SESSION")


class InvalidSessionError(AuthenticationError):
    """Raised when a session token fails signature or structure checks."""

    def __init__(self, message: str = "Invalid session", code: str = "INVALID_SESSION"):
        super().__init__(message, code=code)


class ExpiredSessionError(InvalidSessionError):
    """Raised when a session token is past its validity window."""

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message, code="SESSION_EXPIRED")


class InvalidCredentialsError(AuthenticationError):
    """Raised on a failed password login. Does not say which field was wrong."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InvalidOrExpiredCodeError(ValidationError):
    """Raised when a one-time code or login token does not match a live record."""

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message, code="INVALID_OR_EXPIRED_CODE")


class NoAccountForTargetError(NotFoundError):
    """
    Raised when a verified phone number has no account during login.

    Deliberately tells the client to route the user to registration.
    """

    def __init__(self, message: str = "No account found with this phone number. Please sign up first."):
        super().__init__(message, code="NO_ACCOUNT", details={"needsSignup": True})


class AccountSuspendedError(AuthorizationError):
    """Raised when a suspended user tries to authenticate."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__(
            "Your account has been suspended",
            code="ACCOUNT_SUSPENDED",
            details={"user_id": user_id} if user_id else None,
        )


class UpstreamAuthError(AuthenticationError):
    """Raised when an identity provider is unreachable or rejects the assertion."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            f"Failed to authenticate with {provider}: {message}",
            code="UPSTREAM_AUTH_FAILURE",
            details={"provider": provider},
        )


class MalformedTokenError(AuthenticationError):
    """Raised when an identity token cannot be decoded or lacks a subject."""

    def __init__(self, message: str = "Invalid identity token"):
        super().__init__(message, code="MALFORMED_TOKEN")


class EmailUnavailableError(ValidationError):
    """Raised when neither the identity token nor the profile hint carries an email."""

    def __init__(self):
        super().__init__("No email available", code="EMAIL_UNAVAILABLE")


class InvalidOAuthStateError(AuthenticationError):
    """Raised when the OAuth callback state is missing, forged or stale."""

    def __init__(self):
        super().__init__("Invalid OAuth state", code="INVALID_OAUTH_STATE")


class DuplicateAccountError(ConflictError):
    """Raised when registering with an email or phone that already has an account."""

    def __init__(self, field: str):
        super().__init__(
            f"{field.capitalize()} already registered",
            code="DUPLICATE_ACCOUNT",
            details={"field": field},
        )


class UserNotFoundError(NotFoundError):
    """Raised when a referenced user doesn't exist in the database."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when the session role lacks a required capability."""

    def __init__(self, capability: str, user_role: str):
        super().__init__(
            f"Insufficient permissions. Required: {capability}, role: {user_role}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_capability": capability, "user_role": user_role},
        )


class RoleLockedError(AuthorizationError):
    """Raised when a user tries to change a role that was already chosen."""

    def __init__(self):
        super().__init__(
            "Role has already been selected. Contact support to change it.",
            code="ROLE_LOCKED",
        )
