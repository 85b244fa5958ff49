"""
Session codec.

Sessions are HS256 JWTs signed with the process-wide session secret. Any
holder of the secret can validate a session without a database lookup.
The same secret signs the short-lived OAuth ``state`` values used by the
external-browser mobile sign-in.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from shared.models import AuthenticatedUser, Role

from .exceptions import (
    ExpiredSessionError,
    InvalidOAuthStateError,
    InvalidSessionError,
    MissingSessionError,
)

SESSION_AUDIENCE = "pawzr-session"
STATE_AUDIENCE = "pawzr-oauth-state"

# Time claims are checked against the codec clock, not the wall clock.
_CLOCK_CHECKS_OFF = {"verify_exp": False, "verify_iat": False, "verify_nbf": False}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionClaims(BaseModel):
    """Decoded session token payload."""

    sub: str = Field(..., description="User ID")
    role: Role
    name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None
    iat: int
    exp: int

    def to_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(
            id=self.sub,
            email=self.email,
            name=self.name,
            avatar=self.picture,
            role=self.role,
        )


class SessionCodec:
    """Mints and validates session tokens."""

    ALGORITHM = "HS256"
    STATE_TTL = timedelta(minutes=10)

    def __init__(
        self,
        secret: str,
        max_age: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("Session secret is not configured. Set SESSION_SECRET.")
        self._secret = secret
        self._max_age = max_age
        self._clock = clock

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    def mint(self, user: AuthenticatedUser) -> str:
        """Produce a signed session token for a user."""
        now = self._clock()
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "name": user.name,
            "email": user.email,
            "picture": user.avatar,
            "aud": SESSION_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + self._max_age).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def validate(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Verify a session token and return the user it names.

        Raises:
            MissingSessionError: If no token is given
            ExpiredSessionError: If the token is past its exp claim
            InvalidSessionError: On signature mismatch or malformed payload
        """
        if not token:
            raise MissingSessionError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.ALGORITHM],
                audience=SESSION_AUDIENCE,
                options={"require": ["sub", "exp", "iat"], **_CLOCK_CHECKS_OFF},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidSessionError(f"Invalid session: {e}")

        try:
            claims = SessionClaims(**payload)
        except PydanticValidationError:
            raise InvalidSessionError("Invalid session: malformed claims")

        if self._expired(claims.exp):
            raise ExpiredSessionError()

        return claims.to_user()

    def mint_state(self) -> str:
        """Produce a signed OAuth state value (CSRF guard for redirect flows)."""
        now = self._clock()
        payload = {
            "nonce": secrets.token_urlsafe(16),
            "aud": STATE_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + self.STATE_TTL).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def validate_state(self, state: Optional[str]) -> None:
        """
        Raises:
            InvalidOAuthStateError: If the state is missing, forged or stale
        """
        if not state:
            raise InvalidOAuthStateError()
        try:
            payload = jwt.decode(
                state,
                self._secret,
                algorithms=[self.ALGORITHM],
                audience=STATE_AUDIENCE,
                options={"require": ["nonce", "exp"], **_CLOCK_CHECKS_OFF},
            )
        except jwt.InvalidTokenError:
            raise InvalidOAuthStateError()
        exp = payload["exp"]
        if not isinstance(exp, (int, float)) or self._expired(exp):
            raise InvalidOAuthStateError()

    def _expired(self, exp: float) -> bool:
        return exp <= self._clock().timestamp()
