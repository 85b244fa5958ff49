"""
Authentication service implementation.

One entry point per sign-in channel: email/password, phone OTP, Google and
Apple native tokens, and the external-browser mobile OAuth handoff. Every
successful channel ends in the same place: a suspension check followed by
a freshly minted session.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from shared.config import Settings
from shared.exceptions import ConflictError, ValidationError
from shared.models import DEFAULT_ROLE, SELF_SERVICE_ROLES

from .codes import CodeIssuer
from .contact import MIN_PHONE_DIGITS, normalize_email, normalize_phone, phone_digit_count
from .delivery import deliver_code
from .exceptions import (
    AccountSuspendedError,
    DuplicateAccountError,
    EmailUnavailableError,
    InvalidCredentialsError,
    NoAccountForTargetError,
    UpstreamAuthError,
    UserNotFoundError,
)
from .identity import AppleIdentityVerifier, GoogleOAuthClient
from .interfaces import ICodeSender, IUserRepository
from .models import (
    AppleUserHint,
    CodeKind,
    MobileHandoff,
    OtpPurpose,
    PhoneVerificationResponse,
    PublicUser,
    RegisterRequest,
    SessionGrant,
    User,
)
from .passwords import hash_password, verify_password
from .session import SessionCodec, utcnow

logger = logging.getLogger(__name__)


class AuthService:
    """
    Implementation of the authentication service.

    Repositories are synchronous; password hashing runs in a worker thread
    so bcrypt's cost factor doesn't stall the event loop.
    """

    def __init__(
        self,
        users: IUserRepository,
        codes: CodeIssuer,
        sessions: SessionCodec,
        google: GoogleOAuthClient,
        apple: AppleIdentityVerifier,
        sender: ICodeSender,
        settings: Settings,
    ):
        self._users = users
        self._codes = codes
        self._sessions = sessions
        self._google = google
        self._apple = apple
        self._sender = sender
        self._otp_ttl = timedelta(seconds=settings.otp_ttl)
        self._token_ttl = timedelta(seconds=settings.login_token_ttl)
        self._mobile_redirect_uri = f"{settings.public_base_url.rstrip('/')}/api/auth/mobile-callback"

    # ------------------------------------------------------------------
    # Email / password
    # ------------------------------------------------------------------

    async def register(self, request: RegisterRequest) -> PublicUser:
        """
        Create an account with a password.

        The chosen role is locked immediately; users created this way
        never pass through role onboarding.

        Raises:
            ValidationError: If the role isn't self-service or the phone is malformed
            DuplicateAccountError: If the email or phone already has an account
        """
        if request.role not in SELF_SERVICE_ROLES:
            raise ValidationError("Invalid role", code="INVALID_ROLE")

        email = normalize_email(request.email) if request.email else None
        phone = normalize_phone(request.phone) if request.phone else None
        if phone is not None and phone_digit_count(phone) < MIN_PHONE_DIGITS:
            raise ValidationError("Invalid phone number", code="INVALID_PHONE")

        if email and self._users.get_by_email(email):
            raise DuplicateAccountError("email")
        if phone and self._users.get_by_phone(phone):
            raise DuplicateAccountError("phone")

        password_hash = await asyncio.to_thread(hash_password, request.password)
        try:
            user = self._users.create({
                "email": email,
                "phone": phone,
                "password_hash": password_hash,
                "name": request.name.strip(),
                "role": request.role.value,
                "role_locked": True,
            })
        except ConflictError:
            raise DuplicateAccountError("email" if email else "phone")

        logger.info(f"Registered user {user.id} as {user.role.value}")
        return user.to_public()

    async def login_with_password(self, email: str, password: str) -> SessionGrant:
        """
        Raises:
            InvalidCredentialsError: Unknown email, password-less account or wrong password
            AccountSuspendedError: If the password matched but the account is suspended
        """
        user = self._users.get_by_email(normalize_email(email))
        if user is None or not user.password_hash:
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise InvalidCredentialsError()

        return self.issue_session(user)

    # ------------------------------------------------------------------
    # Phone OTP
    # ------------------------------------------------------------------

    async def send_phone_login_code(self, phone: str) -> str:
        """
        Issue a login OTP for a phone number and hand it to delivery.

        A delivery failure is logged, not raised: the code is already
        stored and the user can request another.

        Returns:
            The issued code (callers expose it only in debug mode)
        """
        normalized = normalize_phone(phone)
        if phone_digit_count(normalized) < MIN_PHONE_DIGITS:
            raise ValidationError("Invalid phone number", code="INVALID_PHONE")

        code = self._codes.issue(normalized, CodeKind.PHONE_LOGIN_OTP, self._otp_ttl)
        await deliver_code(self._sender, normalized, code, CodeKind.PHONE_LOGIN_OTP)
        return code

    async def verify_phone_login_code(
        self,
        phone: str,
        otp: str,
        purpose: OtpPurpose = OtpPurpose.LOGIN,
    ) -> PhoneVerificationResponse:
        """
        Consume a phone OTP.

        For an existing account, issues a short-lived phone login token
        that the client redeems for a session. For an unknown number,
        login fails with NoAccountForTargetError while signup reports the
        number as verified so the client can continue to registration.
        """
        normalized = normalize_phone(phone)
        self._codes.verify(normalized, otp.strip(), CodeKind.PHONE_LOGIN_OTP)

        user = self._users.get_by_phone(normalized)
        if user is None:
            if purpose == OtpPurpose.LOGIN:
                raise NoAccountForTargetError()
            return PhoneVerificationResponse(phone=normalized, needs_signup=True)

        self._ensure_active(user)
        if user.phone_verified is None:
            self._users.update(user.id, {"phone_verified": utcnow().isoformat()})

        token = self._codes.issue_token(user.id, CodeKind.PHONE_LOGIN_TOKEN, self._token_ttl)
        return PhoneVerificationResponse(
            phone=normalized,
            phone_login_token=token,
            user=user.to_public(),
        )

    async def redeem_phone_login_token(self, user_id: str, token: str) -> SessionGrant:
        return self._redeem(user_id, token, CodeKind.PHONE_LOGIN_TOKEN)

    # ------------------------------------------------------------------
    # Native OAuth tokens
    # ------------------------------------------------------------------

    async def exchange_google_token(self, access_token: str) -> SessionGrant:
        identity = await self._google.fetch_user_info(access_token)
        user = self._find_or_create(identity.email, identity.name, identity.picture)
        return self.issue_session(user)

    async def exchange_apple_token(
        self,
        identity_token: str,
        hint: Optional[AppleUserHint] = None,
    ) -> SessionGrant:
        """
        Apple only includes the user's name (and sometimes email) on the
        very first sign-in, so the client forwards them as a hint.

        Raises:
            MalformedTokenError: If the identity token can't be decoded
            EmailUnavailableError: If neither the token nor the hint has an email
        """
        identity = await self._apple.decode(identity_token)
        email = identity.email or (hint.email if hint else None)
        if not email:
            raise EmailUnavailableError()

        name = hint.display_name() if hint else None
        user = self._find_or_create(email, name, None)
        return self.issue_session(user)

    # ------------------------------------------------------------------
    # External-browser mobile OAuth
    # ------------------------------------------------------------------

    def mobile_signin_url(self) -> str:
        if not self._google.is_configured:
            raise UpstreamAuthError(GoogleOAuthClient.PROVIDER, "OAuth client is not configured")
        return self._google.authorization_url(self._mobile_redirect_uri, self._sessions.mint_state())

    async def complete_mobile_signin(self, code: Optional[str], state: Optional[str]) -> MobileHandoff:
        """
        Finish the redirect leg and issue a one-time mobile login token.

        The native shell receives the token through a deep link and trades
        it for a session with redeem_mobile_token.
        """
        self._sessions.validate_state(state)
        if not code:
            raise UpstreamAuthError(GoogleOAuthClient.PROVIDER, "Missing authorization code")

        access_token = await self._google.exchange_code(code, self._mobile_redirect_uri)
        identity = await self._google.fetch_user_info(access_token)
        user = self._find_or_create(identity.email, identity.name, identity.picture)
        self._ensure_active(user)

        token = self._codes.issue_token(user.id, CodeKind.MOBILE_LOGIN_TOKEN, self._token_ttl)
        logger.info(f"Issued mobile login token for user {user.id}")
        return MobileHandoff(user_id=user.id, token=token)

    async def redeem_mobile_token(self, user_id: str, token: str) -> SessionGrant:
        return self._redeem(user_id, token, CodeKind.MOBILE_LOGIN_TOKEN)

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def issue_session(self, user: User) -> SessionGrant:
        """Mint a session for a user, refusing suspended accounts."""
        self._ensure_active(user)
        token = self._sessions.mint(user.to_session_user())
        return SessionGrant(user=user.to_public(), token=token)

    def _redeem(self, user_id: str, token: str, kind: CodeKind) -> SessionGrant:
        # A suspended user's token is left in place.
        user = self._users.get_by_id(user_id)
        if user is not None:
            self._ensure_active(user)
        self._codes.redeem(user_id, token, kind)
        if user is None:
            raise UserNotFoundError(user_id)
        return self.issue_session(user)

    def _ensure_active(self, user: User) -> None:
        if user.suspended:
            logger.info(f"Refused session for suspended user {user.id}")
            raise AccountSuspendedError(user.id)

    def _find_or_create(self, email: str, name: Optional[str], avatar: Optional[str]) -> User:
        """
        Resolve an external identity to a local user by email.

        New users start with the default role and an unlocked role so they
        pass through onboarding. The email is not marked verified; an Apple
        hint address is client-supplied. A concurrent first sign-in for the same
        email can hit the unique constraint; the winner's row is used.
        """
        email = normalize_email(email)
        user = self._users.get_by_email(email)
        if user is not None:
            return user

        try:
            user = self._users.create({
                "email": email,
                "name": name or "User",
                "avatar": avatar,
                "role": DEFAULT_ROLE.value,
                "role_locked": False,
            })
        except ConflictError:
            user = self._users.get_by_email(email)
            if user is None:
                raise
            return user

        logger.info(f"Created user {user.id} from external sign-in")
        return user
