"""
Profile service.

Reads and edits the session user's own record: profile fields, the
one-time onboarding role choice, and email/phone verification.
"""

import logging
from datetime import timedelta

from modules.auth.codes import CodeIssuer
from modules.auth.contact import MIN_PHONE_DIGITS, normalize_phone, phone_digit_count
from modules.auth.delivery import deliver_code
from modules.auth.exceptions import RoleLockedError, UserNotFoundError
from modules.auth.interfaces import ICodeSender, IUserRepository
from modules.auth.models import CodeKind, SessionGrant, User
from modules.auth.policy import capabilities_for
from modules.auth.service import AuthService
from modules.auth.session import utcnow
from shared.config import Settings
from shared.exceptions import ConflictError, ValidationError
from shared.models import SELF_SERVICE_ROLES, Role

from .models import CapabilitiesResponse, Profile, UpdateProfileRequest

logger = logging.getLogger(__name__)


class ProfileService:
    """Self-service profile operations for an authenticated user."""

    def __init__(
        self,
        users: IUserRepository,
        codes: CodeIssuer,
        sender: ICodeSender,
        auth: AuthService,
        settings: Settings,
    ):
        self._users = users
        self._codes = codes
        self._sender = sender
        self._auth = auth
        self._code_ttl = timedelta(seconds=settings.otp_ttl)

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def get_profile(self, user_id: str) -> Profile:
        return Profile.from_user(self._require_user(user_id))

    async def update_profile(self, user_id: str, request: UpdateProfileRequest) -> Profile:
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "image" in changes:
            changes["avatar"] = changes.pop("image")
        if not changes:
            return await self.get_profile(user_id)

        user = self._users.update(user_id, changes)
        if user is None:
            raise UserNotFoundError(user_id)
        return Profile.from_user(user)

    async def choose_role(self, user_id: str, role: Role) -> SessionGrant:
        """
        Set the role during onboarding. Allowed once.

        Returns a fresh session so the new role is visible to the
        capability checks immediately.

        Raises:
            ValidationError: If the role isn't self-service
            RoleLockedError: If the role was already chosen
        """
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError("Invalid role", code="INVALID_ROLE")

        user = self._require_user(user_id)
        if user.role_locked:
            raise RoleLockedError()

        updated = self._users.update(user_id, {"role": role.value, "role_locked": True})
        if updated is None:
            raise UserNotFoundError(user_id)

        logger.info(f"User {user_id} chose role {role.value}")
        return self._auth.issue_session(updated)

    def capabilities(self, role: Role) -> CapabilitiesResponse:
        return CapabilitiesResponse(
            role=role,
            capabilities=sorted(capabilities_for(role), key=lambda c: c.value),
        )

    # ------------------------------------------------------------------
    # Contact verification
    # ------------------------------------------------------------------

    async def send_email_verification(self, user_id: str) -> str:
        user = self._require_user(user_id)
        if not user.email:
            raise ValidationError("No email address on this account", code="NO_EMAIL")
        if user.email_verified is not None:
            raise ValidationError("Email already verified", code="ALREADY_VERIFIED")

        code = self._codes.issue(user.email, CodeKind.EMAIL_VERIFY, self._code_ttl, user_id=user.id)
        await deliver_code(self._sender, user.email, code, CodeKind.EMAIL_VERIFY)
        return code

    async def confirm_email(self, user_id: str, code: str) -> None:
        user = self._require_user(user_id)
        if not user.email:
            raise ValidationError("No email address on this account", code="NO_EMAIL")

        self._codes.verify(user.email, code, CodeKind.EMAIL_VERIFY)
        self._users.update(user_id, {"email_verified": utcnow().isoformat()})
        logger.info(f"User {user_id} verified their email")

    async def send_phone_verification(self, user_id: str, phone: str) -> str:
        """
        Attach a phone number to the account and send a code to it.

        The number is stored unverified right away; confirming the code
        sets phone_verified.

        Raises:
            ValidationError: If the number has fewer than 10 digits
            ConflictError: If another account already owns the number
        """
        normalized = normalize_phone(phone)
        if phone_digit_count(normalized) < MIN_PHONE_DIGITS:
            raise ValidationError("Invalid phone number", code="INVALID_PHONE")

        user = self._require_user(user_id)
        owner = self._users.get_by_phone(normalized)
        if owner is not None and owner.id != user.id:
            raise ConflictError("Phone number already in use", code="PHONE_IN_USE")

        if user.phone != normalized:
            self._users.update(user_id, {"phone": normalized, "phone_verified": None})

        code = self._codes.issue(normalized, CodeKind.PHONE_VERIFY, self._code_ttl, user_id=user.id)
        await deliver_code(self._sender, normalized, code, CodeKind.PHONE_VERIFY)
        return code

    async def confirm_phone(self, user_id: str, code: str) -> str:
        """Returns the verified phone number."""
        record = self._codes.verify_for_user(user_id, code, CodeKind.PHONE_VERIFY)
        self._users.update(user_id, {"phone": record.target, "phone_verified": utcnow().isoformat()})
        logger.info(f"User {user_id} verified their phone")
        return record.target
