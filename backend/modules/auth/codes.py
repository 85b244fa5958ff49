"""
One-time code issuer.

Issues short numeric codes (OTPs) and opaque login tokens, and verifies
them exactly once. Issuing deletes every earlier code of the same kind for
the same target first, and for user-bound codes every earlier code of that
kind owned by the user, so at most one live code exists per (target, kind)
and per (user, kind).
Two concurrent issuances can briefly leave two live codes; either one then
verifies, which is harmless.

Redemption is guarded by the row delete/update itself: when the datastore
reports that nothing was removed, another request consumed the code first
and this one fails.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from .exceptions import InvalidOrExpiredCodeError
from .interfaces import IVerificationCodeRepository
from .models import CodeKind, VerificationCode
from .session import utcnow

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
TOKEN_BYTES = 32

# Kinds whose records are removed on use; the rest are kept and flagged.
DELETE_ON_USE = frozenset(
    {CodeKind.PHONE_LOGIN_OTP, CodeKind.PHONE_LOGIN_TOKEN, CodeKind.MOBILE_LOGIN_TOKEN}
)


def generate_numeric_code(length: int = CODE_LENGTH) -> str:
    """Uniformly random numeric code, leading zeros preserved."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def generate_login_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


class CodeIssuer:
    """Issues, verifies and redeems verification codes."""

    def __init__(
        self,
        repository: IVerificationCodeRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._codes = repository
        self._clock = clock

    def issue(
        self,
        target: str,
        kind: CodeKind,
        ttl: timedelta,
        user_id: Optional[str] = None,
    ) -> str:
        """
        Issue a numeric OTP for a target.

        Args:
            target: Email or phone the code proves control of
            kind: Code purpose
            ttl: Time until the code expires
            user_id: Owning user, when known

        Returns:
            The generated code
        """
        return self._store(target, generate_numeric_code(), kind, ttl, user_id)

    def issue_token(self, user_id: str, kind: CodeKind, ttl: timedelta) -> str:
        """Issue an opaque single-use login token bound to a user."""
        return self._store(user_id, generate_login_token(), kind, ttl, user_id)

    def verify(self, target: str, code: str, kind: CodeKind) -> VerificationCode:
        """
        Verify and consume a code issued for a target.

        Raises:
            InvalidOrExpiredCodeError: If no live code matches, or another
                request consumed it first
        """
        record = self._codes.find_live(target, code, kind, self._clock())
        if record is None:
            raise InvalidOrExpiredCodeError()
        self._consume(record)
        return record

    def verify_for_user(self, user_id: str, code: str, kind: CodeKind) -> VerificationCode:
        """Verify and consume a code owned by a user (target is looked up from the record)."""
        record = self._codes.find_live_for_user(user_id, code, kind, self._clock())
        if record is None:
            raise InvalidOrExpiredCodeError()
        self._consume(record)
        return record

    def redeem(self, user_id: str, token: str, kind: CodeKind) -> VerificationCode:
        """
        Redeem a login token. Succeeds at most once per issued token.

        Raises:
            InvalidOrExpiredCodeError: If the token is unknown, expired or
                already redeemed
        """
        record = self._codes.find_live_for_user(user_id, token, kind, self._clock())
        if record is None:
            raise InvalidOrExpiredCodeError("Invalid or expired token")
        self._consume(record)
        return record

    def _store(
        self,
        target: str,
        code: str,
        kind: CodeKind,
        ttl: timedelta,
        user_id: Optional[str],
    ) -> str:
        removed = self._codes.delete_for_target(target, kind)
        if user_id is not None and user_id != target:
            # A user holds one live code per kind, whatever it was sent to.
            removed += self._codes.delete_for_user(user_id, kind)
        if removed:
            logger.debug(f"Replaced {removed} earlier {kind.value} code(s)")
        self._codes.create(
            target=target,
            code=code,
            kind=kind,
            expires_at=self._clock() + ttl,
            user_id=user_id,
        )
        return code

    def _consume(self, record: VerificationCode) -> None:
        if record.kind in DELETE_ON_USE:
            consumed = self._codes.delete(record.id)
        else:
            consumed = self._codes.mark_consumed(record.id)
        if not consumed:
            logger.info(f"{record.kind.value} {record.id} was consumed concurrently")
            raise InvalidOrExpiredCodeError()
