"""
Authentication module interfaces.

Services depend on these protocols, not on the Supabase repositories or a
concrete delivery channel. Tests plug in in-memory implementations.
"""

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import Role

from .models import CodeKind, User, VerificationCode


@runtime_checkable
class IUserRepository(Protocol):
    """Persistence contract for user records."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_phone(self, phone: str) -> Optional[User]:
        ...

    def create(self, data: dict[str, Any]) -> User:
        """
        Insert a user.

        Raises:
            ConflictError: If the email or phone is already taken
        """
        ...

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        """Update fields on a user; returns None if the user doesn't exist."""
        ...

    def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
        role: Optional[Role] = None,
    ) -> tuple[list[User], int]:
        """Return one page of users (newest first) and the total count."""
        ...


@runtime_checkable
class IVerificationCodeRepository(Protocol):
    """Persistence contract for one-time codes and login tokens."""

    def delete_for_target(self, target: str, kind: CodeKind) -> int:
        """Delete every code of a kind for a target. Returns rows deleted."""
        ...

    def delete_for_user(self, user_id: str, kind: CodeKind) -> int:
        """Delete every code of a kind owned by a user. Returns rows deleted."""
        ...

    def create(
        self,
        target: str,
        code: str,
        kind: CodeKind,
        expires_at: datetime,
        user_id: Optional[str] = None,
    ) -> VerificationCode:
        ...

    def find_live(
        self,
        target: str,
        code: str,
        kind: CodeKind,
        now: datetime,
    ) -> Optional[VerificationCode]:
        """Find an unconsumed, unexpired code matching (target, code, kind)."""
        ...

    def find_live_for_user(
        self,
        user_id: str,
        code: str,
        kind: CodeKind,
        now: datetime,
    ) -> Optional[VerificationCode]:
        """Find an unconsumed, unexpired code matching (user_id, code, kind)."""
        ...

    def delete(self, code_id: str) -> bool:
        """Delete a code by ID. False means another request already removed it."""
        ...

    def mark_consumed(self, code_id: str) -> bool:
        """Flag a code as consumed. False means it was already consumed."""
        ...


@runtime_checkable
class ICodeSender(Protocol):
    """Delivers a one-time code to its owner (email or SMS)."""

    async def send(self, target: str, code: str, kind: CodeKind) -> None:
        """
        Deliver a code.

        Raises:
            Exception: Any delivery failure; callers log and continue.
        """
        ...
