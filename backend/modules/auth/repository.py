"""
Auth repositories for database access.

Encapsulates all Supabase queries and data mapping for:
- users
- verification_codes

Note: These repositories do NOT perform authorization checks.
The service layer is responsible for that.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from supabase import PostgrestAPIError

from shared.exceptions import ConflictError, PersistenceError
from shared.models import Role
from shared.repository import BaseRepository

from .models import CodeKind, User, VerificationCode

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class UserRepository(BaseRepository[User]):
    """Repository for user records."""

    TABLE = "users"

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._get_one("id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_phone(self, phone: str) -> Optional[User]:
        return self._get_one("phone", phone)

    def create(self, data: dict[str, Any]) -> User:
        """
        Insert a user.

        Raises:
            ConflictError: If the email or phone is already taken
        """
        result = self._write(
            "users.create",
            lambda: self._db.table(self.TABLE).insert(data).execute(),
            "Account already exists",
        )
        return self._map_to_user(result.data[0])

    def update(self, user_id: str, data: dict[str, Any]) -> Optional[User]:
        """
        Raises:
            ConflictError: If the new email or phone belongs to another user
        """
        payload = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = self._write(
            "users.update",
            lambda: self._db.table(self.TABLE).update(payload).eq("id", user_id).execute(),
            "Email or phone number already in use",
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
        role: Optional[Role] = None,
    ) -> tuple[list[User], int]:
        offset = (page - 1) * page_size

        query = self._db.table(self.TABLE).select("*", count="exact")
        if role:
            query = query.eq("role", role.value)

        result = self._execute(
            "users.list",
            lambda: query.order("created_at", desc=True)
            .range(offset, offset + page_size - 1)
            .execute(),
        )
        users = [self._map_to_user(row) for row in result.data]
        return users, result.count or 0

    def _write(self, operation: str, query, conflict_message: str):
        try:
            return query()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError(conflict_message, code="DUPLICATE_ACCOUNT")
            logger.error(f"Datastore error during {operation}: {e.message}")
            raise PersistenceError(operation, str(e.message)) from e

    def _get_one(self, column: str, value: str) -> Optional[User]:
        result = self._execute(
            f"users.get_by_{column}",
            lambda: self._db.table(self.TABLE).select("*").eq(column, value).limit(1).execute(),
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map database row to User model."""
        return User(
            id=str(data["id"]),
            email=data.get("email"),
            phone=data.get("phone"),
            password_hash=data.get("password_hash"),
            name=data.get("name") or "User",
            avatar=data.get("avatar"),
            bio=data.get("bio"),
            city=data.get("city"),
            role=Role(data.get("role", Role.OWNER.value)),
            role_locked=data.get("role_locked", False),
            verified=data.get("verified", False),
            suspended=data.get("suspended", False),
            email_verified=data.get("email_verified"),
            phone_verified=data.get("phone_verified"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


class VerificationCodeRepository(BaseRepository[VerificationCode]):
    """Repository for one-time codes and login tokens."""

    TABLE = "verification_codes"

    def delete_for_target(self, target: str, kind: CodeKind) -> int:
        result = self._execute(
            "verification_codes.delete_for_target",
            lambda: self._db.table(self.TABLE)
            .delete()
            .eq("target", target)
            .eq("kind", kind.value)
            .execute(),
        )
        return len(result.data or [])

    def delete_for_user(self, user_id: str, kind: CodeKind) -> int:
        result = self._execute(
            "verification_codes.delete_for_user",
            lambda: self._db.table(self.TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("kind", kind.value)
            .execute(),
        )
        return len(result.data or [])

    def create(
        self,
        target: str,
        code: str,
        kind: CodeKind,
        expires_at: datetime,
        user_id: Optional[str] = None,
    ) -> VerificationCode:
        data = {
            "target": target,
            "code": code,
            "kind": kind.value,
            "expires_at": expires_at.isoformat(),
            "user_id": user_id,
            "consumed": False,
        }
        result = self._execute(
            "verification_codes.create",
            lambda: self._db.table(self.TABLE).insert(data).execute(),
        )
        return self._map_to_code(result.data[0])

    def find_live(
        self,
        target: str,
        code: str,
        kind: CodeKind,
        now: datetime,
    ) -> Optional[VerificationCode]:
        return self._find_live("target", target, code, kind, now)

    def find_live_for_user(
        self,
        user_id: str,
        code: str,
        kind: CodeKind,
        now: datetime,
    ) -> Optional[VerificationCode]:
        return self._find_live("user_id", user_id, code, kind, now)

    def delete(self, code_id: str) -> bool:
        result = self._execute(
            "verification_codes.delete",
            lambda: self._db.table(self.TABLE).delete().eq("id", code_id).execute(),
        )
        return bool(result.data)

    def mark_consumed(self, code_id: str) -> bool:
        # The consumed=false filter makes this a compare-and-set.
        result = self._execute(
            "verification_codes.mark_consumed",
            lambda: self._db.table(self.TABLE)
            .update({"consumed": True})
            .eq("id", code_id)
            .eq("consumed", False)
            .execute(),
        )
        return bool(result.data)

    def _find_live(
        self,
        column: str,
        value: str,
        code: str,
        kind: CodeKind,
        now: datetime,
    ) -> Optional[VerificationCode]:
        result = self._execute(
            "verification_codes.find_live",
            lambda: self._db.table(self.TABLE)
            .select("*")
            .eq(column, value)
            .eq("code", code)
            .eq("kind", kind.value)
            .eq("consumed", False)
            .gt("expires_at", now.isoformat())
            .limit(1)
            .execute(),
        )
        if not result.data:
            return None
        return self._map_to_code(result.data[0])

    def _map_to_code(self, data: dict[str, Any]) -> VerificationCode:
        """Map database row to VerificationCode model."""
        return VerificationCode(
            id=str(data["id"]),
            user_id=data.get("user_id"),
            target=data["target"],
            code=data["code"],
            kind=CodeKind(data["kind"]),
            expires_at=data["expires_at"],
            consumed=data.get("consumed", False),
            created_at=data.get("created_at"),
        )
