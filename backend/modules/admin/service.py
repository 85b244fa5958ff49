"""
Admin moderation service.

Moderators list users, suspend or reinstate them, verify profiles and
reassign roles. Suspension and verification changes are pushed to the
affected user's real-time channel so open clients can react; a role
change takes effect at the user's next sign-in.
"""

import logging
from typing import Optional

from modules.auth.exceptions import UserNotFoundError
from modules.auth.interfaces import IUserRepository
from modules.auth.models import User
from shared.exceptions import ValidationError
from shared.models import Role
from shared.realtime import RealtimeClient, RealtimeEvent, user_channel

from .models import AdminUserListResponse, AdminUserView, VerificationType

logger = logging.getLogger(__name__)


class AdminService:
    """User moderation operations. Callers must hold MODERATE_USERS."""

    def __init__(self, users: IUserRepository, realtime: RealtimeClient):
        self._users = users
        self._realtime = realtime

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
        role: Optional[Role] = None,
    ) -> AdminUserListResponse:
        users, total = self._users.list_users(page, page_size, role)
        return AdminUserListResponse(
            users=[AdminUserView.from_user(u) for u in users],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def set_suspended(self, actor_id: str, user_id: str, suspend: bool) -> AdminUserView:
        if actor_id == user_id and suspend:
            raise ValidationError("You cannot suspend your own account", code="SELF_SUSPEND")

        user = self._update(user_id, {"suspended": suspend})
        logger.info(f"Admin {actor_id} set suspended={suspend} on user {user_id}")
        await self._realtime.publish(
            user_channel(user_id),
            RealtimeEvent.ACCOUNT_UPDATED,
            {"suspended": suspend},
        )
        return AdminUserView.from_user(user)

    async def verify_user(self, actor_id: str, user_id: str, kind: VerificationType) -> AdminUserView:
        user = self._update(user_id, {"verified": True})
        logger.info(f"Admin {actor_id} verified {kind.value} of user {user_id}")
        await self._realtime.publish(
            user_channel(user_id),
            RealtimeEvent.ACCOUNT_UPDATED,
            {"verified": True, "type": kind.value},
        )
        return AdminUserView.from_user(user)

    async def change_role(self, actor_id: str, user_id: str, role: Role) -> AdminUserView:
        user = self._update(user_id, {"role": role.value, "role_locked": True})
        logger.info(f"Admin {actor_id} changed role of user {user_id} to {role.value}")
        return AdminUserView.from_user(user)

    def _update(self, user_id: str, changes: dict) -> User:
        user = self._users.update(user_id, changes)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
