"""
Admin API endpoints.

All endpoints require the MODERATE_USERS capability.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_admin_service
from api.middleware.auth import require_capability
from modules.auth.policy import Capability
from shared.models import AuthenticatedUser, Role

from .models import (
    AdminUserListResponse,
    AdminUserView,
    ChangeRoleRequest,
    SuspendRequest,
    VerifyUserRequest,
)
from .service import AdminService

router = APIRouter()

require_moderator = require_capability(Capability.MODERATE_USERS)


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(default=20, ge=1, le=100, description="Items per page"),
    role: Optional[Role] = Query(default=None, description="Filter by role"),
    admin: AuthenticatedUser = Depends(require_moderator),
    service: AdminService = Depends(get_admin_service),
) -> AdminUserListResponse:
    """List users, newest first."""
    return await service.list_users(page, page_size, role)


@router.put("/users/{user_id}/suspend", response_model=AdminUserView)
async def suspend_user(
    user_id: str,
    request: SuspendRequest,
    admin: AuthenticatedUser = Depends(require_moderator),
    service: AdminService = Depends(get_admin_service),
) -> AdminUserView:
    return await service.set_suspended(admin.id, user_id, request.suspend)


@router.put("/users/{user_id}/verify", response_model=AdminUserView)
async def verify_user(
    user_id: str,
    request: VerifyUserRequest,
    admin: AuthenticatedUser = Depends(require_moderator),
    service: AdminService = Depends(get_admin_service),
) -> AdminUserView:
    return await service.verify_user(admin.id, user_id, request.type)


@router.put("/users/{user_id}/role", response_model=AdminUserView)
async def change_user_role(
    user_id: str,
    request: ChangeRoleRequest,
    admin: AuthenticatedUser = Depends(require_moderator),
    service: AdminService = Depends(get_admin_service),
) -> AdminUserView:
    """Reassign a role. The user's existing sessions keep the old role until they sign in again."""
    return await service.change_role(admin.id, user_id, request.role)
