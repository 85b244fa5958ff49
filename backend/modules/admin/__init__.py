"""
Admin module.

User moderation for holders of the MODERATE_USERS capability.
"""

from .models import AdminUserListResponse, AdminUserView
from .service import AdminService

__all__ = ["AdminService", "AdminUserView", "AdminUserListResponse"]
