"""
Session authentication middleware.

Resolves the session from a bearer header or the session cookie and
enforces role capabilities.
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.auth.bridge import SessionBridge
from modules.auth.exceptions import InvalidSessionError
from modules.auth.policy import Capability, ensure_capability
from modules.auth.session import SessionCodec
from shared.models import AuthenticatedUser

from ..dependencies import get_session_bridge, get_session_codec

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def _presented_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    bridge: SessionBridge,
) -> Optional[str]:
    bearer = credentials.credentials if credentials else None
    return bridge.extract(request, bearer)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    codec: SessionCodec = Depends(get_session_codec),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return codec.validate(_presented_token(request, credentials, bridge))


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    codec: SessionCodec = Depends(get_session_codec),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> Optional[AuthenticatedUser]:
    """Dependency that returns the session user, or None for anonymous or broken sessions."""
    token = _presented_token(request, credentials, bridge)
    if not token:
        return None

    try:
        return codec.validate(token)
    except InvalidSessionError:
        return None


def require_capability(capability: Capability) -> Callable:
    """
    Build a dependency that requires a session whose role holds a capability.

    Usage:
        @router.get("/users")
        async def list_users(user: AuthenticatedUser = Depends(require_capability(Capability.MODERATE_USERS))):
            ...
    """

    async def dependency(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        ensure_capability(user, capability)
        return user

    return dependency


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
