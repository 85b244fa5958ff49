"""
User profile and verification endpoints.

- /api/users: the session user's own profile, onboarding role, capabilities
- /api/verify: email and phone verification codes
"""

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_profile_service, get_session_bridge
from api.middleware.auth import get_current_user
from modules.auth.bridge import SessionBridge
from modules.auth.models import SessionResponse
from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .models import (
    CapabilitiesResponse,
    ChooseRoleRequest,
    ConfirmCodeRequest,
    Profile,
    SendPhoneVerificationRequest,
    UpdateProfileRequest,
    VerificationConfirmedResponse,
    VerificationSentResponse,
)
from .service import ProfileService

router = APIRouter()
verify_router = APIRouter()


@router.get("/me", response_model=Profile)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return await service.get_profile(user.id)


@router.patch("/me", response_model=Profile)
async def update_current_user_profile(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    return await service.update_profile(user.id, request)


@router.post("/me/role", response_model=SessionResponse)
async def choose_role(
    request: ChooseRoleRequest,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> SessionResponse:
    """
    Pick a role during onboarding.

    The session cookie is replaced so the new role takes effect at once.
    """
    grant = await service.choose_role(user.id, request.role)
    bridge.attach(response, grant.token)
    return SessionResponse(user=grant.user, token=grant.token)


@router.get("/me/capabilities", response_model=CapabilitiesResponse)
async def get_capabilities(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> CapabilitiesResponse:
    return service.capabilities(user.role)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


@verify_router.post("/email", response_model=VerificationSentResponse, response_model_exclude_none=True)
async def send_email_verification(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    settings: Settings = Depends(get_settings),
) -> VerificationSentResponse:
    code = await service.send_email_verification(user.id)
    return VerificationSentResponse(
        message="Verification code sent to your email",
        debug_code=code if settings.debug else None,
    )


@verify_router.put("/email", response_model=VerificationConfirmedResponse)
async def confirm_email_verification(
    request: ConfirmCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> VerificationConfirmedResponse:
    await service.confirm_email(user.id, request.code)
    return VerificationConfirmedResponse(message="Email verified successfully")


@verify_router.post("/phone", response_model=VerificationSentResponse, response_model_exclude_none=True)
async def send_phone_verification(
    request: SendPhoneVerificationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    settings: Settings = Depends(get_settings),
) -> VerificationSentResponse:
    code = await service.send_phone_verification(user.id, request.phone)
    return VerificationSentResponse(
        message="Verification code sent to your phone",
        debug_code=code if settings.debug else None,
    )


@verify_router.put("/phone", response_model=VerificationConfirmedResponse)
async def confirm_phone_verification(
    request: ConfirmCodeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> VerificationConfirmedResponse:
    await service.confirm_phone(user.id, request.code)
    return VerificationConfirmedResponse(message="Phone verified successfully")
