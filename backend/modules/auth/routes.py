"""
Authentication API endpoints.

Every sign-in channel returns the same session: the token in the JSON body
for native shells, and (except for Apple) the same token as an HTTP-only
cookie for browsers and web views.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from api.dependencies import get_auth_service, get_session_bridge
from api.middleware.auth import get_current_user
from shared.config import Settings, get_settings
from shared.exceptions import PawzrError
from shared.models import AuthenticatedUser

from .bridge import SessionBridge
from .models import (
    AppleTokenRequest,
    GoogleTokenRequest,
    LoginRequest,
    OtpSentResponse,
    PhoneVerificationResponse,
    RedeemTokenRequest,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    SessionGrant,
    SessionResponse,
    VerifyOtpRequest,
)
from .pages import render_error_page, render_success_page
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_response(
    grant: SessionGrant,
    response: Response,
    bridge: SessionBridge,
    redirect_to: Optional[str] = None,
) -> SessionResponse:
    bridge.attach(response, grant.token)
    return SessionResponse(user=grant.user, token=grant.token, redirect_to=redirect_to)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create an account with email and/or phone and a password."""
    user = await service.register(request)
    return RegisterResponse(user=user)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> SessionResponse:
    grant = await service.login_with_password(request.email, request.password)
    return _session_response(grant, response, bridge)


@router.post("/logout")
async def logout(
    response: Response,
    bridge: SessionBridge = Depends(get_session_bridge),
) -> dict:
    bridge.clear(response)
    return {"success": True}


@router.get("/session", response_model=AuthenticatedUser)
async def get_session(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Return the claims of the presented session."""
    return user


# ---------------------------------------------------------------------------
# Phone OTP
# ---------------------------------------------------------------------------


@router.post("/phone/send-otp", response_model=OtpSentResponse, response_model_exclude_none=True)
async def send_phone_otp(
    request: SendOtpRequest,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> OtpSentResponse:
    """
    Send a login code to a phone number.

    In debug mode the code is echoed back so the flow can be exercised
    without an SMS gateway.
    """
    code = await service.send_phone_login_code(request.phone)
    return OtpSentResponse(
        message="OTP sent successfully",
        debug_code=code if settings.debug else None,
    )


@router.post("/phone/verify-otp", response_model=PhoneVerificationResponse, response_model_exclude_none=True)
async def verify_phone_otp(
    request: VerifyOtpRequest,
    service: AuthService = Depends(get_auth_service),
) -> PhoneVerificationResponse:
    return await service.verify_phone_login_code(request.phone, request.otp, request.purpose)


@router.post("/phone/session", response_model=SessionResponse)
async def redeem_phone_session(
    request: RedeemTokenRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> SessionResponse:
    """Trade a phone login token for a session."""
    grant = await service.redeem_phone_login_token(request.user_id, request.token)
    return _session_response(grant, response, bridge, redirect_to="/")


# ---------------------------------------------------------------------------
# Native OAuth
# ---------------------------------------------------------------------------


@router.post("/google-token", response_model=SessionResponse)
async def google_token(
    request: GoogleTokenRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> SessionResponse:
    grant = await service.exchange_google_token(request.access_token)
    return _session_response(grant, response, bridge)


@router.post("/apple-token", response_model=SessionResponse)
async def apple_token(
    request: AppleTokenRequest,
    service: AuthService = Depends(get_auth_service),
) -> SessionResponse:
    grant = await service.exchange_apple_token(request.id_token, request.user)
    return SessionResponse(user=grant.user, token=grant.token)


# ---------------------------------------------------------------------------
# External-browser mobile OAuth
# ---------------------------------------------------------------------------


@router.get("/mobile-signin")
async def mobile_signin(
    service: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    """Send the system browser to the Google consent screen."""
    return RedirectResponse(service.mobile_signin_url(), status_code=302)


@router.get("/mobile-callback", response_class=HTMLResponse)
async def mobile_callback(
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """
    OAuth redirect target for the mobile sign-in.

    Always answers with a page that deep-links back into the app, either
    with a one-time login token or with an error message.
    """
    scheme = settings.mobile_app_scheme
    if error:
        logger.info(f"Mobile sign-in cancelled at provider: {error}")
        return HTMLResponse(render_error_page(scheme, error), status_code=400)

    try:
        handoff = await service.complete_mobile_signin(code, state)
    except PawzrError as e:
        logger.warning(f"Mobile sign-in failed: {e.code}: {e.message}")
        return HTMLResponse(render_error_page(scheme, e.message), status_code=e.status_code)

    return HTMLResponse(render_success_page(scheme, handoff))


@router.post("/mobile-token", response_model=SessionResponse)
async def redeem_mobile_token(
    request: RedeemTokenRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    bridge: SessionBridge = Depends(get_session_bridge),
) -> SessionResponse:
    """Trade the token handed over by the deep link for a session."""
    grant = await service.redeem_mobile_token(request.user_id, request.token)
    return _session_response(grant, response, bridge, redirect_to="/")
