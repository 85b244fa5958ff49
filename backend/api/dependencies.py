"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. External clients (Supabase, Pusher, Google, Apple, Daily)
are constructed here once and handed to the services that use them; no
module keeps its own hidden client singleton.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client

    from modules.admin.service import AdminService
    from modules.auth.bridge import SessionBridge
    from modules.auth.codes import CodeIssuer
    from modules.auth.identity import AppleIdentityVerifier, GoogleOAuthClient
    from modules.auth.interfaces import ICodeSender, IUserRepository, IVerificationCodeRepository
    from modules.auth.service import AuthService
    from modules.auth.session import SessionCodec
    from modules.users.service import ProfileService
    from modules.video.client import DailyClient
    from modules.video.interfaces import IBookingRepository
    from modules.video.service import VideoService
    from shared.realtime import RealtimeClient


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Everything is created lazily on first access and cached
    for the life of the container.

    Use reset() to clear all cached instances for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self.reset()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    # ------------------------------------------------------------------
    # External clients
    # ------------------------------------------------------------------

    @property
    def database(self) -> "Client":
        """Get the Supabase service-role client."""
        if self._database is None:
            from shared.database import create_supabase_client
            self._database = create_supabase_client(self.settings)
        return self._database

    @property
    def realtime(self) -> "RealtimeClient":
        if self._realtime is None:
            from shared.realtime import RealtimeClient
            self._realtime = RealtimeClient.from_settings(self.settings)
        return self._realtime

    @property
    def google(self) -> "GoogleOAuthClient":
        if self._google is None:
            from modules.auth.identity import GoogleOAuthClient
            self._google = GoogleOAuthClient(
                client_id=self.settings.google_client_id,
                client_secret=self.settings.google_client_secret,
                timeout=self.settings.http_timeout,
            )
        return self._google

    @property
    def apple(self) -> "AppleIdentityVerifier":
        if self._apple is None:
            from modules.auth.identity import AppleIdentityVerifier
            self._apple = AppleIdentityVerifier(
                client_id=self.settings.apple_client_id,
                timeout=self.settings.http_timeout,
            )
        return self._apple

    @property
    def daily(self) -> "DailyClient":
        if self._daily is None:
            from modules.video.client import DailyClient
            self._daily = DailyClient(
                api_key=self.settings.daily_api_key,
                base_url=self.settings.daily_api_url,
                timeout=self.settings.http_timeout,
            )
        return self._daily

    @property
    def code_sender(self) -> "ICodeSender":
        if self._code_sender is None:
            from modules.auth.delivery import LoggingCodeSender
            self._code_sender = LoggingCodeSender()
        return self._code_sender

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    @property
    def user_repository(self) -> "IUserRepository":
        if self._user_repository is None:
            from modules.auth.repository import UserRepository
            self._user_repository = UserRepository(self.database)
        return self._user_repository

    @property
    def code_repository(self) -> "IVerificationCodeRepository":
        if self._code_repository is None:
            from modules.auth.repository import VerificationCodeRepository
            self._code_repository = VerificationCodeRepository(self.database)
        return self._code_repository

    @property
    def booking_repository(self) -> "IBookingRepository":
        if self._booking_repository is None:
            from modules.video.repository import BookingRepository
            self._booking_repository = BookingRepository(self.database)
        return self._booking_repository

    # ------------------------------------------------------------------
    # Sessions and codes
    # ------------------------------------------------------------------

    @property
    def session_codec(self) -> "SessionCodec":
        if self._session_codec is None:
            from modules.auth.session import SessionCodec
            self._session_codec = SessionCodec(
                secret=self.settings.session_secret,
                max_age=timedelta(seconds=self.settings.session_max_age),
            )
        return self._session_codec

    @property
    def session_bridge(self) -> "SessionBridge":
        if self._session_bridge is None:
            from modules.auth.bridge import SessionBridge
            self._session_bridge = SessionBridge(
                cookie_name=self.settings.session_cookie_name,
                max_age=self.settings.session_max_age,
                secure=self.settings.session_cookie_secure,
            )
        return self._session_bridge

    @property
    def code_issuer(self) -> "CodeIssuer":
        if self._code_issuer is None:
            from modules.auth.codes import CodeIssuer
            self._code_issuer = CodeIssuer(self.code_repository)
        return self._code_issuer

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    @property
    def auth(self) -> "AuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                users=self.user_repository,
                codes=self.code_issuer,
                sessions=self.session_codec,
                google=self.google,
                apple=self.apple,
                sender=self.code_sender,
                settings=self.settings,
            )
        return self._auth_service

    @property
    def profiles(self) -> "ProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.users.service import ProfileService
            self._profile_service = ProfileService(
                users=self.user_repository,
                codes=self.code_issuer,
                sender=self.code_sender,
                auth=self.auth,
                settings=self.settings,
            )
        return self._profile_service

    @property
    def admin(self) -> "AdminService":
        """Get the admin service instance."""
        if self._admin_service is None:
            from modules.admin.service import AdminService
            self._admin_service = AdminService(self.user_repository, self.realtime)
        return self._admin_service

    @property
    def video(self) -> "VideoService":
        """Get the video service instance."""
        if self._video_service is None:
            from modules.video.service import VideoService
            self._video_service = VideoService(
                bookings=self.booking_repository,
                daily=self.daily,
                realtime=self.realtime,
            )
        return self._video_service

    def reset(self) -> None:
        """
        Reset all cached instances.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._database = None
        self._realtime = None
        self._google = None
        self._apple = None
        self._daily = None
        self._code_sender = None
        self._user_repository = None
        self._code_repository = None
        self._booking_repository = None
        self._session_codec = None
        self._session_bridge = None
        self._code_issuer = None
        self._auth_service = None
        self._profile_service = None
        self._admin_service = None
        self._video_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "AuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_profile_service() -> "ProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_admin_service() -> "AdminService":
    """FastAPI dependency for admin service."""
    return get_container().admin


def get_video_service() -> "VideoService":
    """FastAPI dependency for video service."""
    return get_container().video


def get_session_codec() -> "SessionCodec":
    """FastAPI dependency for the session codec."""
    return get_container().session_codec


def get_session_bridge() -> "SessionBridge":
    """FastAPI dependency for the session cookie bridge."""
    return get_container().session_bridge
