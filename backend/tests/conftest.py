"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timedelta, timezone

import pytest

from api.dependencies import reset_container
from modules.auth.session import SessionCodec
from shared.config import Settings
from shared.models import AuthenticatedUser, Role

# Test session secret (only for testing)
TEST_SESSION_SECRET = "test-session-secret-for-testing-only"
SESSION_MAX_AGE = timedelta(days=30)


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {
        "session_secret": TEST_SESSION_SECRET,
        "public_base_url": "https://api.pawzr.test",
        "google_client_id": "google-client",
        "google_client_secret": "google-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_codec(clock=None) -> SessionCodec:
    if clock is None:
        return SessionCodec(TEST_SESSION_SECRET, SESSION_MAX_AGE)
    return SessionCodec(TEST_SESSION_SECRET, SESSION_MAX_AGE, clock=clock)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    role: Role = Role.OWNER,
    name: str = "Test User",
    expired: bool = False,
) -> str:
    """
    Create a session token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        role: Role claim
        name: Display name claim
        expired: If True, creates a token whose validity window has passed

    Returns:
        Session token string
    """
    now = datetime.now(timezone.utc)
    minted_at = now - SESSION_MAX_AGE - timedelta(hours=1) if expired else now
    codec = make_codec(clock=lambda: minted_at)
    return codec.mint(AuthenticatedUser(id=user_id, email=email, name=name, role=role))


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def session_codec() -> SessionCodec:
    return make_codec()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def auth_token(test_user_id: str) -> str:
    """Create a valid owner session token for testing."""
    return create_test_token(user_id=test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


def override_sessions(app, settings: Settings | None = None) -> Settings:
    """
    Point an app's session and settings dependencies at test values.

    Returns the settings the routes will see.
    """
    from api.dependencies import get_session_bridge, get_session_codec
    from modules.auth.bridge import SessionBridge
    from shared.config import get_settings

    settings = settings or make_settings()
    bridge = SessionBridge(
        cookie_name=settings.session_cookie_name,
        max_age=settings.session_max_age,
        secure=False,
    )
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_session_codec] = make_codec
    app.dependency_overrides[get_session_bridge] = lambda: bridge
    return settings
