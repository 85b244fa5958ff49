"""
Centralized configuration for the Pawzr backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced (e.g., SUPABASE_*, GOOGLE_*, PUSHER_*).
"""

from decimal import Decimal
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Pawzr API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "capacitor://localhost"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    # Direct Postgres URI, used only by run_migrations.py
    supabase_db_url: str = ""

    # Sessions
    session_secret: str = ""
    session_cookie_name: str = "pawzr.session-token"
    session_max_age: int = 30 * 24 * 60 * 60  # seconds
    session_cookie_secure: bool = False

    # One-time codes (seconds)
    otp_ttl: int = 10 * 60
    login_token_ttl: int = 5 * 60

    # Public base URL (used to build OAuth redirect URIs)
    public_base_url: str = "http://localhost:8000"
    frontend_url: str = "http://localhost:3000"

    # Native app deep link scheme
    mobile_app_scheme: str = "pawzr"

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""

    # Sign in with Apple (identity tokens are signature-checked when set)
    apple_client_id: str = ""

    # Pusher (real-time channel)
    pusher_app_id: str = ""
    pusher_key: str = ""
    pusher_secret: str = ""
    pusher_cluster: str = "us2"

    # Daily (video rooms)
    daily_api_key: str = ""
    daily_api_url: str = "https://api.daily.co/v1"

    # Outbound HTTP timeout (seconds)
    http_timeout: float = 10.0

    # Marketplace
    platform_fee_rate: Decimal = Decimal("0.02")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
