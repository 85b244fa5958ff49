"""
Database client factory for Supabase.

The service-role client is built once by the service container at startup
and passed to every repository.
"""

from supabase import create_client, Client

from .config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role (bypasses RLS).

    Authorization is enforced by the service layer, so all backend
    repositories share this client.

    Args:
        settings: Application settings

    Returns:
        Supabase client configured with the service role key

    Raises:
        RuntimeError: If Supabase is not configured
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
        )
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )
