"""
Database client factory for Supabase.

The Supabase-backed account store uses a service-role client, since the
admin backend manages every user's records rather than acting as one user.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Shared by every SupabaseAccountStore in the process
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get the client the account store reads and writes the key/value table with.

    Built once from SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY. The service
    role is needed because scans and bulk deletion touch every user's rows.

    Raises:
        RuntimeError: If either setting is missing
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase account store selected but not configured. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY, or choose another ACCOUNT_STORE_BACKEND."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def reset_client_cache() -> None:
    """Drop the cached client so the next call rebuilds it from settings."""
    global _service_client
    _service_client = None
