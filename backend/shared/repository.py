"""
Base repository class for database access.

Provides a common abstraction layer for Supabase-backed stores, encapsulating
client access so subclasses only deal with their own tables.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for value type hints

    Example:
        class SupabaseAccountStore(BaseRepository[Any]):
            async def get(self, key: str) -> Optional[Any]:
                result = self._db.table("kv_store").select("value").eq("key", key).execute()
                return result.data[0]["value"] if result.data else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db
