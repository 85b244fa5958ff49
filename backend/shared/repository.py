"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and translating client failures into
PersistenceError.
"""

import logging
from typing import Any, Callable, TypeVar, Generic

from supabase import Client, PostgrestAPIError

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute() wrapper that logs and re-raises datastore failures

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally.

    Example:
        class UserRepository(BaseRepository[User]):
            def get_by_id(self, user_id: str) -> Optional[User]:
                result = self._execute(
                    "users.get_by_id",
                    lambda: self._db.table("users").select("*").eq("id", user_id).execute(),
                )
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, operation: str, query: Callable[[], Any]) -> Any:
        """Run a query, logging and wrapping client errors. Never retries."""
        try:
            return query()
        except PostgrestAPIError as e:
            logger.error(f"Datastore error during {operation}: {e.message}")
            raise PersistenceError(operation, str(e.message)) from e
