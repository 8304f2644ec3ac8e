"""
Base repository class for database access.

Provides a common abstraction layer for all repositories. A repository
wraps exactly one backend handle: either the Supabase client (document
store) or the psycopg2 connection pool (relational store).
"""

from typing import Any, TypeVar, Generic


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Backend handle access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle row/document-to-Pydantic mapping internally.

    Example:
        class DocumentUserRepository(BaseRepository[User]):
            def get_by_id(self, user_id: str) -> Optional[User]:
                result = self._db.table("users").select("*").eq("id", user_id).execute()
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    def __init__(self, db: Any) -> None:
        """
        Initialize the repository with a backend handle.

        Args:
            db: Supabase client or psycopg2 connection pool.
        """
        self._db = db
