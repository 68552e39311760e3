# snapshelf/app/infra/db/base.py
"""
Abstract base class for the catalog item repository.
This interface keeps the hosted store swappable in tests.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


Row = dict[str, Any]


class ItemRepository(ABC):
    """
    Per-table access to catalog items, always scoped by user name.

    Implementations:
    - SupabaseItemRepository: PostgREST tables behind supabase-py
    """

    @abstractmethod
    def list_for_user(self, user_name: str) -> list[Row]:
        """
        Return every row owned by the user, newest first.

        Args:
            user_name: Display name used as the tenancy key

        Returns:
            Rows ordered by created_at descending
        """
        pass

    @abstractmethod
    def insert(self, row: Row) -> Row:
        """
        Insert a row and return it as stored (with id and created_at).

        Args:
            row: Column values, including user_name

        Returns:
            The created row
        """
        pass

    @abstractmethod
    def delete_for_user(self, item_id: str, user_name: str) -> None:
        """
        Delete a row matching both the id and the owner.

        Args:
            item_id: Primary key of the row
            user_name: Owner the row must belong to

        Raises:
            ItemNotFoundError: If no row matched both filters
        """
        pass
