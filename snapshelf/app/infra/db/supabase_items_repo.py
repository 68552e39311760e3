from __future__ import annotations

import logging

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from snapshelf.app.domain.errors import ItemNotFoundError, StoreError
from snapshelf.app.domain.models import ItemKind
from snapshelf.app.infra.db.base import ItemRepository, Row

logger = logging.getLogger(__name__)

DEFAULT_ORDER_COLUMN = "created_at"


def _status_from_api_error(error: APIError) -> int:
    code = str(getattr(error, "code", "") or "")
    if code.isdigit() and 400 <= int(code) < 600:
        return int(code)
    return 400


def _store_error(operation: str, table: str, error: Exception) -> StoreError:
    if isinstance(error, APIError):
        message = getattr(error, "message", None) or f"Failed to {operation} {table}"
        return StoreError(str(message), status_code=_status_from_api_error(error))
    return StoreError(f"Failed to {operation} {table}: {error}", status_code=502)


class SupabaseItemRepository(ItemRepository):
    def __init__(self, client: Client, kind: ItemKind):
        self._client = client
        self.kind = kind
        self.table_name = kind.table

    def list_for_user(self, user_name: str) -> list[Row]:
        try:
            result = (
                self._client.table(self.table_name)
                .select("*")
                .eq("user_name", user_name)
                .order(DEFAULT_ORDER_COLUMN, desc=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as error:
            logger.error("Error listing %s for user=%s: %s", self.table_name, user_name, error)
            raise _store_error("fetch", self.table_name, error) from error

        return list(result.data or [])

    def insert(self, row: Row) -> Row:
        try:
            result = self._client.table(self.table_name).insert(row).execute()
        except (APIError, httpx.HTTPError) as error:
            logger.error("Error saving %s row: %s", self.table_name, error)
            raise _store_error("save", self.table_name, error) from error

        if not result.data:
            raise StoreError(f"Failed to save {self.kind.value}: no row returned", status_code=502)

        created = result.data[0]
        logger.info("Saved %s row id=%s user=%s", self.table_name, created.get("id"), row.get("user_name"))
        return created

    def delete_for_user(self, item_id: str, user_name: str) -> None:
        try:
            result = (
                self._client.table(self.table_name)
                .delete()
                .eq("id", item_id)
                .eq("user_name", user_name)
                .execute()
            )
        except (APIError, httpx.HTTPError) as error:
            logger.error("Error deleting %s id=%s: %s", self.table_name, item_id, error)
            raise _store_error("delete", self.table_name, error) from error

        if not result.data:
            raise ItemNotFoundError(self.table_name, str(item_id))

        logger.info("Deleted %s row id=%s user=%s", self.table_name, item_id, user_name)
