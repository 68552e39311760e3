"""In-memory stand-ins for the store and the language model."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from snapshelf.app.domain.errors import ItemNotFoundError, StoreError
from snapshelf.app.infra.db.base import ItemRepository, Row
from snapshelf.services.gemini_client import ModelReply

_BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class InMemoryItemRepository(ItemRepository):
    def __init__(self, table: str = "wines") -> None:
        self.table = table
        self.rows: list[Row] = []
        self.calls: list[str] = []
        self.fail_with: StoreError | None = None
        self._next_id = 1

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def seed(self, **row: Any) -> Row:
        stored = dict(row)
        stored.setdefault("id", self._next_id)
        stored.setdefault("created_at", (_BASE_TIME + timedelta(minutes=self._next_id)).isoformat())
        self._next_id = max(self._next_id, int(stored["id"])) + 1
        self.rows.append(stored)
        return stored

    def list_for_user(self, user_name: str) -> list[Row]:
        self._check("list")
        owned = [row for row in self.rows if row.get("user_name") == user_name]
        return sorted(owned, key=lambda row: row["created_at"], reverse=True)

    def insert(self, row: Row) -> Row:
        self._check("insert")
        return dict(self.seed(**row))

    def delete_for_user(self, item_id: str, user_name: str) -> None:
        self._check("delete")
        for row in self.rows:
            if str(row["id"]) == str(item_id) and row.get("user_name") == user_name:
                self.rows.remove(row)
                return
        raise ItemNotFoundError(self.table, str(item_id))


class LanguageModelStub:
    def __init__(self, reply: str = "{}") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[tuple[list[dict[str, Any]], int]] = []

    async def complete(self, turns: Sequence[dict[str, Any]], max_tokens: int) -> ModelReply:
        self.calls.append((list(turns), max_tokens))
        if self.error is not None:
            raise self.error
        return ModelReply(text=self.reply, model="gemini-test", stop_reason="stop")

