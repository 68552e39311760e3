from __future__ import annotations


class StoreError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ItemNotFoundError(StoreError):
    def __init__(self, table: str, item_id: str):
        super().__init__(f"No {table} row {item_id} for this user", status_code=404)
        self.table = table
        self.item_id = item_id
