from __future__ import annotations

import copy
import logging
import threading
import uuid
from typing import Any, Callable, Mapping, Sequence

from app.application.ports.data_store import ChangeCallback, DataStorePort, StoreChange


class MemoryDataStore(DataStorePort):
    """In-process tables for local development and tests. Rows are copied in and out."""

    def __init__(self, tables: Mapping[str, list[dict[str, Any]]] | None = None) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {
            name: [copy.deepcopy(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self._subscribers: dict[str, list[ChangeCallback]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order: Sequence[tuple[str, bool]] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            rows = [copy.deepcopy(row) for row in self._tables.get(table, []) if _matches(row, filters)]

        for column, ascending in reversed(list(order)):
            rows.sort(key=lambda row: _sort_key(row.get(column)), reverse=not ascending)

        if limit is not None:
            rows = rows[:limit]
        return [_project(row, columns) for row in rows]

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            self._tables.setdefault(table, []).append(stored)
        self._notify(StoreChange(table=table, event="INSERT", record=copy.deepcopy(stored)))
        return copy.deepcopy(stored)

    def update(self, table: str, values: dict[str, Any], column: str, value: Any) -> list[dict[str, Any]]:
        updated: list[dict[str, Any]] = []
        with self._lock:
            for row in self._tables.get(table, []):
                if row.get(column) == value:
                    row.update(copy.deepcopy(values))
                    updated.append(copy.deepcopy(row))
        for row in updated:
            self._notify(StoreChange(table=table, event="UPDATE", record=copy.deepcopy(row)))
        return updated

    def delete(self, table: str, column: str, value: Any) -> None:
        with self._lock:
            rows = self._tables.get(table, [])
            removed = [row for row in rows if row.get(column) == value]
            self._tables[table] = [row for row in rows if row.get(column) != value]
        for row in removed:
            self._notify(StoreChange(table=table, event="DELETE", record=row))

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        with self._lock:
            self._subscribers.setdefault(table, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(table, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def _notify(self, change: StoreChange) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(change.table, []))
        for callback in callbacks:
            try:
                callback(change)
            except Exception as e:
                self._logger.exception("Change subscriber failed", extra={"table": change.table, "error": str(e)})


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any] | None) -> bool:
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if actual != expected and str(actual) != str(expected):
            return False
    return True


def _sort_key(value: Any) -> tuple[bool, str]:
    return (value is None, "" if value is None else str(value))


def _project(row: dict[str, Any], columns: str) -> dict[str, Any]:
    if columns.strip() == "*":
        return row
    wanted = [c.strip() for c in columns.split(",") if c.strip()]
    return {c: row.get(c) for c in wanted}
