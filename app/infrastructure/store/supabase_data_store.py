from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Sequence

from supabase import Client, create_client

from app.application.exceptions import StoreFetchError, StoreWriteError
from app.application.ports.data_store import ChangeCallback, DataStorePort, StoreChange


class SupabaseDataStore(DataStorePort):
    """
    Data store backed by a Supabase project (PostgREST tables).

    Change subscriptions fire for writes issued through this store. The
    synchronous Supabase client does not expose realtime channels, so
    changes made by other processes are picked up on the next refresh.
    """

    def __init__(self, url: str, key: str, client: Client | None = None) -> None:
        if not client and (not url or not key):
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for SupabaseDataStore")
        self._client = client or create_client(url, key)
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
        try:
            query = self._client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column, ascending in order:
                query = query.order(column, desc=not ascending)
            if limit is not None:
                query = query.limit(limit)
            response = query.execute()
        except Exception as e:
            self._logger.error("Supabase select failed", extra={"table": table, "error": str(e)})
            raise StoreFetchError(f"Failed to fetch from {table}: {e}") from e
        return list(response.data or [])

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.table(table).insert(row).execute()
        except Exception as e:
            self._logger.error("Supabase insert failed", extra={"table": table, "error": str(e)})
            raise StoreWriteError(f"Failed to insert into {table}: {e}") from e
        stored = (response.data or [row])[0]
        self._notify(StoreChange(table=table, event="INSERT", record=stored))
        return stored

    def update(self, table: str, values: dict[str, Any], column: str, value: Any) -> list[dict[str, Any]]:
        try:
            response = self._client.table(table).update(values).eq(column, value).execute()
        except Exception as e:
            self._logger.error("Supabase update failed", extra={"table": table, "error": str(e)})
            raise StoreWriteError(f"Failed to update {table}: {e}") from e
        rows = list(response.data or [])
        for row in rows:
            self._notify(StoreChange(table=table, event="UPDATE", record=row))
        return rows

    def delete(self, table: str, column: str, value: Any) -> None:
        try:
            response = self._client.table(table).delete().eq(column, value).execute()
        except Exception as e:
            self._logger.error("Supabase delete failed", extra={"table": table, "error": str(e)})
            raise StoreWriteError(f"Failed to delete from {table}: {e}") from e
        for row in response.data or [{column: value}]:
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
