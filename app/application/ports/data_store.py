from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence


@dataclass(frozen=True)
class StoreChange:
    table: str
    event: str  # "INSERT", "UPDATE", "DELETE"
    record: dict[str, Any] = field(default_factory=dict)


ChangeCallback = Callable[[StoreChange], None]


class DataStorePort(ABC):
    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        order: Sequence[tuple[str, bool]] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select rows matching equality filters. `order` is a list of (column, ascending)."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row. Returns the stored row."""
        raise NotImplementedError

    @abstractmethod
    def update(self, table: str, values: dict[str, Any], column: str, value: Any) -> list[dict[str, Any]]:
        """Update rows where column == value. Returns the updated rows."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, table: str, column: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Invoke callback on any insert/update/delete to table. Returns an unsubscribe function."""
        raise NotImplementedError
