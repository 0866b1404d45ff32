"""Storage capability shared by the local and the realtime backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping

from pos.models import MenuItem, Order

ChangeKind = Literal["insert", "update", "delete"]


class StorageError(Exception):
    """A backend read or write failed."""


@dataclass(frozen=True)
class ChangeEvent:
    """A row change pushed by the backend: snake_case row images, new and/or old."""

    table: str
    kind: ChangeKind
    new: Mapping[str, Any] | None = None
    old: Mapping[str, Any] | None = None

    @classmethod
    def from_payload(cls, table: str, payload: Mapping[str, Any]) -> ChangeEvent | None:
        """Parse a Realtime ``postgres_changes`` payload.

        Accepts both the ``{"data": {"type", "record", "old_record"}}`` shape and
        the flat ``{"eventType", "new", "old"}`` shape. Returns None for anything
        that is not an insert, update or delete.
        """
        data = payload.get("data")
        if isinstance(data, Mapping):
            kind = data.get("type")
            new = data.get("record")
            old = data.get("old_record")
            table = data.get("table") or table
        else:
            kind = payload.get("eventType") or payload.get("type")
            new = payload.get("new") or payload.get("record")
            old = payload.get("old") or payload.get("old_record")
            table = payload.get("table") or table

        kind = str(kind or "").lower()
        if kind not in ("insert", "update", "delete"):
            return None
        return cls(table=table, kind=kind, new=new or None, old=old or None)


ChangeHandler = Callable[[ChangeEvent], None]


class StorageBackend(ABC):
    """Persists menu and order mutations to exactly one durable place.

    Write methods return the record as acknowledged by the backend, which may
    carry generated identity and timestamps.
    """

    is_remote: bool = False

    @abstractmethod
    async def load_menu(self) -> list[MenuItem] | None:
        """Stored menu, or None when nothing has been stored yet."""

    @abstractmethod
    async def load_orders(self) -> list[Order] | None:
        """Stored orders newest first, or None when nothing has been stored yet."""

    @abstractmethod
    async def insert_menu_item(self, item: MenuItem) -> MenuItem: ...

    @abstractmethod
    async def update_menu_item(self, item: MenuItem) -> MenuItem: ...

    @abstractmethod
    async def delete_menu_item(self, item_id: str) -> None: ...

    @abstractmethod
    async def insert_order(self, order: Order) -> Order: ...

    @abstractmethod
    async def update_order(self, order: Order) -> Order: ...

    @abstractmethod
    async def delete_order(self, order_id: str) -> None: ...

    async def seed_menu(self, menu: list[MenuItem]) -> None:
        """Persist the starting menu of an empty store."""
        return None

    async def subscribe(self, handler: ChangeHandler) -> None:
        """Deliver changes made by other clients to `handler`. No-op by default."""
        return None

    async def close(self) -> None:
        return None
