"""SQLite persistence for the menu and order collections when no realtime backend is configured."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from contextlib import closing
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from pos.config import DB_PATH, MENU_STORAGE_KEY, ORDERS_STORAGE_KEY
from pos.mapping import (
    menu_item_from_document,
    menu_item_to_document,
    order_from_document,
    order_to_document,
)
from pos.models import MenuItem, Order
from pos.storage import StorageBackend, StorageError

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalBackend(StorageBackend):
    """Two independently serialized collections, each rewritten after every mutation.

    SQLite work runs in a worker thread; the lock keeps each read-modify-write whole.
    """

    is_remote = False

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)
        self._menu: list[MenuItem] = []
        self._orders: list[Order] = []
        self._lock = asyncio.Lock()
        self.bootstrap_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        with closing(self._connect()) as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS collections (
                    name TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def _read_collection(self, name: str) -> list[dict] | None:
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT payload FROM collections WHERE name = ?", (name,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"reading {name} failed: {exc}") from exc
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise StorageError(f"{name} is not valid JSON: {exc}") from exc

    def _write_collection(self, name: str, documents: list[dict]) -> None:
        payload = json.dumps(documents, ensure_ascii=False)
        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO collections (name, payload, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(name) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                        """,
                        (name, payload, _utc_now_iso()),
                    )
        except sqlite3.Error as exc:
            raise StorageError(f"writing {name} failed: {exc}") from exc
        logger.debug("collection_saved name=%s rows=%d", name, len(documents))

    async def _save_menu(self, menu: list[MenuItem]) -> None:
        documents = [menu_item_to_document(item) for item in menu]
        await asyncio.to_thread(self._write_collection, MENU_STORAGE_KEY, documents)
        self._menu = menu

    async def _save_orders(self, orders: list[Order]) -> None:
        documents = [order_to_document(order) for order in orders]
        await asyncio.to_thread(self._write_collection, ORDERS_STORAGE_KEY, documents)
        self._orders = orders

    async def load_menu(self) -> list[MenuItem] | None:
        async with self._lock:
            documents = await asyncio.to_thread(self._read_collection, MENU_STORAGE_KEY)
            if documents is None:
                return None
            try:
                self._menu = [menu_item_from_document(doc) for doc in documents]
            except (KeyError, TypeError, ValueError) as exc:
                raise StorageError(f"{MENU_STORAGE_KEY} holds an invalid item: {exc!r}") from exc
            return list(self._menu)

    async def load_orders(self) -> list[Order] | None:
        async with self._lock:
            documents = await asyncio.to_thread(self._read_collection, ORDERS_STORAGE_KEY)
            if documents is None:
                return None
            try:
                self._orders = [order_from_document(doc) for doc in documents]
            except (KeyError, TypeError, ValueError) as exc:
                raise StorageError(f"{ORDERS_STORAGE_KEY} holds an invalid order: {exc!r}") from exc
            return list(self._orders)

    async def seed_menu(self, menu: list[MenuItem]) -> None:
        """Store an initial menu so later mutations start from it."""
        async with self._lock:
            await self._save_menu(list(menu))

    async def insert_menu_item(self, item: MenuItem) -> MenuItem:
        saved = replace(item, id=item.id or uuid4().hex, created_at=item.created_at or _utc_now_iso())
        async with self._lock:
            await self._save_menu([*self._menu, saved])
        return saved

    async def update_menu_item(self, item: MenuItem) -> MenuItem:
        async with self._lock:
            await self._save_menu([item if existing.id == item.id else existing for existing in self._menu])
        return item

    async def delete_menu_item(self, item_id: str) -> None:
        async with self._lock:
            await self._save_menu([item for item in self._menu if item.id != item_id])

    async def insert_order(self, order: Order) -> Order:
        saved = replace(order, id=order.id or uuid4().hex, created_at=order.created_at or _utc_now_iso())
        async with self._lock:
            await self._save_orders([saved, *self._orders])
        return saved

    async def update_order(self, order: Order) -> Order:
        async with self._lock:
            await self._save_orders([order if existing.id == order.id else existing for existing in self._orders])
        return order

    async def delete_order(self, order_id: str) -> None:
        async with self._lock:
            await self._save_orders([order for order in self._orders if order.id != order_id])
