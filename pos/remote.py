"""Supabase backend: PostgREST writes plus Realtime change notifications."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from pos.config import MENU_TABLE, ORDERS_TABLE
from pos.mapping import menu_item_from_row, menu_item_to_row, order_from_row, order_item_to_document, order_to_row
from pos.models import MenuItem, Order
from pos.storage import ChangeEvent, ChangeHandler, StorageBackend, StorageError

logger = logging.getLogger(__name__)

_CHANNEL_NAMES = {
    MENU_TABLE: "menu_changes",
    ORDERS_TABLE: "orders_changes",
}


class RemoteBackend(StorageBackend):
    """Writes go to the shared database; other clients' writes arrive as pushes."""

    is_remote = True

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
        self._channels: list[Any] = []

    @classmethod
    async def connect(cls, url: str, key: str) -> RemoteBackend:
        client = await acreate_client(url, key)
        logger.info("remote_connected url=%s", url)
        return cls(client)

    async def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        try:
            response = await query.execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.error("remote_failed action=%s error=%r", action, exc)
            raise StorageError(f"{action} failed: {exc}") from exc
        return list(response.data or [])

    @staticmethod
    def _first(rows: list[dict[str, Any]], action: str) -> dict[str, Any]:
        if not rows:
            raise StorageError(f"{action} returned no row")
        return rows[0]

    async def load_menu(self) -> list[MenuItem] | None:
        rows = await self._execute(self.client.table(MENU_TABLE).select("*").order("created_at"), "load_menu")
        return [menu_item_from_row(row) for row in rows]

    async def load_orders(self) -> list[Order] | None:
        query = self.client.table(ORDERS_TABLE).select("*").order("created_at", desc=True)
        rows = await self._execute(query, "load_orders")
        return [order_from_row(row) for row in rows]

    async def insert_menu_item(self, item: MenuItem) -> MenuItem:
        query = self.client.table(MENU_TABLE).insert(menu_item_to_row(item, include_identity=False))
        return menu_item_from_row(self._first(await self._execute(query, "insert_menu_item"), "insert_menu_item"))

    async def update_menu_item(self, item: MenuItem) -> MenuItem:
        row = menu_item_to_row(item, include_identity=False)
        query = self.client.table(MENU_TABLE).update(row).eq("id", item.id)
        return menu_item_from_row(self._first(await self._execute(query, "update_menu_item"), "update_menu_item"))

    async def delete_menu_item(self, item_id: str) -> None:
        await self._execute(self.client.table(MENU_TABLE).delete().eq("id", item_id), "delete_menu_item")

    async def insert_order(self, order: Order) -> Order:
        query = self.client.table(ORDERS_TABLE).insert(order_to_row(order, include_identity=False))
        return order_from_row(self._first(await self._execute(query, "insert_order"), "insert_order"))

    async def update_order(self, order: Order) -> Order:
        # Only kitchen progress and status change after creation.
        changes = {
            "items": [order_item_to_document(line) for line in order.items],
            "status": order.status,
        }
        query = self.client.table(ORDERS_TABLE).update(changes).eq("id", order.id)
        return order_from_row(self._first(await self._execute(query, "update_order"), "update_order"))

    async def delete_order(self, order_id: str) -> None:
        await self._execute(self.client.table(ORDERS_TABLE).delete().eq("id", order_id), "delete_order")

    async def subscribe(self, handler: ChangeHandler) -> None:
        for table, channel_name in _CHANNEL_NAMES.items():
            channel = self.client.channel(channel_name)
            channel.on_postgres_changes("*", schema="public", table=table, callback=self._relay(table, handler))
            await channel.subscribe()
            self._channels.append(channel)
            logger.info("remote_subscribed table=%s channel=%s", table, channel_name)

    def _relay(self, table: str, handler: ChangeHandler):
        def callback(payload: dict[str, Any]) -> None:
            event = ChangeEvent.from_payload(table, payload)
            if event is None:
                logger.debug("remote_push_ignored table=%s", table)
                return
            logger.debug("remote_push table=%s kind=%s", event.table, event.kind)
            handler(event)

        return callback

    async def close(self) -> None:
        channels, self._channels = self._channels, []
        for channel in channels:
            await self.client.remove_channel(channel)
