"""Shared fixtures: menu items, a local backend on a temp file, and a fake Supabase client."""

from __future__ import annotations

from typing import Any

import pytest

from pos.models import CartItem, MenuItem
from pos.persistence import LocalBackend
from pos.store import Store

from tests.factories import LATTE_BUNDLE, make_item


@pytest.fixture
def latte() -> MenuItem:
    return make_item(bundle=LATTE_BUNDLE)


@pytest.fixture
def espresso() -> MenuItem:
    return make_item("espresso", "Espresso", 25000)


@pytest.fixture
def latte_line(latte: MenuItem):
    def build(quantity: int) -> CartItem:
        return CartItem(item=latte, quantity=quantity)

    return build


@pytest.fixture
def local_backend(tmp_path) -> LocalBackend:
    return LocalBackend(tmp_path / "pos.db")


@pytest.fixture
async def local_store(local_backend: LocalBackend) -> Store:
    store = Store(local_backend)
    await store.load()
    return store


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Records a PostgREST builder chain and runs it against FakeSupabase tables."""

    def __init__(self, client: FakeSupabase, table: str) -> None:
        self.client = client
        self.table = table
        self.op = "select"
        self.payload: dict[str, Any] | None = None
        self.filters: list[tuple[str, Any]] = []
        self.ordering: list[tuple[str, bool]] = []

    def select(self, *columns: str) -> FakeQuery:
        self.op = "select"
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self.ordering.append((column, desc))
        return self

    def insert(self, row: dict[str, Any]) -> FakeQuery:
        self.op = "insert"
        self.payload = row
        return self

    def update(self, row: dict[str, Any]) -> FakeQuery:
        self.op = "update"
        self.payload = row
        return self

    def delete(self) -> FakeQuery:
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self.filters.append((column, value))
        return self

    async def execute(self) -> FakeResponse:
        return FakeResponse(self.client.run(self))


class FakeChannel:
    def __init__(self, name: str) -> None:
        self.name = name
        self.bindings: list[dict[str, Any]] = []
        self.subscribed = False

    def on_postgres_changes(self, event: str, callback=None, table: str = "*", schema: str = "public", filter=None):
        self.bindings.append({"event": event, "table": table, "schema": schema, "callback": callback})
        return self

    async def subscribe(self, callback=None) -> FakeChannel:
        self.subscribed = True
        return self

    def push(self, payload: dict[str, Any]) -> None:
        for binding in self.bindings:
            binding["callback"](payload)


class FakeSupabase:
    """In-memory stand-in for the async Supabase client."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {"menu_items": [], "orders": []}
        self.queries: list[FakeQuery] = []
        self.channels: list[FakeChannel] = []
        self.removed: list[FakeChannel] = []
        self.fail_with: Exception | None = None
        self._counter = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def channel(self, name: str) -> FakeChannel:
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        self.removed.append(channel)

    def _matches(self, row: dict[str, Any], query: FakeQuery) -> bool:
        return all(row.get(column) == value for column, value in query.filters)

    def run(self, query: FakeQuery) -> list[dict[str, Any]]:
        self.queries.append(query)
        if self.fail_with is not None:
            raise self.fail_with

        rows = self.tables.setdefault(query.table, [])
        if query.op == "select":
            result = [dict(row) for row in rows]
            for column, desc in reversed(query.ordering):
                result.sort(key=lambda row: row.get(column) or "", reverse=desc)
            return result
        if query.op == "insert":
            self._counter += 1
            row = dict(query.payload or {})
            row.setdefault("id", f"{query.table}-{self._counter}")
            row.setdefault("created_at", f"2026-10-19T08:{self._counter:02d}:00+00:00")
            rows.append(row)
            return [dict(row)]
        if query.op == "update":
            matched = [row for row in rows if self._matches(row, query)]
            for row in matched:
                row.update(query.payload or {})
            return [dict(row) for row in matched]
        if query.op == "delete":
            removed = [row for row in rows if self._matches(row, query)]
            self.tables[query.table] = [row for row in rows if not self._matches(row, query)]
            return removed
        raise AssertionError(f"unexpected op {query.op}")


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()
