import asyncio
import json
import sqlite3

import pytest

from pos.persistence import LocalBackend
from pos.storage import StorageError

from tests.factories import LATTE_BUNDLE, make_item, make_order


class TestLocalBackend:
    async def test_empty_database_has_no_collections(self, local_backend):
        assert await local_backend.load_menu() is None
        assert await local_backend.load_orders() is None

    async def test_insert_assigns_identity_and_timestamp(self, local_backend):
        saved = await local_backend.insert_menu_item(make_item(item_id="", bundle=LATTE_BUNDLE))
        assert saved.id
        assert saved.created_at
        assert await local_backend.load_menu() == [saved]

    async def test_collections_survive_reopen(self, tmp_path):
        first = LocalBackend(tmp_path / "pos.db")
        await first.seed_menu([make_item()])
        order = await first.insert_order(make_order(order_id=""))

        reopened = LocalBackend(tmp_path / "pos.db")
        assert [item.id for item in await reopened.load_menu()] == ["latte"]
        assert await reopened.load_orders() == [order]

    async def test_orders_are_stored_newest_first(self, local_backend):
        first = await local_backend.insert_order(make_order(order_id="a"))
        second = await local_backend.insert_order(make_order(order_id="b"))
        assert [order.id for order in await local_backend.load_orders()] == [second.id, first.id]

    async def test_update_and_delete(self, local_backend):
        await local_backend.seed_menu([make_item(), make_item("espresso", "Espresso", 25000)])
        await local_backend.update_menu_item(make_item(price=38000))
        await local_backend.delete_menu_item("espresso")
        menu = await local_backend.load_menu()
        assert [(item.id, item.base_price) for item in menu] == [("latte", 38000)]

    async def test_documents_use_stored_keys(self, local_backend):
        await local_backend.insert_order(make_order(prepared=(True,)))
        with sqlite3.connect(local_backend.db_path) as conn:
            row = conn.execute("SELECT payload FROM collections WHERE name = 'pos_orders'").fetchone()
        doc = json.loads(row[0])[0]
        assert doc["customerName"] == "Dina"
        assert doc["items"][0]["isPrepared"] is True

    async def test_sqlite_errors_become_storage_errors(self, local_backend):
        with sqlite3.connect(local_backend.db_path) as conn:
            conn.execute("DROP TABLE collections")
        with pytest.raises(StorageError):
            await local_backend.load_menu()


class TestCorruptCollections:
    def _store_raw(self, backend, name, payload):
        with sqlite3.connect(backend.db_path) as conn:
            conn.execute(
                "INSERT INTO collections (name, payload, updated_at) VALUES (?, ?, '')", (name, payload)
            )

    async def test_invalid_json_becomes_storage_error(self, local_backend):
        self._store_raw(local_backend, "pos_menu", "{not json")
        with pytest.raises(StorageError):
            await local_backend.load_menu()

    async def test_document_missing_fields_becomes_storage_error(self, local_backend):
        self._store_raw(local_backend, "pos_menu", json.dumps([{"id": "1", "basePrice": 5000}]))
        with pytest.raises(StorageError):
            await local_backend.load_menu()

    async def test_order_collection_of_wrong_shape_becomes_storage_error(self, local_backend):
        self._store_raw(local_backend, "pos_orders", json.dumps(["not an order"]))
        with pytest.raises(StorageError):
            await local_backend.load_orders()


class TestConcurrentWrites:
    async def test_parallel_inserts_are_all_kept(self, local_backend):
        orders = [make_order(order_id=f"o-{idx}") for idx in range(5)]
        await asyncio.gather(*(local_backend.insert_order(order) for order in orders))

        reopened = LocalBackend(local_backend.db_path)
        stored = await reopened.load_orders()
        assert sorted(order.id for order in stored) == [f"o-{idx}" for idx in range(5)]
