import httpx
import pytest
from postgrest.exceptions import APIError

from pos.remote import RemoteBackend
from pos.storage import ChangeEvent, StorageError

from tests.factories import LATTE_BUNDLE, make_item, make_order


@pytest.fixture
def backend(fake_supabase) -> RemoteBackend:
    return RemoteBackend(fake_supabase)


class TestChangeEvent:
    def test_parses_nested_payload(self):
        payload = {
            "data": {
                "type": "UPDATE",
                "table": "orders",
                "record": {"id": "o-1", "status": "Preparing"},
                "old_record": {"id": "o-1"},
            }
        }
        event = ChangeEvent.from_payload("orders", payload)
        assert event == ChangeEvent(
            table="orders", kind="update", new={"id": "o-1", "status": "Preparing"}, old={"id": "o-1"}
        )

    def test_parses_flat_payload(self):
        event = ChangeEvent.from_payload("menu_items", {"eventType": "DELETE", "new": {}, "old": {"id": "m-1"}})
        assert event.kind == "delete"
        assert event.new is None
        assert event.old == {"id": "m-1"}

    def test_unknown_kind_is_ignored(self):
        assert ChangeEvent.from_payload("orders", {"eventType": "TRUNCATE"}) is None
        assert ChangeEvent.from_payload("orders", {}) is None


class TestRemoteBackend:
    async def test_load_orders_newest_first(self, backend, fake_supabase):
        fake_supabase.tables["orders"] = [
            {"id": "old", "created_at": "2026-10-19T08:00:00+00:00"},
            {"id": "new", "created_at": "2026-10-19T09:00:00+00:00"},
        ]
        orders = await backend.load_orders()
        assert [order.id for order in orders] == ["new", "old"]
        assert fake_supabase.queries[-1].ordering == [("created_at", True)]

    async def test_empty_menu_loads_as_empty_list(self, backend):
        assert await backend.load_menu() == []

    async def test_insert_lets_database_assign_identity(self, backend, fake_supabase):
        saved = await backend.insert_menu_item(make_item(item_id="", bundle=LATTE_BUNDLE))
        query = fake_supabase.queries[-1]
        assert "id" not in query.payload
        assert query.payload["bundle_config"]["bundlePrice"] == 60000
        assert saved.id == "menu_items-1"
        assert saved.created_at

    async def test_update_order_sends_items_and_status_only(self, backend, fake_supabase):
        created = await backend.insert_order(make_order(order_id=""))
        await backend.update_order(make_order(order_id=created.id, prepared=(True, False, False), status="Preparing"))
        query = fake_supabase.queries[-1]
        assert set(query.payload) == {"items", "status"}
        assert query.filters == [("id", created.id)]

    async def test_update_of_missing_row_raises(self, backend):
        with pytest.raises(StorageError):
            await backend.update_menu_item(make_item(item_id="ghost"))

    async def test_delete_filters_by_id(self, backend, fake_supabase):
        created = await backend.insert_order(make_order(order_id=""))
        await backend.delete_order(created.id)
        assert fake_supabase.tables["orders"] == []

    @pytest.mark.parametrize(
        "error",
        [
            APIError({"message": "permission denied", "code": "42501", "hint": None, "details": None}),
            httpx.ConnectError("offline"),
        ],
    )
    async def test_backend_errors_become_storage_errors(self, backend, fake_supabase, error):
        fake_supabase.fail_with = error
        with pytest.raises(StorageError):
            await backend.insert_order(make_order(order_id=""))

    async def test_subscribe_relays_pushes(self, backend, fake_supabase):
        received = []
        await backend.subscribe(received.append)

        assert [channel.name for channel in fake_supabase.channels] == ["menu_changes", "orders_changes"]
        assert all(channel.subscribed for channel in fake_supabase.channels)

        orders_channel = fake_supabase.channels[1]
        orders_channel.push({"eventType": "INSERT", "new": {"id": "o-9"}, "old": {}})
        orders_channel.push({"eventType": "TRUNCATE"})
        assert received == [ChangeEvent(table="orders", kind="insert", new={"id": "o-9"})]

    async def test_close_removes_channels(self, backend, fake_supabase):
        await backend.subscribe(lambda event: None)
        await backend.close()
        assert fake_supabase.removed == fake_supabase.channels
        await backend.close()
        assert len(fake_supabase.removed) == 2
