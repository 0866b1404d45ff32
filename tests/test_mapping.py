from pos.mapping import (
    bundle_from_document,
    menu_item_from_document,
    menu_item_from_row,
    menu_item_to_document,
    menu_item_to_row,
    order_from_document,
    order_from_row,
    order_to_document,
    order_to_row,
)
from pos.models import BundleConfig

from tests.factories import LATTE_BUNDLE, make_item, make_order


class TestMenuItemMapping:
    def test_document_uses_camel_case_keys(self):
        doc = menu_item_to_document(make_item(bundle=LATTE_BUNDLE))
        assert doc["basePrice"] == 35000
        assert doc["bundle"] == {"enabled": True, "buyQuantity": 2, "bundlePrice": 60000, "showPromoLabel": True}
        assert "image" not in doc

    def test_document_round_trip(self):
        item = make_item(bundle=LATTE_BUNDLE, image="https://example.com/latte.png", created_at="2026-10-19T08:00:00Z")
        assert menu_item_from_document(menu_item_to_document(item)) == item

    def test_row_uses_snake_case_columns(self):
        row = menu_item_to_row(make_item(bundle=LATTE_BUNDLE))
        assert row["id"] == "latte"
        assert row["base_price"] == 35000
        assert row["bundle_config"]["buyQuantity"] == 2

    def test_row_without_identity_omits_id(self):
        row = menu_item_to_row(make_item(created_at="2026-10-19T08:00:00Z"), include_identity=False)
        assert "id" not in row
        assert "created_at" not in row

    def test_row_round_trip(self):
        item = make_item(bundle=LATTE_BUNDLE, created_at="2026-10-19T08:00:00+00:00")
        assert menu_item_from_row(menu_item_to_row(item)) == item

    def test_missing_category_defaults_to_other(self):
        item = menu_item_from_row({"id": 7, "name": "Water", "base_price": 5000})
        assert item.id == "7"
        assert item.category == "Other"
        assert item.bundle is None

    def test_partial_bundle_document(self):
        assert bundle_from_document({"enabled": True, "buyQuantity": 3}) == BundleConfig(
            enabled=True, buy_quantity=3, bundle_price=0
        )
        assert bundle_from_document(None) is None


class TestOrderMapping:
    def test_document_round_trip(self):
        order = make_order(prepared=(True, False), note="for pickup")
        assert order_from_document(order_to_document(order)) == order

    def test_line_documents_carry_kitchen_fields(self):
        doc = order_to_document(make_order(prepared=(True,)))
        line = doc["items"][0]
        assert line["quantity"] == 1
        assert line["isPrepared"] is True
        assert line["basePrice"] == 10000

    def test_row_round_trip(self):
        order = make_order(prepared=(False, True), payment_status="Paid")
        assert order_from_row(order_to_row(order)) == order

    def test_row_defaults(self):
        order = order_from_row({"id": "o-1", "items": None})
        assert order.customer_name == "Guest"
        assert order.status == "Pending"
        assert order.payment_status == "Unpaid"
        assert order.items == ()
        assert order.note is None

    def test_row_without_identity(self):
        row = order_to_row(make_order(), include_identity=False)
        assert "id" not in row
        assert "created_at" not in row
        assert row["customer_name"] == "Dina"
