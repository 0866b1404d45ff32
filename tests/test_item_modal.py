import pytest

from pos.item_modal import form_values, parse_item_form
from pos.models import BundleConfig

from tests.factories import LATTE_BUNDLE, make_item


def values(**overrides):
    base = form_values(None)
    base.update(name="Matcha", base_price="40000", category="Tea")
    base.update(overrides)
    return base


class TestParseItemForm:
    def test_plain_item(self):
        form = parse_item_form(values(image="  "))
        assert form.name == "Matcha"
        assert form.base_price == 40000
        assert form.category == "Tea"
        assert form.image is None
        assert form.bundle == BundleConfig()

    def test_bundle_item(self):
        form = parse_item_form(
            values(bundle_enabled=True, buy_quantity="3", bundle_price="100000", show_promo_label=True)
        )
        assert form.bundle == BundleConfig(enabled=True, buy_quantity=3, bundle_price=100000, show_promo_label=True)

    def test_disabled_bundle_discards_fields(self):
        form = parse_item_form(values(bundle_enabled=False, buy_quantity="3", bundle_price="100000"))
        assert form.bundle == BundleConfig()

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"name": "  "}, "Name is required."),
            ({"base_price": "abc"}, "Base price must be a whole number."),
            ({"category": "Snacks"}, "Unknown category 'Snacks'."),
            ({"bundle_enabled": True, "buy_quantity": "1", "bundle_price": "10"}, "Buy quantity must be at least 2."),
            ({"bundle_enabled": True, "buy_quantity": "2", "bundle_price": "0"}, "Bundle price must be greater than 0."),
        ],
    )
    def test_rejects_invalid_values(self, overrides, message):
        with pytest.raises(ValueError) as exc_info:
            parse_item_form(values(**overrides))
        assert str(exc_info.value) == message


class TestFormValues:
    def test_prefills_existing_item(self):
        prefilled = form_values(make_item(bundle=LATTE_BUNDLE))
        assert prefilled["name"] == "Iced Latte"
        assert prefilled["base_price"] == "35000"
        assert prefilled["bundle_enabled"] is True
        assert prefilled["buy_quantity"] == "2"

    def test_existing_item_round_trips(self):
        form = parse_item_form(form_values(make_item(bundle=LATTE_BUNDLE)))
        assert form.base_price == 35000
        assert form.bundle == LATTE_BUNDLE
