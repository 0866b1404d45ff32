import pytest
from rich.text import Text

from pos.models import BundleConfig, CartItem
from pos.rendering import (
    append_window,
    bar,
    format_cart_line,
    format_currency,
    format_order_label,
    promo_label,
    window_bounds,
)

from tests.factories import LATTE_BUNDLE, make_item, make_order


class TestFormatCurrency:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [(0, "Rp 0"), (500, "Rp 500"), (35000, "Rp 35.000"), (1250000, "Rp 1.250.000"), (-20000, "-Rp 20.000")],
    )
    def test_dot_separated_rupiah(self, amount, expected):
        assert format_currency(amount) == expected


class TestPromoLabel:
    def test_label_for_advertised_bundle(self):
        assert promo_label(make_item(bundle=LATTE_BUNDLE)) == "Buy 2 for Rp 60.000"

    def test_no_label_when_hidden_or_disabled(self):
        hidden = BundleConfig(enabled=True, buy_quantity=2, bundle_price=60000, show_promo_label=False)
        assert promo_label(make_item(bundle=hidden)) is None
        assert promo_label(make_item(bundle=BundleConfig())) is None
        assert promo_label(make_item()) is None


class TestLabels:
    def test_cart_line_hints_missing_units(self):
        text = format_cart_line(CartItem(item=make_item(bundle=LATTE_BUNDLE), quantity=1)).plain
        assert "add 1 more for bundle price" in text

    def test_cart_line_marks_active_bundle(self):
        text = format_cart_line(CartItem(item=make_item(bundle=LATTE_BUNDLE), quantity=2, note="hot")).plain
        assert "Rp 60.000" in text
        assert "bundle" in text
        assert "[hot]" in text

    def test_order_label_shows_progress(self):
        text = format_order_label(make_order(prepared=(True, False), status="Preparing")).plain
        assert "1/2 ready" in text
        assert "Dina" in text


class TestWindowBounds:
    def test_short_list_fits(self):
        assert window_bounds(3, 10, 1) == (0, 3)

    def test_empty_list(self):
        assert window_bounds(0, 10, None) == (0, 0)

    def test_selection_is_centred(self):
        assert window_bounds(20, 5, 10) == (8, 13)

    def test_clamped_at_edges(self):
        assert window_bounds(20, 5, 0) == (0, 5)
        assert window_bounds(20, 5, 19) == (15, 20)

    def test_append_window_marks_clipping(self):
        lines = Text()
        append_window(lines, [Text(f"row {idx}") for idx in range(10)], 5, 3)
        plain = lines.plain
        assert plain.startswith("⋮")
        assert plain.endswith("⋮")
        assert "➤ row 5" in plain


class TestBar:
    def test_scaled_against_peak(self):
        assert bar(5, 10, 20) == "█" * 10
        assert bar(1, 1000, 20) == "█"
        assert bar(0, 10) == ""
