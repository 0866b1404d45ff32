"""Rendering helpers shared by the cashier and admin screens."""

from __future__ import annotations

from rich.text import Text

from pos.config import CURRENCY_PREFIX
from pos.lifecycle import progress
from pos.models import CartItem, MenuItem, Order
from pos.pricing import active_bundle, bundle_hint, is_bundle_active, line_total


def format_currency(amount: float) -> str:
    """Whole rupiah with dot thousands separators, e.g. ``Rp 35.000``."""
    value = round(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_PREFIX} {abs(value):,}".replace(",", ".")


def promo_label(item: MenuItem) -> str | None:
    """Return e.g. ``Buy 2 for Rp 60.000`` when the item advertises its bundle."""
    rule = active_bundle(item.bundle)
    if rule is None or not rule.show_promo_label:
        return None
    return f"Buy {rule.buy_quantity} for {format_currency(rule.bundle_price)}"


def badge_style(category: str) -> str:
    """Return a consistent badge style for category tags."""
    if category == "Coffee":
        return "bold #ffffff on #6f4e37"
    if category == "Tea":
        return "bold #0b1f0f on #5fbf72"
    if category == "Food":
        return "bold #ffffff on #b23a48"
    if category == "Dessert":
        return "bold #ffffff on #b5568f"
    return "bold #ffffff on #2f6db5"


def status_style(status: str) -> str:
    if status == "Completed":
        return "bold #0b1f0f on #5fbf72"
    if status == "Preparing":
        return "bold #1f1400 on #f0a030"
    if status == "Picked Up":
        return "bold #ffffff on #2f6db5"
    if status == "Cancelled":
        return "bold #ffffff on #b23a48"
    return "bold #1f1f1f on #d0d0d0"


def payment_style(payment_status: str) -> str:
    if payment_status == "Paid":
        return "bold #5fbf72"
    return "#aaaaaa"


def format_menu_label(item: MenuItem) -> Text:
    """Menu row: category tag, name, price and promo label."""
    text = Text()
    text.append(item.category[:3].upper(), style=badge_style(item.category))
    text.append(f" {item.name}  {format_currency(item.base_price)}")
    label = promo_label(item)
    if label:
        text.append(f"  {label}", style="bold #f0a030")
    return text


def format_cart_line(line: CartItem) -> Text:
    text = Text()
    text.append(f"{line.quantity} x {line.item.name}")
    text.append(f"  {format_currency(line_total(line))}")
    if is_bundle_active(line):
        text.append("  bundle", style="bold #5fbf72")
    hint = bundle_hint(line)
    if hint:
        text.append(f"  add {hint} more for bundle price", style="dim")
    if line.note:
        text.append(f"\n      [{line.note}]", style="white")
    return text


def format_order_label(order: Order) -> Text:
    """Order list row: status tag, customer, item count, total and payment."""
    text = Text()
    text.append(f" {order.status} ", style=status_style(order.status))
    cancelled = order.status == "Cancelled"
    text.append(f" {order.customer_name}", style="strike dim" if cancelled else "bold")
    prepared, total = progress(order)
    text.append(f"  {prepared}/{total} ready")
    text.append(f"  {format_currency(order.total)}", style="strike dim" if cancelled else "")
    text.append(f"  {order.payment_status}", style=payment_style(order.payment_status))
    return text


def bar(value: float, peak: float, width: int = 20) -> str:
    """Horizontal bar scaled against `peak`."""
    if peak <= 0 or value <= 0:
        return ""
    return "█" * max(1, round(width * value / peak))


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of a `total`-long list that fits `rows` lines and keeps `selected` centred."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        half = rows // 2
        start = selected - half
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)


def append_window(lines: Text, rows: list[Text], selected: int | None, visible_rows: int) -> None:
    """Append `rows` to `lines` with a pointer on `selected` and ellipses when clipped."""
    start, end = window_bounds(len(rows), visible_rows, selected)
    if start > 0:
        lines.append("⋮\n", style="dim")

    for idx in range(start, end):
        if idx > start:
            lines.append("\n")
        pointer = "➤ " if idx == selected else "  "
        lines.append(pointer)
        lines.append_text(rows[idx])

    if end < len(rows):
        lines.append("\n⋮", style="dim")
