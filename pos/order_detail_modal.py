"""Kitchen view of one order: mark lines prepared, hand the order over."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pos.constant import STATUS_COMPLETED, STATUS_PICKED_UP
from pos.lifecycle import progress
from pos.models import Order
from pos.rendering import format_currency, payment_style, status_style
from pos.store import use_store


class OrderDetailModal(ModalScreen[None]):
    """Centered modal listing the lines of one order with their prepared flags."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle prepared"),
        ("space", "toggle_current", "Toggle prepared"),
        ("p", "pick_up", "Picked up"),
    ]

    CSS = """
    OrderDetailModal {
        align: center middle;
        background: $background 60%;
    }

    #order-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #order-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #order-body {
        margin-bottom: 1;
        color: white;
    }

    #order-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self.order_id = order_id

    def compose(self) -> ComposeResult:
        with Container(id="order-dialog"):
            yield Static("Order Details", id="order-title")
            yield Static(id="order-body")
            yield Static(id="order-help")

    def on_mount(self) -> None:
        self.refresh_view()

    def _order(self) -> Order | None:
        return use_store(self.app).find_order(self.order_id)

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        order = self._order()
        if order is None or not order.items:
            return
        self.cursor_index = (self.cursor_index + delta) % len(order.items)
        self.refresh_view()

    def action_toggle_current(self) -> None:
        order = self._order()
        if order is None or not order.items:
            return
        if order.status == STATUS_PICKED_UP:
            self.app.set_status("Order was picked up and is locked")
            return
        line = order.items[self.cursor_index]
        self.app.run_store_action(use_store(self.app).toggle_order_item_prepared(order.id, line.item.id))

    def action_pick_up(self) -> None:
        order = self._order()
        if order is None:
            return
        if order.status != STATUS_COMPLETED:
            self.app.set_status("Only completed orders can be picked up")
            return
        self.app.run_store_action(
            use_store(self.app).update_order_status(order.id, STATUS_PICKED_UP),
            f"Order for {order.customer_name} picked up",
        )

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        body = self.query_one("#order-body", Static)
        help_text = self.query_one("#order-help", Static)
        order = self._order()
        if order is None:
            body.update("This order no longer exists.")
            help_text.update("Esc/q close")
            return

        content = Text(style="white")
        content.append(f"{order.customer_name}  ", style="bold")
        content.append(f" {order.status} ", style=status_style(order.status))
        content.append("  ")
        content.append(order.payment_status, style=payment_style(order.payment_status))
        content.append(f"\n{order.created_at[:16].replace('T', ' ')}  {format_currency(order.total)}")
        if order.note:
            content.append(f"\nNote: {order.note}")

        prepared, total = progress(order)
        content.append(f"\n\nKitchen progress {prepared}/{total}\n")
        if self.cursor_index >= len(order.items):
            self.cursor_index = max(0, len(order.items) - 1)
        for idx, line in enumerate(order.items):
            content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            checked = "[x]" if line.is_prepared else "[ ]"
            style = "dim strike" if line.is_prepared else "white"
            content.append(f"{pointer}{checked} {line.quantity} x {line.item.name}", style=style)
            if line.note:
                content.append(f"  [{line.note}]", style="white")
        body.update(content)

        if order.status == STATUS_PICKED_UP:
            help_text.update("Picked up: locked. Esc/q close")
        elif order.status == STATUS_COMPLETED:
            help_text.update("All items ready. P mark as picked up. Enter toggle. Esc/q close")
        else:
            help_text.update("J/K/↑/↓ move, Enter/Space toggle prepared, Esc/q close")
