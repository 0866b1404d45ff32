"""Cashier screen: pick menu items into a cart and submit the order."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from pos.cart import Cart
from pos.constant import CATEGORY_FILTERS
from pos.data import filter_menu
from pos.models import MenuItem
from pos.prompt_modal import PromptModal
from pos.rendering import (
    append_window,
    badge_style,
    format_cart_line,
    format_currency,
    format_menu_label,
    payment_style,
)
from pos.storage import StorageError
from pos.store import use_store

logger = logging.getLogger(__name__)


class CashierScreen(Screen):
    """Menu search on the left, the cart being built on the right."""

    CSS = """
    #main-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $secondary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #category-bar {
        height: 1;
        margin-bottom: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #menu-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-header {
        height: auto;
        margin-bottom: 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        height: auto;
        text-style: bold;
        margin-top: 1;
    }
    """

    input_state = reactive("normal")
    category_index = reactive(0)
    search_text = reactive("")
    menu_index = reactive(0)
    cart_index = reactive(None)

    BINDINGS = [
        Binding("tab", "cycle_category(1)", "Next category", priority=True),
        Binding("shift+tab", "cycle_category(-1)", "Previous category", priority=True),
        Binding("up", "move_menu(-1)", "Previous item", show=False),
        Binding("down", "move_menu(1)", "Next item", show=False),
        Binding("enter", "add_selected", "Add to cart", priority=True),
        Binding("ctrl+s", "checkout", "Checkout", priority=True),
        Binding("escape", "cancel_search", "Exit search", show=False),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.cart = Cart()

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane"):
                yield Static(id="category-bar")
                yield Static(id="search-bar")
                yield Static(id="menu-list")
            with Vertical(id="cart-pane"):
                yield Static("Current Order", classes="pane-title")
                yield Static(id="cart-header")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-total")
                yield Static(id="cashier-status", classes="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def on_screen_resume(self) -> None:
        self.refresh_view()

    def on_key(self, event: Key) -> None:
        if not event.is_printable or not event.character:
            if event.key == "backspace" and self.input_state == "search":
                self.search_text = self.search_text[:-1]
                self.menu_index = 0
                self.refresh_view()
                event.stop()
            return

        char = event.character
        if self.input_state == "search":
            self.search_text += char
            self.menu_index = 0
            self.refresh_view()
            event.stop()
            return

        handled = True
        if char == "/":
            self.input_state = "search"
            self.search_text = ""
            self.menu_index = 0
        elif char in {"+", "="}:
            self._change_selected_quantity(1)
        elif char == "-":
            self._change_selected_quantity(-1)
        elif char == "j":
            self._move_cart_selection(1)
        elif char == "k":
            self._move_cart_selection(-1)
        elif char == "n":
            self._prompt_line_note()
        elif char == "c":
            self._prompt_customer_name()
        elif char == "o":
            self._prompt_order_note()
        elif char == "p":
            self.cart.toggle_payment()
        elif char == "x":
            self.cart.clear()
            self.cart_index = None
        else:
            handled = False

        if handled:
            self.refresh_view()
            event.stop()

    def action_cycle_category(self, delta: int) -> None:
        self.category_index = (self.category_index + delta) % len(CATEGORY_FILTERS)
        self.menu_index = 0
        self.refresh_view()

    def action_move_menu(self, delta: int) -> None:
        results = self._filtered_menu()
        if not results:
            self.menu_index = 0
            return
        self.menu_index = (self.menu_index + delta) % len(results)
        self.refresh_view()

    def action_cancel_search(self) -> None:
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_text = ""
        self.menu_index = 0
        self.refresh_view()

    def action_add_selected(self) -> None:
        results = self._filtered_menu()
        if not results:
            return
        if self.menu_index >= len(results):
            self.menu_index = 0
        item = results[self.menu_index]
        self.cart.add(item)
        self.cart_index = next(
            idx for idx, line in enumerate(self.cart.lines) if line.item.id == item.id
        )
        logger.debug("cart_add item_id=%s lines=%d", item.id, len(self.cart.lines))
        self.refresh_view()

    async def action_checkout(self) -> None:
        app = self.app
        if self.cart.is_empty:
            app.set_status("Nothing to submit")
            return
        store = use_store(app)
        try:
            order = await store.checkout(self.cart)
        except StorageError as exc:
            app.set_status(f"Order not saved: {exc}")
            return
        self.cart_index = None
        if order is not None:
            app.set_status(f"Order for {order.customer_name} saved: {format_currency(order.total)}")

    def _filtered_menu(self) -> list[MenuItem]:
        store = use_store(self.app)
        return filter_menu(store.menu, CATEGORY_FILTERS[self.category_index], self.search_text)

    def _selected_line_id(self) -> str | None:
        if self.cart_index is None or not (0 <= self.cart_index < len(self.cart.lines)):
            return None
        return self.cart.lines[self.cart_index].item.id

    def _move_cart_selection(self, delta: int) -> None:
        if not self.cart.lines:
            return
        if self.cart_index is None:
            self.cart_index = 0 if delta > 0 else len(self.cart.lines) - 1
        else:
            self.cart_index = (self.cart_index + delta) % len(self.cart.lines)

    def _change_selected_quantity(self, delta: int) -> None:
        item_id = self._selected_line_id()
        if item_id is None:
            return
        self.cart.update_quantity(item_id, delta)
        if not self.cart.lines:
            self.cart_index = None
        elif self.cart_index is not None:
            self.cart_index = min(self.cart_index, len(self.cart.lines) - 1)

    def _prompt_line_note(self) -> None:
        item_id = self._selected_line_id()
        if item_id is None:
            return
        line = self.cart.find(item_id)

        def apply(note: str | None) -> None:
            if note is None:
                return
            self.cart.set_note(item_id, note)
            self.refresh_view()

        self.app.push_screen(PromptModal("Item note", line.item.name, value=line.note or ""), apply)

    def _prompt_customer_name(self) -> None:
        def apply(name: str | None) -> None:
            if name is None:
                return
            self.cart.customer_name = name
            self.refresh_view()

        self.app.push_screen(
            PromptModal("Customer name", "Leave empty for Guest", value=self.cart.customer_name), apply
        )

    def _prompt_order_note(self) -> None:
        def apply(note: str | None) -> None:
            if note is None:
                return
            self.cart.note = note
            self.refresh_view()

        self.app.push_screen(PromptModal("Order note", value=self.cart.note, max_length=200), apply)

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        self._refresh_category_bar()
        self._refresh_search_bar()
        self._refresh_menu()
        self._refresh_cart()
        self.query_one("#cashier-status", Static).update(self._status_text())

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _refresh_category_bar(self) -> None:
        text = Text()
        for idx, category in enumerate(CATEGORY_FILTERS):
            if idx > 0:
                text.append(" ")
            if idx == self.category_index:
                text.append(f" {category} ", style=badge_style(category) if category != "All" else "reverse")
            else:
                text.append(f" {category} ", style="dim")
        self.query_one("#category-bar", Static).update(text)

    def _refresh_search_bar(self) -> None:
        bar = self.query_one("#search-bar", Static)
        if self.input_state == "normal":
            bar.update("Press / to search. Tab switches category.")
            return
        bar.update(f"Search: {self.search_text}|")

    def _refresh_menu(self) -> None:
        widget = self.query_one("#menu-list", Static)
        results = self._filtered_menu()
        if not results:
            widget.update("No results")
            return
        if self.menu_index >= len(results):
            self.menu_index = 0
        lines = Text()
        append_window(lines, [format_menu_label(item) for item in results], self.menu_index, self._visible_rows(widget))
        widget.update(lines)

    def _refresh_cart(self) -> None:
        header = Text()
        header.append(f"Customer: {self.cart.customer_name or 'Guest'}   ")
        header.append(self.cart.payment_status, style=payment_style(self.cart.payment_status))
        if self.cart.note:
            header.append(f"\nNote: {self.cart.note}", style="white")
        self.query_one("#cart-header", Static).update(header)

        widget = self.query_one("#cart-list", Static)
        if not self.cart.lines:
            self.cart_index = None
            widget.update("(cart is empty)")
        else:
            if self.cart_index is not None and self.cart_index >= len(self.cart.lines):
                self.cart_index = len(self.cart.lines) - 1
            lines = Text()
            append_window(
                lines, [format_cart_line(line) for line in self.cart.lines], self.cart_index, self._visible_rows(widget)
            )
            widget.update(lines)

        self.query_one("#cart-total", Static).update(f"Total: {format_currency(self.cart.total)}")

    def _status_text(self) -> str:
        status = getattr(self.app, "system_status", "") or "Ready"
        return (
            "Enter add. J/K select line, +/- qty, N note. C customer, O order note, P paid, X clear. "
            f"Ctrl+S submit. F2 admin.\n{status}"
        )
