"""Admin dashboard: order lifecycle, menu management and today's analytics."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.events import Key
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from pos.analytics import daily_summary, dashboard_totals, filter_orders, hourly_breakdown
from pos.constant import ORDER_FILTERS, STATUS_CANCELLED
from pos.item_modal import ItemModal, MenuItemForm
from pos.lifecycle import is_terminal
from pos.models import MenuItem, Order
from pos.order_detail_modal import OrderDetailModal
from pos.prompt_modal import ConfirmModal
from pos.rendering import append_window, bar, format_currency, format_menu_label, format_order_label
from pos.store import use_store

TABS = ("orders", "menu", "analytics")


class AdminScreen(Screen):
    """Three tabs selected with 1 / 2 / 3."""

    CSS = """
    #admin-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #admin-tabs {
        height: 1;
        margin-bottom: 1;
    }

    #admin-summary {
        height: auto;
        margin-bottom: 1;
    }

    #admin-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }
    """

    tab = reactive("orders")
    filter_index = reactive(0)
    order_index = reactive(0)
    menu_index = reactive(0)

    BINDINGS = [
        Binding("tab", "cycle_filter(1)", "Next filter", priority=True),
        Binding("shift+tab", "cycle_filter(-1)", "Previous filter", priority=True),
        Binding("up", "move(-1)", "Previous", show=False),
        Binding("down", "move(1)", "Next", show=False),
        Binding("enter", "open_selected", "Open", priority=True),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="admin-pane"):
            yield Static(id="admin-tabs")
            yield Static(id="admin-summary")
            yield Static(id="admin-list")
            yield Static(id="admin-status", classes="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def on_screen_resume(self) -> None:
        self.refresh_view()

    def on_key(self, event: Key) -> None:
        if not event.is_printable or not event.character:
            return

        char = event.character
        handled = True
        if char in {"1", "2", "3"}:
            self.tab = TABS[int(char) - 1]
        elif char == "j":
            self.action_move(1)
        elif char == "k":
            self.action_move(-1)
        elif self.tab == "orders" and char == "x":
            self._cancel_selected_order()
        elif self.tab == "orders" and char == "D":
            self._delete_selected_order()
        elif self.tab == "menu" and char == "a":
            self._open_item_modal(None)
        elif self.tab == "menu" and char == "e":
            self.action_open_selected()
        elif self.tab == "menu" and char == "d":
            self._delete_selected_menu_item()
        else:
            handled = False

        if handled:
            self.refresh_view()
            event.stop()

    def action_cycle_filter(self, delta: int) -> None:
        if self.tab != "orders":
            return
        self.filter_index = (self.filter_index + delta) % len(ORDER_FILTERS)
        self.order_index = 0
        self.refresh_view()

    def action_move(self, delta: int) -> None:
        if self.tab == "orders":
            orders = self._visible_orders()
            if orders:
                self.order_index = (self.order_index + delta) % len(orders)
        elif self.tab == "menu":
            menu = use_store(self.app).menu
            if menu:
                self.menu_index = (self.menu_index + delta) % len(menu)
        self.refresh_view()

    def action_open_selected(self) -> None:
        if self.tab == "orders":
            order = self._selected_order()
            if order is not None:
                self.app.push_screen(OrderDetailModal(order.id))
        elif self.tab == "menu":
            item = self._selected_menu_item()
            if item is not None:
                self._open_item_modal(item)

    def _visible_orders(self) -> list[Order]:
        return filter_orders(use_store(self.app).orders, ORDER_FILTERS[self.filter_index])

    def _selected_order(self) -> Order | None:
        orders = self._visible_orders()
        if not (0 <= self.order_index < len(orders)):
            return None
        return orders[self.order_index]

    def _selected_menu_item(self) -> MenuItem | None:
        menu = use_store(self.app).menu
        if not (0 <= self.menu_index < len(menu)):
            return None
        return menu[self.menu_index]

    def _cancel_selected_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        if is_terminal(order.status):
            self.app.set_status(f"Order is already {order.status}")
            return
        store = use_store(self.app)

        def apply(confirmed: bool) -> None:
            if confirmed:
                self.app.run_store_action(
                    store.update_order_status(order.id, STATUS_CANCELLED), f"Cancelled order for {order.customer_name}"
                )

        self.app.push_screen(ConfirmModal(f"Cancel the order for {order.customer_name}?"), apply)

    def _delete_selected_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        store = use_store(self.app)

        def apply(confirmed: bool) -> None:
            if confirmed:
                self.app.run_store_action(store.delete_order(order.id), "Order deleted")

        self.app.push_screen(
            ConfirmModal(f"Permanently delete the order for {order.customer_name}? This cannot be undone."), apply
        )

    def _delete_selected_menu_item(self) -> None:
        item = self._selected_menu_item()
        if item is None:
            return
        store = use_store(self.app)

        def apply(confirmed: bool) -> None:
            if confirmed:
                self.app.run_store_action(store.delete_menu_item(item.id), f"Deleted {item.name}")

        self.app.push_screen(ConfirmModal(f"Delete {item.name} from the menu?"), apply)

    def _open_item_modal(self, item: MenuItem | None) -> None:
        store = use_store(self.app)

        def apply(form: MenuItemForm | None) -> None:
            if form is None:
                return
            if item is None:
                action = store.add_menu_item(
                    form.name, form.base_price, form.category, image=form.image, bundle=form.bundle
                )
            else:
                action = store.update_menu_item(
                    item.id,
                    name=form.name,
                    base_price=form.base_price,
                    category=form.category,
                    image=form.image,
                    bundle=form.bundle,
                )
            self.app.run_store_action(action, f"Saved {form.name}")

        self.app.push_screen(ItemModal(item), apply)

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        self._refresh_tabs()
        if self.tab == "orders":
            self._refresh_orders()
        elif self.tab == "menu":
            self._refresh_menu()
        else:
            self._refresh_analytics()
        self.query_one("#admin-status", Static).update(self._status_text())

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _refresh_tabs(self) -> None:
        text = Text()
        for idx, name in enumerate(TABS):
            if idx > 0:
                text.append(" ")
            style = "reverse bold" if name == self.tab else "dim"
            text.append(f" {idx + 1} {name.title()} ", style=style)
        self.query_one("#admin-tabs", Static).update(text)

    def _refresh_orders(self) -> None:
        store = use_store(self.app)
        totals = dashboard_totals(store.orders)
        summary = Text()
        summary.append(f"Revenue {format_currency(totals.revenue)}   ")
        summary.append(f"Pending {totals.pending_orders}   Completed {totals.completed_orders}\n")
        for idx, name in enumerate(ORDER_FILTERS):
            if idx > 0:
                summary.append(" ")
            summary.append(f" {name} ", style="reverse" if idx == self.filter_index else "dim")
        self.query_one("#admin-summary", Static).update(summary)

        widget = self.query_one("#admin-list", Static)
        orders = self._visible_orders()
        if not orders:
            widget.update("No orders found")
            return
        if self.order_index >= len(orders):
            self.order_index = len(orders) - 1
        lines = Text()
        append_window(lines, [format_order_label(order) for order in orders], self.order_index, self._visible_rows(widget))
        widget.update(lines)

    def _refresh_menu(self) -> None:
        store = use_store(self.app)
        self.query_one("#admin-summary", Static).update(f"{len(store.menu)} menu items")
        widget = self.query_one("#admin-list", Static)
        if not store.menu:
            widget.update("(menu is empty, press A to add an item)")
            return
        if self.menu_index >= len(store.menu):
            self.menu_index = len(store.menu) - 1
        lines = Text()
        append_window(lines, [format_menu_label(item) for item in store.menu], self.menu_index, self._visible_rows(widget))
        widget.update(lines)

    def _refresh_analytics(self) -> None:
        store = use_store(self.app)
        summary = daily_summary(store.orders)
        text = Text()
        text.append("Today's Analytics\n", style="bold")
        text.append(f"Orders {summary.total_orders}   Completed {summary.completed_orders}   ")
        text.append(f"Pending {summary.pending_orders}   Revenue {format_currency(summary.revenue)}")
        self.query_one("#admin-summary", Static).update(text)

        buckets = [bucket for bucket in hourly_breakdown(store.orders) if bucket.orders]
        widget = self.query_one("#admin-list", Static)
        if not buckets:
            widget.update("No orders today")
            return
        peak_orders = max(bucket.orders for bucket in buckets)
        peak_revenue = max(bucket.revenue for bucket in buckets)
        lines = Text()
        for idx, bucket in enumerate(buckets):
            if idx > 0:
                lines.append("\n")
            lines.append(f"{bucket.label:>6} ")
            lines.append(f"{bar(bucket.orders, peak_orders, 10):<10}", style="#2f6db5")
            lines.append(f" {bucket.orders:>3}  ")
            lines.append(f"{bar(bucket.revenue, peak_revenue, 20):<20}", style="#5fbf72")
            lines.append(f" {format_currency(bucket.revenue)}")
        widget.update(lines)

    def _status_text(self) -> str:
        status = getattr(self.app, "system_status", "") or "Ready"
        if self.tab == "orders":
            help_text = "Tab filter. J/K select. Enter details. X cancel. Shift+D delete."
        elif self.tab == "menu":
            help_text = "J/K select. A add. E/Enter edit. D delete."
        else:
            help_text = "Completed and picked-up orders count toward revenue."
        return f"{help_text} F1 cashier.\n{status}"
