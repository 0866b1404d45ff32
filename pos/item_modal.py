"""Add / edit menu item modal screen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pos.constant import CATEGORIES
from pos.models import BundleConfig, Category, MenuItem
from pos.rendering import format_currency

_TEXT_KIND = "text"
_NUMBER_KIND = "number"
_TOGGLE_KIND = "toggle"
_CHOICE_KIND = "choice"

FIELDS: list[tuple[str, str, str]] = [
    ("name", "Name", _TEXT_KIND),
    ("base_price", "Base price", _NUMBER_KIND),
    ("category", "Category", _CHOICE_KIND),
    ("image", "Image URL", _TEXT_KIND),
    ("bundle_enabled", "Bundle promo", _TOGGLE_KIND),
    ("buy_quantity", "Buy quantity", _NUMBER_KIND),
    ("bundle_price", "Bundle price", _NUMBER_KIND),
    ("show_promo_label", "Show promo label", _TOGGLE_KIND),
]

_BUNDLE_FIELDS = {"buy_quantity", "bundle_price", "show_promo_label"}


@dataclass(frozen=True)
class MenuItemForm:
    """Validated item modal values."""

    name: str
    base_price: int
    category: Category
    image: str | None
    bundle: BundleConfig


def form_values(item: MenuItem | None) -> dict[str, Any]:
    """Initial modal values for `item`, or blank values for a new item."""
    if item is None:
        return {
            "name": "",
            "base_price": "",
            "category": CATEGORIES[0],
            "image": "",
            "bundle_enabled": False,
            "buy_quantity": "",
            "bundle_price": "",
            "show_promo_label": False,
        }
    bundle = item.bundle or BundleConfig()
    return {
        "name": item.name,
        "base_price": str(round(item.base_price)),
        "category": item.category,
        "image": item.image or "",
        "bundle_enabled": bundle.enabled,
        "buy_quantity": str(bundle.buy_quantity) if bundle.buy_quantity else "",
        "bundle_price": str(round(bundle.bundle_price)) if bundle.bundle_price else "",
        "show_promo_label": bundle.show_promo_label,
    }


def parse_item_form(values: dict[str, Any]) -> MenuItemForm:
    """Validate modal values; raises ValueError with a message for the user."""
    name = str(values.get("name", "")).strip()
    if not name:
        raise ValueError("Name is required.")

    price_raw = str(values.get("base_price", "")).strip()
    if not price_raw.isdigit():
        raise ValueError("Base price must be a whole number.")

    category = values.get("category") or CATEGORIES[0]
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category {category!r}.")

    bundle = BundleConfig()
    if values.get("bundle_enabled"):
        buy_raw = str(values.get("buy_quantity", "")).strip()
        bundle_price_raw = str(values.get("bundle_price", "")).strip()
        if not buy_raw.isdigit() or int(buy_raw) < 2:
            raise ValueError("Buy quantity must be at least 2.")
        if not bundle_price_raw.isdigit() or int(bundle_price_raw) <= 0:
            raise ValueError("Bundle price must be greater than 0.")
        bundle = BundleConfig(
            enabled=True,
            buy_quantity=int(buy_raw),
            bundle_price=int(bundle_price_raw),
            show_promo_label=bool(values.get("show_promo_label")),
        )

    image = str(values.get("image", "")).strip() or None
    return MenuItemForm(name=name, base_price=int(price_raw), category=category, image=image, bundle=bundle)


class ItemModal(ModalScreen[MenuItemForm | None]):
    """Field list editor; dismisses with a validated form or None."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
    ]

    CSS = """
    ItemModal {
        align: center middle;
        background: $background 60%;
    }

    #item-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #item-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #item-body {
        margin-bottom: 1;
        color: white;
    }

    #item-error {
        color: #ffb3b3;
    }

    #item-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, item: MenuItem | None = None) -> None:
        super().__init__()
        self.item = item
        self.values = form_values(item)
        self.editing = False
        self.edit_buffer = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="item-dialog"):
            yield Static("Edit Item" if self.item else "Add New Item", id="item-title")
            yield Static(id="item-body")
            yield Static(id="item-error")
            yield Static(id="item-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if self.editing:
            self._handle_edit_key(event)
            event.stop()
            return

        if event.key == "escape":
            self.dismiss(None)
        elif event.key in {"down", "j"}:
            self._move_cursor(1)
        elif event.key in {"up", "k"}:
            self._move_cursor(-1)
        elif event.key in {"enter", "space"}:
            self._activate_current()
        else:
            return
        event.stop()

    def action_save(self) -> None:
        if self.editing:
            self._commit_edit()
        try:
            form = parse_item_form(self.values)
        except ValueError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(form)

    def _rows(self) -> list[tuple[str, str, str]]:
        if self.values["bundle_enabled"]:
            return FIELDS
        return [field for field in FIELDS if field[0] not in _BUNDLE_FIELDS]

    def _move_cursor(self, delta: int) -> None:
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def _activate_current(self) -> None:
        key, _, kind = self._rows()[self.cursor_index]
        if kind == _TOGGLE_KIND:
            self.values[key] = not self.values[key]
        elif kind == _CHOICE_KIND:
            idx = CATEGORIES.index(self.values[key]) if self.values[key] in CATEGORIES else -1
            self.values[key] = CATEGORIES[(idx + 1) % len(CATEGORIES)]
        else:
            self.editing = True
            self.edit_buffer = str(self.values[key])
        self.error = ""
        self._refresh_content()

    def _handle_edit_key(self, event: Key) -> None:
        _, _, kind = self._rows()[self.cursor_index]
        if event.key == "escape":
            self.editing = False
            self.edit_buffer = ""
        elif event.key == "enter":
            self._commit_edit()
        elif event.key == "backspace":
            self.edit_buffer = self.edit_buffer[:-1]
        elif event.is_printable and event.character:
            if kind == _NUMBER_KIND and not event.character.isdigit():
                return
            self.edit_buffer += event.character
        self._refresh_content()

    def _commit_edit(self) -> None:
        key, _, _ = self._rows()[self.cursor_index]
        self.values[key] = self.edit_buffer.strip()
        self.editing = False
        self.edit_buffer = ""

    def _refresh_content(self) -> None:
        rows = self._rows()
        if self.cursor_index >= len(rows):
            self.cursor_index = len(rows) - 1

        content = Text(style="white")
        for idx, (key, label, kind) in enumerate(rows):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            if kind == _TOGGLE_KIND:
                checked = "[x]" if self.values[key] else "[ ]"
                content.append(f"{pointer}{checked} {label}")
            elif self.editing and idx == self.cursor_index:
                content.append(f"{pointer}{label}: {self.edit_buffer}|", style="bold white")
            else:
                content.append(f"{pointer}{label}: {self.values[key]}")

        if self.values["bundle_enabled"] and self.values["buy_quantity"] and self.values["bundle_price"]:
            content.append(
                f"\n\nCustomers buying {self.values['buy_quantity']} items pay "
                f"{format_currency(int(self.values['bundle_price']))} instead of the normal price.",
                style="dim",
            )

        self.query_one("#item-body", Static).update(content)
        self.query_one("#item-error", Static).update(self.error or "")
        if self.editing:
            help_text = "Type text, Enter confirm, Esc cancel typing"
        else:
            help_text = "J/K/↑/↓ move, Enter edit/toggle, Ctrl+S save, Esc cancel"
        self.query_one("#item-help", Static).update(help_text)
