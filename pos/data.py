"""Static menu data and menu lookup helpers."""

from __future__ import annotations

from typing import Iterable

from pos.constant import DEFAULT_MENU
from pos.mapping import menu_item_from_document
from pos.models import MenuItem


def default_menu() -> list[MenuItem]:
    """Seed menu for a fresh local store."""
    return [menu_item_from_document(doc) for doc in DEFAULT_MENU]


def filter_menu(menu: Iterable[MenuItem], category: str = "All", search: str = "") -> list[MenuItem]:
    """Items in `category` ("All" for every category) whose name contains `search`."""
    needle = search.strip().lower()
    return [
        item
        for item in menu
        if (category == "All" or item.category == category) and needle in item.name.lower()
    ]


def find_menu_item(menu: Iterable[MenuItem], item_id: str) -> MenuItem | None:
    for item in menu:
        if item.id == item_id:
            return item
    return None
