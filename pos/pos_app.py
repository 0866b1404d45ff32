"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Awaitable

from textual.app import App
from textual.binding import Binding

from pos.admin_screen import AdminScreen
from pos.cashier_screen import CashierScreen
from pos.lifecycle import InvalidTransition
from pos.storage import StorageError
from pos.store import Store

logger = logging.getLogger(__name__)


class PosApp(App):
    """Cashier register and admin dashboard for a single outlet."""

    TITLE = "Outlet POS"

    CSS = """
    Screen {
        layout: vertical;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }

    .status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }
    """

    MODES = {
        "cashier": CashierScreen,
        "admin": AdminScreen,
    }

    BINDINGS = [
        Binding("f1", "switch_mode('cashier')", "Cashier"),
        Binding("f2", "switch_mode('admin')", "Admin"),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, store: Store) -> None:
        super().__init__()
        self.store = store
        self.system_status = ""
        self._remove_listener = store.add_listener(self._on_store_change)

    async def on_mount(self) -> None:
        self.sub_title = "Realtime" if self.store.is_realtime else "Local storage"
        try:
            await self.store.load()
        except StorageError as exc:
            logger.error("load_failed error=%s", exc)
            self.system_status = f"Could not load data: {exc}"
        await self.switch_mode("cashier")

    async def on_unmount(self) -> None:
        self._remove_listener()
        await self.store.close()

    def set_status(self, message: str) -> None:
        self.system_status = message
        self._on_store_change()

    def run_store_action(self, action: Awaitable[object], success: str | None = None) -> None:
        """Run a store coroutine in the background and report its outcome."""
        self.run_worker(self._run_store_action(action, success), exclusive=False)

    async def _run_store_action(self, action: Awaitable[object], success: str | None) -> None:
        try:
            await action
        except (StorageError, InvalidTransition) as exc:
            logger.error("action_failed error=%s", exc)
            self.set_status(f"Failed: {exc}")
            return
        if success:
            self.set_status(success)

    def _on_store_change(self) -> None:
        screen = self.screen_stack[-1] if self.screen_stack else None
        refresh_view = getattr(screen, "refresh_view", None)
        if refresh_view is not None:
            refresh_view()
