"""Application state: menu and order snapshots kept in sync with one storage backend.

Collections are tuples replaced wholesale on every change. Acknowledged writes
and pushed change events are merged by identity, so the last write applied for
a given id wins; no conflict resolution is attempted.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable

from pos.cart import Cart
from pos.config import MENU_TABLE, ORDERS_TABLE
from pos.constant import DEFAULT_CUSTOMER_NAME, PAYMENT_UNPAID
from pos.data import default_menu, find_menu_item
from pos.lifecycle import change_status, initial_status, toggle_item_prepared
from pos.mapping import menu_item_from_row, order_from_row
from pos.models import BundleConfig, CartItem, Category, MenuItem, Order, OrderItem, OrderStatus, PaymentStatus
from pos.pricing import cart_total
from pos.storage import ChangeEvent, StorageBackend, StorageError

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class StoreContextError(RuntimeError):
    """Store accessed from somewhere that does not own one."""


def use_store(owner: Any) -> Store:
    """Return the store owned by `owner` (normally the running app)."""
    store = getattr(owner, "store", None)
    if not isinstance(store, Store):
        raise StoreContextError("use_store must be called within an app that owns a Store")
    return store


class Store:
    """Owns the menu and orders and routes every mutation through the backend."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self.menu: tuple[MenuItem, ...] = ()
        self.orders: tuple[Order, ...] = ()
        self._listeners: list[Listener] = []

    @property
    def is_realtime(self) -> bool:
        return self.backend.is_remote

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` after every change; returns a function that unregisters it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def find_order(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def find_menu_item(self, item_id: str) -> MenuItem | None:
        return find_menu_item(self.menu, item_id)

    async def load(self) -> None:
        """Fetch initial state and start listening for other clients' changes."""
        menu = await self.backend.load_menu()
        if menu is None:
            menu = default_menu()
            await self.backend.seed_menu(menu)
        orders = await self.backend.load_orders()

        self.menu = tuple(menu)
        self.orders = tuple(orders or ())
        await self.backend.subscribe(self.apply_change)
        logger.info(
            "store_loaded realtime=%s menu=%d orders=%d", self.is_realtime, len(self.menu), len(self.orders)
        )
        self._notify()

    async def close(self) -> None:
        await self.backend.close()

    # Merge on identity.

    def _merge_menu_item(self, item: MenuItem) -> None:
        if any(existing.id == item.id for existing in self.menu):
            self.menu = tuple(item if existing.id == item.id else existing for existing in self.menu)
        else:
            self.menu = (*self.menu, item)
        self._notify()

    def _drop_menu_item(self, item_id: str) -> None:
        self.menu = tuple(item for item in self.menu if item.id != item_id)
        self._notify()

    def _merge_order(self, order: Order) -> None:
        if any(existing.id == order.id for existing in self.orders):
            self.orders = tuple(order if existing.id == order.id else existing for existing in self.orders)
        else:
            self.orders = (order, *self.orders)
        self._notify()

    def _drop_order(self, order_id: str) -> None:
        self.orders = tuple(order for order in self.orders if order.id != order_id)
        self._notify()

    def apply_change(self, event: ChangeEvent) -> None:
        """Merge a change pushed by the backend into the in-memory collections.

        Pushed rows that cannot be mapped are logged and dropped.
        """
        if event.table not in (MENU_TABLE, ORDERS_TABLE):
            logger.debug("push_ignored table=%s kind=%s", event.table, event.kind)
            return

        is_menu = event.table == MENU_TABLE
        if event.kind == "delete":
            if event.old and "id" in event.old:
                drop = self._drop_menu_item if is_menu else self._drop_order
                drop(str(event.old["id"]))
            return
        if not event.new:
            return

        try:
            record = menu_item_from_row(event.new) if is_menu else order_from_row(event.new)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("push_dropped table=%s kind=%s error=%r", event.table, event.kind, exc)
            return
        if is_menu:
            self._merge_menu_item(record)
        else:
            self._merge_order(record)

    # Menu actions.

    async def add_menu_item(
        self,
        name: str,
        base_price: float,
        category: Category = "Other",
        image: str | None = None,
        bundle: BundleConfig | None = None,
    ) -> MenuItem:
        draft = MenuItem(
            id="",
            name=name.strip(),
            base_price=base_price,
            category=category,
            image=image,
            bundle=bundle.normalized() if bundle is not None else None,
        )
        try:
            saved = await self.backend.insert_menu_item(draft)
        except StorageError as exc:
            logger.error("menu_add_failed name=%r error=%s", draft.name, exc)
            raise
        self._merge_menu_item(saved)
        logger.info("menu_added item_id=%s name=%r", saved.id, saved.name)
        return saved

    async def update_menu_item(self, item_id: str, **changes: Any) -> MenuItem | None:
        """Apply field changes (MenuItem field names) to an existing item."""
        current = self.find_menu_item(item_id)
        if current is None:
            logger.warning("menu_update_skipped item_id=%s reason=not_found", item_id)
            return None
        if changes.get("bundle") is not None:
            changes["bundle"] = changes["bundle"].normalized()
        updated = replace(current, **changes)
        try:
            saved = await self.backend.update_menu_item(updated)
        except StorageError as exc:
            logger.error("menu_update_failed item_id=%s error=%s", item_id, exc)
            raise
        self._merge_menu_item(saved)
        logger.info("menu_updated item_id=%s fields=%s", item_id, ",".join(sorted(changes)))
        return saved

    async def delete_menu_item(self, item_id: str) -> None:
        try:
            await self.backend.delete_menu_item(item_id)
        except StorageError as exc:
            logger.error("menu_delete_failed item_id=%s error=%s", item_id, exc)
            raise
        self._drop_menu_item(item_id)
        logger.info("menu_deleted item_id=%s", item_id)

    # Order actions.

    async def create_order(
        self,
        lines: Iterable[CartItem],
        customer_name: str = "",
        payment_status: PaymentStatus = PAYMENT_UNPAID,
        note: str | None = None,
    ) -> Order:
        """Submit cart lines as a new order. The total is fixed here."""
        cart_lines = [line for line in lines if line.quantity > 0]
        draft = Order(
            id="",
            customer_name=customer_name.strip() or DEFAULT_CUSTOMER_NAME,
            items=tuple(
                OrderItem(item=line.item, quantity=line.quantity, note=line.note, is_prepared=False)
                for line in cart_lines
            ),
            total=cart_total(cart_lines),
            status=initial_status(payment_status),
            payment_status=payment_status,
            created_at="",
            note=(note or "").strip() or None,
        )
        try:
            saved = await self.backend.insert_order(draft)
        except StorageError as exc:
            logger.error("order_create_failed customer=%r error=%s", draft.customer_name, exc)
            raise
        self._merge_order(saved)
        logger.info(
            "order_created order_id=%s items=%d total=%s payment=%s",
            saved.id,
            len(saved.items),
            saved.total,
            saved.payment_status,
        )
        return saved

    async def checkout(self, cart: Cart) -> Order | None:
        """Create an order from the cart and clear it. Empty carts are ignored."""
        if cart.is_empty:
            return None
        order = await self.create_order(cart.lines, cart.customer_name, cart.payment_status, cart.note)
        cart.clear()
        return order

    async def _save_order(self, order: Order, action: str) -> Order:
        try:
            saved = await self.backend.update_order(order)
        except StorageError as exc:
            logger.error("%s_failed order_id=%s error=%s", action, order.id, exc)
            raise
        self._merge_order(saved)
        return saved

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order | None:
        """Explicit admin transition; raises InvalidTransition for illegal moves."""
        order = self.find_order(order_id)
        if order is None:
            logger.warning("order_status_skipped order_id=%s reason=not_found", order_id)
            return None
        updated = change_status(order, status)
        if updated is order:
            return order
        saved = await self._save_order(updated, "order_status")
        logger.info("order_status order_id=%s from=%s to=%s", order_id, order.status, saved.status)
        return saved

    async def toggle_order_item_prepared(self, order_id: str, item_id: str) -> Order | None:
        order = self.find_order(order_id)
        if order is None:
            logger.warning("order_toggle_skipped order_id=%s reason=not_found", order_id)
            return None
        updated = toggle_item_prepared(order, item_id)
        if updated is order:
            return order
        saved = await self._save_order(updated, "order_toggle")
        logger.info("order_toggle order_id=%s item_id=%s status=%s", order_id, item_id, saved.status)
        return saved

    async def delete_order(self, order_id: str) -> None:
        try:
            await self.backend.delete_order(order_id)
        except StorageError as exc:
            logger.error("order_delete_failed order_id=%s error=%s", order_id, exc)
            raise
        self._drop_order(order_id)
        logger.info("order_deleted order_id=%s", order_id)
