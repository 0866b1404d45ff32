"""The cashier's in-progress order."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from pos.constant import PAYMENT_UNPAID
from pos.models import CartItem, MenuItem, PaymentStatus
from pos.pricing import cart_total


@dataclass
class Cart:
    """Lines being built at the register, plus order-level details."""

    lines: list[CartItem] = field(default_factory=list)
    customer_name: str = ""
    payment_status: PaymentStatus = PAYMENT_UNPAID
    note: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> float:
        return cart_total(self.lines)

    def find(self, item_id: str) -> CartItem | None:
        for line in self.lines:
            if line.item.id == item_id:
                return line
        return None

    def add(self, item: MenuItem) -> None:
        """Add one unit; an existing line for the same item is incremented."""
        line = self.find(item.id)
        if line is None:
            self.lines.append(CartItem(item=item, quantity=1))
            return
        self._replace(item.id, replace(line, quantity=line.quantity + 1))

    def update_quantity(self, item_id: str, delta: int) -> None:
        """Change a line's quantity, clamped at 0; lines reaching 0 are removed."""
        line = self.find(item_id)
        if line is None:
            return
        quantity = max(0, line.quantity + delta)
        if quantity == 0:
            self.lines = [other for other in self.lines if other.item.id != item_id]
            return
        self._replace(item_id, replace(line, quantity=quantity))

    def set_note(self, item_id: str, note: str) -> None:
        line = self.find(item_id)
        if line is None:
            return
        self._replace(item_id, replace(line, note=note.strip() or None))

    def toggle_payment(self) -> None:
        self.payment_status = "Unpaid" if self.payment_status == "Paid" else "Paid"

    def clear(self) -> None:
        self.lines = []
        self.customer_name = ""
        self.payment_status = PAYMENT_UNPAID
        self.note = ""

    def _replace(self, item_id: str, new_line: CartItem) -> None:
        self.lines = [new_line if line.item.id == item_id else line for line in self.lines]
