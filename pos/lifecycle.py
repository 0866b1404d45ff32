"""Order status derivation from kitchen progress, plus explicit admin transitions."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from pos.constant import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_PICKED_UP,
    STATUS_PREPARING,
)
from pos.models import Order, OrderItem, OrderStatus, PaymentStatus

TERMINAL_STATUSES: frozenset[str] = frozenset({STATUS_CANCELLED, STATUS_PICKED_UP})

# Statuses an admin may pick by hand while the order is still in the kitchen.
_MANUAL_STATUSES: frozenset[str] = frozenset({STATUS_PENDING, STATUS_PREPARING, STATUS_COMPLETED})


class InvalidTransition(ValueError):
    """Raised when an explicit status change is not allowed from the current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"cannot move order from {current!r} to {target!r}")
        self.current = current
        self.target = target


def initial_status(payment_status: PaymentStatus) -> OrderStatus:
    """Workflow status for a new order. Payment is tracked separately."""
    return STATUS_PENDING


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def derive_status(items: Iterable[OrderItem], current: OrderStatus) -> OrderStatus:
    """Status implied by how many lines are prepared.

    Terminal statuses are returned unchanged. An order without lines stays
    Pending since it can never be fully prepared.
    """
    if is_terminal(current):
        return current

    lines = list(items)
    prepared = sum(1 for line in lines if line.is_prepared)
    if prepared == 0:
        return STATUS_PENDING
    if prepared == len(lines):
        return STATUS_COMPLETED
    return STATUS_PREPARING


def progress(order: Order) -> tuple[int, int]:
    """Return (prepared lines, total lines)."""
    return sum(1 for line in order.items if line.is_prepared), len(order.items)


def toggle_item_prepared(order: Order, item_id: str) -> Order:
    """Flip the prepared flag of the line(s) for `item_id` and re-derive status."""
    if not any(line.item.id == item_id for line in order.items):
        return order

    items = tuple(
        replace(line, is_prepared=not line.is_prepared) if line.item.id == item_id else line
        for line in order.items
    )
    return replace(order, items=items, status=derive_status(items, order.status))


def can_change_status(current: str, target: str) -> bool:
    if current == target:
        return True
    if is_terminal(current):
        return False
    if target == STATUS_CANCELLED:
        return True
    if target == STATUS_PICKED_UP:
        return current == STATUS_COMPLETED
    return target in _MANUAL_STATUSES


def change_status(order: Order, target: OrderStatus) -> Order:
    """Apply an explicit admin transition (pick up, cancel, manual override)."""
    if order.status == target:
        return order
    if not can_change_status(order.status, target):
        raise InvalidTransition(order.status, target)
    return replace(order, status=target)
