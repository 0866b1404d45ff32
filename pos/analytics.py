"""Dashboard counters and today's sales analytics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable

from pos.constant import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_PICKED_UP,
    STATUS_PREPARING,
)
from pos.models import Order

OPEN_STATUSES = frozenset({STATUS_PENDING, STATUS_PREPARING})
DONE_STATUSES = frozenset({STATUS_COMPLETED, STATUS_PICKED_UP})


@dataclass(frozen=True)
class DashboardTotals:
    revenue: float
    pending_orders: int
    completed_orders: int


@dataclass(frozen=True)
class DailySummary:
    total_orders: int
    completed_orders: int
    pending_orders: int
    revenue: float


@dataclass(frozen=True)
class HourBucket:
    hour: int
    orders: int
    revenue: float

    @property
    def label(self) -> str:
        return f"{self.hour}:00"


def filter_orders(orders: Iterable[Order], status: str = "All") -> list[Order]:
    return [order for order in orders if status == "All" or order.status == status]


def dashboard_totals(orders: Iterable[Order]) -> DashboardTotals:
    """All-time counters: revenue excludes cancelled orders."""
    orders = list(orders)
    return DashboardTotals(
        revenue=sum((order.total for order in orders if order.status != STATUS_CANCELLED), 0),
        pending_orders=sum(1 for order in orders if order.status in OPEN_STATUSES),
        completed_orders=sum(1 for order in orders if order.status in DONE_STATUSES),
    )


def _created_local(order: Order, tz: tzinfo | None) -> datetime | None:
    if not order.created_at:
        return None
    try:
        created = datetime.fromisoformat(order.created_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    return created.astimezone(tz)


def orders_on(orders: Iterable[Order], day: date | None = None, tz: tzinfo | None = None) -> list[Order]:
    """Orders created on `day` (today by default) in the given timezone (local by default)."""
    day = day or datetime.now(tz).date()
    selected = []
    for order in orders:
        created = _created_local(order, tz)
        if created is not None and created.date() == day:
            selected.append(order)
    return selected


def daily_summary(orders: Iterable[Order], day: date | None = None, tz: tzinfo | None = None) -> DailySummary:
    """Today's counts; revenue only counts completed and picked-up orders."""
    todays = orders_on(orders, day, tz)
    done = [order for order in todays if order.status in DONE_STATUSES]
    return DailySummary(
        total_orders=len(todays),
        completed_orders=len(done),
        pending_orders=sum(1 for order in todays if order.status in OPEN_STATUSES),
        revenue=sum((order.total for order in done), 0),
    )


def hourly_breakdown(orders: Iterable[Order], day: date | None = None, tz: tzinfo | None = None) -> list[HourBucket]:
    """24 buckets: every order counts toward volume, only done orders toward revenue."""
    counts = [0] * 24
    revenue: list[float] = [0] * 24
    for order in orders_on(orders, day, tz):
        created = _created_local(order, tz)
        if created is None:
            continue
        counts[created.hour] += 1
        if order.status in DONE_STATUSES:
            revenue[created.hour] += order.total
    return [HourBucket(hour=hour, orders=counts[hour], revenue=revenue[hour]) for hour in range(24)]
