"""Domain models for the outlet POS."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Category = Literal["Coffee", "Tea", "Food", "Dessert", "Other"]
OrderStatus = Literal["Pending", "Preparing", "Completed", "Picked Up", "Cancelled"]
PaymentStatus = Literal["Paid", "Unpaid"]


@dataclass(frozen=True)
class BundleConfig:
    """Quantity-break rule: every `buy_quantity` units cost `bundle_price` in total."""

    enabled: bool = False
    buy_quantity: int = 0
    bundle_price: float = 0
    show_promo_label: bool = False

    def normalized(self) -> BundleConfig:
        """Return the inert zero/false form when the rule is disabled."""
        if self.enabled:
            return self
        return BundleConfig()


@dataclass(frozen=True)
class MenuItem:
    """A sellable menu entry."""

    id: str
    name: str
    base_price: float
    category: Category = "Other"
    image: str | None = None
    bundle: BundleConfig | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class CartItem:
    """A menu item being ordered, with quantity and an optional line note."""

    item: MenuItem
    quantity: int = 1
    note: str | None = None


@dataclass(frozen=True)
class OrderItem:
    """A persisted order line; kitchen staff mark it prepared."""

    item: MenuItem
    quantity: int
    note: str | None = None
    is_prepared: bool = False


@dataclass(frozen=True)
class Order:
    """A submitted order. `total` is fixed at creation time."""

    id: str
    customer_name: str
    items: tuple[OrderItem, ...]
    total: float
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: str
    note: str | None = None
