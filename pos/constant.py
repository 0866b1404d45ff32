"""Editable static menu, category and status configuration."""

from __future__ import annotations

CATEGORIES: list[str] = ["Coffee", "Tea", "Food", "Dessert", "Other"]

CATEGORY_FILTERS: list[str] = ["All", *CATEGORIES]

STATUS_PENDING = "Pending"
STATUS_PREPARING = "Preparing"
STATUS_COMPLETED = "Completed"
STATUS_PICKED_UP = "Picked Up"
STATUS_CANCELLED = "Cancelled"

ORDER_STATUSES: list[str] = [
    STATUS_PENDING,
    STATUS_PREPARING,
    STATUS_COMPLETED,
    STATUS_PICKED_UP,
    STATUS_CANCELLED,
]

ORDER_FILTERS: list[str] = ["All", *ORDER_STATUSES]

PAYMENT_PAID = "Paid"
PAYMENT_UNPAID = "Unpaid"

DEFAULT_CUSTOMER_NAME = "Guest"

# Seed menu used when local storage holds no menu yet. Raw stored-document shape,
# consumed by pos.data which maps these into MenuItem instances.
DEFAULT_MENU: list[dict[str, object]] = [
    {
        "id": "1",
        "name": "Espresso",
        "basePrice": 25000,
        "category": "Coffee",
        "bundle": {"enabled": False, "buyQuantity": 0, "bundlePrice": 0, "showPromoLabel": False},
    },
    {
        "id": "2",
        "name": "Iced Latte",
        "basePrice": 35000,
        "category": "Coffee",
        "bundle": {"enabled": True, "buyQuantity": 2, "bundlePrice": 60000, "showPromoLabel": True},
    },
    {
        "id": "3",
        "name": "Croissant",
        "basePrice": 20000,
        "category": "Food",
        "bundle": {"enabled": True, "buyQuantity": 3, "bundlePrice": 50000, "showPromoLabel": True},
    },
    {
        "id": "4",
        "name": "Green Tea",
        "basePrice": 30000,
        "category": "Tea",
        "bundle": {"enabled": False, "buyQuantity": 0, "bundlePrice": 0, "showPromoLabel": False},
    },
]
