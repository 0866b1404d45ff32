"""Line and cart pricing with bundle (quantity-break) rules."""

from __future__ import annotations

from typing import Iterable

from pos.models import BundleConfig, CartItem


def active_bundle(bundle: BundleConfig | None) -> BundleConfig | None:
    """Return the rule when it actually changes pricing, else None."""
    if bundle is None or not bundle.enabled:
        return None
    if not bundle.buy_quantity or not bundle.bundle_price:
        return None
    return bundle


def compute_line_total(unit_price: float, quantity: int, bundle: BundleConfig | None = None) -> float:
    """Charge for `quantity` units, applying the bundle price to each complete bundle.

    Units left over after the last complete bundle are charged at `unit_price`.
    Callers clamp `quantity` to >= 0.
    """
    rule = active_bundle(bundle)
    if rule is None:
        return unit_price * quantity

    bundle_count, remainder = divmod(quantity, rule.buy_quantity)
    return bundle_count * rule.bundle_price + remainder * unit_price


def line_total(line: CartItem) -> float:
    return compute_line_total(line.item.base_price, line.quantity, line.item.bundle)


def cart_total(lines: Iterable[CartItem]) -> float:
    return sum((line_total(line) for line in lines), 0)


def is_bundle_active(line: CartItem) -> bool:
    """True when the line already contains at least one complete bundle."""
    rule = active_bundle(line.item.bundle)
    return rule is not None and line.quantity >= rule.buy_quantity


def units_to_next_bundle(line: CartItem) -> int:
    """How many more units complete the next bundle; 0 when no bundle applies."""
    rule = active_bundle(line.item.bundle)
    if rule is None:
        return 0
    return rule.buy_quantity - line.quantity % rule.buy_quantity


def bundle_hint(line: CartItem) -> int:
    """Units to suggest adding, shown only before the first bundle is reached."""
    if line.quantity <= 0 or is_bundle_active(line):
        return 0
    return units_to_next_bundle(line)
