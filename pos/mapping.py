"""Conversion between domain dataclasses, stored documents and backend rows.

Documents (bundle rules, order lines, locally stored collections) keep the
camelCase keys written by other clients of the same database. Backend rows use
the snake_case column names of the ``menu_items`` and ``orders`` tables.
"""

from __future__ import annotations

from typing import Any, Mapping

from pos.constant import DEFAULT_CUSTOMER_NAME, PAYMENT_UNPAID, STATUS_PENDING
from pos.models import BundleConfig, MenuItem, Order, OrderItem

Document = dict[str, Any]


def bundle_to_document(bundle: BundleConfig) -> Document:
    return {
        "enabled": bundle.enabled,
        "buyQuantity": bundle.buy_quantity,
        "bundlePrice": bundle.bundle_price,
        "showPromoLabel": bundle.show_promo_label,
    }


def bundle_from_document(doc: Mapping[str, Any] | None) -> BundleConfig | None:
    if doc is None:
        return None
    return BundleConfig(
        enabled=bool(doc.get("enabled", False)),
        buy_quantity=int(doc.get("buyQuantity") or 0),
        bundle_price=doc.get("bundlePrice") or 0,
        show_promo_label=bool(doc.get("showPromoLabel", False)),
    )


def menu_item_to_document(item: MenuItem) -> Document:
    doc: Document = {
        "id": item.id,
        "name": item.name,
        "basePrice": item.base_price,
        "category": item.category,
    }
    if item.image is not None:
        doc["image"] = item.image
    if item.bundle is not None:
        doc["bundle"] = bundle_to_document(item.bundle)
    if item.created_at is not None:
        doc["createdAt"] = item.created_at
    return doc


def menu_item_from_document(doc: Mapping[str, Any]) -> MenuItem:
    return MenuItem(
        id=str(doc["id"]),
        name=doc["name"],
        base_price=doc["basePrice"],
        category=doc.get("category") or "Other",
        image=doc.get("image"),
        bundle=bundle_from_document(doc.get("bundle")),
        created_at=doc.get("createdAt"),
    )


def order_item_to_document(line: OrderItem) -> Document:
    doc = menu_item_to_document(line.item)
    doc["quantity"] = line.quantity
    if line.note is not None:
        doc["note"] = line.note
    doc["isPrepared"] = line.is_prepared
    return doc


def order_item_from_document(doc: Mapping[str, Any]) -> OrderItem:
    return OrderItem(
        item=menu_item_from_document(doc),
        quantity=int(doc.get("quantity") or 0),
        note=doc.get("note") or None,
        is_prepared=bool(doc.get("isPrepared", False)),
    )


def order_to_document(order: Order) -> Document:
    doc: Document = {
        "id": order.id,
        "customerName": order.customer_name,
        "items": [order_item_to_document(line) for line in order.items],
        "total": order.total,
        "status": order.status,
        "paymentStatus": order.payment_status,
        "createdAt": order.created_at,
    }
    if order.note is not None:
        doc["note"] = order.note
    return doc


def order_from_document(doc: Mapping[str, Any]) -> Order:
    return Order(
        id=str(doc["id"]),
        customer_name=doc.get("customerName") or DEFAULT_CUSTOMER_NAME,
        items=tuple(order_item_from_document(line) for line in doc.get("items") or []),
        total=doc.get("total") or 0,
        status=doc.get("status") or STATUS_PENDING,
        payment_status=doc.get("paymentStatus") or PAYMENT_UNPAID,
        created_at=doc.get("createdAt") or "",
        note=doc.get("note") or None,
    )


def menu_item_to_row(item: MenuItem, include_identity: bool = True) -> Document:
    """Row for the ``menu_items`` table.

    Without identity the backend generates ``id`` and ``created_at``.
    """
    row: Document = {
        "name": item.name,
        "base_price": item.base_price,
        "category": item.category,
        "image": item.image,
        "bundle_config": bundle_to_document(item.bundle) if item.bundle is not None else None,
    }
    if include_identity:
        row["id"] = item.id
        if item.created_at is not None:
            row["created_at"] = item.created_at
    return row


def menu_item_from_row(row: Mapping[str, Any]) -> MenuItem:
    return MenuItem(
        id=str(row["id"]),
        name=row["name"],
        base_price=row["base_price"],
        category=row.get("category") or "Other",
        image=row.get("image"),
        bundle=bundle_from_document(row.get("bundle_config")),
        created_at=row.get("created_at"),
    )


def order_to_row(order: Order, include_identity: bool = True) -> Document:
    """Row for the ``orders`` table; line items are stored as a document array."""
    row: Document = {
        "customer_name": order.customer_name,
        "items": [order_item_to_document(line) for line in order.items],
        "total": order.total,
        "status": order.status,
        "payment_status": order.payment_status,
        "note": order.note,
    }
    if include_identity:
        row["id"] = order.id
        if order.created_at:
            row["created_at"] = order.created_at
    return row


def order_from_row(row: Mapping[str, Any]) -> Order:
    return Order(
        id=str(row["id"]),
        customer_name=row.get("customer_name") or DEFAULT_CUSTOMER_NAME,
        items=tuple(order_item_from_document(line) for line in row.get("items") or []),
        total=row.get("total") or 0,
        status=row.get("status") or STATUS_PENDING,
        payment_status=row.get("payment_status") or PAYMENT_UNPAID,
        created_at=row.get("created_at") or "",
        note=row.get("note") or None,
    )
