"""
Canonical customer/order records consumed by the triage core.

Every storage or presentation shape (Django models, legacy documents with the
order fields flattened onto the customer) is mapped into these records at the
boundary. The records are frozen and hold tuples, so nothing downstream can
mutate the caller's snapshot.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class OrderRecord:
    order_id: str
    customer_id: str
    order_date: Any = None
    collection_date: Any = None
    total_amount: Any = 0
    paid_amount: Any = 0
    status: str = "pending"
    measurements: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class CustomerRecord:
    customer_id: str
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    orders: Tuple[OrderRecord, ...] = ()


# Legacy document keys -> canonical order fields
_ORDER_KEY_ALIASES = {
    "order_date": ("order_date", "orderDate"),
    "collection_date": ("collection_date", "collectionDate", "expectedDate", "expected_date", "deliveryDate"),
    "total_amount": ("total_amount", "totalAmount", "amount"),
    "paid_amount": ("paid_amount", "paidAmount", "advanceAmount", "advance_amount"),
    "status": ("status", "order_status", "orderStatus"),
}


def _pick(doc: Mapping[str, Any], keys: Iterable[str], default: Any = None) -> Any:
    for key in keys:
        if key in doc and doc[key] is not None:
            return doc[key]
    return default


def _document_id(doc: Mapping[str, Any], *keys: str) -> str:
    value = _pick(doc, keys + ("id", "_id"), "")
    return str(value)


def order_from_document(doc: Mapping[str, Any], customer_id: str, fallback_id: str = "") -> OrderRecord:
    """Build an OrderRecord from a camelCase or snake_case order document."""
    values: Dict[str, Any] = {
        name: _pick(doc, keys) for name, keys in _ORDER_KEY_ALIASES.items()
    }
    paid = values["paid_amount"]
    # Flattened legacy documents store a fully paid order only as a label.
    if doc.get("paymentStatus") == "paid" and values["total_amount"] is not None:
        paid = values["total_amount"]
    return OrderRecord(
        order_id=_document_id(doc, "order_id", "orderId") or fallback_id,
        customer_id=customer_id,
        order_date=values["order_date"],
        collection_date=values["collection_date"],
        total_amount=values["total_amount"] if values["total_amount"] is not None else 0,
        paid_amount=paid if paid is not None else 0,
        status=values["status"] or "pending",
        measurements=dict(doc.get("measurements") or {}),
    )


def customer_from_document(doc: Mapping[str, Any]) -> CustomerRecord:
    """
    Build a CustomerRecord from a stored customer document.

    Documents either embed an ``orders`` list, or carry a single order's
    fields directly on the customer (the flattened dashboard shape). In the
    flattened case the customer id doubles as the order id.
    """
    customer_id = _document_id(doc, "customer_id", "customerId")
    embedded = doc.get("orders")
    if isinstance(embedded, (list, tuple)):
        orders = tuple(
            order_from_document(o, customer_id, fallback_id=f"{customer_id}:{i}")
            for i, o in enumerate(embedded)
            if isinstance(o, Mapping)
        )
    elif any(_pick(doc, keys) is not None for keys in _ORDER_KEY_ALIASES.values()
             if keys != _ORDER_KEY_ALIASES["status"]):
        orders = (order_from_document(doc, customer_id, fallback_id=customer_id),)
    else:
        orders = ()

    return CustomerRecord(
        customer_id=customer_id,
        name=str(doc.get("name") or ""),
        phone=str(doc.get("phone") or ""),
        email=str(doc.get("email") or ""),
        address=str(doc.get("address") or ""),
        orders=orders,
    )

