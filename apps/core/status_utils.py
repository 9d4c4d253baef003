"""
Payment-state and collection-urgency derivation for orders.

Pure functions over OrderRecord values: nothing here reads the clock, touches
the database or mutates its input. Calendar comparisons are made on UTC
calendar days: aware datetimes are converted to UTC before the time of day is
dropped, naive datetimes and plain dates are taken as already being UTC.
"""
import logging
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from django.utils.dateparse import parse_date, parse_datetime

from apps.core.records import OrderRecord

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 7


class PaymentState(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    NOT_PAID = "not_paid"


class Urgency(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    UPCOMING = "upcoming"
    NONE = "none"


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    COLLECTED = "collected"


ORDER_STATUS_CHOICES = [
    (OrderStatus.PENDING.value, "Pending"),
    (OrderStatus.IN_PROGRESS.value, "In progress"),
    (OrderStatus.COMPLETED.value, "Completed"),
    (OrderStatus.COLLECTED.value, "Collected"),
]

# Labels used by the various dashboards, mapped onto the canonical set.
ORDER_STATUS_ALIASES = {
    "pending": OrderStatus.PENDING,
    "in_progress": OrderStatus.IN_PROGRESS,
    "in-progress": OrderStatus.IN_PROGRESS,
    "cutting": OrderStatus.IN_PROGRESS,
    "sewing": OrderStatus.IN_PROGRESS,
    "finishing": OrderStatus.IN_PROGRESS,
    "completed": OrderStatus.COMPLETED,
    "ready": OrderStatus.COMPLETED,
    "collected": OrderStatus.COLLECTED,
    "delivered": OrderStatus.COLLECTED,
}

PAYMENT_STATE_ALIASES = {
    "paid": PaymentState.PAID,
    "partial": PaymentState.PARTIAL,
    "advance": PaymentState.PARTIAL,
    "not_paid": PaymentState.NOT_PAID,
    "not-paid": PaymentState.NOT_PAID,
    "unpaid": PaymentState.NOT_PAID,
}

TERMINAL_STATUSES = frozenset({OrderStatus.COLLECTED})


class UnparseableDate(ValueError):
    """Raised when a stored date value cannot be read as a calendar day."""


def normalize_order_status(value: Any) -> Optional[OrderStatus]:
    if isinstance(value, OrderStatus):
        return value
    if value is None:
        return None
    return ORDER_STATUS_ALIASES.get(str(value).strip().lower())


def is_terminal(order: OrderRecord) -> bool:
    return normalize_order_status(order.status) in TERMINAL_STATUSES


def to_amount(value: Any) -> Decimal:
    """Coerce a stored amount to a non-negative Decimal; junk reads as zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite() or amount < 0:
        return Decimal("0")
    return amount


def is_malformed_amount(value: Any) -> bool:
    """True for a stored amount that is present but negative or not a number."""
    if value is None or value == "":
        return False
    if isinstance(value, bool):
        return True
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return True
    return not amount.is_finite() or amount < 0


def has_malformed_amount(order: OrderRecord) -> bool:
    return is_malformed_amount(order.total_amount) or is_malformed_amount(order.paid_amount)


def calendar_day(value: Any) -> Optional[date]:
    """
    Normalize a date-like value to a UTC calendar day.

    Returns None for missing values and raises UnparseableDate for values that
    are present but cannot be read.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed_dt = parse_datetime(text)
            if parsed_dt:
                return calendar_day(parsed_dt)
            parsed = parse_date(text)
        except ValueError as exc:
            # well-formed but impossible, e.g. 2024-02-30
            raise UnparseableDate(value) from exc
        if parsed:
            return parsed
        try:
            return datetime.strptime(text, "%d-%m-%Y").date()
        except ValueError:
            pass
    raise UnparseableDate(value)


def derive_payment_state(order: OrderRecord) -> PaymentState:
    """
    Always returns a state. Malformed amounts read as zero here, so callers
    that act on the state check has_malformed_amount first.
    """
    total = to_amount(order.total_amount)
    paid = to_amount(order.paid_amount)
    # Overpayment is clamped to paid.
    if paid >= total:
        return PaymentState.PAID
    if paid > 0:
        return PaymentState.PARTIAL
    return PaymentState.NOT_PAID


def balance_due(order: OrderRecord) -> Decimal:
    return max(to_amount(order.total_amount) - to_amount(order.paid_amount), Decimal("0"))


def days_until_collection(order: OrderRecord, now: Any) -> Optional[int]:
    """Whole calendar days from ``now`` to the collection date; None if unknown."""
    try:
        collection = calendar_day(order.collection_date)
        today = calendar_day(now)
    except UnparseableDate:
        return None
    if collection is None or today is None:
        return None
    return (collection - today).days


def urgency_for_days(days: Optional[int], lookahead_days: int = UPCOMING_WINDOW_DAYS) -> Urgency:
    if days is None:
        return Urgency.NONE
    if days < 0:
        return Urgency.OVERDUE
    if days == 0:
        return Urgency.DUE_TODAY
    if days == 1:
        return Urgency.DUE_TOMORROW
    if days <= lookahead_days:
        return Urgency.UPCOMING
    return Urgency.NONE


def derive_urgency(order: OrderRecord, now: Any, lookahead_days: int = UPCOMING_WINDOW_DAYS) -> Urgency:
    """
    Classify how urgently an order needs collection relative to ``now``.

    Collected orders never need action. Orders whose collection date is
    missing or unreadable map to Urgency.NONE.
    """
    if is_terminal(order):
        return Urgency.NONE
    return urgency_for_days(days_until_collection(order, now), lookahead_days)
