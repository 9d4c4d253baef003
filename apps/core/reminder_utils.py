"""
Collection reminders: partitions actionable orders into urgency buckets.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from apps.core.records import CustomerRecord, OrderRecord
from apps.core.status_utils import (
    UPCOMING_WINDOW_DAYS,
    PaymentState,
    UnparseableDate,
    Urgency,
    balance_due,
    calendar_day,
    derive_payment_state,
    has_malformed_amount,
    is_terminal,
    urgency_for_days,
)

logger = logging.getLogger(__name__)

BUCKETS = (Urgency.OVERDUE, Urgency.DUE_TODAY, Urgency.DUE_TOMORROW, Urgency.UPCOMING)


@dataclass(frozen=True)
class ReminderEntry:
    customer: CustomerRecord
    order: OrderRecord
    days_until: int

    @property
    def payment_state(self) -> PaymentState:
        return derive_payment_state(self.order)

    @property
    def balance_due(self) -> Decimal:
        return balance_due(self.order)


@dataclass
class Reminders:
    overdue: List[ReminderEntry] = field(default_factory=list)
    due_today: List[ReminderEntry] = field(default_factory=list)
    due_tomorrow: List[ReminderEntry] = field(default_factory=list)
    upcoming: List[ReminderEntry] = field(default_factory=list)
    skipped_unparseable: int = 0
    skipped_malformed: int = 0

    def bucket(self, urgency: Urgency) -> List[ReminderEntry]:
        return getattr(self, urgency.value)

    def as_dict(self) -> Dict[str, List[ReminderEntry]]:
        return {u.value: self.bucket(u) for u in BUCKETS}

    @property
    def urgent(self) -> List[ReminderEntry]:
        return self.overdue + self.due_today

    @property
    def total(self) -> int:
        return sum(len(self.bucket(u)) for u in BUCKETS)


def get_reminders(
    customers: Iterable[CustomerRecord],
    now: Any,
    dismissed_ids: Iterable[str] = (),
    lookahead_days: int = UPCOMING_WINDOW_DAYS,
) -> Reminders:
    """
    Bucket every non-collected, non-dismissed order by collection urgency.

    Buckets are disjoint; within a bucket entries are ordered by collection
    date, earliest first, then by input order. Orders with an unreadable
    collection date are left out and counted in ``skipped_unparseable``; orders
    with a negative or non-numeric amount are left out and counted in
    ``skipped_malformed``.
    """
    dismissed = {str(i) for i in dismissed_ids}
    reminders = Reminders()
    try:
        today = calendar_day(now)
    except UnparseableDate:
        today = None
    if today is None:
        logger.warning(f"get_reminders called without a usable 'now': {now!r}")
        return reminders

    for customer in customers:
        for order in customer.orders:
            if order.order_id in dismissed or is_terminal(order):
                continue
            if has_malformed_amount(order):
                reminders.skipped_malformed += 1
                continue
            try:
                collection = calendar_day(order.collection_date)
            except UnparseableDate:
                reminders.skipped_unparseable += 1
                continue
            if collection is None:
                continue
            days = (collection - today).days
            urgency = urgency_for_days(days, lookahead_days)
            if urgency == Urgency.NONE:
                continue
            reminders.bucket(urgency).append(ReminderEntry(customer, order, days))

    for urgency in BUCKETS:
        # list.sort is stable, so ties keep input order
        reminders.bucket(urgency).sort(key=lambda entry: entry.days_until)

    if reminders.skipped_unparseable:
        logger.warning(
            f"Skipped {reminders.skipped_unparseable} order(s) with unparseable collection dates "
            f"while building reminders"
        )
    if reminders.skipped_malformed:
        logger.warning(f"Skipped {reminders.skipped_malformed} order(s) with malformed amounts while building reminders")
    return reminders


def urgent_summary(reminders: Reminders) -> Optional[Dict[str, Any]]:
    """
    Toast-style summary of the urgent buckets, or None when nothing is urgent.

    ``count`` is the number of urgent orders; the label names the customer
    when they all belong to one, otherwise it counts distinct customers.
    """
    urgent = reminders.urgent
    if not urgent:
        return None
    customers = {}
    for entry in urgent:
        customers.setdefault(entry.customer.customer_id, entry.customer)
    if len(customers) == 1:
        customer = next(iter(customers.values()))
        return {"count": len(urgent), "label": customer.name, "customer_id": customer.customer_id}
    return {"count": len(urgent), "label": f"{len(customers)} customers", "customer_id": ""}


def dispatch_urgent_reminders(reminders: Reminders, notify: Callable[[Dict[str, Any]], Any]) -> bool:
    """
    Call ``notify`` once with the urgent summary if anything is overdue or due
    today. Returns whether a notification was dispatched.
    """
    summary = urgent_summary(reminders)
    if summary is None:
        return False
    notify(summary)
    return True
