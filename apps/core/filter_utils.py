"""
Customer/order filtering for the tailor dashboards.

Filtering works at order granularity: the search stage keeps or drops whole
customers, the status and date stages narrow each customer's candidate orders,
and a customer survives a narrowing stage only while at least one candidate
order is left. Every stage is a pure narrowing pass over the previous stage's
output, so stages commute and the result does not depend on their order.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from apps.core.records import CustomerRecord, OrderRecord
from apps.core.status_utils import (
    PAYMENT_STATE_ALIASES,
    PaymentState,
    UnparseableDate,
    calendar_day,
    derive_payment_state,
    has_malformed_amount,
    normalize_order_status,
)

logger = logging.getLogger(__name__)

FILTER_GRANULARITY = "order"
STATUS_ALL = "all"


class DateFilterMode(str, Enum):
    ALL = "all"
    ORDER = "order"
    COLLECTION = "collection"


@dataclass(frozen=True)
class DateFilter:
    mode: DateFilterMode = DateFilterMode.ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def contains(self, day: date) -> bool:
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True


@dataclass(frozen=True)
class FilterSpec:
    search_text: str = ""
    status_filter: str = STATUS_ALL
    date_filter: DateFilter = field(default_factory=DateFilter)


@dataclass
class FilterResult:
    customers: List[CustomerRecord]
    matched_orders: Dict[str, Tuple[OrderRecord, ...]]
    skipped_unparseable: int = 0
    skipped_malformed: int = 0
    granularity: str = FILTER_GRANULARITY


@dataclass(frozen=True)
class _Candidate:
    customer: CustomerRecord
    orders: Tuple[OrderRecord, ...]


Stage = Callable[[List[_Candidate], FilterSpec], List[_Candidate]]


def _search_stage(candidates: List[_Candidate], spec: FilterSpec) -> List[_Candidate]:
    text = (spec.search_text or "").strip()
    if not text:
        return candidates
    needle = text.lower()

    def matches(customer: CustomerRecord) -> bool:
        if needle in customer.name.lower():
            return True
        # phone is matched raw, without normalizing separators
        if text in customer.phone:
            return True
        return needle in customer.email.lower() or needle in customer.address.lower()

    return [c for c in candidates if matches(c.customer)]


def _payment_label(status_filter: str) -> Optional[PaymentState]:
    return PAYMENT_STATE_ALIASES.get((status_filter or "").strip().lower())


def order_matches_status(order: OrderRecord, status_filter: str) -> bool:
    """
    Exact match of an order against a status label.

    The label may name an order status ("pending", "in_progress", ...) or a
    payment state ("paid", "partial"/"advance", "not_paid"). Unknown labels
    match nothing, and an order with a negative or non-numeric amount never
    matches a payment state.
    """
    payment_state = _payment_label(status_filter)
    if payment_state is not None:
        return not has_malformed_amount(order) and derive_payment_state(order) == payment_state
    wanted = normalize_order_status((status_filter or "").strip().lower())
    if wanted is None:
        return False
    return normalize_order_status(order.status) == wanted


def _status_stage(candidates: List[_Candidate], spec: FilterSpec) -> List[_Candidate]:
    status_filter = (spec.status_filter or STATUS_ALL).strip().lower()
    if status_filter == STATUS_ALL:
        return candidates
    narrowed = []
    for c in candidates:
        orders = tuple(o for o in c.orders if order_matches_status(o, status_filter))
        if orders:
            narrowed.append(_Candidate(c.customer, orders))
    return narrowed


def _date_fields(mode: DateFilterMode) -> Tuple[str, ...]:
    if mode == DateFilterMode.ORDER:
        return ("order_date",)
    if mode == DateFilterMode.COLLECTION:
        return ("collection_date",)
    return ("order_date", "collection_date")


def order_in_date_range(order: OrderRecord, date_filter: DateFilter) -> Tuple[bool, bool]:
    """
    Return (matches, unparseable) for one order.

    In "all" mode either date falling inside the bounds is enough. An order
    with an unreadable date that does not otherwise match is reported as
    unparseable so the caller can count it.
    """
    unparseable = False
    for field_name in _date_fields(date_filter.mode):
        try:
            day = calendar_day(getattr(order, field_name))
        except UnparseableDate:
            unparseable = True
            continue
        if day is not None and date_filter.contains(day):
            return True, False
    return False, unparseable


def _date_stage(candidates: List[_Candidate], spec: FilterSpec) -> List[_Candidate]:
    date_filter = spec.date_filter
    if not date_filter.is_active:
        return candidates
    narrowed = []
    for c in candidates:
        kept = tuple(o for o in c.orders if order_in_date_range(o, date_filter)[0])
        if kept:
            narrowed.append(_Candidate(c.customer, kept))
    return narrowed


def _count_skipped(customers: Sequence[CustomerRecord], spec: FilterSpec) -> Tuple[int, int]:
    """
    Count the orders the active filters drop because of bad data.

    Counted over the whole snapshot in one pass, so the numbers do not depend
    on the order the stages run in.
    """
    check_dates = spec.date_filter.is_active
    check_amounts = _payment_label(spec.status_filter) is not None
    unparseable = malformed = 0
    for customer in customers:
        for order in customer.orders:
            if check_dates and order_in_date_range(order, spec.date_filter) == (False, True):
                unparseable += 1
            if check_amounts and has_malformed_amount(order):
                malformed += 1
    return unparseable, malformed


STAGES: Dict[str, Stage] = {
    "search": _search_stage,
    "status": _status_stage,
    "date": _date_stage,
}

DEFAULT_STAGE_ORDER = ("search", "status", "date")


def filter_customers(
    customers: Iterable[CustomerRecord],
    spec: Optional[FilterSpec] = None,
    stage_order: Sequence[str] = DEFAULT_STAGE_ORDER,
) -> FilterResult:
    """
    Apply search, status and date filters to a tailor's customers.

    Input order is preserved and the input records are returned as-is (never
    copied or modified). ``matched_orders`` maps each surviving customer id to
    the orders that satisfied every active filter. Orders dropped for an
    unreadable date or a negative/non-numeric amount are counted in
    ``skipped_unparseable`` and ``skipped_malformed``.
    """
    spec = spec or FilterSpec()
    customers = list(customers)
    candidates = [_Candidate(c, tuple(c.orders)) for c in customers]

    for name in stage_order:
        candidates = STAGES[name](candidates, spec)

    unparseable, malformed = _count_skipped(customers, spec)
    if unparseable:
        logger.warning(f"Skipped {unparseable} order(s) with unparseable dates while filtering")
    if malformed:
        logger.warning(f"Skipped {malformed} order(s) with malformed amounts while filtering")

    return FilterResult(
        customers=[c.customer for c in candidates],
        matched_orders={c.customer.customer_id: c.orders for c in candidates},
        skipped_unparseable=unparseable,
        skipped_malformed=malformed,
    )
