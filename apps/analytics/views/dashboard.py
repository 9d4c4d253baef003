from decimal import Decimal
from typing import Any, Dict, Iterable

from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from apps.core.auth import IsApprovedTailor
from apps.core.records import CustomerRecord
from apps.core.status_utils import (
    PaymentState,
    Urgency,
    days_until_collection,
    derive_payment_state,
    derive_urgency,
    to_amount,
)
from apps.customers.views import tailor_customers


def dashboard_stats(customers: Iterable[CustomerRecord], now: Any) -> Dict[str, Any]:
    """
    Headline numbers for the tailor dashboard.

    pending_orders counts orders due after today that are not fully paid,
    total_revenue sums the totals of paid orders and advance_payments sums
    what has been paid on partially paid orders.
    """
    customers = list(customers)
    pending = 0
    overdue = 0
    revenue = Decimal("0")
    advances = Decimal("0")

    for customer in customers:
        for order in customer.orders:
            state = derive_payment_state(order)
            if state == PaymentState.PAID:
                revenue += to_amount(order.total_amount)
            elif state == PaymentState.PARTIAL:
                advances += to_amount(order.paid_amount)

            days = days_until_collection(order, now)
            if days is not None and days > 0 and state != PaymentState.PAID:
                pending += 1
            if derive_urgency(order, now) == Urgency.OVERDUE:
                overdue += 1

    return {
        "total_customers": len(customers),
        "pending_orders": pending,
        "total_revenue": str(revenue),
        "advance_payments": str(advances),
        "overdue_orders": overdue,
    }


class DashboardStatsAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(
        tags=["dashboard"],
        summary="Customer, order and payment totals for the tailor",
        responses={
            200: OpenApiResponse(
                response=OpenApiTypes.OBJECT,
                examples=[OpenApiExample(
                    "Stats",
                    value={
                        "total_customers": 12,
                        "pending_orders": 4,
                        "total_revenue": "18500.00",
                        "advance_payments": "3000.00",
                        "overdue_orders": 1,
                    },
                )],
            ),
        },
    )
    def get(self, request):
        records = [c.as_record() for c in tailor_customers(request.user)]
        return Response(dashboard_stats(records, timezone.now()))
