import logging
from typing import Dict

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from apps.core import dismissals
from apps.core.auth import IsApprovedTailor, get_owned_object
from apps.core.reminder_utils import ReminderEntry, get_reminders, urgent_summary
from apps.core.status_utils import UPCOMING_WINDOW_DAYS
from apps.customers.views import serializer_context, tailor_customers
from .models import Order
from .serializers import OrderSerializer, OrderStatusUpdateSerializer

logger = logging.getLogger(__name__)


def _entry_payload(entry: ReminderEntry) -> Dict:
    order = entry.order
    return {
        "order_id": order.order_id,
        "customer_id": entry.customer.customer_id,
        "customer_name": entry.customer.name,
        "phone": entry.customer.phone,
        "collection_date": str(order.collection_date),
        "days_until": entry.days_until,
        "status": order.status,
        "total_amount": str(order.total_amount),
        "paid_amount": str(order.paid_amount),
        "balance_due": str(entry.balance_due),
        "payment_state": entry.payment_state.value,
    }


class OrderDetailAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    def _not_found(self):
        return Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)

    @extend_schema(tags=["orders"], summary="Get one order", responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = get_owned_object(Order, request, order_id=order_id)
        if order is None:
            return self._not_found()
        return Response(OrderSerializer(order, context=serializer_context(request)).data)

    @extend_schema(tags=["orders"], summary="Update an order", request=OrderSerializer,
                   responses={200: OrderSerializer})
    def patch(self, request, order_id):
        order = get_owned_object(Order, request, order_id=order_id)
        if order is None:
            return self._not_found()
        serializer = OrderSerializer(order, data=request.data, partial=True, context=serializer_context(request))
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    @extend_schema(tags=["orders"], summary="Delete an order")
    def delete(self, request, order_id):
        order = get_owned_object(Order, request, order_id=order_id)
        if order is None:
            return self._not_found()
        order.delete()
        logger.info(f"Order {order_id} deleted by tailor {request.user.id}")
        return Response({"message": "Order deleted successfully"})


class OrderStatusAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(
        tags=["orders"],
        summary="Set an order's status",
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer, 404: OpenApiResponse(OpenApiTypes.OBJECT)},
    )
    def post(self, request, order_id):
        order = get_owned_object(Order, request, order_id=order_id)
        if order is None:
            return Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        previous = order.status
        order.status = serializer.validated_data["status"]
        order.save(update_fields=["status", "updated_at"])
        logger.info(f"Order {order.order_id} status {previous} -> {order.status}")
        return Response(OrderSerializer(order, context=serializer_context(request)).data)


class ReminderListAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(
        tags=["reminders"],
        summary="Collection reminders grouped by urgency",
        description=(
            "Buckets every uncollected order of the tailor into overdue, due_today, "
            "due_tomorrow and upcoming (within the look-ahead window). Orders dismissed "
            "during the current session are left out."
        ),
        responses={
            200: OpenApiResponse(
                response=OpenApiTypes.OBJECT,
                examples=[OpenApiExample(
                    "Reminders",
                    value={
                        "overdue": [], "due_today": [], "due_tomorrow": [], "upcoming": [],
                        "total": 0, "urgent": None, "skipped_unparseable": 0, "skipped_malformed": 0,
                        "lookahead_days": 7,
                    },
                )],
            ),
        },
    )
    def get(self, request):
        lookahead = getattr(settings, "TAILOR_REMINDER_LOOKAHEAD_DAYS", UPCOMING_WINDOW_DAYS)
        records = [c.as_record() for c in tailor_customers(request.user)]
        reminders = get_reminders(
            records,
            now=timezone.now(),
            dismissed_ids=dismissals.get_dismissed(request),
            lookahead_days=lookahead,
        )
        payload = {
            name: [_entry_payload(e) for e in entries]
            for name, entries in reminders.as_dict().items()
        }
        payload.update({
            "total": reminders.total,
            "urgent": urgent_summary(reminders),
            "skipped_unparseable": reminders.skipped_unparseable,
            "skipped_malformed": reminders.skipped_malformed,
            "lookahead_days": lookahead,
        })
        return Response(payload)


class ReminderDismissAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(
        tags=["reminders"],
        summary="Dismiss an order's reminder for the rest of this session",
        responses={200: OpenApiResponse(OpenApiTypes.OBJECT), 404: OpenApiResponse(OpenApiTypes.OBJECT)},
    )
    def post(self, request, order_id):
        order = get_owned_object(Order, request, order_id=order_id)
        if order is None:
            return Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)
        dismissed = dismissals.dismiss(request, str(order.order_id))
        return Response({"dismissed": str(order.order_id), "dismissed_count": len(dismissed)})
