import logging
from typing import Mapping

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from apps.core.auth import IsApprovedTailor, get_owned_object
from apps.core.filter_utils import DateFilter, DateFilterMode, FilterSpec, STATUS_ALL, filter_customers
from apps.core.status_utils import UPCOMING_WINDOW_DAYS, UnparseableDate, calendar_day
from apps.orders.serializers import OrderSerializer
from .models import Customer
from .serializers import CustomerSerializer

logger = logging.getLogger(__name__)


class InvalidFilter(ValueError):
    pass


def filter_spec_from_params(params: Mapping[str, str]) -> FilterSpec:
    """Build a FilterSpec from query parameters; raises InvalidFilter on bad input."""
    mode_param = (params.get("date_mode") or DateFilterMode.ALL.value).strip().lower()
    try:
        mode = DateFilterMode(mode_param)
    except ValueError:
        raise InvalidFilter(f"invalid date_mode '{mode_param}' (expected all|order|collection)")

    bounds = {}
    for name in ("start_date", "end_date"):
        try:
            bounds[name] = calendar_day(params.get(name))
        except UnparseableDate:
            raise InvalidFilter(f"invalid {name} '{params.get(name)}'")
    if bounds["start_date"] and bounds["end_date"] and bounds["start_date"] > bounds["end_date"]:
        raise InvalidFilter("start_date must not be after end_date")

    return FilterSpec(
        search_text=params.get("q") or "",
        status_filter=params.get("status") or STATUS_ALL,
        date_filter=DateFilter(mode=mode, **bounds),
    )


def serializer_context(request) -> dict:
    return {
        "request": request,
        "now": timezone.now(),
        "lookahead_days": getattr(settings, "TAILOR_REMINDER_LOOKAHEAD_DAYS", UPCOMING_WINDOW_DAYS),
    }


def tailor_customers(user):
    return Customer.objects.filter(tailor=user).prefetch_related("orders").order_by("-created_at")


class CustomerListCreateAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(
        tags=["customers"],
        summary="List the tailor's customers with search, status and date filters",
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="Case-insensitive match on name, phone, email or address"),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="Order status or payment state; 'all' disables the filter"),
            OpenApiParameter("date_mode", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="all|order|collection (default all: either date may match)"),
            OpenApiParameter("start_date", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("end_date", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: OpenApiResponse(OpenApiTypes.OBJECT), 400: OpenApiResponse(OpenApiTypes.OBJECT)},
    )
    def get(self, request):
        try:
            spec = filter_spec_from_params(request.query_params)
        except InvalidFilter as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        customers = list(tailor_customers(request.user))
        by_id = {str(c.customer_id): c for c in customers}
        result = filter_customers([c.as_record() for c in customers], spec)

        visible = [by_id[record.customer_id] for record in result.customers]
        data = CustomerSerializer(visible, many=True, context=serializer_context(request)).data
        for row, record in zip(data, result.customers):
            row["matched_order_ids"] = [o.order_id for o in result.matched_orders[record.customer_id]]

        return Response({
            "count": len(data),
            "results": data,
            "skipped_unparseable": result.skipped_unparseable,
            "skipped_malformed": result.skipped_malformed,
            "filter_granularity": result.granularity,
        })

    @extend_schema(
        tags=["customers"],
        summary="Add a customer, optionally with a first order",
        request=CustomerSerializer,
        responses={201: CustomerSerializer},
    )
    def post(self, request):
        serializer = CustomerSerializer(data=request.data, context=serializer_context(request))
        serializer.is_valid(raise_exception=True)
        customer = serializer.save(tailor=request.user)
        logger.info(f"Customer {customer.customer_id} added by tailor {request.user.id}")
        return Response(
            {"id": str(customer.customer_id), "message": "Customer added successfully", "customer": serializer.data},
            status=status.HTTP_201_CREATED,
        )


class CustomerDetailAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    def _not_found(self):
        return Response({"error": "Customer not found"}, status=status.HTTP_404_NOT_FOUND)

    @extend_schema(tags=["customers"], summary="Get one customer with orders", responses={200: CustomerSerializer})
    def get(self, request, customer_id):
        customer = get_owned_object(Customer, request, customer_id=customer_id)
        if customer is None:
            return self._not_found()
        return Response(CustomerSerializer(customer, context=serializer_context(request)).data)

    def _update(self, request, customer_id, partial):
        customer = get_owned_object(Customer, request, customer_id=customer_id)
        if customer is None:
            return self._not_found()
        serializer = CustomerSerializer(customer, data=request.data, partial=partial,
                                        context=serializer_context(request))
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"message": "Customer updated successfully", "customer": serializer.data})

    @extend_schema(tags=["customers"], summary="Replace customer details", request=CustomerSerializer)
    def put(self, request, customer_id):
        return self._update(request, customer_id, partial=False)

    @extend_schema(tags=["customers"], summary="Update customer details", request=CustomerSerializer)
    def patch(self, request, customer_id):
        return self._update(request, customer_id, partial=True)

    @extend_schema(tags=["customers"], summary="Delete a customer and their orders")
    def delete(self, request, customer_id):
        customer = get_owned_object(Customer, request, customer_id=customer_id)
        if customer is None:
            return self._not_found()
        customer.delete()
        logger.info(f"Customer {customer_id} deleted by tailor {request.user.id}")
        return Response({"message": "Customer deleted successfully"})


class CustomerOrderCreateAPIView(APIView):
    permission_classes = [IsApprovedTailor]

    @extend_schema(tags=["orders"], summary="Add an order for a customer", request=OrderSerializer,
                   responses={201: OrderSerializer})
    def post(self, request, customer_id):
        customer = get_owned_object(Customer, request, customer_id=customer_id)
        if customer is None:
            return Response({"error": "Customer not found"}, status=status.HTTP_404_NOT_FOUND)
        serializer = OrderSerializer(data=request.data, context=serializer_context(request))
        serializer.is_valid(raise_exception=True)
        order = serializer.save(tailor=request.user, customer=customer)
        logger.info(f"Order {order.order_id} added for customer {customer.customer_id}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
