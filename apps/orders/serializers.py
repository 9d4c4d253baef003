from decimal import Decimal, InvalidOperation

from django.utils import timezone
from rest_framework import serializers

from apps.core.status_utils import (
    balance_due,
    days_until_collection,
    derive_payment_state,
    derive_urgency,
    normalize_order_status,
    UPCOMING_WINDOW_DAYS,
)
from .models import Order


def clean_measurements(value):
    """Coerce numeric measurement values; free-text entries are kept verbatim."""
    if value in (None, ""):
        return {}
    if not isinstance(value, dict):
        raise serializers.ValidationError("Measurements must be an object of name -> value")
    cleaned = {}
    for name, raw in value.items():
        if raw in (None, ""):
            continue
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            cleaned[str(name)] = raw
            continue
        try:
            number = Decimal(str(raw).strip())
        except (InvalidOperation, ValueError):
            cleaned[str(name)] = raw
            continue
        cleaned[str(name)] = float(number) if number.is_finite() else raw
    return cleaned


class OrderStatusField(serializers.CharField):
    """Accepts any known status label and stores the canonical value."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        status = normalize_order_status(value)
        if status is None:
            raise serializers.ValidationError(f"Unknown order status '{value}'")
        return status.value


class OrderSerializer(serializers.ModelSerializer):
    status = OrderStatusField(required=False)
    payment_state = serializers.SerializerMethodField()
    urgency = serializers.SerializerMethodField()
    days_until_collection = serializers.SerializerMethodField()
    balance_due = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "order_id", "customer", "description", "order_date", "collection_date",
            "total_amount", "paid_amount", "status", "measurements", "notes",
            "payment_state", "urgency", "days_until_collection", "balance_due",
            "created_at", "updated_at",
        ]
        read_only_fields = ["order_id", "customer", "created_at", "updated_at"]

    def _now(self):
        return self.context.get("now") or timezone.now()

    def get_payment_state(self, obj):
        return derive_payment_state(obj.as_record()).value

    def get_urgency(self, obj):
        lookahead = self.context.get("lookahead_days", UPCOMING_WINDOW_DAYS)
        return derive_urgency(obj.as_record(), self._now(), lookahead).value

    def get_days_until_collection(self, obj):
        return days_until_collection(obj.as_record(), self._now())

    def get_balance_due(self, obj):
        return str(balance_due(obj.as_record()))

    def validate_measurements(self, value):
        return clean_measurements(value)

    def validate(self, attrs):
        total = attrs.get("total_amount", getattr(self.instance, "total_amount", None))
        paid = attrs.get("paid_amount", getattr(self.instance, "paid_amount", Decimal("0")))
        if total is not None and paid is not None and paid > total:
            raise serializers.ValidationError({"paid_amount": "Paid amount cannot exceed the total amount"})
        return attrs


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = OrderStatusField()
