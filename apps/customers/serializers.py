from django.db import transaction
from rest_framework import serializers

from apps.orders.models import Order
from apps.orders.serializers import OrderSerializer
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    orders = OrderSerializer(many=True, read_only=True)
    order = OrderSerializer(write_only=True, required=False,
                            help_text="Optional first order captured with the customer")

    class Meta:
        model = Customer
        fields = [
            "customer_id", "name", "phone", "email", "address", "notes",
            "orders", "order", "created_at", "updated_at",
        ]
        read_only_fields = ["customer_id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_phone(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Phone is required")
        return value

    def create(self, validated_data):
        order_data = validated_data.pop("order", None)
        tailor = validated_data["tailor"]
        with transaction.atomic():
            customer = Customer.objects.create(**validated_data)
            if order_data:
                Order.objects.create(tailor=tailor, customer=customer, **order_data)
        return customer

    def update(self, instance, validated_data):
        validated_data.pop("order", None)
        return super().update(instance, validated_data)
