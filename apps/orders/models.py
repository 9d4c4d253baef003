import uuid
from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal

from apps.core.records import OrderRecord
from apps.core.status_utils import ORDER_STATUS_CHOICES, OrderStatus

FEMALE_MEASUREMENT_FIELDS = [
    'shoulder', 'bust', 'waist', 'underbust', 'fullLength', 'blouseLength',
    'sleeveLength', 'roundSleeve', 'skirtLength', 'hips', 'shoulderToWaist',
    'shoulderToHips', 'shoulderToKnee',
]
MALE_MEASUREMENT_FIELDS = [
    'trouser', 'shirt', 'neck', 'hands', 'shirtComfort', 'waist',
]


def measurement_fields_for(gender: str):
    return FEMALE_MEASUREMENT_FIELDS if gender == 'female' else MALE_MEASUREMENT_FIELDS


class Order(models.Model):
    """
    A garment order placed by a customer.
    Payment state and collection urgency are derived on read, never stored.
    """
    order_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tailor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column='tailor_id',
        related_name='orders'
    )
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.CASCADE,
        db_column='customer_id',
        related_name='orders'
    )
    description = models.CharField(max_length=255, blank=True, default='', help_text="Garment / style description")
    order_date = models.DateField(default=timezone.localdate, help_text="Date the order was placed")
    collection_date = models.DateField(help_text="Date the finished garment is due for collection")
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    paid_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Amount paid so far, including any advance"
    )
    status = models.CharField(max_length=20, choices=ORDER_STATUS_CHOICES, default=OrderStatus.PENDING.value)
    measurements = models.JSONField(default=dict, blank=True, help_text="Named body measurements (inches)")
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['collection_date', 'created_at']
        indexes = [
            models.Index(fields=['tailor', 'collection_date', 'status'], name='orders_tailor_coll_status_idx'),
            models.Index(fields=['tailor', 'order_date'], name='orders_tailor_order_date_idx'),
            models.Index(fields=['customer'], name='orders_customer_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_id} ({self.status})"

    def as_record(self) -> OrderRecord:
        return OrderRecord(
            order_id=str(self.order_id),
            customer_id=str(self.customer_id),
            order_date=self.order_date,
            collection_date=self.collection_date,
            total_amount=self.total_amount,
            paid_amount=self.paid_amount,
            status=self.status,
            measurements=self.measurements or {},
        )
