import uuid
from django.conf import settings
from django.db import models

from apps.core.records import CustomerRecord


class Customer(models.Model):
    """
    Customer model representing the people a tailor sews for.
    Each customer belongs to exactly one tailor and is only ever visible to
    that tailor.
    """
    customer_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tailor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column='tailor_id',
        related_name='customers'
    )
    name = models.CharField(max_length=255, help_text="Customer name")
    phone = models.CharField(max_length=32, help_text="Customer phone number, stored as entered")
    email = models.EmailField(max_length=255, blank=True, default='', help_text="Customer email address")
    address = models.TextField(blank=True, default='', help_text="Customer address")
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True, help_text="Customer creation timestamp")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        verbose_name = 'Customer'
        verbose_name_plural = 'Customers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tailor', 'name'], name='customers_tailor_name_idx'),
            models.Index(fields=['tailor', 'phone'], name='customers_tailor_phone_idx'),
            models.Index(fields=['created_at'], name='customers_created_at_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    def as_record(self) -> CustomerRecord:
        """Map to the canonical record; uses prefetched orders when present."""
        return CustomerRecord(
            customer_id=str(self.customer_id),
            name=self.name,
            phone=self.phone,
            email=self.email or '',
            address=self.address or '',
            orders=tuple(order.as_record() for order in self.orders.all()),
        )
