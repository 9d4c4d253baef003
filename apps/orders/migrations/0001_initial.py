import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('customers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('order_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(blank=True, default='', help_text='Garment / style description', max_length=255)),
                ('order_date', models.DateField(default=django.utils.timezone.localdate, help_text='Date the order was placed')),
                ('collection_date', models.DateField(help_text='Date the finished garment is due for collection')),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('paid_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount paid so far, including any advance', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('collected', 'Collected')], default='pending', max_length=20)),
                ('measurements', models.JSONField(blank=True, default=dict, help_text='Named body measurements (inches)')),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(db_column='customer_id', on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='customers.customer')),
                ('tailor', models.ForeignKey(db_column='tailor_id', on_delete=django.db.models.deletion.CASCADE, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['collection_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['tailor', 'collection_date', 'status'], name='orders_tailor_coll_status_idx'),
                    models.Index(fields=['tailor', 'order_date'], name='orders_tailor_order_date_idx'),
                    models.Index(fields=['customer'], name='orders_customer_idx'),
                ],
            },
        ),
    ]
