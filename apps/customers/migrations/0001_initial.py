import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('customer_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Customer name', max_length=255)),
                ('phone', models.CharField(help_text='Customer phone number, stored as entered', max_length=32)),
                ('email', models.EmailField(blank=True, default='', help_text='Customer email address', max_length=255)),
                ('address', models.TextField(blank=True, default='', help_text='Customer address')),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Customer creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tailor', models.ForeignKey(db_column='tailor_id', on_delete=django.db.models.deletion.CASCADE, related_name='customers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Customer',
                'verbose_name_plural': 'Customers',
                'db_table': 'customers',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['tailor', 'name'], name='customers_tailor_name_idx'),
                    models.Index(fields=['tailor', 'phone'], name='customers_tailor_phone_idx'),
                    models.Index(fields=['created_at'], name='customers_created_at_idx'),
                ],
            },
        ),
    ]
