from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from apps.core.records import CustomerRecord, OrderRecord

STRONG_PASSWORD = "Tailor-Pass-2024!"

# Fixed clock for the pure-core tests.
NOW = datetime(2024, 6, 15, 10, 30, tzinfo=dt_timezone.utc)
TODAY = NOW.date()


def make_order(order_id, customer_id="c1", collection=None, order_date=None,
               total=100, paid=0, status="pending"):
    return OrderRecord(
        order_id=order_id,
        customer_id=customer_id,
        order_date=order_date,
        collection_date=collection,
        total_amount=total,
        paid_amount=paid,
        status=status,
    )


def make_customer(customer_id, name, orders=(), phone="", email="", address=""):
    return CustomerRecord(
        customer_id=customer_id,
        name=name,
        phone=phone,
        email=email,
        address=address,
        orders=tuple(orders),
    )


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def tailor(db, django_user_model):
    return django_user_model.objects.create_user(
        email="tailor@example.com",
        password=STRONG_PASSWORD,
        name="Amina Stitches",
        phone="08030000000",
        gender="female",
        role="tailor",
        status="approved",
    )


@pytest.fixture
def other_tailor(db, django_user_model):
    return django_user_model.objects.create_user(
        email="other@example.com",
        password=STRONG_PASSWORD,
        name="Bola Threads",
        role="tailor",
        status="approved",
    )


@pytest.fixture
def pending_tailor(db, django_user_model):
    return django_user_model.objects.create_user(
        email="pending@example.com",
        password=STRONG_PASSWORD,
        name="Chidi Pending",
        role="tailor",
        status="pending",
    )


@pytest.fixture
def admin_user(db, django_user_model):
    return django_user_model.objects.create_superuser(
        email="admin@example.com",
        password=STRONG_PASSWORD,
        name="Site Admin",
    )


def login(client, user, password=STRONG_PASSWORD):
    response = client.post("/api/v1/auth/login/", {"email": user.email, "password": password}, format="json")
    assert response.status_code == 200, response.content
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['token']}")
    return response.json()


@pytest.fixture
def tailor_client(api_client, tailor):
    login(api_client, tailor)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    login(api_client, admin_user)
    return api_client


@pytest.fixture
def make_db_customer(tailor):
    """Create a Customer (and optional orders) directly in the database."""
    from apps.customers.models import Customer
    from apps.orders.models import Order

    def _make(name="Jane Doe", phone="08011112222", owner=None, orders=()):
        owner = owner or tailor
        customer = Customer.objects.create(tailor=owner, name=name, phone=phone)
        for spec in orders:
            spec = dict(spec)
            spec.setdefault("total_amount", Decimal("100.00"))
            spec.setdefault("collection_date", timezone.localdate() + timedelta(days=10))
            Order.objects.create(tailor=owner, customer=customer, **spec)
        return customer

    return _make


def days_from_today(n):
    return timezone.now().date() + timedelta(days=n)
