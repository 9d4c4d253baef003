from decimal import Decimal

import pytest

from apps.customers.models import Customer
from apps.orders.models import Order
from tests.conftest import days_from_today

pytestmark = pytest.mark.django_db

URL = "/api/v1/tailor/customers/"


def customer_payload(**overrides):
    payload = {
        "name": "Jane Doe",
        "phone": "08031112222",
        "email": "jane@example.com",
        "address": "12 Allen Avenue, Ikeja",
        "order": {
            "description": "Aso-ebi gown",
            "order_date": str(days_from_today(-3)),
            "collection_date": str(days_from_today(4)),
            "total_amount": "25000.00",
            "paid_amount": "10000.00",
            "status": "in-progress",
            "measurements": {"bust": "36", "waist": 30, "customNotes": "loose sleeves"},
        },
    }
    payload.update(overrides)
    return payload


class TestAccess:
    def test_requires_authentication(self, api_client):
        assert api_client.get(URL).status_code == 401

    def test_pending_tailor_is_forbidden(self, api_client, pending_tailor):
        api_client.force_authenticate(pending_tailor)
        assert api_client.get(URL).status_code == 403

    def test_admin_is_not_a_tailor(self, admin_client):
        assert admin_client.get(URL).status_code == 403


class TestCreate:
    def test_create_with_first_order(self, tailor_client, tailor):
        response = tailor_client.post(URL, customer_payload(), format="json")
        assert response.status_code == 201, response.content
        body = response.json()
        customer = Customer.objects.get(customer_id=body["id"])
        assert customer.tailor == tailor

        (order,) = body["customer"]["orders"]
        assert order["status"] == "in_progress"
        assert order["payment_state"] == "partial"
        assert order["urgency"] == "upcoming"
        assert order["days_until_collection"] == 4
        assert order["balance_due"] == "15000.00"
        assert order["measurements"] == {"bust": 36.0, "waist": 30, "customNotes": "loose sleeves"}
        assert Order.objects.get(order_id=order["order_id"]).tailor == tailor

    def test_create_without_order(self, tailor_client):
        payload = customer_payload()
        del payload["order"]
        response = tailor_client.post(URL, payload, format="json")
        assert response.status_code == 201
        assert response.json()["customer"]["orders"] == []

    def test_name_and_phone_are_required(self, tailor_client):
        response = tailor_client.post(URL, customer_payload(name="  ", phone=""), format="json")
        assert response.status_code == 400
        assert set(response.json()) >= {"name", "phone"}
        assert Customer.objects.count() == 0

    def test_overpayment_is_rejected_at_the_boundary(self, tailor_client):
        payload = customer_payload()
        payload["order"]["paid_amount"] = "30000.00"
        response = tailor_client.post(URL, payload, format="json")
        assert response.status_code == 400
        assert Customer.objects.count() == 0


class TestList:
    @pytest.fixture
    def book(self, make_db_customer, other_tailor):
        jane = make_db_customer("Jane Doe", "0803-111-2222", orders=[
            {"collection_date": days_from_today(-1), "total_amount": Decimal("100"), "paid_amount": Decimal("40"),
             "status": "in_progress"},
            {"collection_date": days_from_today(5), "total_amount": Decimal("200"), "paid_amount": Decimal("200"),
             "status": "completed"},
        ])
        john = make_db_customer("John Smith", "08055556666", orders=[
            {"collection_date": days_from_today(2), "order_date": days_from_today(-1)},
        ])
        musa = make_db_customer("Musa Bello", "09099990000")
        make_db_customer("Hidden Customer", "0700", owner=other_tailor, orders=[{}])
        return {"jane": jane, "john": john, "musa": musa}

    def names(self, response):
        return {row["name"] for row in response.json()["results"]}

    def test_lists_only_own_customers(self, tailor_client, book):
        response = tailor_client.get(URL)
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        assert self.names(response) == {"Jane Doe", "John Smith", "Musa Bello"}
        assert body["filter_granularity"] == "order"
        assert body["skipped_unparseable"] == 0
        assert body["skipped_malformed"] == 0

    def test_search(self, tailor_client, book):
        assert self.names(tailor_client.get(URL, {"q": "JANE"})) == {"Jane Doe"}
        assert self.names(tailor_client.get(URL, {"q": "111-2222"})) == {"Jane Doe"}

    def test_status_filter_reports_matched_orders(self, tailor_client, book):
        response = tailor_client.get(URL, {"status": "paid"})
        (row,) = response.json()["results"]
        assert row["name"] == "Jane Doe"
        paid_order = book["jane"].orders.get(status="completed")
        assert row["matched_order_ids"] == [str(paid_order.order_id)]
        assert len(row["orders"]) == 2

    def test_collection_date_range(self, tailor_client, book):
        response = tailor_client.get(URL, {
            "date_mode": "collection",
            "start_date": str(days_from_today(0)),
            "end_date": str(days_from_today(3)),
        })
        assert self.names(response) == {"John Smith"}

    def test_all_dates_mode_uses_either_date(self, tailor_client, book):
        response = tailor_client.get(URL, {
            "start_date": str(days_from_today(-1)),
            "end_date": str(days_from_today(-1)),
        })
        assert self.names(response) == {"Jane Doe", "John Smith"}

    @pytest.mark.parametrize("params", [
        {"date_mode": "delivery"},
        {"start_date": "yesterday"},
        {"start_date": "2024-06-10", "end_date": "2024-06-01"},
    ])
    def test_invalid_filters(self, tailor_client, book, params):
        response = tailor_client.get(URL, params)
        assert response.status_code == 400
        assert "error" in response.json()


class TestDetail:
    def test_get_update_delete(self, tailor_client, make_db_customer):
        customer = make_db_customer("Jane Doe", orders=[{}])
        url = f"{URL}{customer.customer_id}/"

        response = tailor_client.get(url)
        assert response.status_code == 200
        assert len(response.json()["orders"]) == 1

        response = tailor_client.patch(url, {"address": "5 Broad Street"}, format="json")
        assert response.status_code == 200
        assert response.json()["customer"]["address"] == "5 Broad Street"

        response = tailor_client.put(url, {"name": "Jane Okoro", "phone": "0809"}, format="json")
        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.name == "Jane Okoro"

        assert tailor_client.delete(url).status_code == 200
        assert not Customer.objects.filter(pk=customer.pk).exists()
        assert not Order.objects.filter(customer_id=customer.pk).exists()

    def test_other_tailors_customer_is_not_found(self, tailor_client, make_db_customer, other_tailor):
        customer = make_db_customer("Someone Else", owner=other_tailor)
        url = f"{URL}{customer.customer_id}/"
        assert tailor_client.get(url).status_code == 404
        assert tailor_client.patch(url, {"name": "Mine"}, format="json").status_code == 404
        assert tailor_client.delete(url).status_code == 404
        assert Customer.objects.filter(pk=customer.pk).exists()


class TestAddOrder:
    def test_add_order(self, tailor_client, make_db_customer, tailor):
        customer = make_db_customer("Jane Doe")
        response = tailor_client.post(f"{URL}{customer.customer_id}/orders/", {
            "collection_date": str(days_from_today(0)),
            "total_amount": "5000",
            "paid_amount": "5000",
        }, format="json")
        assert response.status_code == 201, response.content
        body = response.json()
        assert body["customer"] == str(customer.customer_id)
        assert body["urgency"] == "due_today"
        assert body["payment_state"] == "paid"
        assert body["status"] == "pending"

    @pytest.mark.parametrize("payload", [
        {"collection_date": "2024-06-01", "total_amount": "-5"},
        {"collection_date": "2024-06-01", "total_amount": "10", "paid_amount": "11"},
        {"collection_date": "2024-06-01", "total_amount": "10", "status": "lost"},
        {"total_amount": "10"},
    ])
    def test_invalid_orders(self, tailor_client, make_db_customer, payload):
        customer = make_db_customer("Jane Doe")
        response = tailor_client.post(f"{URL}{customer.customer_id}/orders/", payload, format="json")
        assert response.status_code == 400
        assert customer.orders.count() == 0

    def test_cannot_add_to_another_tailors_customer(self, tailor_client, make_db_customer, other_tailor):
        customer = make_db_customer("Someone Else", owner=other_tailor)
        response = tailor_client.post(f"{URL}{customer.customer_id}/orders/", {
            "collection_date": "2024-06-01", "total_amount": "10",
        }, format="json")
        assert response.status_code == 404
