from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.orders.models import Order
from tests.conftest import days_from_today, login

pytestmark = pytest.mark.django_db

REMINDERS_URL = "/api/v1/tailor/reminders/"


def order_url(order, suffix=""):
    return f"/api/v1/tailor/orders/{order.order_id}/{suffix}"


class TestOrderEndpoints:
    def test_get_patch_delete(self, tailor_client, make_db_customer):
        order = make_db_customer("Jane Doe", orders=[{}]).orders.get()

        response = tailor_client.get(order_url(order))
        assert response.status_code == 200
        assert response.json()["payment_state"] == "not_paid"

        response = tailor_client.patch(order_url(order), {"paid_amount": "40"}, format="json")
        assert response.status_code == 200
        assert response.json()["payment_state"] == "partial"
        assert response.json()["balance_due"] == "60.00"

        assert tailor_client.delete(order_url(order)).status_code == 200
        assert not Order.objects.filter(pk=order.pk).exists()

    def test_patch_cannot_overpay(self, tailor_client, make_db_customer):
        order = make_db_customer("Jane Doe", orders=[{}]).orders.get()
        response = tailor_client.patch(order_url(order), {"paid_amount": "100.01"}, format="json")
        assert response.status_code == 400
        order.refresh_from_db()
        assert order.paid_amount == Decimal("0.00")

    def test_set_status_accepts_aliases(self, tailor_client, make_db_customer):
        order = make_db_customer("Jane Doe", orders=[{}]).orders.get()
        response = tailor_client.post(order_url(order, "status/"), {"status": "delivered"}, format="json")
        assert response.status_code == 200
        assert response.json()["status"] == "collected"
        assert response.json()["urgency"] == "none"
        order.refresh_from_db()
        assert order.status == "collected"

    def test_set_status_rejects_unknown_labels(self, tailor_client, make_db_customer):
        order = make_db_customer("Jane Doe", orders=[{}]).orders.get()
        response = tailor_client.post(order_url(order, "status/"), {"status": "lost"}, format="json")
        assert response.status_code == 400

    def test_other_tailors_order_is_not_found(self, tailor_client, make_db_customer, other_tailor):
        order = make_db_customer("Someone Else", owner=other_tailor, orders=[{}]).orders.get()
        assert tailor_client.get(order_url(order)).status_code == 404
        assert tailor_client.patch(order_url(order), {"paid_amount": "1"}, format="json").status_code == 404
        assert tailor_client.post(order_url(order, "status/"), {"status": "collected"}, format="json").status_code == 404
        assert tailor_client.delete(order_url(order)).status_code == 404
        order.refresh_from_db()
        assert order.status == "pending"


class TestReminders:
    @pytest.fixture
    def orders(self, make_db_customer, other_tailor):
        jane = make_db_customer("Jane Doe", "08031112222", orders=[
            {"collection_date": days_from_today(-2), "total_amount": Decimal("100"), "paid_amount": Decimal("40")},
            {"collection_date": days_from_today(0)},
            {"collection_date": days_from_today(-5), "status": "collected"},
        ])
        john = make_db_customer("John Smith", orders=[
            {"collection_date": days_from_today(1)},
            {"collection_date": days_from_today(6)},
            {"collection_date": days_from_today(30)},
        ])
        make_db_customer("Hidden", owner=other_tailor, orders=[{"collection_date": days_from_today(0)}])
        by_date = {}
        for customer in (jane, john):
            for order in customer.orders.all():
                if order.status != "collected":
                    by_date[(order.collection_date - days_from_today(0)).days] = order
        return by_date

    def ids(self, entries):
        return [e["order_id"] for e in entries]

    def test_buckets(self, tailor_client, orders):
        response = tailor_client.get(REMINDERS_URL)
        assert response.status_code == 200
        body = response.json()
        assert self.ids(body["overdue"]) == [str(orders[-2].order_id)]
        assert self.ids(body["due_today"]) == [str(orders[0].order_id)]
        assert self.ids(body["due_tomorrow"]) == [str(orders[1].order_id)]
        assert self.ids(body["upcoming"]) == [str(orders[6].order_id)]
        assert body["total"] == 4
        assert body["lookahead_days"] == 7
        assert body["skipped_malformed"] == 0
        assert body["urgent"] == {"count": 2, "label": "Jane Doe", "customer_id": str(orders[0].customer_id)}

        overdue = body["overdue"][0]
        assert overdue["customer_name"] == "Jane Doe"
        assert overdue["phone"] == "08031112222"
        assert overdue["days_until"] == -2
        assert overdue["payment_state"] == "partial"
        assert overdue["balance_due"] == "60.00"

    def test_dismiss_is_idempotent_and_session_scoped(self, api_client, tailor, orders):
        login(api_client, tailor)
        overdue = orders[-2]
        dismiss_url = f"{REMINDERS_URL}{overdue.order_id}/dismiss/"

        first = api_client.post(dismiss_url)
        second = api_client.post(dismiss_url)
        assert first.status_code == second.status_code == 200
        assert first.json() == second.json() == {"dismissed": str(overdue.order_id), "dismissed_count": 1}

        body = api_client.get(REMINDERS_URL).json()
        assert body["overdue"] == []
        assert body["total"] == 3

        # A new login is a new session with nothing dismissed.
        fresh = APIClient()
        login(fresh, tailor)
        assert self.ids(fresh.get(REMINDERS_URL).json()["overdue"]) == [str(overdue.order_id)]

    def test_dismissal_does_not_affect_the_customer_list(self, tailor_client, orders):
        tailor_client.post(f"{REMINDERS_URL}{orders[-2].order_id}/dismiss/")
        response = tailor_client.get("/api/v1/tailor/customers/", {"q": "jane"})
        (row,) = response.json()["results"]
        assert str(orders[-2].order_id) in row["matched_order_ids"]

    def test_cannot_dismiss_another_tailors_order(self, tailor_client, make_db_customer, other_tailor):
        order = make_db_customer("Hidden", owner=other_tailor, orders=[{}]).orders.get()
        response = tailor_client.post(f"{REMINDERS_URL}{order.order_id}/dismiss/")
        assert response.status_code == 404

    def test_lookahead_setting(self, tailor_client, orders, settings):
        settings.TAILOR_REMINDER_LOOKAHEAD_DAYS = 3
        body = tailor_client.get(REMINDERS_URL).json()
        assert body["upcoming"] == []
        assert body["lookahead_days"] == 3
