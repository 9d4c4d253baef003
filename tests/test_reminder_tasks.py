import json
from decimal import Decimal

import pytest
from django.core.management import call_command
from django_celery_beat.models import PeriodicTask

from apps.core.tasks.notifications import send_notification_email
from apps.core.tasks.reminders import send_collection_reminders
from tests.conftest import days_from_today

pytestmark = pytest.mark.django_db


def test_reminder_emails_go_to_tailors_with_urgent_orders(
    tailor, other_tailor, pending_tailor, make_db_customer, mailoutbox
):
    make_db_customer("Jane Doe", "08031112222", orders=[
        {"collection_date": days_from_today(-1), "total_amount": Decimal("100"), "paid_amount": Decimal("30")},
        {"collection_date": days_from_today(1)},
    ])
    make_db_customer("Only Upcoming", owner=other_tailor, orders=[{"collection_date": days_from_today(4)}])
    make_db_customer("Not Approved", owner=pending_tailor, orders=[{"collection_date": days_from_today(-3)}])

    result = send_collection_reminders.apply()
    assert result.get() == 1

    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.to == [tailor.email]
    assert message.subject == "Collection reminder: Jane Doe"
    assert "Overdue:" in message.body
    assert "Due tomorrow:" in message.body
    assert "balance 70.00" in message.body


def test_no_urgent_orders_sends_nothing(tailor, make_db_customer, mailoutbox):
    make_db_customer("Jane Doe", orders=[
        {"collection_date": days_from_today(-1), "status": "collected"},
        {"collection_date": days_from_today(2)},
    ])
    assert send_collection_reminders() == 0
    assert mailoutbox == []


def test_send_notification_email(mailoutbox, settings):
    settings.DEFAULT_FROM_EMAIL = "shop@example.com"
    assert send_notification_email("Hello", "Body", "someone@example.com") == "Email sent to someone@example.com"
    assert mailoutbox[0].from_email == "shop@example.com"


def test_setup_reminder_schedule_is_idempotent():
    call_command("setup_reminder_schedule", hour="6", minute="30")
    call_command("setup_reminder_schedule", hour="6", minute="30")
    task = PeriodicTask.objects.get(name="send-collection-reminders")
    assert task.task == "apps.core.tasks.reminders.send_collection_reminders"
    assert task.enabled
    assert json.loads(task.kwargs) == {}
    assert (task.crontab.hour, task.crontab.minute) == ("6", "30")


def test_reminder_schedule_is_owned_by_the_command(settings):
    assert "send-collection-reminders" not in getattr(settings, "CELERY_BEAT_SCHEDULE", {})

    call_command("setup_reminder_schedule")
    task = PeriodicTask.objects.get(name="send-collection-reminders")
    assert task.interval is None
    assert (task.crontab.hour, task.crontab.minute) == ("7", "0")
