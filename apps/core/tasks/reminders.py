from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone
import logging

from apps.core.reminder_utils import dispatch_urgent_reminders, get_reminders
from apps.core.status_utils import UPCOMING_WINDOW_DAYS
from apps.core.tasks.notifications import send_notification_email

logger = logging.getLogger(__name__)


def reminder_email_body(tailor, reminders):
    lines = [f"Hello {tailor.name},", ""]
    for title, entries in (("Overdue", reminders.overdue), ("Due today", reminders.due_today),
                           ("Due tomorrow", reminders.due_tomorrow)):
        if not entries:
            continue
        lines.append(f"{title}:")
        for entry in entries:
            lines.append(
                f"  - {entry.customer.name} ({entry.customer.phone}), "
                f"collection {entry.order.collection_date}, balance {entry.balance_due}"
            )
        lines.append("")
    return "\n".join(lines)


@shared_task
def send_collection_reminders():
    """
    Email every approved tailor who has overdue or due-today collections.
    """
    from apps.customers.models import Customer

    User = get_user_model()
    now = timezone.now()
    lookahead = getattr(settings, "TAILOR_REMINDER_LOOKAHEAD_DAYS", UPCOMING_WINDOW_DAYS)
    sent = 0

    tailors = User.objects.filter(role=User.ROLE_TAILOR, status=User.STATUS_APPROVED, is_active=True)
    for tailor in tailors.iterator():
        customers = Customer.objects.filter(tailor=tailor).prefetch_related("orders")
        reminders = get_reminders([c.as_record() for c in customers], now=now, lookahead_days=lookahead)

        def notify(summary, tailor=tailor, reminders=reminders):
            subject = f"Collection reminder: {summary['label']}"
            send_notification_email.delay(subject, reminder_email_body(tailor, reminders), tailor.email)

        if dispatch_urgent_reminders(reminders, notify):
            sent += 1

    logger.info(f"Collection reminders queued for {sent} tailor(s)")
    return sent
