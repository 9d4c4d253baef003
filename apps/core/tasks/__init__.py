from .notifications import send_notification_email
from .reminders import send_collection_reminders

__all__ = ["send_notification_email", "send_collection_reminders"]
