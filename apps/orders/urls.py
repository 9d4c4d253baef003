from django.urls import path
from .views import (
    OrderDetailAPIView,
    OrderStatusAPIView,
    ReminderDismissAPIView,
    ReminderListAPIView,
)


urlpatterns = [
    path("tailor/orders/<uuid:order_id>/", OrderDetailAPIView.as_view(), name="order_detail"),
    path("tailor/orders/<uuid:order_id>/status/", OrderStatusAPIView.as_view(), name="order_status"),
    path("tailor/reminders/", ReminderListAPIView.as_view(), name="reminders"),
    path("tailor/reminders/<uuid:order_id>/dismiss/", ReminderDismissAPIView.as_view(), name="reminder_dismiss"),
]
