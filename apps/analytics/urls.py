from django.urls import path
from .views.dashboard import DashboardStatsAPIView

urlpatterns = [
    path("tailor/dashboard/stats/", DashboardStatsAPIView.as_view(), name="dashboard_stats"),
]
