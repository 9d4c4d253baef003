"""
URL patterns for the accounts app.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

app_name = 'accounts'

urlpatterns = [
    path('auth/register/', views.RegisterAPIView.as_view(), name='register'),
    path('auth/login/', views.LoginAPIView.as_view(), name='login'),
    path('auth/verify/', views.VerifyAPIView.as_view(), name='verify'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Admin approval of tailor accounts
    path('admin/tailors/', views.TailorListAPIView.as_view(), name='tailor_list'),
    path('admin/tailors/update-status/', views.TailorStatusUpdateAPIView.as_view(), name='tailor_update_status'),
]
