from django.urls import path
from .views import CustomerDetailAPIView, CustomerListCreateAPIView, CustomerOrderCreateAPIView


urlpatterns = [
    path("tailor/customers/", CustomerListCreateAPIView.as_view(), name="customer_list"),
    path("tailor/customers/<uuid:customer_id>/", CustomerDetailAPIView.as_view(), name="customer_detail"),
    path("tailor/customers/<uuid:customer_id>/orders/", CustomerOrderCreateAPIView.as_view(), name="customer_orders"),
]
