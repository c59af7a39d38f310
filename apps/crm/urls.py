"""
URL configuration for CRM app.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    path("api/customers/", views.CustomerListAPIView.as_view(), name="customer_list"),
    path("api/customers/lookup/", views.customer_lookup, name="customer_lookup"),
    path(
        "api/customers/<uuid:id>/bills/",
        views.CustomerBillsAPIView.as_view(),
        name="customer_bills",
    ),
]
