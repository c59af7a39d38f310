"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path("api/bills/", views.BillListView.as_view(), name="bill_list"),
    path("api/bills/checkout/", views.bill_checkout, name="bill_checkout"),
    path("api/bills/invoice/<str:token>/", views.public_invoice, name="public_invoice"),
    path("api/bills/<str:bill_id>/", views.BillDetailView.as_view(), name="bill_detail"),
    path("api/bills/<str:bill_id>/status/", views.bill_update_status, name="bill_update_status"),
]
