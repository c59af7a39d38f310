"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("api/products/", views.ProductListCreateView.as_view(), name="product_list"),
    path("api/products/scan/", views.scan_product, name="product_scan"),
    path("api/products/<uuid:id>/", views.ProductDetailView.as_view(), name="product_detail"),
    path("api/products/<uuid:id>/barcode/", views.product_barcode, name="product_barcode"),
    path("api/products/<uuid:id>/label/", views.product_label, name="product_label"),
]
