"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = ["sku", "name", "price", "stock", "category", "is_active", "created_at"]
    list_filter = ["is_active", "category", "created_at"]
    search_fields = ["sku", "name", "category"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "sku", "name", "category", "is_active"),
            },
        ),
        (
            "Pricing & Stock",
            {
                "fields": ("price", "stock"),
            },
        ),
        (
            "Attributes",
            {
                "fields": ("size", "color"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
