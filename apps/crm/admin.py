"""
Admin configuration for CRM models.
"""

from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer."""

    list_display = ["name", "phone", "created_at"]
    search_fields = ["name", "phone"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Customer",
            {
                "fields": ("id", "name", "phone"),
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
