"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    """Inline admin for BillItem model. Items are snapshots and cannot be edited."""

    model = BillItem
    extra = 0
    can_delete = False
    fields = ["position", "product_name", "sku", "price", "quantity", "line_total"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    """Admin interface for Bill model."""

    list_display = [
        "bill_id",
        "customer",
        "final_amount",
        "amount_paid",
        "amount_due",
        "payment_status",
        "due_date",
        "created_at",
    ]
    list_filter = ["payment_status", "created_at", "due_date"]
    search_fields = ["bill_id", "customer__name", "customer__phone"]
    readonly_fields = [
        "id",
        "bill_id",
        "public_token",
        "customer",
        "subtotal",
        "discount_percent",
        "discount_amount",
        "final_amount",
        "amount_paid",
        "amount_due",
        "payment_status",
        "due_date",
        "created_at",
        "updated_at",
    ]
    inlines = [BillItemInline]
    fieldsets = [
        (
            "Bill",
            {
                "fields": ["id", "bill_id", "public_token", "customer"],
            },
        ),
        (
            "Totals",
            {
                "fields": ["subtotal", "discount_percent", "discount_amount", "final_amount"],
            },
        ),
        (
            "Payment",
            {
                "fields": ["amount_paid", "amount_due", "payment_status", "due_date"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
            },
        ),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("customer")
