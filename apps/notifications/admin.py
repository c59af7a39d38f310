from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import NotificationLog


@admin.register(NotificationLog)
class NotificationLogAdmin(admin.ModelAdmin):
    """Admin interface for NotificationLog model"""

    list_display = ["bill", "channel", "status_badge", "to_phone", "sent_at"]
    list_filter = ["channel", "status", "sent_at"]
    search_fields = ["bill__bill_id", "to_phone", "message"]
    readonly_fields = [
        "bill",
        "channel",
        "status",
        "message",
        "to_phone",
        "message_sid",
        "sent_at",
    ]
    date_hierarchy = "sent_at"
    ordering = ["-sent_at"]

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        return super().get_queryset(request).select_related("bill")

    def has_add_permission(self, request):
        return False

    def status_badge(self, obj):
        """Display status as colored badge"""
        colors = {
            NotificationLog.SENT: "#10b981",
            NotificationLog.FAILED: "#ef4444",
        }
        color = colors.get(obj.status, "#6b7280")
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; border-radius: 4px; font-size: 12px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_badge.short_description = _("Status")
