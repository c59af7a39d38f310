import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.sales.models import Bill


class NotificationLog(models.Model):
    """
    Append-only record of an SMS, WhatsApp or reminder send attempt for a bill.
    """

    SMS = "SMS"
    WHATSAPP = "WHATSAPP"
    REMINDER = "REMINDER"

    CHANNEL_CHOICES = [
        (SMS, _("SMS")),
        (WHATSAPP, _("WhatsApp")),
        (REMINDER, _("Payment Reminder")),
    ]

    SENT = "SENT"
    FAILED = "FAILED"

    STATUS_CHOICES = [
        (SENT, _("Sent")),
        (FAILED, _("Failed")),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill = models.ForeignKey(
        Bill,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text=_("Bill the notification was sent for"),
    )
    channel = models.CharField(
        max_length=10, choices=CHANNEL_CHOICES, help_text=_("Delivery channel")
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, help_text=_("Send outcome"))
    message = models.TextField(
        blank=True, help_text=_("Message sent, or the error when sending failed")
    )
    to_phone = models.CharField(
        max_length=32, blank=True, help_text=_("Recipient address as sent to the provider")
    )
    message_sid = models.CharField(
        max_length=64, null=True, blank=True, help_text=_("Twilio message SID")
    )
    sent_at = models.DateTimeField(auto_now_add=True, help_text=_("When the attempt was made"))

    class Meta:
        db_table = "notification_logs"
        ordering = ["-sent_at"]
        verbose_name = _("Notification Log")
        verbose_name_plural = _("Notification Logs")
        indexes = [
            models.Index(fields=["bill", "-sent_at"], name="notiflog_bill_date_idx"),
            models.Index(fields=["channel", "status"], name="notiflog_channel_status_idx"),
        ]

    def __str__(self):
        return f"{self.channel} {self.status} - {self.bill.bill_id}"
