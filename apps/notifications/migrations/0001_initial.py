import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("sales", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="NotificationLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "channel",
                    models.CharField(
                        choices=[
                            ("SMS", "SMS"),
                            ("WHATSAPP", "WhatsApp"),
                            ("REMINDER", "Payment Reminder"),
                        ],
                        help_text="Delivery channel",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("SENT", "Sent"), ("FAILED", "Failed")],
                        help_text="Send outcome",
                        max_length=10,
                    ),
                ),
                (
                    "message",
                    models.TextField(
                        blank=True, help_text="Message sent, or the error when sending failed"
                    ),
                ),
                (
                    "to_phone",
                    models.CharField(
                        blank=True,
                        help_text="Recipient address as sent to the provider",
                        max_length=32,
                    ),
                ),
                (
                    "message_sid",
                    models.CharField(
                        blank=True, help_text="Twilio message SID", max_length=64, null=True
                    ),
                ),
                (
                    "sent_at",
                    models.DateTimeField(auto_now_add=True, help_text="When the attempt was made"),
                ),
                (
                    "bill",
                    models.ForeignKey(
                        help_text="Bill the notification was sent for",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to="sales.bill",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification Log",
                "verbose_name_plural": "Notification Logs",
                "db_table": "notification_logs",
                "ordering": ["-sent_at"],
                "indexes": [
                    models.Index(fields=["bill", "-sent_at"], name="notiflog_bill_date_idx"),
                    models.Index(
                        fields=["channel", "status"], name="notiflog_channel_status_idx"
                    ),
                ],
            },
        ),
    ]
