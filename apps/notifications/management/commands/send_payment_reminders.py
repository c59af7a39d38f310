"""
Management command to send payment reminders for overdue bills.

Usage:
    python manage.py send_payment_reminders
    python manage.py send_payment_reminders --date 2024-02-01
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from apps.notifications.tasks import send_payment_reminders


class Command(BaseCommand):
    """Send SMS and WhatsApp reminders for pending bills past their due date."""

    help = "Send payment reminders for pending bills whose due date has passed"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--date",
            type=str,
            default=None,
            help="Treat this ISO date (YYYY-MM-DD) as today (default: current date)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        today = options["date"]
        if today:
            try:
                date.fromisoformat(today)
            except ValueError:
                raise CommandError(f"Invalid date: {today}. Use YYYY-MM-DD.")

        self.stdout.write(self.style.WARNING("Sending payment reminders..."))

        # Call the Celery task directly (synchronously for management command)
        result = send_payment_reminders(today=today)

        self.stdout.write(
            self.style.SUCCESS(
                f"Reminders sent for {result['reminded']} of {result['overdue']} overdue bills"
            )
        )
