"""
Celery tasks for bill notifications.

Both tasks are single-attempt: a failed send is recorded in the notification
log and never retried.
"""

import logging
from datetime import date

from django.utils import timezone

from celery import shared_task

from apps.sales.invoice_service import InvoiceService
from apps.sales.models import Bill

from .services import notify_bill, send_payment_reminder

logger = logging.getLogger(__name__)


@shared_task
def send_bill_notifications(bill_pk: str):
    """
    Send the invoice summary for a freshly committed bill.

    Args:
        bill_pk: primary key of the Bill
    """
    try:
        bill = Bill.objects.select_related("customer").get(pk=bill_pk)
    except Bill.DoesNotExist:
        logger.error(f"Bill {bill_pk} not found, notifications skipped")
        return None

    results = notify_bill(bill, InvoiceService.get_invoice_url(bill))
    return {channel: result.sent for channel, result in results.items()}


@shared_task
def send_payment_reminders(today=None):
    """
    Remind customers of pending bills whose due date has passed.

    Args:
        today: ISO date (or date) to evaluate overdue bills against; defaults
            to the current local date

    Returns:
        dict: number of overdue bills and of reminders that reached the customer
    """
    if today is None:
        today = timezone.localdate()
    elif not isinstance(today, date):
        today = date.fromisoformat(today)

    overdue_bills = Bill.objects.filter(
        payment_status=Bill.PENDING, due_date__lt=today
    ).select_related("customer")

    total = 0
    reached = 0
    for bill in overdue_bills:
        total += 1
        try:
            if send_payment_reminder(bill):
                reached += 1
        except Exception as e:
            logger.error(f"Reminder for {bill.bill_id} failed: {str(e)}", exc_info=True)
            continue

        logger.info(f"Reminder processed for {bill.bill_id} -> {bill.customer.name}")

    if total == 0:
        logger.info("No overdue pending bills found")
    else:
        logger.info(f"Payment reminders: {reached}/{total} overdue bills reached")

    return {"overdue": total, "reminded": reached}
