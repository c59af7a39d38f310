"""
Notification services for bills.

Sends the invoice summary and payment reminders to customers by SMS and
WhatsApp through Twilio, and records every attempt in ``NotificationLog``.
Nothing in this module raises to its caller: a failed send is logged and
recorded, never propagated into checkout or settlement.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from .models import NotificationLog

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    sent: bool
    to: str = ""
    message_sid: Optional[str] = None
    error: str = ""


def _get_twilio_client():
    """
    Get Twilio client instance.

    Requests carry ``NOTIFICATION_HTTP_TIMEOUT`` so a slow provider cannot
    hold a worker indefinitely.
    """
    account_sid = getattr(settings, "TWILIO_ACCOUNT_SID", None)
    auth_token = getattr(settings, "TWILIO_AUTH_TOKEN", None)

    if not account_sid or not auth_token:
        logger.error("Twilio credentials not configured")
        return None

    try:
        http_client = TwilioHttpClient(timeout=settings.NOTIFICATION_HTTP_TIMEOUT)
        return Client(account_sid, auth_token, http_client=http_client)
    except Exception as e:
        logger.error(f"Failed to initialize Twilio client: {str(e)}")
        return None


def sanitize_phone(phone: str) -> str:
    """
    Reduce a phone number to its 10 digit national form.

    "+91 98765 43210" -> "9876543210", "09876543210" -> "9876543210".
    """
    digits = re.sub(r"\D", "", phone or "")

    if len(digits) == 12 and digits.startswith(settings.PHONE_COUNTRY_CODE):
        return digits[len(settings.PHONE_COUNTRY_CODE) :]
    if len(digits) == 11 and digits.startswith("0"):
        return digits[1:]
    return digits[-10:]


def to_e164(phone: str) -> str:
    return f"+{settings.PHONE_COUNTRY_CODE}{sanitize_phone(phone)}"


def _send(from_number: str, to: str, body: str, channel: str) -> DeliveryResult:
    if not from_number:
        logger.warning(f"[{channel}] Sender number not configured, skipping")
        return DeliveryResult(sent=False, to=to, error=f"{channel} sender number not configured")

    client = _get_twilio_client()
    if not client:
        return DeliveryResult(sent=False, to=to, error="Twilio client not configured")

    try:
        message = client.messages.create(body=body, from_=from_number, to=to)
    except Exception as e:
        logger.error(f"[{channel}] Failed to send to {to}: {str(e)}")
        return DeliveryResult(sent=False, to=to, error=f"Error: {str(e)}")

    if message.status in ["failed", "undelivered"]:
        logger.error(f"[{channel}] Twilio rejected message to {to}: {message.error_message}")
        return DeliveryResult(
            sent=False,
            to=to,
            message_sid=message.sid,
            error=f"Twilio rejected: {message.error_message or message.status}",
        )

    logger.info(f"[{channel}] Sent to {to}, SID: {message.sid}")
    return DeliveryResult(sent=True, to=to, message_sid=message.sid)


def send_sms(phone: str, body: str) -> DeliveryResult:
    """Send a plain SMS."""
    return _send(settings.TWILIO_PHONE_NUMBER, to_e164(phone), body, NotificationLog.SMS)


def send_whatsapp(phone: str, body: str) -> DeliveryResult:
    """Send a WhatsApp message through Twilio's ``whatsapp:`` addressing."""
    from_number = settings.TWILIO_WHATSAPP_NUMBER
    if from_number and not from_number.startswith("whatsapp:"):
        from_number = f"whatsapp:{from_number}"

    return _send(from_number, f"whatsapp:{to_e164(phone)}", body, NotificationLog.WHATSAPP)


def log_notification(bill, channel, status, message="", to_phone="", message_sid=None):
    """
    Record a send attempt. Never raises.
    """
    try:
        return NotificationLog.objects.create(
            bill=bill,
            channel=channel,
            status=status,
            message=message,
            to_phone=to_phone,
            message_sid=message_sid,
        )
    except Exception as e:
        logger.error(f"[Notification Log] Failed to record {channel} for {bill.bill_id}: {e}")
        return None


def _deliver(bill, channel, sender, body):
    try:
        result = sender(bill.customer.phone, body)
    except Exception as e:
        logger.error(f"[{channel}] Unexpected error for {bill.bill_id}: {e}", exc_info=True)
        result = DeliveryResult(sent=False, error=f"Error: {str(e)}")

    log_notification(
        bill,
        channel,
        NotificationLog.SENT if result.sent else NotificationLog.FAILED,
        message=body if result.sent else result.error,
        to_phone=result.to,
        message_sid=result.message_sid,
    )
    return result


def build_invoice_message(bill, invoice_url=None) -> str:
    """Invoice summary sent right after checkout."""
    lines = [
        f"Thank you for shopping at {settings.SHOP_NAME}!",
        f"Bill ID: {bill.bill_id}",
        f"Total Bill: Rs.{bill.final_amount:.2f}",
        f"Paid Now:   Rs.{bill.amount_paid:.2f}",
    ]

    if bill.amount_due > 0:
        lines.append(f"Balance Due: Rs.{bill.amount_due:.2f}")
        if bill.due_date:
            lines.append(f"Due Date: {bill.due_date.isoformat()}")
        lines.append("Status: PENDING (Partial Payment)")
    else:
        lines.append("Status: PAID")

    message = "\n".join(lines)
    if invoice_url:
        message += f"\nView Invoice: {invoice_url}"
    return message


def build_reminder_message(bill) -> str:
    """Reminder for an overdue balance."""
    due_by = f" by {bill.due_date.isoformat()}" if bill.due_date else ""
    return (
        f"Dear {bill.customer.name},\n"
        f"Reminder from {settings.SHOP_NAME}: Your balance of Rs.{bill.amount_due:.2f} "
        f"(Bill: {bill.bill_id}) is due{due_by}.\n"
        f"Please visit us or contact us to clear the balance. Thank you!"
    )


def notify_bill(bill, invoice_url=None):
    """
    Send the invoice summary by SMS, then WhatsApp.

    Returns:
        dict: channel -> DeliveryResult
    """
    body = build_invoice_message(bill, invoice_url)
    return {
        NotificationLog.SMS: _deliver(bill, NotificationLog.SMS, send_sms, body),
        NotificationLog.WHATSAPP: _deliver(bill, NotificationLog.WHATSAPP, send_whatsapp, body),
    }


def send_payment_reminder(bill):
    """
    Remind a customer of an overdue balance by SMS and WhatsApp.

    Each channel is logged on its own, followed by one REMINDER entry for the bill.
    """
    body = build_reminder_message(bill)
    results = {
        NotificationLog.SMS: _deliver(bill, NotificationLog.SMS, send_sms, body),
        NotificationLog.WHATSAPP: _deliver(bill, NotificationLog.WHATSAPP, send_whatsapp, body),
    }

    reached = any(result.sent for result in results.values())
    log_notification(
        bill,
        NotificationLog.REMINDER,
        NotificationLog.SENT if reached else NotificationLog.FAILED,
        message=body,
        to_phone=bill.customer.phone,
    )
    return reached
