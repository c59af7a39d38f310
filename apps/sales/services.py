"""
Checkout and settlement.

``checkout`` is the one place stock leaves the shop. Everything it writes
(customer, bill, items, stock deductions) happens inside a single
``transaction.atomic()`` block; the invoice PDF and the SMS/WhatsApp
notifications only run once that block has committed and can never undo it.
"""

import logging
import secrets
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from rest_framework.exceptions import ValidationError

from apps.core.exceptions import BillNotFound
from apps.crm.services import resolve_customer
from apps.inventory.stock import StockReservation
from apps.notifications.tasks import send_bill_notifications

from .invoice_service import InvoiceService
from .models import Bill, BillItem
from .totals import PAID, PENDING, ZERO, calculate_totals, money

logger = logging.getLogger(__name__)


def generate_bill_id(today=None):
    """
    Human readable bill number, e.g. ``BILL-20240115-3FA2C1``.

    Regenerated until unused; the unique constraint on ``Bill.bill_id``
    covers the remaining insert race.
    """
    today = today or timezone.localdate()
    while True:
        bill_id = f"{settings.BILL_ID_PREFIX}-{today:%Y%m%d}-{secrets.token_hex(3).upper()}"
        if not Bill.objects.filter(bill_id=bill_id).exists():
            return bill_id


def generate_public_token():
    """256-bit random token for the public invoice link."""
    return secrets.token_hex(32)


@dataclass
class CheckoutResult:
    bill: Bill
    customer_created: bool
    invoice_url: str
    pdf_url: Optional[str] = None
    stock_updated: List[dict] = field(default_factory=list)


def _dispatch_notifications(bill):
    """Queue the SMS/WhatsApp task. A broker failure is logged, never raised."""
    try:
        send_bill_notifications.delay(str(bill.pk))
    except Exception as e:
        logger.error(f"Could not queue notifications for {bill.bill_id}: {e}", exc_info=True)


def _notify_after_commit(bill):
    transaction.on_commit(lambda: _dispatch_notifications(bill))


def checkout(
    customer_name,
    customer_phone,
    items,
    discount_percent=ZERO,
    payment_status=PAID,
    amount_paid=None,
    due_date=None,
):
    """
    Create a bill for a cart and take its items out of stock.

    Args:
        customer_name: name typed at the counter
        customer_phone: 10 digit phone, the customer's identity
        items: cart lines, dicts with ``product_name``, ``price``,
            ``quantity`` and an optional ``sku``
        discount_percent: percentage off the subtotal
        payment_status: PAID or PENDING
        amount_paid: amount received now (PENDING only)
        due_date: when the balance is due; kept only if the bill ends up PENDING

    Raises:
        ProductNotFound: a line's SKU is not an active product
        InsufficientStock: a line asks for more than is in stock

    Either error leaves the database untouched.
    """
    with transaction.atomic():
        customer, customer_created = resolve_customer(customer_name, customer_phone)

        reservation = StockReservation()
        for item in items:
            reservation.reserve(item.get("sku"), item["quantity"])

        totals = calculate_totals(
            [(item["price"], item["quantity"]) for item in items],
            discount_percent=discount_percent,
            payment_status=payment_status,
            amount_paid=amount_paid,
        )

        bill = Bill.objects.create(
            bill_id=generate_bill_id(),
            public_token=generate_public_token(),
            customer=customer,
            subtotal=totals.subtotal,
            discount_percent=totals.discount_percent,
            discount_amount=totals.discount_amount,
            final_amount=totals.final_amount,
            amount_paid=totals.amount_paid,
            amount_due=totals.amount_due,
            payment_status=totals.payment_status,
            due_date=due_date if totals.payment_status == PENDING else None,
        )

        BillItem.objects.bulk_create(
            [
                BillItem(
                    bill=bill,
                    position=position,
                    product_name=item["product_name"],
                    sku=(item.get("sku") or "").strip() or None,
                    price=money(item["price"]),
                    quantity=item["quantity"],
                    line_total=line_total,
                )
                for position, (item, line_total) in enumerate(zip(items, totals.line_totals))
            ]
        )

        stock_updated = reservation.apply()

        _notify_after_commit(bill)

    logger.info(
        f"Checkout complete: {bill.bill_id} for {customer.phone} "
        f"final={bill.final_amount} paid={bill.amount_paid} due={bill.amount_due} "
        f"status={bill.payment_status}"
    )

    pdf_url = InvoiceService.generate_and_save(bill)

    return CheckoutResult(
        bill=bill,
        customer_created=customer_created,
        invoice_url=InvoiceService.get_invoice_url(bill),
        pdf_url=pdf_url,
        stock_updated=stock_updated,
    )


def apply_settlement(bill_id, additional_payment=None, payment_status=None):
    """
    Record a later payment against a bill or set its status.

    - ``additional_payment`` > 0 is added to the amount paid. Anything beyond
      the balance due is not recorded, so paid + due always equals the final
      amount. The bill becomes PAID once nothing is due.
    - Otherwise ``payment_status`` is applied. Marking a bill PAID settles it
      in full and drops the partial payment history.

    The invoice PDF is regenerated afterwards on a best-effort basis.

    Raises:
        BillNotFound: unknown ``bill_id``
        ValidationError: nothing to apply, or PENDING on a bill with no balance
    """
    with transaction.atomic():
        try:
            bill = Bill.objects.select_for_update().select_related("customer").get(bill_id=bill_id)
        except Bill.DoesNotExist:
            raise BillNotFound(bill_id)

        additional_payment = Decimal(str(additional_payment)) if additional_payment is not None else None

        if additional_payment is not None and additional_payment > ZERO:
            payment = money(additional_payment)
            if payment > bill.amount_due:
                logger.warning(
                    f"Payment of {payment} on {bill.bill_id} exceeds balance {bill.amount_due}; "
                    f"recording {bill.amount_due}"
                )
                payment = bill.amount_due

            bill.amount_paid += payment
            bill.amount_due -= payment
            if bill.amount_due <= ZERO:
                bill.amount_due = ZERO
                bill.payment_status = PAID

        elif payment_status == PAID:
            bill.payment_status = PAID
            bill.amount_paid = bill.final_amount
            bill.amount_due = ZERO

        elif payment_status == PENDING:
            if bill.amount_due <= ZERO:
                raise ValidationError(
                    {"payment_status": "A bill with no balance due cannot be marked PENDING."}
                )
            bill.payment_status = PENDING

        else:
            raise ValidationError(
                {"detail": "Provide a positive additional_payment or a payment_status."}
            )

        if bill.payment_status == PAID:
            bill.due_date = None

        bill.save(
            update_fields=["amount_paid", "amount_due", "payment_status", "due_date", "updated_at"]
        )

    logger.info(
        f"Settlement applied to {bill.bill_id}: paid={bill.amount_paid} due={bill.amount_due} "
        f"status={bill.payment_status}"
    )

    InvoiceService.generate_and_save(bill)

    return bill
