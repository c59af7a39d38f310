"""
Sales models for the shop.

A Bill is written once by checkout together with its items and only its
payment fields change afterwards (settlement). Bill items are snapshots of the
cart line: they keep the name, SKU and price charged even if the product is
later renamed, repriced or deleted.
"""

import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.crm.models import Customer

from . import totals


class Bill(models.Model):
    """
    Bill (invoice) issued at checkout.

    Invariants:
    - final_amount = subtotal - discount_amount
    - amount_paid + amount_due = final_amount
    - payment_status is PAID exactly when amount_due is zero
    """

    PAID = totals.PAID
    PENDING = totals.PENDING

    PAYMENT_STATUS_CHOICES = [
        (PAID, "Paid"),
        (PENDING, "Pending"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the bill",
    )

    bill_id = models.CharField(
        max_length=40,
        unique=True,
        help_text="Human readable bill number (e.g., 'BILL-20240115-3FA2C1')",
    )

    public_token = models.CharField(
        max_length=64,
        unique=True,
        help_text="Unguessable token for the public invoice link",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="bills",
        help_text="Customer the bill was issued to",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of the line totals",
    )

    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        help_text="Discount percentage applied to the subtotal",
    )

    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Discount amount",
    )

    final_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount payable (subtotal - discount)",
    )

    # Payment details
    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount received so far",
    )

    amount_due = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Outstanding balance",
    )

    payment_status = models.CharField(
        max_length=10,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAID,
        help_text="PAID when nothing is outstanding, PENDING for partial payments",
    )

    due_date = models.DateField(
        null=True,
        blank=True,
        help_text="When the outstanding balance is due (pending bills only)",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the bill was created",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the bill was last updated",
    )

    class Meta:
        db_table = "bills"
        ordering = ["-created_at"]
        verbose_name = "Bill"
        verbose_name_plural = "Bills"
        indexes = [
            models.Index(fields=["-created_at"], name="bill_date_idx"),
            models.Index(fields=["payment_status", "due_date"], name="bill_status_due_idx"),
            models.Index(fields=["customer", "-created_at"], name="bill_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.bill_id} - {self.final_amount}"

    @property
    def is_pending(self):
        return self.payment_status == self.PENDING


class BillItem(models.Model):
    """
    Line of a bill.

    ``sku`` is empty for manual entries that are not tracked in inventory.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the bill item",
    )

    bill = models.ForeignKey(
        Bill,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Bill that this item belongs to",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Position of the line in the cart",
    )

    product_name = models.CharField(max_length=120, help_text="Product name at time of sale")

    sku = models.CharField(
        max_length=60,
        null=True,
        blank=True,
        help_text="Product SKU at time of sale (empty for manual entries)",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price charged",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="price x quantity, rounded to 2 places",
    )

    class Meta:
        db_table = "bill_items"
        ordering = ["position"]
        verbose_name = "Bill Item"
        verbose_name_plural = "Bill Items"
        indexes = [
            models.Index(fields=["bill", "position"], name="billitem_bill_pos_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
