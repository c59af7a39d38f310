"""
CRM models for the shop.

Customers are identified by their 10 digit mobile number. A customer record is
created the first time a number is seen at the counter and the stored name
follows whatever the cashier typed most recently.
"""

import uuid

from django.core.validators import RegexValidator
from django.db import models

phone_validator = RegexValidator(
    regex=r"^\d{10}$",
    message="Phone number must be exactly 10 digits.",
)


class Customer(models.Model):
    """
    Customer of the shop.

    Looked up by phone on every checkout; see ``apps.crm.services.resolve_customer``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the customer",
    )

    name = models.CharField(max_length=120, help_text="Customer's name")

    phone = models.CharField(
        max_length=15,
        unique=True,
        validators=[phone_validator],
        help_text="Customer's 10 digit mobile number",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["name"], name="customer_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"
