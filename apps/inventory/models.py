"""
Inventory models for the shop.

Each Product is one scannable inventory line. The SKU doubles as the barcode
value printed on the label, so it is unique and never changes once assigned.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Product(models.Model):
    """
    Product (inventory line) sold at the counter.

    Stock is only decremented by checkout, through a single
    ``UPDATE ... SET stock = stock - n`` on a row locked for the duration of
    the checkout transaction (see ``apps.inventory.stock``).
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    sku = models.CharField(
        max_length=60,
        unique=True,
        help_text="Stock keeping unit / barcode value (auto-generated EAN-13 if not provided)",
    )

    name = models.CharField(
        max_length=120,
        help_text="Product name shown on the POS and invoices",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current selling price",
    )

    stock = models.PositiveIntegerField(
        default=0,
        help_text="Units currently in stock",
    )

    # Optional descriptive attributes
    category = models.CharField(max_length=60, null=True, blank=True)
    size = models.CharField(max_length=20, null=True, blank=True)
    color = models.CharField(max_length=40, null=True, blank=True)

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive products are soft-deleted and cannot be sold",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["is_active", "-created_at"], name="product_active_date_idx"),
            models.Index(fields=["category"], name="product_category_idx"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def soft_delete(self):
        """Hide the product from the catalogue and from checkout."""
        self.is_active = False
        self.save(update_fields=["is_active", "updated_at"])
