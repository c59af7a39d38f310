import decimal
import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the product",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "sku",
                    models.CharField(
                        help_text="Stock keeping unit / barcode value (auto-generated EAN-13 if not provided)",
                        max_length=60,
                        unique=True,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Product name shown on the POS and invoices", max_length=120
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Current selling price",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "stock",
                    models.PositiveIntegerField(default=0, help_text="Units currently in stock"),
                ),
                ("category", models.CharField(blank=True, max_length=60, null=True)),
                ("size", models.CharField(blank=True, max_length=20, null=True)),
                ("color", models.CharField(blank=True, max_length=40, null=True)),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Inactive products are soft-deleted and cannot be sold",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "products",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["is_active", "-created_at"], name="product_active_date_idx"
                    ),
                    models.Index(fields=["category"], name="product_category_idx"),
                ],
            },
        ),
    ]
