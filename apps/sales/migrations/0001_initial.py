import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("crm", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Bill",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the bill",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "bill_id",
                    models.CharField(
                        help_text="Human readable bill number (e.g., 'BILL-20240115-3FA2C1')",
                        max_length=40,
                        unique=True,
                    ),
                ),
                (
                    "public_token",
                    models.CharField(
                        help_text="Unguessable token for the public invoice link",
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Sum of the line totals",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "discount_percent",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Discount percentage applied to the subtotal",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0.00")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100.00")),
                        ],
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Discount amount",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "final_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount payable (subtotal - discount)",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "amount_paid",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Amount received so far",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "amount_due",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Outstanding balance",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("PAID", "Paid"), ("PENDING", "Pending")],
                        default="PAID",
                        help_text="PAID when nothing is outstanding, PENDING for partial payments",
                        max_length=10,
                    ),
                ),
                (
                    "due_date",
                    models.DateField(
                        blank=True,
                        help_text="When the outstanding balance is due (pending bills only)",
                        null=True,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, help_text="When the bill was created"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, help_text="When the bill was last updated"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer the bill was issued to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bills",
                        to="crm.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bill",
                "verbose_name_plural": "Bills",
                "db_table": "bills",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="bill_date_idx"),
                    models.Index(fields=["payment_status", "due_date"], name="bill_status_due_idx"),
                    models.Index(fields=["customer", "-created_at"], name="bill_cust_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BillItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the bill item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(default=0, help_text="Position of the line in the cart"),
                ),
                (
                    "product_name",
                    models.CharField(help_text="Product name at time of sale", max_length=120),
                ),
                (
                    "sku",
                    models.CharField(
                        blank=True,
                        help_text="Product SKU at time of sale (empty for manual entries)",
                        max_length=60,
                        null=True,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price charged",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        help_text="Quantity sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "line_total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="price x quantity, rounded to 2 places",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
                    ),
                ),
                (
                    "bill",
                    models.ForeignKey(
                        help_text="Bill that this item belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.bill",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bill Item",
                "verbose_name_plural": "Bill Items",
                "db_table": "bill_items",
                "ordering": ["position"],
                "indexes": [
                    models.Index(fields=["bill", "position"], name="billitem_bill_pos_idx"),
                ],
            },
        ),
    ]
