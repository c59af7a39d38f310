"""
Serializers for sales app.

- Checkout request validation
- Settlement (payment status) updates
- Bill list, detail and public invoice representations
"""

from decimal import Decimal

from django.conf import settings

from rest_framework import serializers

from apps.crm.models import phone_validator
from apps.crm.serializers import CustomerSerializer

from .invoice_service import InvoiceService
from .models import Bill, BillItem


class CheckoutItemSerializer(serializers.Serializer):
    """One cart line as sent by the POS."""

    product_name = serializers.CharField(max_length=120)
    sku = serializers.CharField(max_length=60, required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    """
    Serializer for the checkout request.

    All validation happens here, before the checkout transaction starts.
    """

    customer_name = serializers.CharField(max_length=120)
    customer_phone = serializers.CharField(max_length=15, validators=[phone_validator])
    items = CheckoutItemSerializer(many=True, allow_empty=False)
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0.00"),
        max_value=Decimal("100.00"),
        default=Decimal("0.00"),
    )
    payment_status = serializers.ChoiceField(choices=Bill.PAYMENT_STATUS_CHOICES, default=Bill.PAID)
    amount_paid = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    due_date = serializers.DateField(required=False, allow_null=True)

    def validate_items(self, value):
        """Validate that at least one item is provided."""
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def validate(self, data):
        if data.get("payment_status") == Bill.PENDING and data.get("amount_paid") is None:
            raise serializers.ValidationError(
                {"amount_paid": "Amount paid is required for a pending payment."}
            )
        return data


class SettlementSerializer(serializers.Serializer):
    """Either a further payment or an explicit payment status."""

    additional_payment = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    payment_status = serializers.ChoiceField(
        choices=Bill.PAYMENT_STATUS_CHOICES, required=False, allow_null=True
    )

    def validate(self, data):
        additional_payment = data.get("additional_payment")
        has_payment = additional_payment is not None and additional_payment > 0
        if not has_payment and not data.get("payment_status"):
            raise serializers.ValidationError(
                "Provide a positive additional_payment or a payment_status (PAID or PENDING)."
            )
        return data


class BillItemSerializer(serializers.ModelSerializer):
    """Serializer for bill item snapshots."""

    class Meta:
        model = BillItem
        fields = ["id", "product_name", "sku", "price", "quantity", "line_total"]
        read_only_fields = fields


class BillListSerializer(serializers.ModelSerializer):
    """Serializer for bill list."""

    customer_name = serializers.CharField(source="customer.name", read_only=True)
    customer_phone = serializers.CharField(source="customer.phone", read_only=True)

    class Meta:
        model = Bill
        fields = [
            "id",
            "bill_id",
            "customer_name",
            "customer_phone",
            "final_amount",
            "amount_paid",
            "amount_due",
            "payment_status",
            "due_date",
            "created_at",
        ]
        read_only_fields = fields


class BillDetailSerializer(serializers.ModelSerializer):
    """Serializer for bill details."""

    customer = CustomerSerializer(read_only=True)
    items = BillItemSerializer(many=True, read_only=True)
    invoice_url = serializers.SerializerMethodField()
    pdf_url = serializers.SerializerMethodField()

    class Meta:
        model = Bill
        fields = [
            "id",
            "bill_id",
            "customer",
            "items",
            "subtotal",
            "discount_percent",
            "discount_amount",
            "final_amount",
            "amount_paid",
            "amount_due",
            "payment_status",
            "due_date",
            "invoice_url",
            "pdf_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_invoice_url(self, obj):
        return InvoiceService.get_invoice_url(obj)

    def get_pdf_url(self, obj):
        return InvoiceService.get_pdf_url(obj) if InvoiceService.pdf_exists(obj) else None


class PublicBillSerializer(serializers.ModelSerializer):
    """Bill as shown on the customer-facing invoice page."""

    customer = serializers.SerializerMethodField()
    items = BillItemSerializer(many=True, read_only=True)

    class Meta:
        model = Bill
        fields = [
            "bill_id",
            "customer",
            "items",
            "subtotal",
            "discount_percent",
            "discount_amount",
            "final_amount",
            "amount_paid",
            "amount_due",
            "payment_status",
            "due_date",
            "created_at",
        ]
        read_only_fields = fields

    def get_customer(self, obj):
        return {"name": obj.customer.name, "phone": obj.customer.phone}


def shop_details():
    return {
        "name": settings.SHOP_NAME,
        "address": settings.SHOP_ADDRESS,
        "phone": settings.SHOP_PHONE,
        "email": settings.SHOP_EMAIL,
    }


class BillListQuerySerializer(serializers.Serializer):
    """Filters accepted by the bill list."""

    search = serializers.CharField(required=False, allow_blank=True)
    payment_status = serializers.CharField(required=False, allow_blank=True)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate_payment_status(self, value):
        value = value.strip().upper()
        if value and value not in (Bill.PAID, Bill.PENDING):
            raise serializers.ValidationError("Must be PAID or PENDING.")
        return value

    def validate(self, data):
        date_from, date_to = data.get("date_from"), data.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({"date_to": "date_to must not be before date_from."})
        return data
