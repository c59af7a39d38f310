"""
Serializers for CRM models.
"""

from rest_framework import serializers

from .models import Customer, phone_validator


class CustomerSerializer(serializers.ModelSerializer):
    """Serializer for Customer model."""

    class Meta:
        model = Customer
        fields = ["id", "name", "phone", "created_at", "updated_at"]
        read_only_fields = fields


class CustomerLookupSerializer(serializers.Serializer):
    """Name and phone typed at the counter."""

    name = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=15, validators=[phone_validator])


class CustomerBillsSerializer(CustomerSerializer):
    """Customer with their bill history, newest first."""

    bills = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ["bills"]
        read_only_fields = fields

    def get_bills(self, obj):
        from apps.sales.serializers import BillListSerializer

        bills = obj.bills.order_by("-created_at")
        return BillListSerializer(bills, many=True).data
