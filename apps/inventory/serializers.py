"""
Serializers for inventory models.
"""

from rest_framework import serializers

from apps.core.exceptions import DuplicateSKU

from .barcode_utils import generate_sku
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for listing, creating and updating products."""

    sku = serializers.CharField(max_length=60, required=False, allow_blank=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "price",
            "stock",
            "category",
            "size",
            "color",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "is_active", "created_at", "updated_at"]

    def validate_sku(self, value):
        """SKUs are immutable once assigned; new SKUs must be unused."""
        value = value.strip()

        if self.instance is not None:
            if value and value != self.instance.sku:
                raise serializers.ValidationError("SKU cannot be changed once assigned.")
            return self.instance.sku

        if value and Product.objects.filter(sku=value).exists():
            raise DuplicateSKU(value)

        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required.")
        return value

    def create(self, validated_data):
        """Generate an EAN-13 style SKU when none is supplied."""
        if not validated_data.get("sku"):
            sku = generate_sku()
            while Product.objects.filter(sku=sku).exists():
                sku = generate_sku()
            validated_data["sku"] = sku

        return super().create(validated_data)


class ProductScanSerializer(serializers.ModelSerializer):
    """Compact product summary returned to the POS after a barcode scan."""

    product_name = serializers.CharField(source="name", read_only=True)

    class Meta:
        model = Product
        fields = ["product_name", "sku", "price", "stock", "category", "size", "color"]
        read_only_fields = fields


class ScanRequestSerializer(serializers.Serializer):
    sku = serializers.CharField(max_length=60, trim_whitespace=True)
