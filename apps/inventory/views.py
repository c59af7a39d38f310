"""
Views for the product catalogue.

- Product list with search, create with auto-generated SKU
- Product detail, update and soft delete
- Barcode scan lookup for the POS
- Barcode and label images for printing
"""

import logging

from django.db.models import Q
from django.http import HttpResponse

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import ProductNotFound

from .barcode_utils import generate_barcode_image, generate_product_label
from .models import Product
from .serializers import ProductScanSerializer, ProductSerializer, ScanRequestSerializer

logger = logging.getLogger(__name__)


class ProductListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and creating products.

    Query parameters:
    - search: matches name, SKU or category
    - include_inactive: also list soft-deleted products
    """

    serializer_class = ProductSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = Product.objects.all()

        include_inactive = self.request.query_params.get("include_inactive", "")
        if include_inactive.lower() not in ["true", "1", "yes"]:
            queryset = queryset.active()

        search = self.request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(sku__icontains=search) | Q(category__icontains=search)
            )

        return queryset

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(f'Product created: "{product.name}" (SKU: {product.sku})')


class ProductDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deleting (soft delete) a product.
    """

    serializer_class = ProductSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_field = "id"
    queryset = Product.objects.all()

    def perform_destroy(self, instance):
        """Soft delete by setting is_active to False."""
        instance.soft_delete()
        logger.info(f"Product soft-deleted: {instance.sku}")


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def scan_product(request):
    """
    Look up an active product by its scanned SKU.

    Request body:
    {
        "sku": "<barcode value>"
    }
    """
    serializer = ScanRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    sku = serializer.validated_data["sku"]

    try:
        product = Product.objects.active().get(sku=sku)
    except Product.DoesNotExist:
        raise ProductNotFound(sku)

    return Response(ProductScanSerializer(product).data, status=status.HTTP_200_OK)


def _get_product_or_404(product_id):
    try:
        return Product.objects.get(id=product_id)
    except Product.DoesNotExist:
        return None


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_barcode(request, id):
    """
    Code128 barcode of a product's SKU.

    Returns:
        PNG image of the barcode
    """
    product = _get_product_or_404(id)
    if product is None:
        return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)

    barcode_bytes = generate_barcode_image(product.sku)

    response = HttpResponse(barcode_bytes, content_type="image/png")
    response["Content-Disposition"] = f'inline; filename="{product.sku}_barcode.png"'
    return response


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_label(request, id):
    """Printable label with name, SKU, price and barcode (PNG)."""
    product = _get_product_or_404(id)
    if product is None:
        return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)

    label_bytes = generate_product_label(product.name, product.sku, str(product.price))

    response = HttpResponse(label_bytes, content_type="image/png")
    response["Content-Disposition"] = f'inline; filename="{product.sku}_label.png"'
    return response
