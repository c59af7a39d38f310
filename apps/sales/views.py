"""
Views for billing.

- Checkout (bill creation with stock deduction)
- Bill list and detail
- Settlement (payment status updates)
- Public invoice lookup by token
"""

import logging

from django.db.models import Q

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import BillNotFound, InvoiceNotFound

from .invoice_service import InvoiceService
from .models import Bill
from .serializers import (
    BillDetailSerializer,
    BillListQuerySerializer,
    BillListSerializer,
    CheckoutSerializer,
    PublicBillSerializer,
    SettlementSerializer,
    shop_details,
)
from .services import apply_settlement, checkout

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def bill_checkout(request):
    """
    Check out a cart.

    Request body:
    {
        "customer_name": "Asha",
        "customer_phone": "9876543210",
        "items": [
            {"product_name": "Shirt", "sku": "8901234567890", "price": "100.00", "quantity": 2}
        ],
        "discount_percent": "10" (optional, default 0),
        "payment_status": "PAID|PENDING" (optional, default PAID),
        "amount_paid": "100.00" (required when PENDING),
        "due_date": "2024-02-01" (optional, kept only for PENDING bills)
    }

    Lines without a SKU are manual entries and do not touch inventory.
    """
    serializer = CheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = checkout(
        customer_name=data["customer_name"],
        customer_phone=data["customer_phone"],
        items=data["items"],
        discount_percent=data["discount_percent"],
        payment_status=data["payment_status"],
        amount_paid=data.get("amount_paid"),
        due_date=data.get("due_date"),
    )

    bill = result.bill
    return Response(
        {
            "detail": "Checkout successful.",
            "bill_id": bill.bill_id,
            "invoice_url": result.invoice_url,
            "pdf_url": result.pdf_url,
            "final_amount": f"{bill.final_amount:.2f}",
            "amount_paid": f"{bill.amount_paid:.2f}",
            "amount_due": f"{bill.amount_due:.2f}",
            "payment_status": bill.payment_status,
            "customer": {"name": bill.customer.name, "phone": bill.customer.phone},
            "stock_updated": result.stock_updated,
        },
        status=status.HTTP_201_CREATED,
    )


class BillListView(generics.ListAPIView):
    """
    API endpoint for listing bills, newest first.

    Query parameters:
    - search: bill id, customer name or phone
    - payment_status: PAID or PENDING
    - date_from / date_to: creation date (YYYY-MM-DD)
    """

    serializer_class = BillListSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "final_amount", "amount_due", "due_date"]
    ordering = ["-created_at"]

    def get_queryset(self):
        query = BillListQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        queryset = Bill.objects.select_related("customer")

        search = params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(bill_id__icontains=search)
                | Q(customer__name__icontains=search)
                | Q(customer__phone__icontains=search)
            )

        payment_status = params.get("payment_status")
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)

        date_from = params.get("date_from")
        if date_from:
            queryset = queryset.filter(created_at__date__gte=date_from)

        date_to = params.get("date_to")
        if date_to:
            queryset = queryset.filter(created_at__date__lte=date_to)

        return queryset


class BillDetailView(generics.RetrieveAPIView):
    """
    API endpoint for retrieving a bill by its bill id.
    """

    serializer_class = BillDetailSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_field = "bill_id"
    queryset = Bill.objects.select_related("customer").prefetch_related("items")

    def get_object(self):
        try:
            return self.get_queryset().get(bill_id=self.kwargs["bill_id"])
        except Bill.DoesNotExist:
            raise BillNotFound(self.kwargs["bill_id"])


@api_view(["PATCH"])
@permission_classes([permissions.IsAuthenticated])
def bill_update_status(request, bill_id):
    """
    Record a further payment or set the payment status of a bill.

    Request body (one of):
    {"additional_payment": "125.00"}
    {"payment_status": "PAID|PENDING"}
    """
    serializer = SettlementSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    bill = apply_settlement(
        bill_id,
        additional_payment=serializer.validated_data.get("additional_payment"),
        payment_status=serializer.validated_data.get("payment_status"),
    )

    bill = Bill.objects.select_related("customer").prefetch_related("items").get(pk=bill.pk)
    return Response(
        {"detail": "Bill updated.", "bill": BillDetailSerializer(bill).data},
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def public_invoice(request, token):
    """
    Customer-facing invoice, reachable only with the bill's public token.
    """
    try:
        bill = (
            Bill.objects.select_related("customer")
            .prefetch_related("items")
            .get(public_token=token)
        )
    except Bill.DoesNotExist:
        raise InvoiceNotFound()

    if InvoiceService.pdf_exists(bill):
        pdf_url = InvoiceService.get_pdf_url(bill)
    else:
        pdf_url = InvoiceService.generate_and_save(bill)

    return Response(
        {
            "bill": PublicBillSerializer(bill).data,
            "pdf_url": pdf_url,
            "shop": shop_details(),
        },
        status=status.HTTP_200_OK,
    )
