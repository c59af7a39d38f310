"""
Views for customer lookup and history.
"""

from django.db.models import Q

from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from .models import Customer
from .serializers import CustomerBillsSerializer, CustomerLookupSerializer, CustomerSerializer
from .services import resolve_customer


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def customer_lookup(request):
    """
    Find or create a customer by phone.

    Request body:
    {
        "name": "<customer name>",
        "phone": "<10 digit phone>"
    }

    Returns 201 for a new customer and 200 for an existing one.
    """
    serializer = CustomerLookupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    customer, created = resolve_customer(
        serializer.validated_data["name"], serializer.validated_data["phone"]
    )

    return Response(
        {"customer": CustomerSerializer(customer).data, "is_new": created},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


class CustomerListAPIView(generics.ListAPIView):
    """
    API endpoint for listing customers.

    Query parameters:
    - search: matches name or phone
    """

    serializer_class = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = Customer.objects.all()

        search = self.request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(phone__icontains=search))

        return queryset


class CustomerBillsAPIView(generics.RetrieveAPIView):
    """
    API endpoint for a customer with their bill history.
    """

    serializer_class = CustomerBillsSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_field = "id"
    queryset = Customer.objects.prefetch_related("bills")
