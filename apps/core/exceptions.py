"""
Domain exceptions and the REST framework exception handler.

Every error a checkout or settlement can surface is an ``APIException`` so DRF
renders it with the right status code. Structured context (offending SKU,
available stock, ...) travels on ``extra`` and is merged into the response body
by ``api_exception_handler``.
"""

import logging

from django.db import IntegrityError

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ProductNotFound(NotFound):
    """No active product matches the scanned or submitted SKU."""

    default_code = "product_not_found"

    def __init__(self, sku):
        self.sku = sku
        self.extra = {"sku": sku}
        super().__init__(
            f'Product with SKU "{sku}" not found in inventory. Add it in the Products page first.'
        )


class BillNotFound(NotFound):
    default_code = "bill_not_found"

    def __init__(self, bill_id):
        self.bill_id = bill_id
        self.extra = {"bill_id": bill_id}
        super().__init__("Bill not found.")


class InvoiceNotFound(NotFound):
    # The token is never echoed back.
    default_code = "invoice_not_found"

    def __init__(self):
        super().__init__("Invoice not found.")


class InsufficientStock(APIException):
    """Requested quantity exceeds the stock of a locked product row."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "insufficient_stock"

    def __init__(self, product_name, available, requested, sku=None):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        self.sku = sku
        self.extra = {
            "product_name": product_name,
            "sku": sku,
            "available": available,
            "requested": requested,
        }
        super().__init__(
            f'Insufficient stock for "{product_name}". '
            f"Available: {available}, Requested: {requested}."
        )


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A record with the same unique value already exists."
    default_code = "conflict"


class OwnerAlreadyRegistered(Conflict):
    default_detail = "Owner already registered. Only one owner allowed."
    default_code = "owner_exists"


class DuplicateSKU(Conflict):
    default_code = "duplicate_sku"

    def __init__(self, sku):
        self.sku = sku
        self.extra = {"sku": sku}
        super().__init__(f'SKU "{sku}" already exists.')


def api_exception_handler(exc, context):
    """
    REST framework exception handler.

    - Domain exceptions keep their status and get their ``extra`` fields merged in.
    - ``IntegrityError`` (a unique constraint lost a race) becomes a 409.
    - Anything else is logged with its traceback and reported as a generic 500.
    """
    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error surfaced as conflict: {exc}")
        exc = Conflict()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        view_name = view.__class__.__name__ if view else "unknown view"
        logger.error(f"Unhandled error in {view_name}: {exc}", exc_info=exc)
        return Response(
            {"detail": "Internal server error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    extra = getattr(exc, "extra", None)
    if extra and isinstance(response.data, dict):
        response.data.update(extra)

    return response
