"""
Tests for the API exception handler and health endpoints.
"""

from unittest.mock import patch

from django.db import IntegrityError
from django.urls import reverse

import pytest
from rest_framework import status
from rest_framework.exceptions import ValidationError

from apps.core.exceptions import (
    DuplicateSKU,
    InsufficientStock,
    InvoiceNotFound,
    api_exception_handler,
)


class DummyView:
    pass


def handle(exc):
    return api_exception_handler(exc, {"view": DummyView()})


class TestApiExceptionHandler:
    def test_insufficient_stock_payload(self):
        response = handle(InsufficientStock("Cotton Shirt", 2, 5, sku="8901234567890"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["detail"] == (
            'Insufficient stock for "Cotton Shirt". Available: 2, Requested: 5.'
        )
        assert response.data["available"] == 2
        assert response.data["requested"] == 5
        assert response.data["sku"] == "8901234567890"

    def test_duplicate_sku_is_conflict(self):
        response = handle(DuplicateSKU("ABC"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["sku"] == "ABC"

    def test_integrity_error_is_conflict(self):
        response = handle(IntegrityError("UNIQUE constraint failed: customers.phone"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "customers.phone" not in str(response.data)

    def test_invoice_not_found_has_no_extra(self):
        response = handle(InvoiceNotFound())

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"detail": "Invoice not found."}

    def test_validation_error_untouched(self):
        response = handle(ValidationError({"customer_phone": ["Invalid."]}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"customer_phone": ["Invalid."]}

    def test_unexpected_error_is_generic_500(self):
        response = handle(KeyError("secret internals"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"detail": "Internal server error."}


@pytest.mark.django_db
class TestUnexpectedErrorThroughAPI:
    def test_checkout_crash_returns_500(self, authenticated_client, product):
        payload = {
            "customer_name": "Asha Rao",
            "customer_phone": "9876543210",
            "items": [
                {"product_name": "Cotton Shirt", "sku": product.sku, "price": "100.00", "quantity": 1}
            ],
        }

        with patch("apps.sales.views.checkout", side_effect=RuntimeError("boom")):
            response = authenticated_client.post(
                reverse("sales:bill_checkout"), payload, format="json"
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"detail": "Internal server error."}


@pytest.mark.django_db
class TestHealthEndpoints:
    def test_health(self, client):
        response = client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness(self, client):
        response = client.get(reverse("readiness"))

        assert response.status_code == 200
        assert response.json()["checks"] == {
            "database": "healthy",
            "invoice_storage": "healthy",
        }

    def test_readiness_reports_unwritable_storage(self, client):
        with patch("apps.core.health.os.access", return_value=False):
            response = client.get(reverse("readiness"))

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
