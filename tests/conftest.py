"""
Pytest configuration and fixtures for the shop billing backend.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(django_user_model):
    """Shop owner account."""
    return django_user_model.objects.create_user(
        username="owner", email="owner@example.com", password="testpass123"
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """
    Fixture for authenticated API client.
    """
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def product():
    """In-stock product with a scannable SKU."""
    from apps.inventory.models import Product

    return Product.objects.create(
        sku="8901234567890",
        name="Cotton Shirt",
        price=Decimal("100.00"),
        stock=5,
        category="Apparel",
        size="M",
        color="Blue",
    )


@pytest.fixture
def second_product():
    from apps.inventory.models import Product

    return Product.objects.create(
        sku="8901234567906",
        name="Denim Jeans",
        price=Decimal("50.00"),
        stock=10,
        category="Apparel",
    )


@pytest.fixture
def customer():
    from apps.crm.models import Customer

    return Customer.objects.create(name="Asha Rao", phone="9876543210")


@pytest.fixture
def make_bill(customer):
    """
    Factory for bills created directly, bypassing checkout.
    """
    from apps.sales.models import Bill, BillItem
    from apps.sales.services import generate_bill_id, generate_public_token

    def _make_bill(
        final_amount=Decimal("250.00"),
        amount_paid=None,
        payment_status="PAID",
        due_date=None,
        bill_customer=None,
    ):
        amount_paid = final_amount if amount_paid is None else amount_paid
        bill = Bill.objects.create(
            bill_id=generate_bill_id(),
            public_token=generate_public_token(),
            customer=bill_customer or customer,
            subtotal=final_amount,
            final_amount=final_amount,
            amount_paid=amount_paid,
            amount_due=final_amount - amount_paid,
            payment_status=payment_status,
            due_date=due_date,
        )
        BillItem.objects.create(
            bill=bill,
            product_name="Cotton Shirt",
            sku="8901234567890",
            price=final_amount,
            quantity=1,
            line_total=final_amount,
        )
        return bill

    return _make_bill


@pytest.fixture
def mock_twilio():
    """
    Patch the Twilio client so sends succeed without network access.
    """
    from unittest.mock import MagicMock, patch

    client = MagicMock()
    client.messages.create.return_value = MagicMock(sid="SM123", status="queued", error_message=None)

    with patch("apps.notifications.services._get_twilio_client", return_value=client):
        yield client


@pytest.fixture
def twilio_settings(settings):
    settings.TWILIO_ACCOUNT_SID = "AC123"
    settings.TWILIO_AUTH_TOKEN = "secret"
    settings.TWILIO_PHONE_NUMBER = "+15550001111"
    settings.TWILIO_WHATSAPP_NUMBER = "+14155238886"
    return settings
