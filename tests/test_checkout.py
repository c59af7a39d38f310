"""
Tests for the checkout transaction.
"""

import os
import threading
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from django.conf import settings
from django.db import connections
from django.urls import reverse

import pytest
from kombu.exceptions import OperationalError
from rest_framework import status

from apps.core.exceptions import InsufficientStock, ProductNotFound
from apps.crm.models import Customer
from apps.inventory.models import Product
from apps.notifications.models import NotificationLog
from apps.sales.models import Bill, BillItem
from apps.sales.services import checkout, generate_bill_id, generate_public_token


def shirt_line(product, quantity=2):
    return {
        "product_name": product.name,
        "sku": product.sku,
        "price": product.price,
        "quantity": quantity,
    }


@pytest.mark.django_db
class TestCheckout:
    """Test checkout with stock deduction."""

    def test_paid_checkout_with_discount(self, product, second_product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 2), shirt_line(second_product, 1)],
            discount_percent=Decimal("10"),
        )

        bill = result.bill
        assert bill.subtotal == Decimal("250.00")
        assert bill.discount_amount == Decimal("25.00")
        assert bill.final_amount == Decimal("225.00")
        assert bill.amount_paid == Decimal("225.00")
        assert bill.amount_due == Decimal("0.00")
        assert bill.payment_status == Bill.PAID
        assert bill.due_date is None

        product.refresh_from_db()
        second_product.refresh_from_db()
        assert product.stock == 3
        assert second_product.stock == 9

        assert [s["stock_after"] for s in result.stock_updated] == [3, 9]
        assert result.customer_created is True

    def test_pending_checkout_keeps_balance_and_due_date(self, product, second_product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 2), shirt_line(second_product, 1)],
            discount_percent=Decimal("10"),
            payment_status=Bill.PENDING,
            amount_paid=Decimal("100.00"),
            due_date=date(2024, 2, 1),
        )

        bill = result.bill
        assert bill.amount_paid == Decimal("100.00")
        assert bill.amount_due == Decimal("125.00")
        assert bill.payment_status == Bill.PENDING
        assert bill.due_date == date(2024, 2, 1)

    def test_due_date_dropped_for_paid_bill(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 1)],
            due_date=date(2024, 2, 1),
        )

        assert result.bill.due_date is None

    def test_overpaid_pending_checkout_becomes_paid(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 1)],
            payment_status=Bill.PENDING,
            amount_paid=Decimal("500.00"),
            due_date=date(2024, 2, 1),
        )

        bill = result.bill
        assert bill.payment_status == Bill.PAID
        assert bill.amount_paid == Decimal("100.00")
        assert bill.amount_due == Decimal("0.00")
        assert bill.due_date is None

    def test_items_are_snapshots(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 2)],
        )

        product.name = "Linen Shirt"
        product.price = Decimal("999.00")
        product.save()

        item = BillItem.objects.get(bill=result.bill)
        assert item.product_name == "Cotton Shirt"
        assert item.price == Decimal("100.00")
        assert item.line_total == Decimal("200.00")
        assert item.sku == product.sku

    def test_items_keep_cart_order(self, product, second_product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[
                shirt_line(second_product, 1),
                {"product_name": "Alteration", "price": Decimal("30.00"), "quantity": 1},
                shirt_line(product, 1),
            ],
        )

        names = list(result.bill.items.values_list("product_name", flat=True))
        assert names == ["Denim Jeans", "Alteration", "Cotton Shirt"]

    def test_manual_line_does_not_touch_inventory(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[
                {"product_name": "Gift wrap", "sku": "", "price": Decimal("20.00"), "quantity": 3}
            ],
        )

        item = result.bill.items.get()
        assert item.sku is None
        assert result.bill.final_amount == Decimal("60.00")
        assert result.stock_updated == []

        product.refresh_from_db()
        assert product.stock == 5

    def test_bill_identifiers(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 1)],
        )

        bill = result.bill
        prefix, day, suffix = bill.bill_id.split("-")
        assert prefix == settings.BILL_ID_PREFIX
        assert len(day) == 8 and day.isdigit()
        assert len(suffix) == 6
        assert len(bill.public_token) == 64
        assert result.invoice_url == f"http://app.testserver/invoice/{bill.public_token}"

    def test_existing_customer_is_reused_and_renamed(self, product, customer):
        result = checkout(
            customer_name="Asha R.",
            customer_phone="9876543210",
            items=[shirt_line(product, 1)],
        )

        assert result.customer_created is False
        assert result.bill.customer_id == customer.pk
        customer.refresh_from_db()
        assert customer.name == "Asha R."
        assert Customer.objects.count() == 1

    def test_invoice_pdf_written(self, product):
        result = checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 1)],
        )

        filename = f"invoice_{result.bill.bill_id}.pdf"
        assert result.pdf_url == f"http://api.testserver/media/invoices/{filename}"
        assert os.path.exists(os.path.join(settings.MEDIA_ROOT, "invoices", filename))

    def test_pdf_failure_does_not_fail_checkout(self, product):
        with patch(
            "apps.sales.invoice_service.InvoiceService.save_invoice",
            side_effect=OSError("disk full"),
        ):
            result = checkout(
                customer_name="Asha Rao",
                customer_phone="9876543210",
                items=[shirt_line(product, 1)],
            )

        assert result.pdf_url is None
        assert Bill.objects.filter(pk=result.bill.pk).exists()
        product.refresh_from_db()
        assert product.stock == 4


@pytest.mark.django_db
class TestCheckoutAtomicity:
    """A failing line leaves no trace of the checkout."""

    def test_unknown_sku_rolls_back_everything(self, product):
        with pytest.raises(ProductNotFound):
            checkout(
                customer_name="New Customer",
                customer_phone="9123456780",
                items=[
                    shirt_line(product, 2),
                    {
                        "product_name": "Ghost",
                        "sku": "0000000000000",
                        "price": Decimal("10.00"),
                        "quantity": 1,
                    },
                ],
            )

        assert Bill.objects.count() == 0
        assert BillItem.objects.count() == 0
        assert Customer.objects.count() == 0
        product.refresh_from_db()
        assert product.stock == 5

    def test_insufficient_stock_rolls_back_everything(self, product, second_product):
        with pytest.raises(InsufficientStock) as exc_info:
            checkout(
                customer_name="New Customer",
                customer_phone="9123456780",
                items=[shirt_line(second_product, 4), shirt_line(product, 6)],
            )

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 6
        assert Bill.objects.count() == 0
        assert Customer.objects.count() == 0
        second_product.refresh_from_db()
        assert second_product.stock == 10

    def test_second_checkout_cannot_oversell(self, product):
        checkout(
            customer_name="Asha Rao",
            customer_phone="9876543210",
            items=[shirt_line(product, 4)],
        )

        with pytest.raises(InsufficientStock) as exc_info:
            checkout(
                customer_name="Ravi",
                customer_phone="9123456780",
                items=[shirt_line(product, 4)],
            )

        assert exc_info.value.available == 1
        assert Bill.objects.count() == 1
        assert Product.objects.get(pk=product.pk).stock == 1

    def test_inactive_product_cannot_be_sold(self, product):
        product.soft_delete()

        with pytest.raises(ProductNotFound):
            checkout(
                customer_name="Asha Rao",
                customer_phone="9876543210",
                items=[shirt_line(product, 1)],
            )

        assert Bill.objects.count() == 0


@pytest.mark.django_db
class TestCheckoutNotifications:
    def test_notifications_sent_after_commit(
        self, product, twilio_settings, mock_twilio, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            result = checkout(
                customer_name="Asha Rao",
                customer_phone="9876543210",
                items=[shirt_line(product, 1)],
            )

        assert len(callbacks) == 1
        assert mock_twilio.messages.create.call_count == 2

        logs = NotificationLog.objects.filter(bill=result.bill)
        assert sorted(logs.values_list("channel", flat=True)) == [
            NotificationLog.SMS,
            NotificationLog.WHATSAPP,
        ]
        assert set(logs.values_list("status", flat=True)) == {NotificationLog.SENT}

        body = mock_twilio.messages.create.call_args_list[0].kwargs["body"]
        assert result.bill.bill_id in body
        assert result.invoice_url in body

    def test_failed_checkout_schedules_nothing(self, product, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(InsufficientStock):
                checkout(
                    customer_name="Asha Rao",
                    customer_phone="9876543210",
                    items=[shirt_line(product, 50)],
                )

        assert callbacks == []
        assert NotificationLog.objects.count() == 0

    def test_notification_failure_does_not_affect_bill(
        self, product, django_capture_on_commit_callbacks
    ):
        """Without Twilio credentials each channel is logged as failed."""
        with django_capture_on_commit_callbacks(execute=True):
            result = checkout(
                customer_name="Asha Rao",
                customer_phone="9876543210",
                items=[shirt_line(product, 1)],
            )

        assert Bill.objects.filter(pk=result.bill.pk).exists()
        statuses = set(
            NotificationLog.objects.filter(bill=result.bill).values_list("status", flat=True)
        )
        assert statuses == {NotificationLog.FAILED}


@pytest.mark.django_db
class TestBillIdentifiers:
    def test_generate_bill_id_uses_given_date(self):
        bill_id = generate_bill_id(today=date(2024, 1, 15))

        assert bill_id.startswith(f"{settings.BILL_ID_PREFIX}-20240115-")

    def test_generate_bill_id_skips_used_ids(self, make_bill):
        existing = make_bill()
        _, day, suffix = existing.bill_id.split("-")

        with patch("apps.sales.services.secrets.token_hex", side_effect=[suffix.lower(), "abc123"]):
            bill_id = generate_bill_id(today=datetime.strptime(day, "%Y%m%d").date())

        assert bill_id != existing.bill_id
        assert bill_id.endswith("-ABC123")

    def test_public_tokens_are_unique(self):
        assert generate_public_token() != generate_public_token()


@pytest.mark.postgres
@pytest.mark.skipif(
    not os.getenv("POSTGRES_HOST"), reason="row locks need PostgreSQL (set POSTGRES_HOST)"
)
@pytest.mark.django_db(transaction=True)
class TestConcurrentCheckout:
    """Two checkouts racing for the last units of one product."""

    def test_parallel_checkouts_never_oversell(self, product):
        barrier = threading.Barrier(2)
        outcomes = []

        def buy(phone):
            try:
                barrier.wait()
                checkout(
                    customer_name="Racer",
                    customer_phone=phone,
                    items=[shirt_line(product, 4)],
                )
                outcomes.append("ok")
            except InsufficientStock:
                outcomes.append("insufficient")
            finally:
                connections.close_all()

        threads = [
            threading.Thread(target=buy, args=(phone,))
            for phone in ("9000000001", "9000000002")
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["insufficient", "ok"]
        assert Product.objects.get(pk=product.pk).stock == 1
        assert Bill.objects.count() == 1


@pytest.mark.django_db(transaction=True)
class TestCheckoutAfterCommit:
    """Work queued after commit cannot turn a committed checkout into an error."""

    def test_unreachable_broker_is_only_logged(self, product, caplog):
        with patch(
            "apps.sales.services.send_bill_notifications.delay",
            side_effect=OperationalError("broker unreachable"),
        ) as delay:
            result = checkout(
                customer_name="Asha Rao",
                customer_phone="9876543210",
                items=[shirt_line(product, 1)],
            )

        delay.assert_called_once_with(str(result.bill.pk))
        assert Bill.objects.filter(pk=result.bill.pk).exists()
        assert Product.objects.get(pk=product.pk).stock == 4
        assert "Could not queue notifications" in caplog.text

    def test_checkout_endpoint_still_returns_201(self, authenticated_client, product):
        payload = {
            "customer_name": "Asha Rao",
            "customer_phone": "9876543210",
            "items": [
                {"product_name": "Cotton Shirt", "sku": product.sku, "price": "100.00", "quantity": 1}
            ],
        }

        with patch(
            "apps.sales.services.send_bill_notifications.delay",
            side_effect=OperationalError("broker unreachable"),
        ):
            response = authenticated_client.post(
                reverse("sales:bill_checkout"), payload, format="json"
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert Bill.objects.filter(bill_id=response.data["bill_id"]).exists()
        assert Product.objects.get(pk=product.pk).stock == 4
