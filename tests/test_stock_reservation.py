"""
Tests for the checkout stock guard.
"""

from django.db import transaction

import pytest

from apps.core.exceptions import InsufficientStock, ProductNotFound
from apps.inventory.models import Product
from apps.inventory.stock import StockReservation


@pytest.mark.django_db
class TestStockReservation:
    """Test StockReservation reserve/apply."""

    def test_reserve_and_apply_deducts_stock(self, product):
        """Stock is only reduced by apply()."""
        with transaction.atomic():
            reservation = StockReservation()
            line = reservation.reserve(product.sku, 2)

            assert line.product.pk == product.pk
            product.refresh_from_db()
            assert product.stock == 5

            summary = reservation.apply()

        product.refresh_from_db()
        assert product.stock == 3
        assert summary == [
            {
                "product_name": "Cotton Shirt",
                "sku": product.sku,
                "sold": 2,
                "stock_before": 5,
                "stock_after": 3,
            }
        ]

    def test_blank_sku_is_skipped(self):
        with transaction.atomic():
            reservation = StockReservation()
            assert reservation.reserve("", 3) is None
            assert reservation.reserve(None, 3) is None
            assert reservation.reserve("   ", 3) is None
            assert reservation.apply() == []

    def test_unknown_sku_raises_not_found(self):
        with transaction.atomic():
            with pytest.raises(ProductNotFound) as exc_info:
                StockReservation().reserve("0000000000000", 1)

        assert exc_info.value.extra == {"sku": "0000000000000"}

    def test_inactive_product_is_not_found(self, product):
        product.soft_delete()

        with transaction.atomic():
            with pytest.raises(ProductNotFound):
                StockReservation().reserve(product.sku, 1)

    def test_insufficient_stock(self, product):
        with transaction.atomic():
            with pytest.raises(InsufficientStock) as exc_info:
                StockReservation().reserve(product.sku, 6)

        error = exc_info.value
        assert error.product_name == "Cotton Shirt"
        assert error.available == 5
        assert error.requested == 6
        assert error.status_code == 422

    def test_exact_stock_can_be_sold(self, product):
        with transaction.atomic():
            reservation = StockReservation()
            reservation.reserve(product.sku, 5)
            reservation.apply()

        product.refresh_from_db()
        assert product.stock == 0

    def test_repeated_sku_counts_against_same_stock(self, product):
        """Two cart lines for one product share its stock."""
        with transaction.atomic():
            reservation = StockReservation()
            reservation.reserve(product.sku, 3)

            with pytest.raises(InsufficientStock) as exc_info:
                reservation.reserve(product.sku, 3)

        assert exc_info.value.available == 2
        assert exc_info.value.requested == 3

    def test_repeated_sku_summary_tracks_running_stock(self, product):
        with transaction.atomic():
            reservation = StockReservation()
            reservation.reserve(product.sku, 2)
            reservation.reserve(product.sku, 1)
            summary = reservation.apply()

        assert [(s["stock_before"], s["stock_after"]) for s in summary] == [(5, 3), (3, 2)]
        product.refresh_from_db()
        assert product.stock == 2

    def test_apply_twice_is_refused(self, product):
        with transaction.atomic():
            reservation = StockReservation()
            reservation.reserve(product.sku, 1)
            reservation.apply()

            with pytest.raises(RuntimeError):
                reservation.apply()

        product.refresh_from_db()
        assert product.stock == 4

    def test_rollback_restores_stock(self, product):
        class Boom(Exception):
            pass

        with pytest.raises(Boom):
            with transaction.atomic():
                reservation = StockReservation()
                reservation.reserve(product.sku, 4)
                reservation.apply()
                raise Boom()

        assert Product.objects.get(pk=product.pk).stock == 5


@pytest.mark.django_db(transaction=True)
class TestStockReservationOutsideTransaction:
    """Without an enclosing atomic block there is no lock to hold."""

    def test_reserve_outside_transaction_is_refused(self, product):
        with pytest.raises(transaction.TransactionManagementError):
            StockReservation().reserve(product.sku, 1)

        product.refresh_from_db()
        assert product.stock == 5
