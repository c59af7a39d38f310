"""
Stock reservation for checkout.

A ``StockReservation`` is bound to the checkout's transaction. ``reserve()``
locks each product row with ``SELECT ... FOR UPDATE`` at lookup time and
validates availability; nothing is written until ``apply()`` runs after every
line has passed, so a checkout can never deduct some lines and then fail on a
later one. Locks are released when the surrounding transaction commits or
rolls back.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import F

from apps.core.exceptions import InsufficientStock, ProductNotFound

from .models import Product

logger = logging.getLogger(__name__)


@dataclass
class StockLine:
    """A validated, locked product line waiting to be deducted."""

    product: Product
    quantity: int


class StockReservation:
    """
    Validate-then-deduct stock guard for one checkout.

    Usage::

        with transaction.atomic():
            reservation = StockReservation()
            for line in cart:
                reservation.reserve(line["sku"], line["quantity"])
            ...  # persist the bill
            reservation.apply()
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self.lines: List[StockLine] = []
        self._applied = False

    def _ensure_in_transaction(self):
        if not transaction.get_connection(self.using).in_atomic_block:
            raise transaction.TransactionManagementError(
                "Stock reservation must run inside the checkout transaction."
            )

    def reserved_quantity(self, product: Product) -> int:
        return sum(line.quantity for line in self.lines if line.product.pk == product.pk)

    def reserve(self, sku: Optional[str], quantity: int) -> Optional[StockLine]:
        """
        Lock and validate the product for ``sku``.

        Blank SKUs are manual entries that are not tracked in inventory; they
        are skipped and ``None`` is returned.

        Raises:
            ProductNotFound: no active product has this SKU.
            InsufficientStock: ``quantity`` exceeds the locked row's stock.
        """
        sku = (sku or "").strip()
        if not sku:
            return None

        self._ensure_in_transaction()

        try:
            product = Product.objects.using(self.using).select_for_update().get(
                sku=sku, is_active=True
            )
        except Product.DoesNotExist:
            raise ProductNotFound(sku)

        # Earlier lines of the same cart may already hold part of this row's stock.
        available = product.stock - self.reserved_quantity(product)

        if quantity > available:
            raise InsufficientStock(
                product_name=product.name,
                available=available,
                requested=quantity,
                sku=product.sku,
            )

        line = StockLine(product=product, quantity=quantity)
        self.lines.append(line)
        return line

    def apply(self) -> List[dict]:
        """
        Deduct every reserved line with an atomic ``stock = stock - n`` update.

        Must run inside the same transaction as ``reserve()``. Returns the
        per-line stock summary shown to the cashier.
        """
        if self._applied:
            raise RuntimeError("Stock reservation has already been applied")

        self._ensure_in_transaction()

        running_stock = {}
        summary = []
        for line in self.lines:
            product = line.product
            Product.objects.using(self.using).filter(pk=product.pk).update(
                stock=F("stock") - line.quantity
            )

            stock_before = running_stock.get(product.pk, product.stock)
            stock_after = stock_before - line.quantity
            running_stock[product.pk] = stock_after

            summary.append(
                {
                    "product_name": product.name,
                    "sku": product.sku,
                    "sold": line.quantity,
                    "stock_before": stock_before,
                    "stock_after": stock_after,
                }
            )

            logger.info(
                f'[Stock] "{product.name}" (SKU: {product.sku}) '
                f"{stock_before} -> {stock_after} (sold: {line.quantity})"
            )

        self._applied = True
        return summary
