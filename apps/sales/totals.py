"""
Bill arithmetic.

All amounts are ``Decimal`` rounded half-up to 2 places. Each line total is
rounded on its own and the subtotal is the sum of the rounded lines, so the
figures printed per line always add up to the printed subtotal.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Tuple

PAID = "PAID"
PENDING = "PENDING"

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value) -> Decimal:
    """Round to 2 decimal places, half-up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BillTotals:
    line_totals: List[Decimal] = field(default_factory=list)
    subtotal: Decimal = ZERO
    discount_percent: Decimal = ZERO
    discount_amount: Decimal = ZERO
    final_amount: Decimal = ZERO
    amount_paid: Decimal = ZERO
    amount_due: Decimal = ZERO
    payment_status: str = PAID


def calculate_totals(
    lines: Iterable[Tuple[Decimal, int]],
    discount_percent=ZERO,
    payment_status: str = PAID,
    amount_paid: Optional[Decimal] = None,
) -> BillTotals:
    """
    Compute the totals of a bill.

    Args:
        lines: (unit_price, quantity) pairs in cart order
        discount_percent: percentage off the subtotal, 0-100
        payment_status: requested status, PAID or PENDING
        amount_paid: amount received now; only read when PENDING

    A PENDING payment larger than the final amount is clamped to it, and a
    PENDING bill with nothing left to pay resolves to PAID.
    """
    line_totals = [money(Decimal(str(price)) * quantity) for price, quantity in lines]
    subtotal = money(sum(line_totals, ZERO))

    discount_percent = Decimal(str(discount_percent or 0))
    discount_amount = money(subtotal * discount_percent / Decimal("100"))
    final_amount = subtotal - discount_amount

    if payment_status == PENDING:
        paid = money(amount_paid if amount_paid is not None else ZERO)
        paid = min(paid, final_amount)
        due = final_amount - paid
        if due <= ZERO:
            payment_status = PAID
            due = ZERO
    else:
        payment_status = PAID
        paid = final_amount
        due = ZERO

    return BillTotals(
        line_totals=line_totals,
        subtotal=subtotal,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        final_amount=final_amount,
        amount_paid=paid,
        amount_due=due,
        payment_status=payment_status,
    )
