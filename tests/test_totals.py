"""
Tests for bill totals arithmetic.
"""

from decimal import Decimal

from apps.sales.totals import PAID, PENDING, calculate_totals, money


class TestMoney:
    def test_rounds_half_up(self):
        assert money(Decimal("2.345")) == Decimal("2.35")
        assert money(Decimal("2.344")) == Decimal("2.34")

    def test_accepts_strings_and_ints(self):
        assert money("10") == Decimal("10.00")
        assert money(3) == Decimal("3.00")


class TestCalculateTotals:
    """Test calculate_totals."""

    def test_paid_bill_with_discount(self):
        """2 x 100 + 1 x 50 with 10% off is settled in full."""
        totals = calculate_totals(
            [(Decimal("100.00"), 2), (Decimal("50.00"), 1)],
            discount_percent=Decimal("10"),
            payment_status=PAID,
        )

        assert totals.subtotal == Decimal("250.00")
        assert totals.discount_amount == Decimal("25.00")
        assert totals.final_amount == Decimal("225.00")
        assert totals.amount_paid == Decimal("225.00")
        assert totals.amount_due == Decimal("0.00")
        assert totals.payment_status == PAID

    def test_pending_bill_splits_paid_and_due(self):
        totals = calculate_totals(
            [(Decimal("100.00"), 2), (Decimal("50.00"), 1)],
            discount_percent=Decimal("10"),
            payment_status=PENDING,
            amount_paid=Decimal("100.00"),
        )

        assert totals.amount_paid == Decimal("100.00")
        assert totals.amount_due == Decimal("125.00")
        assert totals.payment_status == PENDING

    def test_subtotal_is_sum_of_rounded_lines(self):
        """Each line is rounded before summing."""
        totals = calculate_totals([(Decimal("0.005"), 1), (Decimal("0.005"), 1)])

        assert totals.line_totals == [Decimal("0.01"), Decimal("0.01")]
        assert totals.subtotal == Decimal("0.02")

    def test_line_rounding_uses_exact_decimal(self):
        totals = calculate_totals([(Decimal("19.99"), 3)])

        assert totals.line_totals == [Decimal("59.97")]
        assert totals.subtotal == Decimal("59.97")

    def test_discount_rounds_half_up(self):
        totals = calculate_totals([(Decimal("33.33"), 1)], discount_percent=Decimal("15"))

        # 33.33 * 0.15 = 4.9995
        assert totals.discount_amount == Decimal("5.00")
        assert totals.final_amount == Decimal("28.33")

    def test_overpayment_is_clamped_and_resolves_to_paid(self):
        totals = calculate_totals(
            [(Decimal("100.00"), 1)], payment_status=PENDING, amount_paid=Decimal("150.00")
        )

        assert totals.amount_paid == Decimal("100.00")
        assert totals.amount_due == Decimal("0.00")
        assert totals.payment_status == PAID

    def test_exact_payment_resolves_to_paid(self):
        totals = calculate_totals(
            [(Decimal("100.00"), 1)], payment_status=PENDING, amount_paid=Decimal("100.00")
        )

        assert totals.payment_status == PAID
        assert totals.amount_due == Decimal("0.00")

    def test_pending_with_nothing_paid(self):
        totals = calculate_totals([(Decimal("80.00"), 1)], payment_status=PENDING, amount_paid=None)

        assert totals.amount_paid == Decimal("0.00")
        assert totals.amount_due == Decimal("80.00")
        assert totals.payment_status == PENDING

    def test_full_discount(self):
        totals = calculate_totals([(Decimal("80.00"), 1)], discount_percent=Decimal("100"))

        assert totals.final_amount == Decimal("0.00")
        assert totals.payment_status == PAID

    def test_amounts_always_reconcile(self):
        """paid + due == final == subtotal - discount for a range of inputs."""
        cases = [
            ([(Decimal("9.99"), 7), (Decimal("0.01"), 3)], Decimal("12.5"), Decimal("20.00")),
            ([(Decimal("1234.56"), 1)], Decimal("33.33"), Decimal("0.00")),
            ([(Decimal("0.00"), 4)], Decimal("0"), Decimal("0.00")),
            ([(Decimal("45.45"), 2)], Decimal("7"), Decimal("84.53")),
        ]

        for lines, discount, paid in cases:
            totals = calculate_totals(
                lines, discount_percent=discount, payment_status=PENDING, amount_paid=paid
            )
            assert totals.final_amount == totals.subtotal - totals.discount_amount
            assert totals.amount_paid + totals.amount_due == totals.final_amount
            assert (totals.payment_status == PAID) == (totals.amount_due == 0)
