"""
Unit tests for the ledger arithmetic and the month helpers.

These run without a database.
"""
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from crm.exceptions import InvalidPeriod, UnknownCategory
from crm.services.ledger import (
    STATUS_OVERPAID,
    STATUS_PAID,
    STATUS_PENDING,
    compute_ledger,
    display_status,
)
from crm.services.periods import (
    last_day_of_month,
    period_bounds,
    previous_period,
    validate_period,
)
from crm.services.repositories import get_category

D = Decimal


class ComputeLedgerTests(SimpleTestCase):
    def test_partial_payment_carries_remainder(self):
        f = compute_ledger(D('15000'), D('0'), D('5000'), D('0'))
        self.assertEqual(f.net_balance, D('10000.00'))
        self.assertEqual(f.carry_forward_to_next, D('10000.00'))
        self.assertEqual(f.status, STATUS_PENDING)

    def test_previous_balance_is_added(self):
        f = compute_ledger(D('15000'), D('10000'), D('10000'), D('0'))
        self.assertEqual(f.net_balance, D('15000.00'))
        self.assertEqual(f.carry_forward_to_next, D('15000.00'))
        self.assertEqual(f.status, STATUS_PENDING)

    def test_exact_payment_is_paid(self):
        f = compute_ledger(D('15000'), D('0'), D('14000'), D('1000'))
        self.assertEqual(f.net_balance, D('0.00'))
        self.assertEqual(f.carry_forward_to_next, D('0.00'))
        self.assertEqual(f.status, STATUS_PAID)

    def test_overpayment_keeps_negative_net_and_carries_nothing(self):
        f = compute_ledger(D('15000'), D('0'), D('20000'), D('0'))
        self.assertEqual(f.net_balance, D('-5000.00'))
        self.assertEqual(f.carry_forward_to_next, D('0.00'))
        self.assertEqual(f.status, STATUS_PAID)

    def test_advance_counts_like_a_payment(self):
        f = compute_ledger(D('8000'), D('0'), D('0'), D('3000'))
        self.assertEqual(f.net_balance, D('5000.00'))

    def test_missing_values_are_zero(self):
        f = compute_ledger(None, None, '', None)
        self.assertEqual(f.net_balance, D('0.00'))
        self.assertEqual(f.status, STATUS_PAID)

    def test_fractional_amounts_keep_two_places(self):
        f = compute_ledger('1000.10', '0.20', '500.05', 0)
        self.assertEqual(f.net_balance, D('500.25'))
        self.assertEqual(f.carry_forward_to_next, D('500.25'))

    def test_carry_forward_is_never_negative(self):
        for paid in ('0', '999', '1000', '1001', '5000'):
            f = compute_ledger('1000', '0', paid, '0')
            self.assertEqual(f.carry_forward_to_next, max(D('0'), f.net_balance))
            self.assertEqual(f.status, STATUS_PENDING if f.net_balance > 0 else STATUS_PAID)


class DisplayStatusTests(SimpleTestCase):
    def test_labels(self):
        self.assertEqual(display_status(D('1')), STATUS_PENDING)
        self.assertEqual(display_status(D('0')), STATUS_PAID)
        self.assertEqual(display_status(D('-0.01')), STATUS_OVERPAID)


class PeriodTests(SimpleTestCase):
    def test_previous_period_wraps_year(self):
        self.assertEqual(previous_period(1, 2024), (12, 2023))
        self.assertEqual(previous_period(7, 2024), (6, 2024))

    def test_last_day_handles_leap_years(self):
        self.assertEqual(last_day_of_month(2, 2024), date(2024, 2, 29))
        self.assertEqual(last_day_of_month(2, 2023), date(2023, 2, 28))
        self.assertEqual(period_bounds(4, 2024), (date(2024, 4, 1), date(2024, 4, 30)))

    def test_validate_period_coerces_strings(self):
        self.assertEqual(validate_period('3', '2024'), (3, 2024))
        self.assertEqual(validate_period(3.0, 2024.0), (3, 2024))

    def test_validate_period_rejects_bad_input(self):
        for month, year in [(None, 2024), (3, None), ('', 2024), (0, 2024), (13, 2024),
                            ('x', 2024), (3, 1999), (3, 2101),
                            (3.9, 2024), (3, 2024.5), ('3.5', 2024), (True, 2024), (3, False)]:
            with self.subTest(month=month, year=year):
                with self.assertRaises(InvalidPeriod):
                    validate_period(month, year)

    def test_unknown_category(self):
        with self.assertRaises(UnknownCategory):
            get_category('nurse')
        self.assertEqual(get_category('patient').obligation_field, 'monthly_fees')
