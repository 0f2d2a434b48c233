"""
Tests for the amortization engine.

Covers fixed and reducing-balance payments, total interest, loan summaries
and schedule generation.
"""

from decimal import Decimal

import pytest

from loan_math.data_models import FIXED, REDUCING, LoanInput
from loan_math.engine import (
    fixed_monthly_payment,
    loan_input,
    loan_summary,
    payment_schedule,
    reducing_payment_stats,
    total_interest_fixed,
    total_interest_reducing,
)
from loan_math.errors import InvalidInputError, LoanMathError
from loan_math.utils import round_currency


class TestFixedMonthlyPayment:
    def test_standard_loan(self):
        # 100,000 at 5% over 60 months is about 1,887.12
        payment = fixed_monthly_payment(100000, 5, 60)
        assert abs(payment - Decimal("1887.12")) < Decimal("0.01")

    @pytest.mark.parametrize("principal,months", [(50000, 12), (1000, 7), (123456.78, 360), (1, 1)])
    def test_zero_rate_is_principal_over_months(self, principal, months):
        payment = fixed_monthly_payment(principal, 0, months)
        assert payment == Decimal(str(principal)) / Decimal(months)

    def test_single_month_repays_principal_plus_one_month_interest(self):
        payment = fixed_monthly_payment(1200, 12, 1)
        assert payment == Decimal("1212")

    def test_accepts_strings_and_decimals(self):
        assert fixed_monthly_payment("100,000", "5", 60) == fixed_monthly_payment(Decimal("100000"), 5.0, 60)


class TestReducingPaymentStats:
    def test_first_last_average(self):
        # 120,000 at 6% over 12 months: principal 10,000 and monthly rate 0.5%
        stats = reducing_payment_stats(120000, 6, 12)
        assert stats.first == Decimal("10600")
        assert stats.last == Decimal("10050")
        assert stats.average == Decimal("10325")

    def test_zero_rate_has_flat_payment(self):
        stats = reducing_payment_stats(1200, 0, 12)
        assert stats.first == stats.last == stats.average == Decimal("100")


class TestTotalInterest:
    def test_fixed_interest_is_payments_minus_principal(self):
        assert total_interest_fixed(Decimal("110"), 10, Decimal("1000")) == Decimal("100")

    def test_reducing_interest_walks_declining_balance(self):
        # 0.5% of 120k + 110k + ... + 10k
        assert total_interest_reducing(120000, 6, 12) == Decimal("3900")

    def test_reducing_interest_zero_rate(self):
        assert total_interest_reducing(5000, 0, 24) == 0


class TestLoanSummary:
    def test_fixed_five_year_loan(self):
        summary = loan_summary(100000, 5, 5, FIXED)

        assert summary.term_months == 60
        assert round_currency(summary.monthly_payment) == Decimal("1887")
        assert abs(summary.total_interest - Decimal("13227.4")) < 1
        assert summary.total_amount == summary.principal + summary.total_interest
        assert round_currency(summary.total_amount) == Decimal("113227")
        assert summary.first_payment is None
        assert summary.last_payment is None

    def test_percentages_are_relative_to_principal(self):
        summary = loan_summary(100000, 5, 5)
        assert summary.interest_percentage == summary.total_interest / 1000
        assert summary.payment_to_loan_ratio == summary.monthly_payment / 1000

    def test_zero_rate(self):
        summary = loan_summary(50000, 0, 1)

        assert summary.term_months == 12
        assert round_currency(summary.monthly_payment, 2) == Decimal("4166.67")
        assert abs(summary.total_interest) < Decimal("1e-15")
        assert round_currency(summary.total_amount) == Decimal("50000")

    def test_reducing_reports_mean_of_first_and_last(self):
        summary = loan_summary(120000, 6, 1, REDUCING)

        assert summary.interest_type == REDUCING
        assert summary.first_payment == Decimal("10600")
        assert summary.last_payment == Decimal("10050")
        assert summary.monthly_payment == Decimal("10325")
        assert summary.total_interest == Decimal("3900")
        assert summary.total_amount == Decimal("123900")

    def test_reducing_costs_less_interest_than_fixed(self):
        fixed = loan_summary(200000, 7, 20, FIXED)
        reducing = loan_summary(200000, 7, 20, REDUCING)
        assert reducing.total_interest < fixed.total_interest

    def test_years_rounded_to_whole_months(self):
        assert loan_summary(10000, 5, 2.5).term_months == 30
        assert loan_summary(10000, 5, 1.04).term_months == 12

    def test_interest_type_is_case_insensitive(self):
        assert loan_summary(10000, 5, 1, "Reducing").interest_type == REDUCING

    def test_to_dict_gives_plain_numbers(self):
        data = loan_summary(10000, 5, 1).to_dict()
        assert isinstance(data["monthly_payment"], float)
        assert data["term_months"] == 12
        assert data["interest_type"] == FIXED


class TestPaymentSchedule:
    def test_fixed_schedule_repays_principal(self):
        schedule = payment_schedule(100000, 5, 60, FIXED)

        assert len(schedule) == 60
        assert [e.month for e in schedule] == list(range(1, 61))
        total_principal = sum(e.principal_portion for e in schedule)
        assert abs(total_principal - 100000) < Decimal("0.01")
        assert schedule[-1].remaining_balance == 0

    def test_fixed_schedule_constant_payment_and_shifting_split(self):
        schedule = payment_schedule(100000, 5, 60, FIXED)

        payment = fixed_monthly_payment(100000, 5, 60)
        assert all(e.total_payment == payment for e in schedule)
        assert schedule[0].interest_portion > schedule[-1].interest_portion
        assert schedule[0].principal_portion < schedule[-1].principal_portion
        for entry in schedule:
            assert abs(entry.principal_portion + entry.interest_portion - entry.total_payment) < Decimal("1e-15")

    def test_first_month_interest_on_full_principal(self):
        schedule = payment_schedule(120000, 6, 12, FIXED)
        assert schedule[0].interest_portion == Decimal("600")

    def test_reducing_schedule_has_constant_principal(self):
        schedule = payment_schedule(100000, 5, 60, REDUCING)

        installment = Decimal(100000) / 60
        assert all(e.principal_portion == installment for e in schedule)
        payments = [e.total_payment for e in schedule]
        assert payments == sorted(payments, reverse=True)
        assert schedule[-1].remaining_balance == 0

    def test_reducing_schedule_matches_summary(self):
        schedule = payment_schedule(120000, 6, 12, REDUCING)
        summary = loan_summary(120000, 6, 1, REDUCING)

        assert schedule[0].total_payment == summary.first_payment
        assert schedule[-1].total_payment == summary.last_payment
        assert sum(e.interest_portion for e in schedule) == summary.total_interest

    def test_remaining_balance_never_negative(self):
        for kind in (FIXED, REDUCING):
            for entry in payment_schedule(33333.33, 7.77, 37, kind):
                assert entry.remaining_balance >= 0

    def test_small_balance_kept_until_final_month(self):
        schedule = payment_schedule(Decimal("0.004"), 0, 2)
        assert schedule[0].remaining_balance == Decimal("0.002")
        assert schedule[1].remaining_balance == 0

    def test_schedule_is_deterministic(self):
        assert payment_schedule(75000, 4.2, 48, FIXED) == payment_schedule(75000, 4.2, 48, FIXED)

    def test_zero_rate_schedule(self):
        schedule = payment_schedule(1200, 0, 12)
        assert all(e.interest_portion == 0 for e in schedule)
        assert all(e.principal_portion == 100 for e in schedule)
        assert schedule[5].remaining_balance == Decimal("600")

    def test_single_month(self):
        schedule = payment_schedule(500, 12, 1, REDUCING)
        assert len(schedule) == 1
        assert schedule[0].total_payment == Decimal("505")
        assert schedule[0].remaining_balance == 0


class TestValidation:
    def test_loan_input_normalises_values(self):
        loan = loan_input("1,000", 3.5, 12, "FIXED")
        assert loan == LoanInput(Decimal("1000"), Decimal("3.5"), 12, FIXED)

    @pytest.mark.parametrize("principal", [0, -100, "abc", float("nan")])
    def test_rejects_bad_principal(self, principal):
        with pytest.raises(InvalidInputError) as excinfo:
            fixed_monthly_payment(principal, 5, 12)
        assert excinfo.value.field == "principal"

    def test_rejects_negative_rate(self):
        with pytest.raises(InvalidInputError) as excinfo:
            payment_schedule(1000, -1, 12)
        assert excinfo.value.field == "annual_rate"

    @pytest.mark.parametrize(
        "months", [0, -3, 2.5, "12", True, None, float("inf"), float("nan"), Decimal("Infinity")]
    )
    def test_rejects_bad_months(self, months):
        with pytest.raises(InvalidInputError) as excinfo:
            fixed_monthly_payment(1000, 5, months)
        assert excinfo.value.field == "months"

    def test_rejects_term_rounding_to_zero_months(self):
        with pytest.raises(InvalidInputError):
            loan_summary(1000, 5, 0.01)

    def test_rejects_unknown_interest_type(self):
        with pytest.raises(InvalidInputError) as excinfo:
            loan_summary(1000, 5, 1, "balloon")
        assert excinfo.value.field == "interest_type"

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            loan_summary(-1, 5, 1)
        assert issubclass(InvalidInputError, LoanMathError)
