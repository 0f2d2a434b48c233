"""Core calculation engine for the loan math package.

This module implements the amortization math for both fixed (annuity, equal
installment) and reducing-balance (constant principal, declining installment)
loans: monthly payments, total interest, loan summaries and month-by-month
schedules. All functions are pure; amounts are returned unrounded as
``Decimal`` values.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Tuple

from .data_models import (
    FIXED,
    INTEREST_TYPES,
    REDUCING,
    LoanInput,
    LoanSummary,
    ReducingPaymentStats,
    ScheduleEntry,
)
from .errors import InvalidInputError
from .utils import HUNDRED, ZERO, Number, monthly_rate, months_from_years, to_decimal, whole_months

logger = logging.getLogger(__name__)

# A balance below half a cent left when a loan ends is rounding residue.
_RESIDUAL = Decimal("0.005")


def loan_input(
    principal: Number,
    annual_rate: Number,
    months: int,
    interest_type: str = FIXED,
) -> LoanInput:
    """Validate raw loan parameters and return them as a ``LoanInput``.

    Raises
    ------
    InvalidInputError
        If the principal is not positive, the rate is negative, the term is
        shorter than one month or the interest type is unknown.
    """
    principal_value = to_decimal(principal, "principal")
    if principal_value <= 0:
        raise InvalidInputError("principal", principal, "must be positive")
    rate_value, term = rate_and_term(annual_rate, months)
    kind = str(interest_type).lower()
    if kind not in INTEREST_TYPES:
        raise InvalidInputError(
            "interest_type", interest_type, f"must be one of {', '.join(INTEREST_TYPES)}"
        )
    return LoanInput(principal_value, rate_value, term, kind)


def rate_and_term(annual_rate: Number, months: int) -> Tuple[Decimal, int]:
    """Validate an annual rate and a term in months.

    The rate must not be negative and the term must be a whole number of at
    least one month.
    """
    rate_value = to_decimal(annual_rate, "annual_rate")
    if rate_value < 0:
        raise InvalidInputError("annual_rate", annual_rate, "must not be negative")
    term = whole_months(months)
    if term < 1:
        raise InvalidInputError("months", months, "must be at least 1")
    return rate_value, term


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if rate_per_month == 0:
        return principal / Decimal(term)
    factor = (1 + rate_per_month) ** term
    return principal * (rate_per_month * factor) / (factor - 1)


def fixed_monthly_payment(principal: Number, annual_rate: Number, months: int) -> Decimal:
    """Return the constant monthly payment of a fixed-rate loan."""
    loan = loan_input(principal, annual_rate, months)
    payment = _calculate_annuity_payment(loan.principal, monthly_rate(loan.annual_rate), loan.term_months)
    logger.debug("Fixed payment for %s over %d months: %s", loan.principal, loan.term_months, payment)
    return payment


def reducing_payment_stats(principal: Number, annual_rate: Number, months: int) -> ReducingPaymentStats:
    """Return the first, last and average payment of a reducing-balance loan.

    The principal installment is ``P / n`` every month. The first payment adds
    a full month of interest on ``P``; the last adds interest on the final
    ``P / n`` still owed.
    """
    loan = loan_input(principal, annual_rate, months, REDUCING)
    rate = monthly_rate(loan.annual_rate)
    installment = loan.principal / Decimal(loan.term_months)
    first = installment + loan.principal * rate
    last = installment + installment * rate
    return ReducingPaymentStats(first=first, last=last, average=(first + last) / 2)


def total_interest_fixed(monthly_payment: Decimal, months: int, principal: Decimal) -> Decimal:
    """Total interest of a fixed loan: everything paid minus the principal."""
    return monthly_payment * Decimal(months) - principal


def total_interest_reducing(principal: Number, annual_rate: Number, months: int) -> Decimal:
    """Total interest of a reducing loan, summed over the declining balance."""
    loan = loan_input(principal, annual_rate, months, REDUCING)
    rate = monthly_rate(loan.annual_rate)
    installment = loan.principal / Decimal(loan.term_months)
    balance = loan.principal
    total = ZERO
    for _ in range(loan.term_months):
        total += balance * rate
        balance -= installment
    return total


def loan_summary(
    principal: Number,
    annual_rate: Number,
    years: Number,
    interest_type: str = FIXED,
) -> LoanSummary:
    """Compute the summary figures of a loan whose term is given in years.

    The term is converted with ``round(years * 12)``. For reducing loans the
    reported ``monthly_payment`` is the mean of the first and last payment;
    see :class:`~loan_math.data_models.LoanSummary`.
    """
    loan = loan_input(principal, annual_rate, months_from_years(years), interest_type)
    first = last = None
    if loan.interest_type == REDUCING:
        stats = reducing_payment_stats(loan.principal, loan.annual_rate, loan.term_months)
        monthly_payment = stats.average
        first, last = stats.first, stats.last
        total_interest = total_interest_reducing(loan.principal, loan.annual_rate, loan.term_months)
    else:
        monthly_payment = fixed_monthly_payment(loan.principal, loan.annual_rate, loan.term_months)
        total_interest = total_interest_fixed(monthly_payment, loan.term_months, loan.principal)

    summary = LoanSummary(
        principal=loan.principal,
        monthly_payment=monthly_payment,
        total_interest=total_interest,
        total_amount=loan.principal + total_interest,
        interest_percentage=total_interest / loan.principal * HUNDRED,
        payment_to_loan_ratio=monthly_payment / loan.principal * HUNDRED,
        term_months=loan.term_months,
        interest_type=loan.interest_type,
        first_payment=first,
        last_payment=last,
    )
    logger.debug("Loan summary computed: %s", summary)
    return summary


def payment_schedule(
    principal: Number,
    annual_rate: Number,
    months: int,
    interest_type: str = FIXED,
) -> List[ScheduleEntry]:
    """Compute the month-by-month amortization schedule of a loan.

    Returns
    -------
    List[ScheduleEntry]
        Exactly ``months`` entries numbered from 1. A new list is built on
        every call; identical inputs always give identical schedules.
    """
    loan = loan_input(principal, annual_rate, months, interest_type)
    rate = monthly_rate(loan.annual_rate)

    if loan.interest_type == REDUCING:
        installment = loan.principal / Decimal(loan.term_months)
    else:
        payment = _calculate_annuity_payment(loan.principal, rate, loan.term_months)

    schedule: List[ScheduleEntry] = []
    balance = loan.principal
    for month in range(1, loan.term_months + 1):
        interest_portion = balance * rate
        if loan.interest_type == REDUCING:
            principal_portion = installment
            total_payment = installment + interest_portion
        else:
            principal_portion = payment - interest_portion
            total_payment = payment
        # The carried balance stays unclamped; only the reported one is floored.
        balance -= principal_portion
        if month == loan.term_months and balance < _RESIDUAL:
            remaining = ZERO
        else:
            remaining = max(balance, ZERO)
        schedule.append(
            ScheduleEntry(
                month=month,
                principal_portion=principal_portion,
                interest_portion=interest_portion,
                total_payment=total_payment,
                remaining_balance=remaining,
            )
        )
    return schedule
