"""Early payment (lump-sum overpayment) recomputation for fixed-rate loans.

A lump sum paid after some months reduces the outstanding balance. The
monthly payment is kept and the term shrinks; the new term is the smallest
whole number of payments that clears the reduced balance:

    n = ceil( ln(payment / (payment - balance * i)) / ln(1 + i) )
"""

from __future__ import annotations

import logging
from decimal import ROUND_CEILING, Decimal
from typing import Tuple

from .data_models import EarlyPaymentOutcome
from .engine import _RESIDUAL, _calculate_annuity_payment, loan_input
from .errors import InvalidInputError, MathDomainError
from .utils import ZERO, Number, monthly_rate, to_decimal, whole_months

logger = logging.getLogger(__name__)

# Precision noise below this is dropped before rounding a term up, so an
# exact term such as 48 is not reported as 49.
_TERM_QUANTUM = Decimal("1e-9")


def _replay_balance(principal: Decimal, payment: Decimal, rate: Decimal, months: int) -> Decimal:
    """Walk the schedule for ``months`` payments and return the balance left."""
    balance = principal
    for _ in range(months):
        balance -= payment - balance * rate
    return balance


def _remaining_term(balance: Decimal, payment: Decimal, rate: Decimal) -> int:
    """Number of payments of ``payment`` needed to clear ``balance``."""
    if rate == 0:
        raw = balance / payment
    else:
        denominator = payment - balance * rate
        if denominator <= 0:
            raise MathDomainError(
                f"Monthly payment {payment} does not cover the interest on balance {balance}; "
                "the loan would never be repaid"
            )
        raw = (payment / denominator).ln() / (1 + rate).ln()
    return int(raw.quantize(_TERM_QUANTUM).to_integral_value(rounding=ROUND_CEILING))


def _interest_until_paid(balance: Decimal, payment: Decimal, rate: Decimal, months: int) -> Decimal:
    """Interest paid while clearing ``balance``; the last payment may be smaller."""
    total = ZERO
    for _ in range(months):
        if balance <= 0:
            break
        interest = balance * rate
        total += interest
        balance -= min(payment - interest, balance)
    return total


def _validate_progress(months: int, paid_months: int, lump_sum: Number) -> Tuple[int, Decimal]:
    paid = whole_months(paid_months, "paid_months")
    if not 0 <= paid <= months:
        raise InvalidInputError("paid_months", paid_months, f"must be between 0 and {months}")
    amount = to_decimal(lump_sum, "lump_sum")
    if amount < 0:
        raise InvalidInputError("lump_sum", lump_sum, "must not be negative")
    return paid, amount


def early_payment_savings(
    principal: Number,
    annual_rate: Number,
    months: int,
    paid_months: int,
    lump_sum: Number,
) -> EarlyPaymentOutcome:
    """Compute what a lump-sum payment saves on a fixed-rate loan.

    Parameters
    ----------
    principal, annual_rate, months:
        The original loan (annual rate in percent, term in months).
    paid_months: int
        Regular payments already made before the lump sum.
    lump_sum:
        Extra amount applied to the principal right after ``paid_months``.

    Raises
    ------
    InvalidInputError
        For invalid loan parameters, a negative lump sum or ``paid_months``
        outside ``0..months``.
    MathDomainError
        If the monthly payment cannot amortize the reduced balance.
    """
    loan = loan_input(principal, annual_rate, months)
    paid, amount = _validate_progress(loan.term_months, paid_months, lump_sum)
    rate = monthly_rate(loan.annual_rate)
    payment = _calculate_annuity_payment(loan.principal, rate, loan.term_months)

    balance = _replay_balance(loan.principal, payment, rate, paid)
    if balance < _RESIDUAL:
        balance = ZERO
    remaining_months = loan.term_months - paid
    interest_without = payment * Decimal(remaining_months) - balance
    new_balance = balance - amount
    logger.debug(
        "Balance after %d payments: %s; after lump sum of %s: %s", paid, balance, amount, new_balance
    )

    if new_balance <= 0:
        return EarlyPaymentOutcome(
            interest_saved=interest_without,
            time_saved_months=remaining_months,
            new_monthly_payment=ZERO,
            new_balance=ZERO,
            completed=True,
            total_savings=interest_without,
            outstanding_balance=balance,
            new_term_months=0,
        )

    new_months = _remaining_term(new_balance, payment, rate)
    interest_with = _interest_until_paid(new_balance, payment, rate, new_months)
    interest_saved = interest_without - interest_with
    logger.debug("New term %d months (was %d)", new_months, remaining_months)
    return EarlyPaymentOutcome(
        interest_saved=interest_saved,
        time_saved_months=remaining_months - new_months,
        new_monthly_payment=payment,
        new_balance=new_balance,
        completed=False,
        total_savings=interest_saved,
        outstanding_balance=balance,
        new_term_months=new_months,
    )
