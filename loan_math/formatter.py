"""Output helpers for the loan math package.

This module renders loan summaries, amortization schedules, debt ratio
results, borrowing capacity and early-payment outcomes as plain text. It is
the output boundary: amounts are rounded to whole currency units here and
nowhere earlier.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .data_models import (
    REDUCING,
    BorrowingCapacity,
    DebtRatioResult,
    EarlyPaymentOutcome,
    LoanSummary,
    ScheduleEntry,
)
from .utils import round_currency


def money(value) -> str:
    """Format an amount as whole currency units with thousands separators."""
    return f"{round_currency(value):,}"


def percent(value) -> str:
    return f"{value:.2f}%"


def print_summary(summary: LoanSummary) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Interest type      : {summary.interest_type}")
    print(f"Term               : {summary.term_months} months")
    if summary.interest_type == REDUCING:
        print(f"First payment      : {money(summary.first_payment)}")
        print(f"Last payment       : {money(summary.last_payment)}")
        print(f"Average payment    : {money(summary.monthly_payment)}")
    else:
        print(f"Monthly payment    : {money(summary.monthly_payment)}")
    print(f"Total interest     : {money(summary.total_interest)}")
    print(f"Total amount       : {money(summary.total_amount)}")
    print(f"Interest / loan    : {percent(summary.interest_percentage)}")
    print(f"Payment / loan     : {percent(summary.payment_to_loan_ratio)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry]) -> None:
    """Print the amortization schedule as a tab separated table."""
    headers = ["Month", "Principal", "Interest", "Payment", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.month),
            money(entry.principal_portion),
            money(entry.interest_portion),
            money(entry.total_payment),
            money(entry.remaining_balance),
        ]
        print("\t".join(row))


def print_debt_ratio(result: DebtRatioResult) -> None:
    print("Debt ratio")
    print("-" * 72)
    print(f"Total commitments  : {money(result.total_commitments)}")
    print(f"Debt ratio         : {percent(result.debt_ratio)}")
    print(f"Net salary         : {money(result.net_salary)} ({percent(result.net_salary_percentage)})")
    print(f"Status             : {result.status}")
    print(result.message)
    print("-" * 72)


def print_capacity(capacity: BorrowingCapacity) -> None:
    print("Borrowing capacity")
    print("-" * 72)
    print(f"Maximum loan       : {money(capacity.max_loan_amount)}")
    print(f"Monthly payment    : {money(capacity.monthly_payment)}")
    print(f"Debt ratio         : {percent(capacity.debt_ratio)}")
    print(f"Status             : {capacity.status}")
    print(capacity.message)
    print("-" * 72)


def print_early_payment(outcome: EarlyPaymentOutcome) -> None:
    """Print the effect of a lump-sum payment."""
    print("Early payment")
    print("-" * 72)
    print(f"Balance before     : {money(outcome.outstanding_balance)}")
    print(f"Balance after      : {money(outcome.new_balance)}")
    if outcome.completed:
        print("The lump sum pays the loan off completely.")
    else:
        print(f"Monthly payment    : {money(outcome.new_monthly_payment)}")
        print(f"Payments left      : {outcome.new_term_months}")
    print(f"Interest saved     : {money(outcome.interest_saved)}")
    print(f"Time saved         : {outcome.time_saved_months} months")
    print("-" * 72)


def print_comparison(s1: LoanSummary, s2: LoanSummary) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 - scenario1; a negative difference
    means the second scenario is cheaper.
    """
    print("Comparison")
    print("=" * 72)
    keys: Sequence[str] = ("monthly_payment", "total_interest", "total_amount")
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = getattr(s1, key)
        v2 = getattr(s2, key)
        print(f"{key:20s} {money(v1):>15s} {money(v2):>15s} {money(v2 - v1):>15s}")
    print(f"{'term_months':20s} {s1.term_months:15d} {s2.term_months:15d} {s2.term_months - s1.term_months:15d}")
    print("=" * 72)
