"""Data models for the loan math package.

This module defines dataclasses for the inputs and results of every
calculation: loan parameters, loan summaries, schedule entries, debt ratio
classifications, borrowing capacity and early-payment outcomes. Using
dataclasses makes it easy to construct, inspect and serialize these
structures. Amounts are kept unrounded; rounding for display happens in the
formatter, the CLI exports and the web adapter.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

# Interest accrual conventions
FIXED = "fixed"
REDUCING = "reducing"
INTEREST_TYPES = (FIXED, REDUCING)

# Debt ratio statuses
SAFE = "safe"
ACCEPTABLE = "acceptable"
WARNING = "warning"
DANGER = "danger"

# Borrowing capacity statuses
CANNOT_BORROW = "cannot_borrow"
EXCELLENT = "excellent"
GOOD = "good"
LIMITED = "limited"


def _plain(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in values.items()}


@dataclass(frozen=True)
class LoanInput:
    """Parameters describing a loan.

    Attributes
    ----------
    principal: Decimal
        The borrowed amount.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``5`` means 5 %).
    term_months: int
        Number of monthly payments.
    interest_type: str
        ``"fixed"`` (annuity) or ``"reducing"`` (constant principal).
    """

    principal: Decimal
    annual_rate: Decimal
    term_months: int
    interest_type: str = FIXED


@dataclass(frozen=True)
class ReducingPaymentStats:
    """First, last and average payment of a reducing-balance loan."""

    first: Decimal
    last: Decimal
    average: Decimal


@dataclass(frozen=True)
class LoanSummary:
    """Aggregate figures for a loan.

    For reducing loans the payment changes every month; ``monthly_payment``
    then holds the mean of ``first_payment`` and ``last_payment``. Consumers
    that need the real month-by-month amounts should build the schedule
    instead of relying on this figure.
    """

    principal: Decimal
    monthly_payment: Decimal
    total_interest: Decimal
    total_amount: Decimal
    interest_percentage: Decimal
    payment_to_loan_ratio: Decimal
    term_months: int
    interest_type: str
    first_payment: Optional[Decimal] = None
    last_payment: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class ScheduleEntry:
    """An entry in the amortization schedule.

    Each entry corresponds to one month. ``remaining_balance`` is the balance
    after the payment, never below zero.
    """

    month: int
    principal_portion: Decimal
    interest_portion: Decimal
    total_payment: Decimal
    remaining_balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class DebtRatioResult:
    total_commitments: Decimal
    debt_ratio: Decimal  # percent of salary
    net_salary: Decimal
    net_salary_percentage: Decimal
    status: str
    message: str


@dataclass(frozen=True)
class BorrowingCapacity:
    """Largest affordable principal under a debt ratio ceiling.

    ``monthly_payment`` is the payment the ceiling leaves room for and
    ``debt_ratio`` is that payment as a percentage of salary.
    """

    max_loan_amount: Decimal
    monthly_payment: Decimal
    debt_ratio: Decimal
    status: str
    message: str


@dataclass(frozen=True)
class EarlyPaymentOutcome:
    """Effect of a lump-sum payment on a fixed-rate loan.

    Attributes
    ----------
    interest_saved: Decimal
        Interest no longer paid compared with continuing the original plan.
    time_saved_months: int
        How many monthly payments are no longer needed.
    new_monthly_payment: Decimal
        The payment kept after the lump sum (zero once the loan is retired).
    new_balance: Decimal
        Outstanding balance right after the lump sum, never below zero.
    completed: bool
        True when the lump sum retires the loan entirely.
    total_savings: Decimal
        Total money saved; equal to ``interest_saved`` since the payment
        amount does not change.
    outstanding_balance: Decimal
        Balance just before the lump sum was applied.
    new_term_months: int
        Payments still due after the lump sum.
    """

    interest_saved: Decimal
    time_saved_months: int
    new_monthly_payment: Decimal
    new_balance: Decimal
    completed: bool
    total_savings: Decimal
    outstanding_balance: Decimal
    new_term_months: int

