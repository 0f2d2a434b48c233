"""Debt ratio classification and borrowing capacity.

The debt ratio is the share of a monthly salary taken by loan payments and
other recurring commitments. It is classified against ordered thresholds:

    ratio <= 25 %   safe
    ratio <= 33 %   acceptable
    ratio <= 40 %   warning
    ratio >  40 %   danger

Some lenders draw the danger line at 50 % instead of 40 %. The cut-offs are
collected in :class:`DebtRatioThresholds` so callers can pass their own, e.g.
``DebtRatioThresholds(warning_max=Decimal("50"))``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from .data_models import (
    ACCEPTABLE,
    CANNOT_BORROW,
    DANGER,
    EXCELLENT,
    GOOD,
    LIMITED,
    SAFE,
    WARNING,
    BorrowingCapacity,
    DebtRatioResult,
)
from .engine import rate_and_term
from .errors import InvalidInputError
from .utils import HUNDRED, ZERO, Number, monthly_rate, months_from_years, to_decimal

logger = logging.getLogger(__name__)

SAFE_THRESHOLD = Decimal("25")
ACCEPTABLE_THRESHOLD = Decimal("33")
DANGER_THRESHOLD = Decimal("40")
DEFAULT_MAX_DEBT_RATIO = Decimal("33")

DEBT_RATIO_MESSAGES = {
    SAFE: "Your finances are in excellent shape and very safe.",
    ACCEPTABLE: "Your situation is acceptable, but be careful about taking on more commitments.",
    WARNING: "Your debt ratio is high. Try to reduce your commitments.",
    DANGER: "Your debt ratio is dangerously high and will strain your everyday budget.",
}

CAPACITY_MESSAGES = {
    CANNOT_BORROW: "Your current commitments leave no room to borrow safely.",
    EXCELLENT: "Your borrowing capacity is excellent.",
    GOOD: "Your borrowing capacity is good.",
    LIMITED: "Your borrowing capacity is limited.",
}


@dataclass(frozen=True)
class DebtRatioThresholds:
    """Upper bounds (inclusive, in percent) of each debt ratio band.

    Anything above ``warning_max`` is classified as danger.
    """

    safe_max: Decimal = SAFE_THRESHOLD
    acceptable_max: Decimal = ACCEPTABLE_THRESHOLD
    warning_max: Decimal = DANGER_THRESHOLD

    def __post_init__(self) -> None:
        if not (0 < self.safe_max <= self.acceptable_max <= self.warning_max):
            raise InvalidInputError(
                "thresholds",
                (self.safe_max, self.acceptable_max, self.warning_max),
                "must be positive and in ascending order",
            )

    def classify(self, ratio: Decimal) -> str:
        if ratio <= self.safe_max:
            return SAFE
        if ratio <= self.acceptable_max:
            return ACCEPTABLE
        if ratio <= self.warning_max:
            return WARNING
        return DANGER


DEFAULT_THRESHOLDS = DebtRatioThresholds()


def _positive_salary(salary: Number) -> Decimal:
    value = to_decimal(salary, "salary")
    if value <= 0:
        raise InvalidInputError("salary", salary, "must be positive")
    return value


def _non_negative(value: Number, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return result


def debt_ratio(
    salary: Number,
    monthly_payment: Number,
    other_commitments: Number = 0,
    thresholds: DebtRatioThresholds = DEFAULT_THRESHOLDS,
) -> DebtRatioResult:
    """Classify how much of ``salary`` goes to loan payment and commitments."""
    salary_value = _positive_salary(salary)
    total_commitments = _non_negative(monthly_payment, "monthly_payment") + _non_negative(
        other_commitments, "other_commitments"
    )
    ratio = total_commitments / salary_value * HUNDRED
    net_salary = salary_value - total_commitments
    status = thresholds.classify(ratio)
    logger.debug("Debt ratio %s%% classified as %s", ratio, status)
    return DebtRatioResult(
        total_commitments=total_commitments,
        debt_ratio=ratio,
        net_salary=net_salary,
        net_salary_percentage=net_salary / salary_value * HUNDRED,
        status=status,
        message=DEBT_RATIO_MESSAGES[status],
    )


def max_borrowing_capacity(
    salary: Number,
    annual_rate: Number,
    years: Number,
    other_commitments: Number = 0,
    max_debt_ratio: Number = DEFAULT_MAX_DEBT_RATIO,
    thresholds: DebtRatioThresholds = DEFAULT_THRESHOLDS,
) -> BorrowingCapacity:
    """Return the largest fixed-rate loan the salary can carry.

    The affordable payment is ``salary * max_debt_ratio / 100`` minus the
    existing commitments. The annuity formula is then inverted to find the
    principal that payment amortizes over the term:

        P = payment * ((1 + i)^n - 1) / (i * (1 + i)^n)

    or ``payment * n`` when the rate is zero.
    """
    salary_value = _positive_salary(salary)
    commitments = _non_negative(other_commitments, "other_commitments")
    rate_value, term = rate_and_term(annual_rate, months_from_years(years))
    ceiling = to_decimal(max_debt_ratio, "max_debt_ratio")
    if ceiling <= 0 or ceiling > HUNDRED:
        raise InvalidInputError("max_debt_ratio", max_debt_ratio, "must be between 0 and 100")

    max_payment = salary_value * ceiling / HUNDRED - commitments
    if max_payment <= 0:
        logger.debug("Commitments %s exhaust the %s%% ceiling", commitments, ceiling)
        return BorrowingCapacity(
            max_loan_amount=ZERO,
            monthly_payment=ZERO,
            debt_ratio=ZERO,
            status=CANNOT_BORROW,
            message=CAPACITY_MESSAGES[CANNOT_BORROW],
        )

    rate = monthly_rate(rate_value)
    if rate == 0:
        max_loan = max_payment * Decimal(term)
    else:
        factor = (1 + rate) ** term
        max_loan = max_payment * (factor - 1) / (rate * factor)

    ratio = max_payment / salary_value * HUNDRED
    if ratio <= thresholds.safe_max:
        status = EXCELLENT
    elif ratio <= thresholds.acceptable_max:
        status = GOOD
    else:
        status = LIMITED
    return BorrowingCapacity(
        max_loan_amount=max_loan,
        monthly_payment=max_payment,
        debt_ratio=ratio,
        status=status,
        message=CAPACITY_MESSAGES[status],
    )
