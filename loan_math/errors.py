"""Exceptions raised by the loan math functions.

Every public function either returns a complete result or raises one of the
errors below; no partial results are produced. All of them derive from
``ValueError`` so existing ``except ValueError`` handlers keep working.
"""

from __future__ import annotations

from typing import Any


class LoanMathError(ValueError):
    """Base class for loan calculation failures."""


class InvalidInputError(LoanMathError):
    """An input lies outside the domain a calculation accepts.

    Attributes
    ----------
    field: str
        Name of the offending parameter, e.g. ``"principal"``.
    value: Any
        The rejected value as it was passed in.
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} ({value!r}): {reason}")


class MathDomainError(LoanMathError):
    """A formula would need the logarithm of a non-positive number.

    Raised when the monthly payment does not exceed the interest accrued on
    the remaining balance, i.e. the loan would never be paid off.
    """
