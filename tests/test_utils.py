from decimal import Decimal

import pytest

from loan_math.errors import InvalidInputError
from loan_math.utils import monthly_rate, months_from_years, round_currency, to_decimal, whole_months


class TestToDecimal:
    def test_float_goes_through_its_string_form(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_strips_thousands_separators(self):
        assert to_decimal("1,250,000.50") == Decimal("1250000.50")

    @pytest.mark.parametrize("value", ["abc", "", float("inf"), float("nan"), None, True])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(InvalidInputError) as excinfo:
            to_decimal(value, "salary")
        assert excinfo.value.field == "salary"


class TestWholeMonths:
    @pytest.mark.parametrize("value,months", [(12, 12), (12.0, 12), (Decimal("360"), 360), (0, 0)])
    def test_accepts_whole_numbers(self, value, months):
        assert whole_months(value) == months

    @pytest.mark.parametrize("value", [2.5, "12", None, True, float("inf"), float("nan")])
    def test_rejects_other_values(self, value):
        with pytest.raises(InvalidInputError) as excinfo:
            whole_months(value, "paid_months")
        assert excinfo.value.field == "paid_months"


class TestMonthsFromYears:
    @pytest.mark.parametrize(
        "years,months",
        [(1, 12), (5, 60), (2.5, 30), (1.04, 12), (0.125, 2), ("30", 360), (Decimal("0.5"), 6)],
    )
    def test_rounds_half_up(self, years, months):
        assert months_from_years(years) == months


class TestRounding:
    def test_whole_units_by_default(self):
        assert round_currency(Decimal("1887.5")) == Decimal("1888")
        assert round_currency(Decimal("1887.49")) == Decimal("1887")

    def test_cents(self):
        assert round_currency(Decimal("50000") / 12, 2) == Decimal("4166.67")

    def test_monthly_rate(self):
        assert monthly_rate(Decimal("6")) == Decimal("0.005")
