"""Command‑line interface for the loan math package.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute loan summaries and amortization schedules, check
their debt ratio and borrowing capacity, estimate early-payment savings or
compare two loan scenarios. Schedules and summaries can be exported to
JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import shlex
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .affordability import DebtRatioThresholds, debt_ratio, max_borrowing_capacity
from .data_models import FIXED, INTEREST_TYPES, LoanSummary, ScheduleEntry
from .early_payment import early_payment_savings
from .engine import loan_summary, payment_schedule
from .errors import LoanMathError
from .formatter import (
    print_capacity,
    print_comparison,
    print_debt_ratio,
    print_early_payment,
    print_schedule,
    print_summary,
)
from .utils import months_from_years, round_currency

logger = logging.getLogger(__name__)

MAX_PRINTED_ROWS = 120


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), thousands separators ("500,000") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    text = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    try:
        amount = Decimal(text) * factor
    except ArithmeticError:
        raise click.BadParameter(f"Invalid amount: {value}")
    if not amount.is_finite():
        raise click.BadParameter(f"Invalid amount: {value}")
    return amount


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as "5", "5.25" or "5%"."""
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
    try:
        pct = Decimal(text)
    except ArithmeticError:
        raise click.BadParameter(f"Invalid percentage: {value}")
    if not pct.is_finite():
        raise click.BadParameter(f"Invalid percentage: {value}")
    return pct


def parse_years(value: str) -> Decimal:
    """Parse a loan term in years such as "30" or "2.5"."""
    try:
        years = Decimal(value.strip())
    except ArithmeticError:
        raise click.BadParameter(f"Invalid term in years: {value}")
    if not years.is_finite():
        raise click.BadParameter(f"Invalid term in years: {value}")
    return years


class AmountType(click.ParamType):
    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return parse_amount(str(value))
        except click.BadParameter as exc:
            self.fail(exc.message, param, ctx)


class PercentType(click.ParamType):
    name = "percent"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return parse_percent(str(value))
        except click.BadParameter as exc:
            self.fail(exc.message, param, ctx)


AMOUNT = AmountType()
PERCENT = PercentType()


def export_to_json(path: Path, summary: LoanSummary, schedule: Optional[List[ScheduleEntry]] = None) -> None:
    """Export a summary (and optionally its schedule) to a JSON file."""
    data: Dict[str, Any] = {"summary": summary.to_dict()}
    if schedule is not None:
        data["schedule"] = [e.to_dict() for e in schedule]
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[ScheduleEntry]) -> None:
    """Export a schedule to a CSV file, amounts rounded to cents."""
    header = ["Month", "Principal", "Interest", "Payment", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.month,
                    round_currency(e.principal_portion, 2),
                    round_currency(e.interest_portion, 2),
                    round_currency(e.total_payment, 2),
                    round_currency(e.remaining_balance, 2),
                ]
            )


def _fail(exc: LoanMathError) -> click.ClickException:
    logger.warning("Calculation rejected: %s", exc)
    return click.ClickException(str(exc))


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """A command‑line loan calculator for fixed and reducing-balance loans."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


def loan_options(func):
    """Options shared by the commands that describe a single loan."""
    func = click.option(
        "--type", "interest_type", type=click.Choice(INTEREST_TYPES), default=FIXED, help="Interest type"
    )(func)
    func = click.option("--years", "-y", "years", required=True, type=float, help="Loan term in years")(func)
    func = click.option("--rate", "-r", "rate", required=True, type=PERCENT, help="Annual interest rate (percent)")(func)
    func = click.option("--principal", "-p", "principal", required=True, type=AMOUNT, help="Loan amount")(func)
    return func


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: Decimal, rate: Decimal, years: float, interest_type: str, output: Optional[str]) -> None:
    """Compute and print the summary metrics for a loan."""
    try:
        result = loan_summary(principal, rate, years, interest_type)
    except LoanMathError as exc:
        raise _fail(exc)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        export_to_json(path, result)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(principal: Decimal, rate: Decimal, years: float, interest_type: str, output: Optional[str]) -> None:
    """Compute and print the full amortization schedule."""
    try:
        result = loan_summary(principal, rate, years, interest_type)
        entries = payment_schedule(principal, rate, months_from_years(years), interest_type)
    except LoanMathError as exc:
        raise _fail(exc)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result, entries)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result)
    # Limit schedule length printed to avoid flooding the terminal
    if len(entries) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(entries)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        entries = entries[:MAX_PRINTED_ROWS]
    print_schedule(entries)


def _thresholds(danger_threshold: Optional[Decimal]) -> DebtRatioThresholds:
    if danger_threshold is None:
        return DebtRatioThresholds()
    try:
        return DebtRatioThresholds(warning_max=danger_threshold)
    except LoanMathError as exc:
        raise click.BadParameter(str(exc))


@cli.command("debt-ratio")
@click.option("--salary", "-s", required=True, type=AMOUNT, help="Monthly salary")
@click.option("--payment", required=True, type=AMOUNT, help="Monthly loan payment")
@click.option("--commitments", "-c", default="0", type=AMOUNT, help="Other monthly commitments")
@click.option("--danger-threshold", type=PERCENT, help="Debt ratio above which the status is danger (default 40)")
def debt_ratio_command(
    salary: Decimal, payment: Decimal, commitments: Decimal, danger_threshold: Optional[Decimal]
) -> None:
    """Classify the share of salary taken by loan payments."""
    thresholds = _thresholds(danger_threshold)
    try:
        result = debt_ratio(salary, payment, commitments, thresholds)
    except LoanMathError as exc:
        raise _fail(exc)
    print_debt_ratio(result)


@cli.command()
@click.option("--salary", "-s", required=True, type=AMOUNT, help="Monthly salary")
@click.option("--rate", "-r", required=True, type=PERCENT, help="Annual interest rate (percent)")
@click.option("--years", "-y", required=True, type=float, help="Loan term in years")
@click.option("--commitments", "-c", default="0", type=AMOUNT, help="Existing monthly commitments")
@click.option("--max-ratio", default="33", type=PERCENT, show_default=True, help="Highest acceptable debt ratio")
def capacity(salary: Decimal, rate: Decimal, years: float, commitments: Decimal, max_ratio: Decimal) -> None:
    """Estimate the largest loan the salary can safely carry."""
    try:
        result = max_borrowing_capacity(salary, rate, years, commitments, max_ratio)
    except LoanMathError as exc:
        raise _fail(exc)
    print_capacity(result)


@cli.command("early-payment")
@click.option("--principal", "-p", required=True, type=AMOUNT, help="Original loan amount")
@click.option("--rate", "-r", required=True, type=PERCENT, help="Annual interest rate (percent)")
@click.option("--term", "-t", required=True, type=int, help="Original loan term in months")
@click.option("--paid", required=True, type=int, help="Monthly payments already made")
@click.option("--amount", "-a", required=True, type=AMOUNT, help="Lump sum paid now")
def early_payment(principal: Decimal, rate: Decimal, term: int, paid: int, amount: Decimal) -> None:
    """Show what a lump-sum payment saves on a fixed-rate loan."""
    try:
        outcome = early_payment_savings(principal, rate, term, paid, amount)
    except LoanMathError as exc:
        raise _fail(exc)
    print_early_payment(outcome)


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Turn a quoted option string such as ``"-p 500k -r 3.5 -y 30"`` into arguments."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {"principal": None, "annual_rate": None, "years": None, "interest_type": FIXED}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Option {token} in scenario needs a value")
        value = tokens[i + 1]
        if token in ("-p", "--principal"):
            params["principal"] = parse_amount(value)
        elif token in ("-r", "--rate"):
            params["annual_rate"] = parse_percent(value)
        elif token in ("-y", "--years"):
            params["years"] = parse_years(value)
        elif token == "--type":
            if value not in INTEREST_TYPES:
                raise click.BadParameter(f"Unknown interest type in scenario: {value}")
            params["interest_type"] = value
        else:
            raise click.BadParameter(f"Unknown option in scenario: {token}")
        i += 2
    for name in ("principal", "annual_rate", "years"):
        if params[name] is None:
            raise click.BadParameter(f"Scenario missing required option {name}")
    return params


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        loan-math compare --scenario1 "-p 500k -r 3.5 -y 30" --scenario2 "-p 500k -r 3.2 -y 25"
    """
    params1 = parse_scenario_opts(scenario1)
    params2 = parse_scenario_opts(scenario2)
    try:
        summary1 = loan_summary(**params1)
        summary2 = loan_summary(**params2)
    except LoanMathError as exc:
        raise _fail(exc)
    print_comparison(summary1, summary2)


if __name__ == "__main__":
    cli()
