"""Flask front end for the loan math package.

Each page reads a form, calls the pure calculation functions and renders the
result. The last values submitted on each form are kept in an injected
``InputStore`` keyed by a per-session user token, so the form is pre-filled
on the next visit.
"""

import logging
import os
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

import click
from flask import Flask, current_app, render_template, request, session

from loan_math.affordability import DebtRatioThresholds, debt_ratio, max_borrowing_capacity
from loan_math.data_models import FIXED, INTEREST_TYPES
from loan_math.early_payment import early_payment_savings
from loan_math.engine import loan_summary, payment_schedule
from loan_math.formatter import money
from loan_math.main import MAX_PRINTED_ROWS, parse_amount, parse_percent, parse_years
from loan_math.utils import months_from_years, to_decimal
from loan_math_web.input_store import InputStore, create_store_from_env

logger = logging.getLogger(__name__)

LOAN_FIELDS = ("principal", "rate", "years", "interest_type")
AFFORDABILITY_FIELDS = ("salary", "payment", "commitments", "rate", "years", "max_ratio")
EARLY_PAYMENT_FIELDS = ("principal", "rate", "term", "paid", "amount")

LOAN_DEFAULTS = {"principal": "100000", "rate": "5", "years": "5", "interest_type": FIXED}
AFFORDABILITY_DEFAULTS = {"salary": "", "payment": "", "commitments": "0", "rate": "5", "years": "5", "max_ratio": "33"}
EARLY_PAYMENT_DEFAULTS = {"principal": "100000", "rate": "5", "term": "60", "paid": "12", "amount": "10000"}


def _ensure_user_token() -> str:
    token = session.get("user_token")
    if not token:
        token = uuid4().hex
        session["user_token"] = token
        session.modified = True
    return token


def _store() -> InputStore:
    return current_app.extensions["loan_math_inputs"]


def _form_values(form_name: str, fields, defaults: Dict[str, str], form: Optional[Mapping] = None) -> Dict[str, str]:
    """Return the values to show in a form and remember submitted ones.

    On POST the submitted values are saved; on GET the last saved values
    (or the defaults) are returned.
    """
    key = f"{_ensure_user_token()}:{form_name}"
    if form is None:
        saved = _store().get(key) or {}
        return {name: saved.get(name, defaults.get(name, "")) for name in fields}
    values = {name: form.get(name, "").strip() for name in fields}
    _store().set(key, values)
    return values


def _thresholds() -> DebtRatioThresholds:
    danger = current_app.config.get("DANGER_THRESHOLD")
    if danger is None:
        return DebtRatioThresholds()
    return DebtRatioThresholds(warning_max=to_decimal(danger, "danger_threshold"))


def _optional_amount(value: str) -> Optional[Decimal]:
    return parse_amount(value) if value else None


def _run_loan(values: Dict[str, str], show_full_schedule: bool) -> Dict[str, Any]:
    principal = parse_amount(values["principal"])
    rate = parse_percent(values["rate"])
    years = parse_years(values["years"])
    interest_type = values["interest_type"] or FIXED
    summary = loan_summary(principal, rate, years, interest_type)
    schedule = payment_schedule(principal, rate, months_from_years(years), interest_type)
    truncated = 0
    if not show_full_schedule and len(schedule) > MAX_PRINTED_ROWS:
        truncated = len(schedule) - MAX_PRINTED_ROWS
        schedule = schedule[:MAX_PRINTED_ROWS]
    return {"summary": summary, "schedule": schedule, "truncated": truncated}


def _run_affordability(values: Dict[str, str]) -> Dict[str, Any]:
    salary = parse_amount(values["salary"])
    commitments = _optional_amount(values["commitments"]) or Decimal(0)
    payment = _optional_amount(values["payment"])
    thresholds = _thresholds()
    ratio = debt_ratio(salary, payment, commitments, thresholds) if payment is not None else None
    capacity = max_borrowing_capacity(
        salary,
        parse_percent(values["rate"]),
        parse_years(values["years"]),
        commitments,
        parse_percent(values["max_ratio"] or "33"),
        thresholds,
    )
    return {"ratio": ratio, "capacity": capacity}


def _run_early_payment(values: Dict[str, str]) -> Dict[str, Any]:
    try:
        term = int(values["term"])
        paid = int(values["paid"])
    except ValueError:
        raise click.BadParameter("Term and paid months must be whole numbers")
    outcome = early_payment_savings(
        parse_amount(values["principal"]),
        parse_percent(values["rate"]),
        term,
        paid,
        parse_amount(values["amount"]),
    )
    return {"outcome": outcome}


def _render(template: str, form_name: str, fields, defaults, runner, **extra):
    result: Dict[str, Any] = {}
    error = None
    if request.method == "POST":
        values = _form_values(form_name, fields, defaults, request.form)
        try:
            result = runner(values, **extra)
            logger.info("Computed %s for user %s", form_name, session.get("user_token"))
        except (ValueError, click.BadParameter) as exc:
            error = exc.message if isinstance(exc, click.BadParameter) else str(exc)
            logger.warning("Rejected %s input: %s", form_name, error)
    else:
        values = _form_values(form_name, fields, defaults)
    return render_template(
        template,
        values=values,
        error=error,
        asset_version=current_app.config["ASSET_VERSION"],
        interest_types=INTEREST_TYPES,
        **result,
    )


def index():
    show_full_schedule = request.form.get("show_full_schedule") == "1"
    return _render(
        "loan.html",
        "loan",
        LOAN_FIELDS,
        LOAN_DEFAULTS,
        _run_loan,
        show_full_schedule=show_full_schedule,
    )


def affordability():
    return _render("affordability.html", "affordability", AFFORDABILITY_FIELDS, AFFORDABILITY_DEFAULTS, _run_affordability)


def early_payment():
    return _render("early_payment.html", "early_payment", EARLY_PAYMENT_FIELDS, EARLY_PAYMENT_DEFAULTS, _run_early_payment)


def create_app(config: Optional[Dict[str, Any]] = None, store: Optional[InputStore] = None) -> Flask:
    """Create the web application.

    Settings come from environment variables unless overridden by ``config``:
    ``FLASK_SECRET_KEY``, ``ASSET_VERSION``, ``LOAN_MATH_STORE_URL`` and
    ``LOAN_MATH_DANGER_THRESHOLD``.
    """
    app = Flask(__name__)
    app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
    app.config["STORE_URL"] = os.environ.get("LOAN_MATH_STORE_URL")
    app.config["DANGER_THRESHOLD"] = os.environ.get("LOAN_MATH_DANGER_THRESHOLD")
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    if config:
        app.config.update(config)

    app.extensions["loan_math_inputs"] = store or create_store_from_env(app.config["STORE_URL"])
    app.jinja_env.filters["money"] = money

    app.add_url_rule("/", "index", index, methods=["GET", "POST"])
    app.add_url_rule("/affordability", "affordability", affordability, methods=["GET", "POST"])
    app.add_url_rule("/early-payment", "early_payment", early_payment, methods=["GET", "POST"])
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Starting Loan Math web app...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
