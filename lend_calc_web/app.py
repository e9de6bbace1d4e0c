"""JSON API over the lending calculator.

The mobile and web clients post the loan terms gathered by their forms and
receive the quote, schedule or penalty back. Nothing is stored here; the
clients persist the returned installments themselves.
"""

import logging

from flask import Flask, jsonify, request

from lend_calc import config
from lend_calc.data_models import LoanTerms, PenaltyRegime
from lend_calc.engine import calculate_periodic_payment, compute_schedule
from lend_calc.exceptions import LendCalcError
from lend_calc.formatter import entry_to_dict, penalty_to_dict, summary_to_dict
from lend_calc.penalty import assess_installments, calculate_late_penalty
from lend_calc.utils import decimal_from_str, parse_date

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["MAX_TERM_LENGTH"] = config.MAX_TERM_LENGTH


class BadRequest(LendCalcError):
    """Raised when a request body is missing fields or malformed."""


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _required(data: dict, name: str):
    value = data.get(name)
    if value is None or value == "":
        raise BadRequest(f"Missing field: {name}")
    return value


def _decimal_field(data: dict, name: str, default=None):
    value = data.get(name, default)
    if value is None:
        raise BadRequest(f"Missing field: {name}")
    try:
        return decimal_from_str(str(value))
    except ValueError as exc:
        raise BadRequest(str(exc), {"field": name}) from exc


def _int_field(data: dict, name: str, default=None) -> int:
    value = data.get(name, default)
    if value is None:
        raise BadRequest(f"Missing field: {name}")
    if isinstance(value, bool):
        raise BadRequest(f"Invalid integer value: {value}", {"field": name})
    if isinstance(value, float):
        if not value.is_integer():
            raise BadRequest(f"Invalid integer value: {value}", {"field": name})
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise BadRequest(f"Invalid integer value: {value}", {"field": name}) from exc


def _date_field(data: dict, name: str):
    try:
        return parse_date(str(_required(data, name)))
    except ValueError as exc:
        raise BadRequest(str(exc), {"field": name}) from exc


def _paid_numbers(data: dict) -> list:
    value = data.get("paid_numbers") or []
    if not isinstance(value, list) or not all(isinstance(n, int) for n in value):
        raise BadRequest("paid_numbers must be a list of installment numbers")
    return value


def _terms_from_payload(data: dict) -> LoanTerms:
    term_length = _int_field(data, "term_length")
    if term_length > app.config["MAX_TERM_LENGTH"]:
        raise BadRequest(
            "Term length too large", {"max_term_length": app.config["MAX_TERM_LENGTH"]}
        )
    return LoanTerms(
        principal=_decimal_field(data, "principal"),
        annual_rate=_decimal_field(data, "annual_rate", "0"),
        term_length=term_length,
        term_unit=data.get("term_unit", config.DEFAULT_TERM_UNIT),
        interest_method=data.get("interest_method", config.DEFAULT_INTEREST_METHOD),
    )


def _regime_from_payload(data: dict) -> PenaltyRegime:
    return PenaltyRegime(
        grace_period_days=_int_field(data, "grace_period_days", config.DEFAULT_GRACE_PERIOD_DAYS),
        penalty_type=data.get("penalty_type", config.DEFAULT_PENALTY_TYPE),
        penalty_rate=_decimal_field(data, "penalty_rate", "0"),
    )


@app.errorhandler(LendCalcError)
def handle_input_error(exc: LendCalcError):
    logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": exc.message, "details": exc.details}), 400


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


@app.post("/api/payment")
def payment():
    terms = _terms_from_payload(_payload())
    quote = calculate_periodic_payment(terms)
    return jsonify(
        {
            "payment_amount": float(quote.payment_amount),
            "total_interest": float(quote.total_interest),
            "total_amount": float(quote.total_amount),
            "periodic_rate": float(quote.periodic_rate),
        }
    )


@app.post("/api/schedule")
def schedule():
    """Return the schedule of a loan, optionally with the penalties due today.

    When the body carries a ``penalty`` object, every installment not listed
    in ``paid_numbers`` is assessed against ``current_date`` (or today).
    """
    data = _payload()
    terms = _terms_from_payload(data)
    entries, summary = compute_schedule(terms, _date_field(data, "first_due_date"))
    body = {
        "summary": summary_to_dict(summary),
        "schedule": [entry_to_dict(e) for e in entries],
    }

    penalty_data = data.get("penalty")
    if penalty_data is not None:
        if not isinstance(penalty_data, dict):
            raise BadRequest("penalty must be a JSON object")
        current_date = _date_field(data, "current_date") if data.get("current_date") else None
        assessments = assess_installments(
            entries,
            _regime_from_payload(penalty_data),
            paid_numbers=_paid_numbers(data),
            current_date=current_date,
        )
        body["penalties"] = [
            dict(number=a.entry.number, **penalty_to_dict(a.penalty)) for a in assessments
        ]
    return jsonify(body)


@app.post("/api/penalty")
def penalty():
    data = _payload()
    current_date = _date_field(data, "current_date") if data.get("current_date") else None
    result = calculate_late_penalty(
        _date_field(data, "due_date"),
        _decimal_field(data, "installment_amount"),
        _regime_from_payload(data),
        current_date,
    )
    return jsonify(penalty_to_dict(result))


if __name__ == "__main__":
    print("Starting lending calculator API...")
    app.run(host="0.0.0.0", port=8710, debug=config.DEBUG)
