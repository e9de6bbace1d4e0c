"""Core amortization engine for the lending calculator.

This module implements the financial logic shared by loans and personal
debts: the periodic payment under the simple and French (annuity) interest
methods, the period-by-period amortization schedule and the end date of a
repayment plan. Every monetary value goes through ``round_money`` so the
results are reproducible to the cent.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple

from .config import MAX_AMOUNT, PERIODS_PER_YEAR
from .data_models import (
    INTEREST_METHODS,
    METHOD_FRENCH,
    METHOD_SIMPLE,
    TERM_UNITS,
    LoanTerms,
    PaymentResult,
    PaymentScheduleEntry,
)
from .exceptions import (
    AmountOutOfRangeError,
    InvalidTermError,
    NegativeRateError,
    NonPositivePrincipalError,
    UnsupportedOptionError,
)
from .utils import Number, add_periods, round_money, to_date, to_decimal

logger = logging.getLogger(__name__)


def _check_term(term_length: int, term_unit: str) -> None:
    if isinstance(term_length, bool) or not isinstance(term_length, int) or term_length < 1:
        raise InvalidTermError(term_length)
    if term_unit not in TERM_UNITS:
        raise UnsupportedOptionError("term unit", term_unit, TERM_UNITS)


def validate_terms(terms: LoanTerms) -> None:
    """Reject terms that would make the payment formulas degenerate."""
    principal = to_decimal(terms.principal)
    if principal <= 0:
        raise NonPositivePrincipalError(terms.principal)
    if principal > MAX_AMOUNT:
        raise AmountOutOfRangeError(terms.principal)
    if to_decimal(terms.annual_rate) < 0:
        raise NegativeRateError(terms.annual_rate)
    _check_term(terms.term_length, terms.term_unit)
    if terms.interest_method not in INTEREST_METHODS:
        raise UnsupportedOptionError("interest method", terms.interest_method, INTEREST_METHODS)


def periodic_rate_for(annual_rate: Number, term_unit: str) -> Decimal:
    """Convert an annual percentage rate into the rate of one period."""
    return (to_decimal(annual_rate) / Decimal(100)) / Decimal(PERIODS_PER_YEAR[term_unit])


def calculate_periodic_payment(terms: LoanTerms) -> PaymentResult:
    """Return the installment, total interest and total amount of a loan.

    The simple method charges ``P * r * n`` of interest on the original
    principal and spreads it evenly over the installments. The French method
    uses the annuity formula:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``r`` is the periodic rate and ``n`` the number of installments.
    When the rate is zero both methods reduce to ``P / n``.
    """
    validate_terms(terms)
    principal = to_decimal(terms.principal)
    term = Decimal(terms.term_length)
    rate = periodic_rate_for(terms.annual_rate, terms.term_unit)

    if rate == 0:
        payment = principal / term
        total_interest = Decimal("0")
        total_amount = principal
    elif terms.interest_method == METHOD_SIMPLE:
        total_interest = principal * rate * term
        total_amount = principal + total_interest
        payment = total_amount / term
    else:
        factor = (1 + rate) ** terms.term_length
        payment = principal * (rate * factor) / (factor - 1)
        total_amount = payment * term
        total_interest = total_amount - principal

    result = PaymentResult(
        payment_amount=round_money(payment),
        total_interest=round_money(total_interest),
        total_amount=round_money(total_amount),
        periodic_rate=rate,
    )
    logger.debug(
        "Payment for %s over %d %s (%s): %s",
        principal,
        terms.term_length,
        terms.term_unit,
        terms.interest_method,
        result.payment_amount,
    )
    return result


def generate_amortization_schedule(
    principal: Number,
    periodic_rate: Number,
    payment_amount: Number,
    term_length: int,
    term_unit: str,
    first_due_date: date,
    interest_method: str = METHOD_FRENCH,
) -> List[PaymentScheduleEntry]:
    """Expand a loan into its period-by-period amortization schedule.

    Interest for each period is charged on the outstanding balance and the
    rest of the installment repays principal. With ``interest_method`` set to
    ``"simple"`` interest is charged on the original principal instead, so
    every installment has the same composition. The last entry repays
    whatever balance is left, moving any accumulated rounding difference into
    its interest portion, so the schedule always closes at exactly zero.
    """
    _check_term(term_length, term_unit)
    if interest_method not in INTEREST_METHODS:
        raise UnsupportedOptionError("interest method", interest_method, INTEREST_METHODS)
    balance = round_money(principal)
    if balance <= 0:
        raise NonPositivePrincipalError(principal)
    rate = to_decimal(periodic_rate)
    payment = round_money(payment_amount)
    first_due_date = to_date(first_due_date)
    flat_interest = round_money(balance * rate)

    schedule: List[PaymentScheduleEntry] = []
    for number in range(1, term_length + 1):
        if interest_method == METHOD_SIMPLE:
            interest_portion = flat_interest
        else:
            interest_portion = round_money(balance * rate)
        principal_portion = round_money(payment - interest_portion)

        if number == term_length:
            principal_portion = round_money(balance)
            interest_portion = round_money(payment - principal_portion)

        balance = max(Decimal("0.00"), round_money(balance - principal_portion))

        schedule.append(
            PaymentScheduleEntry(
                number=number,
                due_date=add_periods(first_due_date, number - 1, term_unit),
                principal_portion=principal_portion,
                interest_portion=interest_portion,
                total_payment=payment,
                remaining_balance=balance,
            )
        )

    return schedule


def calculate_end_date(first_due_date: date, term_length: int, term_unit: str) -> date:
    """Return the due date of the last installment.

    A single-period plan ends on its first due date.
    """
    _check_term(term_length, term_unit)
    return add_periods(to_date(first_due_date), term_length - 1, term_unit)


def compute_schedule(
    terms: LoanTerms, first_due_date: date
) -> Tuple[List[PaymentScheduleEntry], Dict[str, object]]:
    """Compute the payment quote, schedule and summary for a loan or debt.

    Returns
    -------
    schedule: List[PaymentScheduleEntry]
        One entry per installment.
    summary: Dict[str, object]
        The quote together with the term details and the first and last due
        dates.
    """
    quote = calculate_periodic_payment(terms)
    schedule = generate_amortization_schedule(
        terms.principal,
        quote.periodic_rate,
        quote.payment_amount,
        terms.term_length,
        terms.term_unit,
        first_due_date,
        interest_method=terms.interest_method,
    )
    end_date = calculate_end_date(first_due_date, terms.term_length, terms.term_unit)

    summary = {
        "principal": round_money(terms.principal),
        "annual_rate": to_decimal(terms.annual_rate),
        "periodic_rate": quote.periodic_rate,
        "payment_amount": quote.payment_amount,
        "total_interest": quote.total_interest,
        "total_amount": quote.total_amount,
        "term_length": terms.term_length,
        "term_unit": terms.term_unit,
        "interest_method": terms.interest_method,
        "first_due_date": to_date(first_due_date),
        "end_date": end_date,
        "payments": len(schedule),
    }
    logger.debug("Generated %d installments ending %s", len(schedule), end_date)
    return schedule, summary


def calculate_payment_progress(paid_amount: Number, total_amount: Number) -> Decimal:
    """Return the percentage of ``total_amount`` already paid."""
    total = to_decimal(total_amount)
    if total == 0:
        return round_money(0)
    return round_money(to_decimal(paid_amount) / total * 100)
