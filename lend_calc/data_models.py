"""Data models for the lending calculator.

This module defines dataclasses representing the values handled by the
calculator: the terms of a loan or personal debt, the periodic payment
quote, individual schedule entries and the late-penalty configuration and
result of an installment. All of them are computed on demand and never
stored by this package; persisting them is the caller's job.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

TERM_UNIT_WEEKS = "weeks"
TERM_UNIT_MONTHS = "months"
TERM_UNITS = (TERM_UNIT_WEEKS, TERM_UNIT_MONTHS)

METHOD_SIMPLE = "simple"
METHOD_FRENCH = "french"
INTEREST_METHODS = (METHOD_SIMPLE, METHOD_FRENCH)

PENALTY_NONE = "none"
PENALTY_FIXED = "fixed"
PENALTY_DAILY = "daily"
PENALTY_WEEKLY = "weekly"
PENALTY_TYPES = (PENALTY_NONE, PENALTY_FIXED, PENALTY_DAILY, PENALTY_WEEKLY)

STATUS_CURRENT = "current"
STATUS_IN_GRACE = "overdue_in_grace"
STATUS_PENALIZED = "overdue_penalized"


@dataclass(frozen=True)
class LoanTerms:
    """Terms of a loan or personal debt.

    Attributes
    ----------
    principal: Decimal
        The amount lent. Must be positive.
    annual_rate: Decimal
        Nominal annual interest rate in percent (``24`` means 24 %).
    term_length: int
        Number of installments.
    term_unit: str
        ``"weeks"`` or ``"months"``; selects the length of one period.
    interest_method: str
        ``"simple"`` charges interest once on the original principal and
        spreads it evenly. ``"french"`` is the constant installment annuity
        where interest is charged on the outstanding balance.
    """

    principal: Decimal
    annual_rate: Decimal
    term_length: int
    term_unit: str = TERM_UNIT_MONTHS
    interest_method: str = METHOD_SIMPLE


@dataclass(frozen=True)
class PaymentResult:
    """Periodic payment quote for a set of loan terms.

    The monetary fields are rounded to cents. ``periodic_rate`` is kept
    unrounded because the schedule generator needs the exact value.
    """

    payment_amount: Decimal
    total_interest: Decimal
    total_amount: Decimal
    periodic_rate: Decimal


@dataclass(frozen=True)
class PaymentScheduleEntry:
    """An entry in the amortization schedule.

    ``total_payment`` is the constant installment; on the last entry the
    split between principal and interest absorbs the rounding drift so that
    ``remaining_balance`` lands exactly on zero.
    """

    number: int
    due_date: date
    principal_portion: Decimal
    interest_portion: Decimal
    total_payment: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class PenaltyRegime:
    """Late-payment policy attached to a loan."""

    grace_period_days: int = 0
    penalty_type: str = PENALTY_NONE  # "none", "fixed", "daily" or "weekly"
    penalty_rate: Decimal = Decimal("0")  # percent of the installment


@dataclass(frozen=True)
class PenaltyResult:
    is_overdue: bool
    days_overdue: int
    days_after_grace: int
    penalty_amount: Decimal
    total_with_penalty: Decimal
    status: str = STATUS_CURRENT


@dataclass(frozen=True)
class InstallmentAssessment:
    """An unpaid schedule entry together with its freshly computed penalty."""

    entry: PaymentScheduleEntry
    penalty: PenaltyResult
