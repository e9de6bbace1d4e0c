"""Late-payment penalty calculation.

An installment moves from ``current`` to ``overdue_in_grace`` once its due
date passes and to ``overdue_penalized`` when the grace period is exhausted.
The status is derived from the dates on every call and never stored, so a
persisted status elsewhere is only a snapshot of this computation.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .config import DAYS_PER_WEEK, MAX_AMOUNT
from .data_models import (
    PENALTY_DAILY,
    PENALTY_FIXED,
    PENALTY_NONE,
    PENALTY_TYPES,
    STATUS_CURRENT,
    STATUS_IN_GRACE,
    STATUS_PENALIZED,
    InstallmentAssessment,
    PaymentScheduleEntry,
    PenaltyRegime,
    PenaltyResult,
)
from .exceptions import AmountOutOfRangeError, InvalidPenaltyError, UnsupportedOptionError
from .utils import Number, round_money, to_date, to_decimal

logger = logging.getLogger(__name__)


def validate_regime(regime: PenaltyRegime) -> None:
    if regime.penalty_type not in PENALTY_TYPES:
        raise UnsupportedOptionError("penalty type", regime.penalty_type, PENALTY_TYPES)
    if regime.grace_period_days < 0:
        raise InvalidPenaltyError(
            "Grace period cannot be negative", {"grace_period_days": regime.grace_period_days}
        )
    if to_decimal(regime.penalty_rate) < 0:
        raise InvalidPenaltyError(
            "Penalty rate cannot be negative", {"penalty_rate": str(regime.penalty_rate)}
        )


def penalty_status(days_overdue: int, grace_period_days: int) -> str:
    """Classify an installment by how far past its due date it is."""
    if days_overdue <= 0:
        return STATUS_CURRENT
    if days_overdue <= grace_period_days:
        return STATUS_IN_GRACE
    return STATUS_PENALIZED


def calculate_late_penalty(
    due_date: date,
    installment_amount: Number,
    regime: PenaltyRegime,
    current_date: Optional[date] = None,
) -> PenaltyResult:
    """Compute the penalty accrued by an installment as of ``current_date``.

    Parameters
    ----------
    due_date: date
        Due date of the installment. A ``datetime`` is truncated to its date.
    installment_amount: Decimal
        The installment the penalty rate applies to.
    regime: PenaltyRegime
        Grace period, penalty type and rate of the loan.
    current_date: date, optional
        Reference date. Defaults to today; pass it explicitly for
        reproducible results.

    Returns
    -------
    PenaltyResult
        ``fixed`` charges the rate once, ``daily`` charges it for every day
        past the grace period and ``weekly`` for every started week past it.
    """
    validate_regime(regime)
    amount = to_decimal(installment_amount)
    if amount <= 0:
        raise InvalidPenaltyError(
            "Installment amount must be positive", {"installment_amount": str(installment_amount)}
        )
    if amount > MAX_AMOUNT:
        raise AmountOutOfRangeError(installment_amount)
    due = to_date(due_date)
    today = to_date(current_date) if current_date is not None else date.today()

    days_overdue = (today - due).days
    if days_overdue <= 0:
        return PenaltyResult(
            is_overdue=False,
            days_overdue=0,
            days_after_grace=0,
            penalty_amount=round_money(0),
            total_with_penalty=amount,
            status=STATUS_CURRENT,
        )

    status = penalty_status(days_overdue, regime.grace_period_days)
    days_after_grace = max(0, days_overdue - regime.grace_period_days)

    if days_after_grace <= 0 or regime.penalty_type == PENALTY_NONE:
        return PenaltyResult(
            is_overdue=True,
            days_overdue=days_overdue,
            days_after_grace=0,
            penalty_amount=round_money(0),
            total_with_penalty=amount,
            status=status,
        )

    rate = to_decimal(regime.penalty_rate) / Decimal(100)
    if regime.penalty_type == PENALTY_FIXED:
        penalty = amount * rate
    elif regime.penalty_type == PENALTY_DAILY:
        penalty = amount * rate * days_after_grace
    else:
        weeks_after_grace = math.ceil(days_after_grace / DAYS_PER_WEEK)
        penalty = amount * rate * weeks_after_grace

    penalty_amount = round_money(penalty)
    logger.debug(
        "Installment due %s is %d days overdue, %s penalty %s",
        due,
        days_overdue,
        regime.penalty_type,
        penalty_amount,
    )
    return PenaltyResult(
        is_overdue=True,
        days_overdue=days_overdue,
        days_after_grace=days_after_grace,
        penalty_amount=penalty_amount,
        total_with_penalty=round_money(amount + penalty_amount),
        status=status,
    )


def assess_installments(
    schedule: Iterable[PaymentScheduleEntry],
    regime: PenaltyRegime,
    paid_numbers: Iterable[int] = (),
    current_date: Optional[date] = None,
) -> List[InstallmentAssessment]:
    """Recompute the penalty of every unpaid installment of a schedule.

    Paid installments are skipped. The reference date is resolved once so
    that all installments are assessed against the same day.
    """
    paid = set(paid_numbers)
    today = to_date(current_date) if current_date is not None else date.today()
    assessments: List[InstallmentAssessment] = []
    for entry in schedule:
        if entry.number in paid:
            continue
        result = calculate_late_penalty(entry.due_date, entry.total_payment, regime, today)
        assessments.append(InstallmentAssessment(entry=entry, penalty=result))
    return assessments


def format_penalty_status(result: PenaltyResult) -> str:
    """Return a short human-readable description of a penalty result."""
    if not result.is_overdue:
        return "Up to date"
    plural = "s" if result.days_overdue != 1 else ""
    if result.status == STATUS_IN_GRACE:
        return f"Overdue {result.days_overdue} day{plural} (in grace period)"
    if result.penalty_amount == 0:
        return f"Overdue {result.days_overdue} day{plural}"
    return f"Overdue {result.days_overdue} day{plural} - penalty {result.penalty_amount:.2f}"
