"""Output helpers for the lending calculator.

This module provides simple functions to render payment summaries,
amortization schedules and penalty results in a tabular text format using
built-in printing and string formatting. Currency symbols are left to the
caller; amounts are printed with two decimals.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable

from .data_models import PaymentScheduleEntry, PenaltyResult
from .penalty import format_penalty_status


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def summary_to_dict(summary: Dict[str, object]) -> Dict[str, Any]:
    """Convert a summary into JSON-serialisable values."""
    return {key: _plain(value) for key, value in summary.items()}


def entry_to_dict(entry: PaymentScheduleEntry) -> Dict[str, Any]:
    return {
        "number": entry.number,
        "due_date": entry.due_date.isoformat(),
        "principal": float(entry.principal_portion),
        "interest": float(entry.interest_portion),
        "payment": float(entry.total_payment),
        "balance": float(entry.remaining_balance),
    }


def penalty_to_dict(result: PenaltyResult) -> Dict[str, Any]:
    return {
        "is_overdue": result.is_overdue,
        "days_overdue": result.days_overdue,
        "days_after_grace": result.days_after_grace,
        "penalty_amount": float(result.penalty_amount),
        "total_with_penalty": float(result.total_with_penalty),
        "status": result.status,
        "description": format_penalty_status(result),
    }


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {summary['principal']:.2f}")
    print(f"Annual rate        : {summary['annual_rate']}%")
    print(f"Interest method    : {summary['interest_method']}")
    print(f"Installment        : {summary['payment_amount']:.2f}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    print(f"Total amount       : {summary['total_amount']:.2f}")
    print(f"Term               : {summary['term_length']} {summary['term_unit']}")
    if summary.get("first_due_date"):
        print(f"First due date     : {summary['first_due_date'].isoformat()}")
        print(f"End date           : {summary['end_date'].isoformat()}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentScheduleEntry]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "Number",
        "DueDate",
        "Payment",
        "Principal",
        "Interest",
        "Balance",
    ]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.number),
            entry.due_date.isoformat(),
            f"{entry.total_payment:.2f}",
            f"{entry.principal_portion:.2f}",
            f"{entry.interest_portion:.2f}",
            f"{entry.remaining_balance:.2f}",
        ]
        print("\t".join(row))


def print_penalty(result: PenaltyResult) -> None:
    """Print the outcome of a late-penalty calculation."""
    print("Late penalty")
    print("-" * 72)
    print(f"Status             : {format_penalty_status(result)}")
    print(f"Days overdue       : {result.days_overdue}")
    print(f"Days after grace   : {result.days_after_grace}")
    print(f"Penalty            : {result.penalty_amount:.2f}")
    print(f"Total with penalty : {result.total_with_penalty:.2f}")
    print("-" * 72)
