"""Command-line interface for the lending calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can quote the periodic payment of a loan, print or export
its full amortization schedule and compute the late penalty of an overdue
installment. Schedules can be exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from . import config
from .data_models import INTEREST_METHODS, PENALTY_TYPES, TERM_UNITS, LoanTerms, PaymentScheduleEntry, PenaltyRegime
from .engine import calculate_periodic_payment, compute_schedule
from .exceptions import LoanInputError
from .formatter import entry_to_dict, print_penalty, print_schedule, print_summary, summary_to_dict
from .penalty import calculate_late_penalty
from .utils import decimal_from_str, parse_date


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("50000") and shorthand with ``k``/``m`` suffixes
    (e.g., "50k" meaning 50_000). Returns a ``Decimal``.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string (e.g. "24" or "24%")."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        return decimal_from_str(value)
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}")


def parse_due_date(value: Optional[str], name: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def build_terms_from_options(
    principal: str,
    rate: str,
    term: int,
    term_unit: str,
    method: str,
) -> LoanTerms:
    return LoanTerms(
        principal=parse_amount(principal),
        annual_rate=parse_percent(rate),
        term_length=term,
        term_unit=term_unit.lower(),
        interest_method=method.lower(),
    )


def export_to_json(path: Path, schedule: List[PaymentScheduleEntry], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": summary_to_dict(summary),
        "schedule": [entry_to_dict(e) for e in schedule],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PaymentScheduleEntry]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Number",
        "Due_Date",
        "Payment",
        "Principal",
        "Interest",
        "Remaining_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.number,
                    e.due_date.isoformat(),
                    f"{e.total_payment:.2f}",
                    f"{e.principal_portion:.2f}",
                    f"{e.interest_portion:.2f}",
                    f"{e.remaining_balance:.2f}",
                ]
            )


def loan_options(func):
    """Attach the options describing the loan terms to a command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Amount lent (e.g. 5000 or 5k)"),
        click.option("--rate", "-r", "rate", default="0", show_default=True, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=click.IntRange(min=1), help="Number of installments"),
        click.option(
            "--unit",
            "term_unit",
            type=click.Choice(TERM_UNITS),
            default=config.DEFAULT_TERM_UNIT,
            show_default=True,
            help="Length of one period",
        ),
        click.option(
            "--method",
            "method",
            type=click.Choice(INTEREST_METHODS),
            default=config.DEFAULT_INTEREST_METHOD,
            show_default=True,
            help="Interest method",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line calculator for loans, personal debts and late penalties."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
def payment(principal: str, rate: str, term: int, term_unit: str, method: str) -> None:
    """Quote the periodic payment, total interest and total amount."""
    terms = build_terms_from_options(principal, rate, term, term_unit, method)
    try:
        quote = calculate_periodic_payment(terms)
    except LoanInputError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Installment    : {quote.payment_amount:.2f} per {term_unit[:-1]}")
    click.echo(f"Total interest : {quote.total_interest:.2f}")
    click.echo(f"Total amount   : {quote.total_amount:.2f}")


@cli.command()
@loan_options
@click.option("--first-due", "-s", "first_due", required=True, help="First due date (YYYY-MM-DD)")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    term: int,
    term_unit: str,
    method: str,
    first_due: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    terms = build_terms_from_options(principal, rate, term, term_unit, method)
    first_due_date = parse_due_date(first_due, "--first-due")
    try:
        schedule_entries, summary = compute_schedule(terms, first_due_date)
    except LoanInputError as exc:
        raise click.ClickException(str(exc))
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_entries, summary)
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_entries)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_summary(summary)
        # Limit schedule length printed to avoid flooding the terminal
        max_rows = config.MAX_PREVIEW_ROWS
        if len(schedule_entries) > max_rows:
            click.echo(
                f"Schedule has {len(schedule_entries)} rows; showing first {max_rows} rows."
            )
            print_schedule(schedule_entries[:max_rows])
        else:
            print_schedule(schedule_entries)


@cli.command()
@click.option("--due", "due", required=True, help="Installment due date (YYYY-MM-DD)")
@click.option("--amount", "-a", "amount", required=True, help="Installment amount")
@click.option("--grace", "grace", type=click.IntRange(min=0), default=config.DEFAULT_GRACE_PERIOD_DAYS, show_default=True, help="Grace period in days")
@click.option(
    "--type",
    "penalty_type",
    type=click.Choice(PENALTY_TYPES),
    default=config.DEFAULT_PENALTY_TYPE,
    show_default=True,
    help="Penalty regime",
)
@click.option("--rate", "-r", "rate", default="0", show_default=True, help="Penalty rate (percent of the installment)")
@click.option("--today", "today", help="Reference date (YYYY-MM-DD); defaults to the current date")
def penalty(
    due: str,
    amount: str,
    grace: int,
    penalty_type: str,
    rate: str,
    today: Optional[str],
) -> None:
    """Compute the late penalty accrued by one installment."""
    regime = PenaltyRegime(
        grace_period_days=grace,
        penalty_type=penalty_type,
        penalty_rate=parse_percent(rate),
    )
    try:
        result = calculate_late_penalty(
            parse_due_date(due, "--due"),
            parse_amount(amount),
            regime,
            parse_due_date(today, "--today"),
        )
    except LoanInputError as exc:
        raise click.ClickException(str(exc))
    print_penalty(result)


if __name__ == "__main__":
    cli()
