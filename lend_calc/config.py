"""Centralized configuration for the lending calculator.

Business constants and default values live here so that the engine, the
command-line interface and the web API agree on them.
"""

import os
from decimal import Decimal

from .data_models import METHOD_SIMPLE, PENALTY_NONE, TERM_UNIT_MONTHS, TERM_UNIT_WEEKS

# Number of periods in a year for each term unit
PERIODS_PER_YEAR = {
    TERM_UNIT_WEEKS: 52,
    TERM_UNIT_MONTHS: 12,
}

# Days in one weekly period
DAYS_PER_WEEK = 7

# Money is rounded to cents
MONEY_QUANTUM = Decimal("0.01")

# Working precision for Decimal arithmetic
DECIMAL_PRECISION = 28

DEFAULT_TERM_UNIT = TERM_UNIT_MONTHS
DEFAULT_INTEREST_METHOD = METHOD_SIMPLE
DEFAULT_PENALTY_TYPE = PENALTY_NONE
DEFAULT_GRACE_PERIOD_DAYS = 0

# Rows printed by the CLI before the schedule is truncated
MAX_PREVIEW_ROWS = 120

# Upper bound on the number of installments the web API will generate
MAX_TERM_LENGTH = int(os.environ.get("LEND_CALC_MAX_TERM", "1200"))

# ISO 8601 dates for input and export
DATE_FORMAT = "%Y-%m-%d"

LOG_LEVEL = os.environ.get("LEND_CALC_LOG_LEVEL", "WARNING").upper()

# Largest principal or installment accepted
MAX_AMOUNT = Decimal("1000000000000")


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean switch such as ``LEND_CALC_DEBUG=1`` from the environment."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DEBUG = env_flag("LEND_CALC_DEBUG")
