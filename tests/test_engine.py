"""
Tests for the amortization engine
"""

from datetime import date
from decimal import Decimal

import pytest

from lend_calc.data_models import LoanTerms
from lend_calc.engine import (
    calculate_end_date,
    calculate_payment_progress,
    calculate_periodic_payment,
    compute_schedule,
    generate_amortization_schedule,
)
from lend_calc.exceptions import (
    AmountOutOfRangeError,
    InvalidTermError,
    LoanInputError,
    NegativeRateError,
    NonPositivePrincipalError,
    UnsupportedOptionError,
)
from lend_calc.utils import add_months, add_periods, round_money


def _terms(principal="5000", rate="24", term=6, unit="months", method="simple"):
    return LoanTerms(
        principal=Decimal(principal),
        annual_rate=Decimal(rate),
        term_length=term,
        term_unit=unit,
        interest_method=method,
    )


class TestRounding:
    """Test cases for the shared money rounding"""

    def test_half_rounds_away_from_zero(self):
        assert round_money(Decimal("2.005")) == Decimal("2.01")
        assert round_money(Decimal("-2.005")) == Decimal("-2.01")
        assert round_money(Decimal("2.004")) == Decimal("2.00")

    def test_float_input_is_not_truncated(self):
        """2.675 is stored as 2.67499... in binary but must still round up"""
        assert round_money(2.675) == Decimal("2.68")

    def test_add_months_clamps_day(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)

    def test_add_periods_never_rolls_into_next_month(self):
        assert add_periods(date(2025, 1, 31), 1, "months") == date(2025, 2, 28)
        assert add_periods(date(2025, 1, 31), 2, "months") == date(2025, 3, 31)
        assert add_periods(date(2025, 1, 31), 1, "weeks") == date(2025, 2, 7)

    def test_amount_beyond_precision_is_an_input_error(self):
        with pytest.raises(AmountOutOfRangeError) as excinfo:
            round_money(Decimal("1e27"))
        assert isinstance(excinfo.value, LoanInputError)
        assert excinfo.value.message == "Amount is too large"


class TestPeriodicPayment:
    """Test cases for calculate_periodic_payment"""

    def test_simple_interest(self):
        quote = calculate_periodic_payment(_terms())
        assert quote.periodic_rate == Decimal("0.02")
        assert quote.total_interest == Decimal("600.00")
        assert quote.total_amount == Decimal("5600.00")
        assert quote.payment_amount == Decimal("933.33")

    def test_french_annuity(self):
        quote = calculate_periodic_payment(_terms(method="french"))
        assert quote.payment_amount == Decimal("892.63")
        assert quote.total_amount == Decimal("5355.77")
        assert quote.total_interest == Decimal("355.77")

    @pytest.mark.parametrize("method", ["simple", "french"])
    def test_zero_rate(self, method):
        quote = calculate_periodic_payment(_terms("1200", "0", 12, method=method))
        assert quote.payment_amount == Decimal("100.00")
        assert quote.total_interest == Decimal("0")
        assert quote.total_amount == Decimal("1200.00")

    def test_weekly_rate_uses_52_periods(self):
        quote = calculate_periodic_payment(_terms("1000", "52", 10, unit="weeks"))
        assert quote.periodic_rate == Decimal("0.01")
        assert quote.total_interest == Decimal("100.00")
        assert quote.payment_amount == Decimal("110.00")

    def test_french_is_cheaper_than_simple(self):
        simple = calculate_periodic_payment(_terms("20000", "18", 24))
        french = calculate_periodic_payment(_terms("20000", "18", 24, method="french"))
        assert french.total_interest < simple.total_interest

    def test_accepts_plain_numbers(self):
        terms = LoanTerms(principal=5000, annual_rate=24.0, term_length=6)
        assert calculate_periodic_payment(terms).payment_amount == Decimal("933.33")

    def test_invalid_inputs_are_rejected(self):
        with pytest.raises(InvalidTermError):
            calculate_periodic_payment(_terms(term=0))
        with pytest.raises(NonPositivePrincipalError):
            calculate_periodic_payment(_terms(principal="0"))
        with pytest.raises(NegativeRateError):
            calculate_periodic_payment(_terms(rate="-1"))
        with pytest.raises(UnsupportedOptionError):
            calculate_periodic_payment(_terms(unit="days"))
        with pytest.raises(UnsupportedOptionError):
            calculate_periodic_payment(_terms(method="german"))

    def test_input_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            calculate_periodic_payment(_terms(term=-3))
        assert issubclass(LoanInputError, ValueError)

    def test_huge_principal_is_rejected(self):
        with pytest.raises(AmountOutOfRangeError):
            calculate_periodic_payment(_terms(principal="1e27"))

    def test_huge_rate_overflowing_cents_is_rejected(self):
        with pytest.raises(AmountOutOfRangeError):
            calculate_periodic_payment(_terms(principal="1000", rate="1e30"))


class TestAmortizationSchedule:
    """Test cases for generate_amortization_schedule"""

    def test_french_schedule_closes_at_zero(self):
        quote = calculate_periodic_payment(_terms(method="french"))
        schedule = generate_amortization_schedule(
            Decimal("5000"), quote.periodic_rate, quote.payment_amount, 6, "months", date(2025, 1, 15)
        )
        assert len(schedule) == 6
        assert schedule[0].interest_portion == Decimal("100.00")
        assert schedule[0].principal_portion == Decimal("792.63")
        assert schedule[-1].remaining_balance == Decimal("0")
        assert sum(e.principal_portion for e in schedule) == Decimal("5000.00")
        assert all(e.total_payment == Decimal("892.63") for e in schedule)

    def test_balance_is_non_increasing(self):
        quote = calculate_periodic_payment(_terms("100000", "7.5", 360, method="french"))
        schedule = generate_amortization_schedule(
            Decimal("100000"), quote.periodic_rate, quote.payment_amount, 360, "months", date(2025, 1, 1)
        )
        balances = [e.remaining_balance for e in schedule]
        assert balances == sorted(balances, reverse=True)
        assert balances[-1] == Decimal("0")
        assert sum(e.principal_portion for e in schedule) == Decimal("100000.00")

    def test_total_payments_within_a_cent_per_entry(self):
        quote = calculate_periodic_payment(_terms("15000", "30", 18, method="french"))
        schedule = generate_amortization_schedule(
            Decimal("15000"), quote.periodic_rate, quote.payment_amount, 18, "months", date(2025, 1, 1)
        )
        paid = sum(e.principal_portion + e.interest_portion for e in schedule)
        assert abs(paid - quote.payment_amount * 18) <= Decimal("0.01") * 18

    def test_last_entry_absorbs_the_difference(self):
        """Declining-balance interest with the simple installment"""
        schedule = generate_amortization_schedule(
            Decimal("5000"), Decimal("0.02"), Decimal("933.33"), 6, "months", date(2025, 1, 1)
        )
        assert [e.interest_portion for e in schedule[:5]] == [
            Decimal("100.00"),
            Decimal("83.33"),
            Decimal("66.33"),
            Decimal("48.99"),
            Decimal("31.31"),
        ]
        assert schedule[-1].principal_portion == Decimal("663.31")
        assert schedule[-1].interest_portion == Decimal("270.02")
        assert schedule[-1].remaining_balance == Decimal("0")

    def test_simple_method_has_flat_composition(self):
        schedule = generate_amortization_schedule(
            Decimal("5000"),
            Decimal("0.02"),
            Decimal("933.33"),
            6,
            "months",
            date(2025, 1, 1),
            interest_method="simple",
        )
        assert all(e.interest_portion == Decimal("100.00") for e in schedule[:5])
        assert all(e.principal_portion == Decimal("833.33") for e in schedule[:5])
        assert schedule[-1].principal_portion == Decimal("833.35")
        assert schedule[-1].interest_portion == Decimal("99.98")
        assert schedule[-1].remaining_balance == Decimal("0")

    def test_simple_method_keeps_principal_sum_on_long_terms(self):
        terms = _terms("1000", "520", 24, unit="weeks")
        schedule, summary = compute_schedule(terms, date(2025, 1, 1))
        assert summary["payment_amount"] == Decimal("141.67")
        assert sum(e.principal_portion for e in schedule) == Decimal("1000.00")
        assert schedule[-1].principal_portion == Decimal("41.59")
        assert schedule[-1].remaining_balance == Decimal("0")

    def test_zero_rate_uneven_split(self):
        schedule = generate_amortization_schedule(
            Decimal("1000"), Decimal("0"), Decimal("333.33"), 3, "months", date(2025, 1, 1)
        )
        assert [e.principal_portion for e in schedule] == [
            Decimal("333.33"),
            Decimal("333.33"),
            Decimal("333.34"),
        ]
        assert schedule[-1].remaining_balance == Decimal("0")

    def test_monthly_due_dates_keep_anchor_day(self):
        schedule = generate_amortization_schedule(
            Decimal("400"), Decimal("0"), Decimal("100"), 4, "months", date(2025, 1, 31)
        )
        assert [e.due_date for e in schedule] == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
        ]
        assert [e.number for e in schedule] == [1, 2, 3, 4]

    def test_weekly_due_dates(self):
        schedule = generate_amortization_schedule(
            Decimal("300"), Decimal("0"), Decimal("100"), 3, "weeks", date(2025, 1, 1)
        )
        assert [e.due_date for e in schedule] == [
            date(2025, 1, 1),
            date(2025, 1, 8),
            date(2025, 1, 15),
        ]

    def test_rejects_zero_term(self):
        with pytest.raises(InvalidTermError):
            generate_amortization_schedule(
                Decimal("300"), Decimal("0"), Decimal("100"), 0, "weeks", date(2025, 1, 1)
            )


class TestEndDateAndSummary:
    """Test cases for calculate_end_date, compute_schedule and progress"""

    def test_single_period_ends_on_first_due_date(self):
        assert calculate_end_date(date(2025, 1, 15), 1, "months") == date(2025, 1, 15)

    def test_end_dates(self):
        assert calculate_end_date(date(2025, 1, 15), 12, "months") == date(2025, 12, 15)
        assert calculate_end_date(date(2025, 1, 1), 4, "weeks") == date(2025, 1, 22)

    def test_end_date_matches_last_entry(self):
        schedule, summary = compute_schedule(_terms(method="french"), date(2025, 3, 31))
        assert summary["end_date"] == schedule[-1].due_date == date(2025, 8, 31)
        assert summary["payments"] == 6
        assert summary["total_interest"] == Decimal("355.77")

    def test_payment_progress(self):
        assert calculate_payment_progress(250, 1000) == Decimal("25.00")
        assert calculate_payment_progress(1, 3) == Decimal("33.33")
        assert calculate_payment_progress(100, 0) == Decimal("0.00")
