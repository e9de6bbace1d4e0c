"""Custom exceptions for the lending calculator."""

from typing import Optional


class LendCalcError(Exception):
    """Base exception for all lending calculator errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class LoanInputError(LendCalcError, ValueError):
    """Raised when the inputs of a calculation are not usable."""


class NonPositivePrincipalError(LoanInputError):
    def __init__(self, principal):
        super().__init__("Principal must be positive", {"principal": str(principal)})


class InvalidTermError(LoanInputError):
    def __init__(self, term_length):
        super().__init__("Term length must be a positive integer", {"term_length": term_length})


class NegativeRateError(LoanInputError):
    def __init__(self, annual_rate):
        super().__init__("Interest rate cannot be negative", {"annual_rate": str(annual_rate)})


class UnsupportedOptionError(LoanInputError):
    """Raised for an unknown term unit, interest method or penalty type."""

    def __init__(self, name: str, value, allowed):
        super().__init__(
            f"Unsupported {name}: {value!r}",
            {"allowed": ", ".join(allowed)},
        )


class InvalidPenaltyError(LoanInputError):
    """Raised when a penalty regime or installment amount is out of range."""


class AmountOutOfRangeError(LoanInputError):
    """Raised when an amount is too large to be computed to the cent."""

    def __init__(self, value):
        super().__init__("Amount is too large", {"amount": str(value)})
