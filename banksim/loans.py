"""
Loan Module

Annuity loans: fixed monthly payment computed at origination, payment
counting, and remaining balance as the present value of the payments still
due at the loan's current interest rate.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Optional

from .currency import ZERO, monthly_rate, require_non_negative, require_positive, to_decimal
from .errors import InvalidAmountError


ONE = Decimal('1')
MAX_TERM_MONTHS = 1200  # 100 years


def require_term(term_months) -> int:
    """
    Validate a loan term in months

    Raises:
        InvalidAmountError: If the term is not an int in 1..MAX_TERM_MONTHS
    """
    if not isinstance(term_months, int) or isinstance(term_months, bool):
        raise InvalidAmountError(f"Term must be a whole number of months, got {term_months!r}")
    if term_months <= 0 or term_months > MAX_TERM_MONTHS:
        raise InvalidAmountError(
            f"Term must be between 1 and {MAX_TERM_MONTHS} months, got {term_months}"
        )
    return term_months


def calculate_annuity_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """
    Fixed monthly payment that amortizes principal over term_months

    Standard loan payment formula: P * [r(1+r)^n] / [(1+r)^n - 1]
    Where P = principal, r = monthly interest rate, n = number of payments.
    A zero rate degenerates to straight division.

    Raises:
        InvalidAmountError: If the term is out of range or the rate is too
            large for the payment to be represented
    """
    require_term(term_months)

    rate = monthly_rate(annual_rate)
    if rate == ZERO:
        # No interest - simple division
        return principal / Decimal(term_months)

    try:
        factor = (ONE + rate) ** term_months
        return principal * (rate * factor) / (factor - ONE)
    except ArithmeticError as e:
        raise InvalidAmountError(
            f"Cannot compute payment at {annual_rate}% over {term_months} months"
        ) from e


def present_value(payment: Decimal, annual_rate: Decimal, months: int) -> Decimal:
    """
    Present value of `months` equal payments (inverse annuity formula)

    payment * [(1+r)^m - 1] / [r(1+r)^m]; a zero rate is payment * m.

    Raises:
        InvalidAmountError: If the rate and horizon overflow the decimal context
    """
    if months <= 0:
        return ZERO

    rate = monthly_rate(annual_rate)
    if rate == ZERO:
        return payment * Decimal(months)

    try:
        factor = (ONE + rate) ** months
        return payment * (factor - ONE) / (rate * factor)
    except ArithmeticError as e:
        raise InvalidAmountError(
            f"Cannot discount {months} payments at {annual_rate}%"
        ) from e


@dataclass
class Loan:
    """Single annuity loan and its payment state"""
    id: int
    principal: Decimal
    interest_rate: Decimal              # Annual rate in percent, raised by penalties
    term_months: int
    monthly_payment: Optional[Decimal] = None     # Fixed at origination
    months_paid: int = 0
    start_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    original_interest_rate: Optional[Decimal] = None
    missed_payments: int = 0

    def __post_init__(self):
        self.principal = require_positive(self.principal, "Loan amount")
        self.interest_rate = require_non_negative(self.interest_rate, "Interest rate")
        self.term_months = require_term(self.term_months)

        if self.original_interest_rate is None:
            self.original_interest_rate = self.interest_rate

        if self.monthly_payment is None:
            self.monthly_payment = calculate_annuity_payment(
                self.principal, self.interest_rate, self.term_months
            )
        else:
            self.monthly_payment = to_decimal(self.monthly_payment)

    @property
    def months_remaining(self) -> int:
        return max(self.term_months - self.months_paid, 0)

    @property
    def is_paid_off(self) -> bool:
        """Check if every scheduled payment has been made"""
        return self.months_paid >= self.term_months

    @property
    def straight_line_principal(self) -> Decimal:
        """Principal share of one payment if principal were repaid evenly"""
        return self.principal / Decimal(self.term_months)

    def make_payment(self) -> bool:
        """
        Record one scheduled payment

        Returns:
            True if recorded, False if the loan is already fully paid (no change)
        """
        if self.months_paid < self.term_months:
            self.months_paid += 1
            return True
        return False

    def remaining_balance(self) -> Decimal:
        """
        Outstanding balance at the current interest rate

        A penalty raises interest_rate without touching monthly_payment, so
        the value reported here moves with the rate even between payments.
        """
        if self.months_paid >= self.term_months:
            return ZERO
        return present_value(self.monthly_payment, self.interest_rate, self.months_remaining)

    def apply_penalty(self, rate_increase: Decimal, reprice: bool = False) -> Decimal:
        """
        Raise the interest rate after a missed payment

        Args:
            rate_increase: Percentage points added to the annual rate
            reprice: Also recompute monthly_payment so the remaining balance
                at the old rate amortizes over the remaining months at the new
                rate. Off by default: the payment stays fixed.

        Returns:
            The new annual interest rate
        """
        rate_increase = to_decimal(rate_increase)
        reprice = reprice and self.months_remaining > 0
        if reprice:
            # Balance at the old rate, before the increase
            outstanding = self.remaining_balance()

        self.interest_rate += rate_increase
        self.missed_payments += 1

        if reprice:
            self.monthly_payment = calculate_annuity_payment(
                outstanding, self.interest_rate, self.months_remaining
            )
        return self.interest_rate
