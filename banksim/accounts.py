"""
Account Module

Bank accounts held by clients. Each account type carries a fixed annual
interest rate which is credited monthly as simple rate / 12.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Union
from enum import Enum

from .currency import ZERO, monthly_rate, require_non_negative, require_positive, to_decimal


class AccountType(Enum):
    """Account products with their annual interest rate in percent"""
    CHECKING = ("checking", Decimal('0.5'))   # Current account
    SAVINGS = ("savings", Decimal('3.5'))     # Savings account
    DEPOSIT = ("deposit", Decimal('5.0'))     # Term deposit

    def __init__(self, label: str, default_rate: Decimal):
        self.label = label
        self.default_rate = default_rate

    @classmethod
    def parse(cls, value: Union['AccountType', str, None]) -> 'AccountType':
        """
        Resolve an account type from an enum member or a name

        Unknown or missing names fall back to CHECKING.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.label == key:
                    return member
        return cls.CHECKING


@dataclass
class BankAccount:
    """Single account balance with interest behaviour"""
    account_number: str
    account_type: AccountType
    interest_rate: Decimal              # Annual rate in percent, e.g. 3.5
    balance: Decimal = ZERO
    open_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.balance = require_non_negative(self.balance, "Opening balance")
        self.interest_rate = to_decimal(self.interest_rate)

    def deposit(self, amount: Decimal) -> None:
        """Credit the account"""
        amount = require_positive(amount)
        self.balance += amount

    def withdraw(self, amount: Decimal) -> bool:
        """
        Debit the account if the balance covers the amount

        Returns:
            True if withdrawn, False if the balance is too low (no change)
        """
        amount = require_positive(amount)
        if self.balance < amount:
            return False
        self.balance -= amount
        return True

    def monthly_interest(self) -> Decimal:
        """Interest that the next accrual would credit"""
        return self.balance * monthly_rate(self.interest_rate)

    def apply_interest(self) -> Decimal:
        """Credit one month of interest and return the amount credited"""
        interest = self.monthly_interest()
        self.balance += interest
        return interest
