"""
Client Module

A client owns accounts and loans and holds free cash (balance) that is
separate from the money sitting in its accounts. Loan disbursements and
incoming transfers land in the free balance; loan payments and outgoing
transfers leave from it.
"""

from decimal import Decimal
from dataclasses import dataclass, field
from typing import List, Optional

from .currency import ZERO
from .accounts import BankAccount
from .loans import Loan


@dataclass
class Client:
    """Person or company banking with the simulator"""
    id: int
    name: str
    balance: Decimal = ZERO
    accounts: List[BankAccount] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)

    @property
    def total_account_balance(self) -> Decimal:
        return sum((account.balance for account in self.accounts), ZERO)

    @property
    def total_loan_principal(self) -> Decimal:
        return sum((loan.principal for loan in self.loans), ZERO)

    def find_account(self, account_number: str) -> Optional[BankAccount]:
        for account in self.accounts:
            if account.account_number == account_number:
                return account
        return None

    def find_loan(self, loan_id: int) -> Optional[Loan]:
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        return None

    def can_afford(self, amount: Decimal) -> bool:
        """Check whether free balance covers amount"""
        return self.balance >= amount
