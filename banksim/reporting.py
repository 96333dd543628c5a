"""
Reporting Module

Read-side views of the bank: the status summary and per-client detail
with computed loan balances. Views are plain snapshots taken under the
bank lock; mutating them does not affect the bank.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, TYPE_CHECKING

from .currency import round_money

if TYPE_CHECKING:
    from .bank import Bank
    from .clients import Client


@dataclass
class AccountView:
    account_number: str
    account_type: str
    interest_rate: Decimal
    balance: Decimal
    open_date: datetime


@dataclass
class LoanView:
    loan_id: int
    principal: Decimal
    interest_rate: Decimal
    original_interest_rate: Decimal
    term_months: int
    months_paid: int
    monthly_payment: Decimal
    remaining_balance: Decimal
    missed_payments: int
    start_date: datetime


@dataclass
class ClientDetail:
    client_id: int
    name: str
    balance: Decimal
    accounts: List[AccountView]
    loans: List[LoanView]

    @property
    def total_account_balance(self) -> Decimal:
        return sum((a.balance for a in self.accounts), Decimal('0'))


@dataclass
class BankSummary:
    name: str
    month: int
    capital: Decimal
    reserve_fund: Decimal
    client_count: int
    total_deposits: Decimal
    total_loans: Decimal

    def to_dict(self, rounded: bool = True) -> Dict[str, Any]:
        """Convert to dictionary, rounding money to cents unless told otherwise"""
        data = asdict(self)
        if rounded:
            for key in ("capital", "reserve_fund", "total_deposits", "total_loans"):
                data[key] = round_money(data[key])
        return data


def bank_summary(bank: "Bank") -> BankSummary:
    """Capital, reserve, client count and deposit/loan totals"""
    with bank.lock:
        return BankSummary(
            name=bank.name,
            month=bank.current_month,
            capital=bank.capital,
            reserve_fund=bank.reserve_fund,
            client_count=len(bank.clients),
            total_deposits=bank.total_deposits,
            total_loans=bank.total_loans
        )


def client_detail(bank: "Bank", client_id: int) -> ClientDetail:
    """
    Snapshot of one client's balance, accounts and outstanding loans

    Raises:
        UnknownEntityError: If the client does not exist
    """
    with bank.lock:
        return _detail(bank.get_client(client_id))


def all_client_details(bank: "Bank") -> List[ClientDetail]:
    """Snapshots for every client in registration order"""
    with bank.lock:
        return [_detail(client) for client in bank.clients]


def _detail(client: "Client") -> ClientDetail:
    return ClientDetail(
        client_id=client.id,
        name=client.name,
        balance=client.balance,
        accounts=[
            AccountView(
                account_number=a.account_number,
                account_type=a.account_type.label,
                interest_rate=a.interest_rate,
                balance=a.balance,
                open_date=a.open_date
            )
            for a in client.accounts
        ],
        loans=[
            LoanView(
                loan_id=l.id,
                principal=l.principal,
                interest_rate=l.interest_rate,
                original_interest_rate=l.original_interest_rate,
                term_months=l.term_months,
                months_paid=l.months_paid,
                monthly_payment=l.monthly_payment,
                remaining_balance=l.remaining_balance(),
                missed_payments=l.missed_payments,
                start_date=l.start_date
            )
            for l in client.loans
        ]
    )
