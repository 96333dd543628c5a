"""
Pydantic schemas for API requests and responses
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..currency import round_money
from ..events import EventPayload
from ..reporting import AccountView, BankSummary, ClientDetail, LoanView


def money(value: Decimal) -> str:
    return str(round_money(value))


# Client schemas
class CreateClientRequest(BaseModel):
    name: str = Field(..., min_length=1)


class OpenAccountRequest(BaseModel):
    initial_deposit: Decimal = Field(Decimal('0'), description="Initial deposit, decimal")
    account_type: str = Field("checking", description="Account type (checking, savings, deposit)")


class AccountAmountRequest(BaseModel):
    amount: Decimal


class GrantLoanRequest(BaseModel):
    amount: Decimal
    interest_rate: Decimal = Field(..., description="Annual rate in percent, e.g. 12")
    term_months: int = Field(..., description="Term in months, 1 to 1200")


class TransferRequest(BaseModel):
    from_client_id: int
    to_client_id: int
    amount: Decimal


class ProcessMonthRequest(BaseModel):
    months: int = Field(1, ge=1, le=600)


# Response schemas
class AccountModel(BaseModel):
    account_number: str
    account_type: str
    interest_rate: str
    balance: str
    open_date: str

    @classmethod
    def from_view(cls, view: AccountView) -> 'AccountModel':
        return cls(
            account_number=view.account_number,
            account_type=view.account_type,
            interest_rate=str(view.interest_rate),
            balance=money(view.balance),
            open_date=view.open_date.isoformat()
        )


class LoanModel(BaseModel):
    loan_id: int
    principal: str
    interest_rate: str
    term_months: int
    months_paid: int
    monthly_payment: str
    remaining_balance: str
    missed_payments: int

    @classmethod
    def from_view(cls, view: LoanView) -> 'LoanModel':
        return cls(
            loan_id=view.loan_id,
            principal=money(view.principal),
            interest_rate=str(view.interest_rate),
            term_months=view.term_months,
            months_paid=view.months_paid,
            monthly_payment=money(view.monthly_payment),
            remaining_balance=money(view.remaining_balance),
            missed_payments=view.missed_payments
        )


class ClientModel(BaseModel):
    client_id: int
    name: str
    balance: str
    accounts: List[AccountModel]
    loans: List[LoanModel]

    @classmethod
    def from_detail(cls, detail: ClientDetail) -> 'ClientModel':
        return cls(
            client_id=detail.client_id,
            name=detail.name,
            balance=money(detail.balance),
            accounts=[AccountModel.from_view(a) for a in detail.accounts],
            loans=[LoanModel.from_view(l) for l in detail.loans]
        )


class BankStatusModel(BaseModel):
    name: str
    month: int
    capital: str
    reserve_fund: str
    client_count: int
    total_deposits: str
    total_loans: str

    @classmethod
    def from_summary(cls, summary: BankSummary) -> 'BankStatusModel':
        return cls(
            name=summary.name,
            month=summary.month,
            capital=money(summary.capital),
            reserve_fund=money(summary.reserve_fund),
            client_count=summary.client_count,
            total_deposits=money(summary.total_deposits),
            total_loans=money(summary.total_loans)
        )


class EventModel(BaseModel):
    event_type: str
    entity_type: str
    entity_id: str
    month: int
    data: Dict[str, Any]

    @classmethod
    def from_event(cls, event: EventPayload) -> 'EventModel':
        return cls(
            event_type=event.event_type.value,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            month=event.month,
            data=event.data
        )


class ProcessMonthResponse(BaseModel):
    month: int
    events: List[EventModel]
    status: Optional[BankStatusModel] = None
