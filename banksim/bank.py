"""
Bank Module

The Bank aggregate owns every client, the capital and reserve fund, and the
identifier counters. It enforces lending policy and runs the monthly cycle:
interest accrual on accounts, loan collection, delinquency penalties and
reserve bookkeeping.
"""

from decimal import Decimal
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from threading import RLock

from .currency import ZERO, require_non_negative, require_positive, to_decimal
from .errors import BankingError, InvalidAmountError, RejectionReason, UnknownEntityError, error_for
from .accounts import AccountType, BankAccount
from .loans import Loan, require_term
from .clients import Client
from .events import (
    DomainEvent, EventDispatcher, EventPayload,
    create_account_event, create_client_event, create_loan_event
)
from .logging_config import get_logger, log_action


logger = get_logger(__name__)

ClientRef = Union[Client, int]


AccountRates = Tuple[Tuple[AccountType, Decimal], ...]


def _freeze_rates(rates: Union[Dict[AccountType, Decimal], AccountRates]) -> AccountRates:
    rates = dict(rates)
    return tuple((account_type, rates[account_type]) for account_type in AccountType if account_type in rates)


def _default_account_rates() -> AccountRates:
    return tuple((account_type, account_type.default_rate) for account_type in AccountType)


@dataclass(frozen=True)
class BankPolicy:
    """
    Lending, reserve and product rules applied by a Bank

    account_rates may be given as a dict; it is stored as an ordered tuple of
    (AccountType, rate) pairs so policies stay hashable.
    """
    reserve_seed_ratio: Decimal = Decimal('0.10')
    exposure_limit_ratio: Decimal = Decimal('0.10')
    own_funds_ratio: Decimal = Decimal('0.20')
    reserve_profit_share: Decimal = Decimal('0.20')
    reserve_yield_rate: Decimal = Decimal('0.01')
    delinquency_penalty_rate: Decimal = Decimal('5')
    reprice_on_delinquency: bool = False
    account_rates: AccountRates = field(default_factory=_default_account_rates)

    def __post_init__(self):
        object.__setattr__(self, "account_rates", _freeze_rates(self.account_rates))

    @classmethod
    def from_config(cls, cfg) -> 'BankPolicy':
        """Build a policy from BankSimConfig"""
        return cls(
            reserve_seed_ratio=cfg.reserve_seed_ratio,
            exposure_limit_ratio=cfg.exposure_limit_ratio,
            own_funds_ratio=cfg.own_funds_ratio,
            reserve_profit_share=cfg.reserve_profit_share,
            reserve_yield_rate=cfg.reserve_yield_rate,
            delinquency_penalty_rate=cfg.delinquency_penalty_rate,
            reprice_on_delinquency=cfg.reprice_on_delinquency,
            account_rates={
                AccountType.CHECKING: cfg.checking_rate,
                AccountType.SAVINGS: cfg.savings_rate,
                AccountType.DEPOSIT: cfg.deposit_rate,
            }
        )

    def rate_for(self, account_type: AccountType) -> Decimal:
        rates = dict(self.account_rates)
        return rates.get(account_type, rates[AccountType.CHECKING])


@dataclass
class LoanDecision:
    """Outcome of a loan application"""
    loan: Optional[Loan] = None
    reason: Optional[RejectionReason] = None

    @property
    def approved(self) -> bool:
        return self.loan is not None

    def raise_if_rejected(self) -> Loan:
        """Return the loan or raise the exception matching the rejection"""
        if self.reason is not None:
            raise error_for(self.reason)
        return self.loan


@dataclass
class TransferResult:
    """Outcome of a client-to-client transfer"""
    success: bool
    amount: Decimal
    reason: Optional[RejectionReason] = None

    def raise_if_rejected(self) -> None:
        if self.reason is not None:
            raise error_for(self.reason)


class Bank:
    """
    Simulated retail bank

    All mutating operations and monthly processing run under a single
    re-entrant lock so no caller can observe a half-applied operation.
    """

    def __init__(
        self,
        name: str,
        initial_capital: Decimal,
        policy: Optional[BankPolicy] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        first_client_id: int = 1,
        first_loan_id: int = 1,
        first_account_number: int = 1000001,
        account_number_prefix: str = "ACC"
    ):
        self.name = name
        self.policy = policy or BankPolicy()
        self.capital = require_non_negative(initial_capital, "Initial capital")
        self.reserve_fund = self.capital * self.policy.reserve_seed_ratio
        self.clients: List[Client] = []
        self.current_month = 0
        self.event_dispatcher = event_dispatcher or EventDispatcher()
        self.lock = RLock()

        self._next_client_id = first_client_id
        self._next_loan_id = first_loan_id
        self._next_account_number = first_account_number
        self._account_number_prefix = account_number_prefix

    @classmethod
    def from_config(cls, cfg=None, event_dispatcher: Optional[EventDispatcher] = None) -> 'Bank':
        """Create a bank using BankSimConfig values"""
        if cfg is None:
            from .config import get_config
            cfg = get_config()
        return cls(
            name=cfg.bank_name,
            initial_capital=cfg.initial_capital,
            policy=BankPolicy.from_config(cfg),
            event_dispatcher=event_dispatcher,
            first_client_id=cfg.first_client_id,
            first_loan_id=cfg.first_loan_id,
            first_account_number=cfg.first_account_number,
            account_number_prefix=cfg.account_number_prefix
        )

    # ------------------------------------------------------------------
    # Lookups

    def get_client(self, client: ClientRef) -> Client:
        """
        Resolve a client by id or instance

        Raises:
            UnknownEntityError: If the client is not held by this bank
        """
        with self.lock:
            if isinstance(client, Client):
                if any(c is client for c in self.clients):
                    return client
                raise UnknownEntityError("client", client.id)

            for candidate in self.clients:
                if candidate.id == client:
                    return candidate
            raise UnknownEntityError("client", client)

    def find_account(self, account_number: str) -> Tuple[Client, BankAccount]:
        """Locate an account and its owner by account number"""
        with self.lock:
            for client in self.clients:
                account = client.find_account(account_number)
                if account:
                    return client, account
            raise UnknownEntityError("account", account_number)

    def find_loan(self, loan_id: int) -> Tuple[Client, Loan]:
        """Locate an outstanding loan and its borrower"""
        with self.lock:
            for client in self.clients:
                loan = client.find_loan(loan_id)
                if loan:
                    return client, loan
            raise UnknownEntityError("loan", loan_id)

    # ------------------------------------------------------------------
    # Constructive operations

    def add_client(self, name: str) -> Client:
        """Register a new client with zero balance"""
        with self.lock:
            client = Client(id=self._next_client_id, name=name)
            self._next_client_id += 1
            self.clients.append(client)

            log_action(logger, "info", f"Client {client.id} added",
                       action="add_client", resource=f"client:{client.id}", month=self.current_month)
            self._publish([create_client_event(DomainEvent.CLIENT_ADDED, client, self.current_month)])
            return client

    def open_account(
        self,
        client: ClientRef,
        initial_deposit: Decimal,
        account_type: Union[AccountType, str, None] = AccountType.CHECKING
    ) -> BankAccount:
        """
        Open an account for a client

        The initial deposit is credited to the new account and also raises the
        client's free balance and the bank's capital.

        Raises:
            InvalidAmountError: If initial_deposit is negative
            UnknownEntityError: If the client does not belong to this bank
        """
        initial_deposit = require_non_negative(initial_deposit, "Initial deposit")
        account_type = AccountType.parse(account_type)

        with self.lock:
            owner = self.get_client(client)
            account = BankAccount(
                account_number=f"{self._account_number_prefix}{self._next_account_number}",
                account_type=account_type,
                interest_rate=self.policy.rate_for(account_type),
                balance=initial_deposit
            )
            self._next_account_number += 1

            owner.accounts.append(account)
            owner.balance += initial_deposit
            self.capital += initial_deposit

            log_action(logger, "info", f"Account {account.account_number} opened for client {owner.id}",
                       action="open_account", resource=f"account:{account.account_number}",
                       month=self.current_month,
                       extra={"account_type": account_type.label, "initial_deposit": str(initial_deposit)})
            self._publish([create_account_event(DomainEvent.ACCOUNT_OPENED, account, owner, self.current_month)])
            return account

    def deposit_to_account(self, account_number: str, amount: Decimal) -> BankAccount:
        """Credit an existing account"""
        with self.lock:
            owner, account = self.find_account(account_number)
            account.deposit(amount)
            self._publish([create_account_event(
                DomainEvent.ACCOUNT_DEPOSIT, account, owner, self.current_month, amount=to_decimal(amount)
            )])
            return account

    def withdraw_from_account(self, account_number: str, amount: Decimal) -> bool:
        """
        Debit an existing account

        Returns:
            True if withdrawn, False if the account balance is too low
        """
        with self.lock:
            owner, account = self.find_account(account_number)
            if not account.withdraw(amount):
                log_action(logger, "warning", f"Withdrawal from {account_number} refused: insufficient funds",
                           action="withdraw", resource=f"account:{account_number}", month=self.current_month)
                return False
            self._publish([create_account_event(
                DomainEvent.ACCOUNT_WITHDRAWAL, account, owner, self.current_month, amount=to_decimal(amount)
            )])
            return True

    def grant_loan(
        self,
        client: ClientRef,
        amount: Decimal,
        interest_rate: Decimal,
        term_months: int
    ) -> LoanDecision:
        """
        Apply for a loan

        Checks, in order: the amount may not exceed the exposure limit share
        of current capital, and the client's free balance must cover the
        own-funds share of the amount. A rejected application changes nothing.

        Raises:
            InvalidAmountError: If amount, rate or term is out of range
            UnknownEntityError: If the client does not belong to this bank
        """
        amount = require_positive(amount, "Loan amount")
        interest_rate = require_non_negative(interest_rate, "Interest rate")
        term_months = require_term(term_months)

        with self.lock:
            borrower = self.get_client(client)

            reason = None
            if amount > self.capital * self.policy.exposure_limit_ratio:
                reason = RejectionReason.EXCEEDS_EXPOSURE_LIMIT
            elif borrower.balance < amount * self.policy.own_funds_ratio:
                reason = RejectionReason.INSUFFICIENT_OWN_FUNDS

            if reason is not None:
                log_action(logger, "warning", f"Loan application from client {borrower.id} rejected: {reason.message}",
                           action="grant_loan", resource=f"client:{borrower.id}", month=self.current_month,
                           extra={"amount": str(amount), "reason": reason.value})
                self._publish([create_client_event(
                    DomainEvent.LOAN_REJECTED, borrower, self.current_month,
                    amount=amount, reason=reason.value
                )])
                return LoanDecision(reason=reason)

            loan = Loan(
                id=self._next_loan_id,
                principal=amount,
                interest_rate=interest_rate,
                term_months=term_months
            )
            self._next_loan_id += 1

            borrower.loans.append(loan)
            borrower.balance += amount
            self.capital -= amount

            log_action(logger, "info", f"Loan {loan.id} granted to client {borrower.id}",
                       action="grant_loan", resource=f"loan:{loan.id}", month=self.current_month,
                       extra={"amount": str(amount), "monthly_payment": str(loan.monthly_payment)})
            self._publish([create_loan_event(DomainEvent.LOAN_GRANTED, loan, borrower, self.current_month)])
            return LoanDecision(loan=loan)

    def transfer(self, sender: ClientRef, receiver: ClientRef, amount: Decimal) -> TransferResult:
        """
        Move free balance from one client to another

        Raises:
            InvalidAmountError: If amount is not positive
            BankingError: If sender and receiver are the same client
            UnknownEntityError: If either client does not belong to this bank
        """
        amount = require_positive(amount, "Transfer amount")

        with self.lock:
            source = self.get_client(sender)
            target = self.get_client(receiver)
            if source is target:
                raise BankingError("Cannot transfer to the same client")

            if not source.can_afford(amount):
                log_action(logger, "warning", f"Transfer from client {source.id} to {target.id} refused: insufficient funds",
                           action="transfer", resource=f"client:{source.id}", month=self.current_month,
                           extra={"amount": str(amount)})
                self._publish([create_client_event(
                    DomainEvent.TRANSFER_FAILED, source, self.current_month,
                    to_client_id=target.id, amount=amount,
                    reason=RejectionReason.INSUFFICIENT_FUNDS.value
                )])
                return TransferResult(success=False, amount=amount, reason=RejectionReason.INSUFFICIENT_FUNDS)

            source.balance -= amount
            target.balance += amount

            log_action(logger, "info", f"Transferred {amount} from client {source.id} to {target.id}",
                       action="transfer", resource=f"client:{source.id}", month=self.current_month)
            self._publish([create_client_event(
                DomainEvent.TRANSFER_COMPLETED, source, self.current_month,
                to_client_id=target.id, amount=amount
            )])
            return TransferResult(success=True, amount=amount)

    # ------------------------------------------------------------------
    # Monthly cycle

    def process_month(self) -> List[EventPayload]:
        """
        Advance the simulation by one month

        1. Credit interest on every account.
        2. Collect each loan payment the borrower can afford; a shortfall is a
           delinquency and raises the loan rate by the penalty.
        3. Credit the reserve fund's investment yield to capital.

        Returns:
            Delinquency and paid-off notices, in processing order
        """
        with self.lock:
            month = self.current_month + 1
            events: List[EventPayload] = []
            notices: List[EventPayload] = []

            for client in self.clients:
                for account in client.accounts:
                    account.apply_interest()

            for client in self.clients:
                # Paid-off loans leave client.loans during this pass
                for loan in list(client.loans):
                    notices.extend(self._collect_payment(client, loan, month, events))

            investment_yield = self.reserve_fund * self.policy.reserve_yield_rate
            self.capital += investment_yield
            self.current_month = month

            events.append(EventPayload(
                event_type=DomainEvent.MONTH_PROCESSED,
                entity_type="bank",
                entity_id=self.name,
                data={
                    "capital": str(self.capital),
                    "reserve_fund": str(self.reserve_fund),
                    "investment_yield": str(investment_yield),
                    "delinquencies": sum(1 for n in notices if n.event_type == DomainEvent.LOAN_DELINQUENT),
                    "loans_paid_off": sum(1 for n in notices if n.event_type == DomainEvent.LOAN_PAID_OFF),
                },
                month=month
            ))
            log_action(logger, "info", f"Month {month} processed",
                       action="process_month", resource=f"bank:{self.name}", month=month,
                       extra={"capital": str(self.capital), "reserve_fund": str(self.reserve_fund),
                              "notices": len(notices)})

            self._publish(events)
            return notices

    def run_months(self, months: int) -> List[EventPayload]:
        """Process several months in a row and return all notices"""
        if months < 0:
            raise InvalidAmountError(f"Number of months cannot be negative, got {months}")
        notices: List[EventPayload] = []
        for _ in range(months):
            notices.extend(self.process_month())
        return notices

    def _collect_payment(self, client: Client, loan: Loan, month: int,
                         events: List[EventPayload]) -> List[EventPayload]:
        payment = loan.monthly_payment

        if not client.can_afford(payment):
            previous_rate = loan.interest_rate
            loan.apply_penalty(
                self.policy.delinquency_penalty_rate,
                reprice=self.policy.reprice_on_delinquency
            )
            log_action(logger, "warning", f"Missed payment on loan {loan.id} of client {client.id}",
                       action="collect_payment", resource=f"loan:{loan.id}", month=month,
                       extra={"balance": str(client.balance), "payment": str(payment),
                              "new_rate": str(loan.interest_rate)})
            notice = create_loan_event(
                DomainEvent.LOAN_DELINQUENT, loan, client, month,
                previous_interest_rate=previous_rate, client_balance=client.balance
            )
            events.append(notice)
            return [notice]

        if not loan.make_payment():
            return []

        client.balance -= payment
        self.capital += payment

        # Straight-line principal stands in for the principal share of the payment
        profit = payment - loan.straight_line_principal
        to_reserve = profit * self.policy.reserve_profit_share
        self.reserve_fund += to_reserve

        events.append(create_loan_event(
            DomainEvent.LOAN_PAYMENT, loan, client, month,
            amount=payment, reserve_contribution=to_reserve
        ))

        if loan.months_paid == loan.term_months:
            client.loans.remove(loan)
            log_action(logger, "info", f"Loan {loan.id} of client {client.id} paid off",
                       action="collect_payment", resource=f"loan:{loan.id}", month=month)
            notice = create_loan_event(DomainEvent.LOAN_PAID_OFF, loan, client, month)
            events.append(notice)
            return [notice]
        return []

    # ------------------------------------------------------------------
    # Aggregates

    @property
    def total_deposits(self) -> Decimal:
        """Sum of all account balances across clients"""
        with self.lock:
            return sum((c.total_account_balance for c in self.clients), ZERO)

    @property
    def total_loans(self) -> Decimal:
        """Sum of outstanding loans' original principal"""
        with self.lock:
            return sum((c.total_loan_principal for c in self.clients), ZERO)

    def _publish(self, events: List[EventPayload]) -> None:
        for event in events:
            self.event_dispatcher.publish(event)
