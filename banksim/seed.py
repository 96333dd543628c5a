"""Demo data for the bank simulator

Recreates the classic start-up state: one bank with 1,000,000 capital,
three clients, four accounts and two loans.

Run with: python -m banksim.seed
"""

from decimal import Decimal
from typing import Optional

from .accounts import AccountType
from .bank import Bank, BankPolicy
from .events import EventDispatcher
from .logging_config import get_logger, setup_logging_from_config
from .reporting import all_client_details, bank_summary
from .currency import format_money

logger = get_logger(__name__)

DEMO_CLIENTS = [
    # name, accounts (type, initial deposit), loans (amount, rate, term)
    ("Ivan Petrov", [(AccountType.CHECKING, Decimal('50000')), (AccountType.DEPOSIT, Decimal('100000'))],
     [(Decimal('20000'), Decimal('12'), 24)]),
    ("Anna Sidorova", [(AccountType.SAVINGS, Decimal('75000'))], []),
    ("Romashka LLC", [(AccountType.CHECKING, Decimal('500000'))],
     [(Decimal('100000'), Decimal('10'), 12)]),
]


def build_demo_bank(
    name: str = "Financial Bank",
    initial_capital: Decimal = Decimal('1000000'),
    policy: Optional[BankPolicy] = None,
    event_dispatcher: Optional[EventDispatcher] = None
) -> Bank:
    """Create a bank populated with the demo clients, accounts and loans"""
    bank = Bank(name, initial_capital, policy=policy, event_dispatcher=event_dispatcher)
    seed_bank(bank)
    return bank


def seed_bank(bank: Bank) -> Bank:
    """Add the demo clients, accounts and loans to an existing bank"""
    for client_name, accounts, loans in DEMO_CLIENTS:
        client = bank.add_client(client_name)
        for account_type, deposit in accounts:
            bank.open_account(client, deposit, account_type)
        for amount, rate, term in loans:
            decision = bank.grant_loan(client, amount, rate, term)
            if not decision.approved:
                logger.warning(f"Demo loan for {client_name} rejected: {decision.reason.message}")

    logger.info(f"Seeded {len(DEMO_CLIENTS)} demo clients into {bank.name}")
    return bank


def main():
    """Seed a demo bank and print a year of simulated status"""
    setup_logging_from_config()
    bank = build_demo_bank()

    for notice in bank.run_months(12):
        print(f"month {notice.month}: {notice.event_type.value} loan {notice.entity_id} "
              f"({notice.data['client_name']})")

    summary = bank_summary(bank)
    print(f"{summary.name} after {summary.month} months")
    print(f"  capital:      {format_money(summary.capital)}")
    print(f"  reserve fund: {format_money(summary.reserve_fund)}")
    print(f"  deposits:     {format_money(summary.total_deposits)}")
    print(f"  loans:        {format_money(summary.total_loans)}")
    for detail in all_client_details(bank):
        print(f"  #{detail.client_id} {detail.name}: {format_money(detail.balance)}")


if __name__ == "__main__":
    main()
