"""
Test suite for reporting module

Tests the bank status summary and client detail views.
"""

import pytest
from decimal import Decimal

from banksim.accounts import AccountType
from banksim.bank import Bank
from banksim.errors import UnknownEntityError
from banksim.reporting import bank_summary, client_detail, all_client_details


@pytest.fixture
def bank():
    bank = Bank("Report Bank", Decimal('1000000'))
    ivan = bank.add_client("Ivan")
    bank.open_account(ivan, Decimal('50000'), AccountType.CHECKING)
    bank.open_account(ivan, Decimal('100000'), AccountType.DEPOSIT)
    anna = bank.add_client("Anna")
    bank.open_account(anna, Decimal('75000'), AccountType.SAVINGS)
    bank.grant_loan(ivan, Decimal('20000'), Decimal('12'), 24)
    return bank


class TestBankSummary:
    """Test the bank status view"""

    def test_summary(self, bank):
        summary = bank_summary(bank)

        assert summary.name == "Report Bank"
        assert summary.month == 0
        assert summary.capital == Decimal('1205000')
        assert summary.reserve_fund == Decimal('100000')
        assert summary.client_count == 2
        assert summary.total_deposits == Decimal('225000')
        assert summary.total_loans == Decimal('20000')

    def test_totals_use_principal_not_remaining_balance(self, bank):
        bank.process_month()
        assert bank_summary(bank).total_loans == Decimal('20000')

    def test_to_dict_rounds(self, bank):
        bank.process_month()
        data = bank_summary(bank).to_dict()
        assert data["capital"] == data["capital"].quantize(Decimal('0.01'))
        assert data["total_deposits"].as_tuple().exponent == -2
        assert data["month"] == 1

    def test_snapshot_is_detached(self, bank):
        summary = bank_summary(bank)
        bank.add_client("Later")
        assert summary.client_count == 2


class TestClientDetail:
    """Test the per-client view"""

    def test_detail(self, bank):
        detail = client_detail(bank, 1)

        assert detail.name == "Ivan"
        assert detail.balance == Decimal('170000')
        assert [a.account_number for a in detail.accounts] == ["ACC1000001", "ACC1000002"]
        assert [a.account_type for a in detail.accounts] == ["checking", "deposit"]
        assert detail.total_account_balance == Decimal('150000')

        loan = detail.loans[0]
        assert loan.loan_id == 1
        assert loan.months_paid == 0
        assert loan.term_months == 24
        assert loan.remaining_balance.quantize(Decimal('0.01')) == Decimal('20000.00')

    def test_remaining_balance_reflects_penalty(self, bank):
        ivan = bank.get_client(1)
        bank.transfer(ivan, 2, ivan.balance)
        bank.process_month()

        loan = client_detail(bank, 1).loans[0]
        assert loan.interest_rate == Decimal('17')
        assert loan.original_interest_rate == Decimal('12')
        assert loan.missed_payments == 1
        assert loan.remaining_balance < Decimal('20000')

    def test_all_client_details(self, bank):
        assert [d.client_id for d in all_client_details(bank)] == [1, 2]

    def test_unknown_client(self, bank):
        with pytest.raises(UnknownEntityError):
            client_detail(bank, 3)
