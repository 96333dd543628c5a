"""
Test suite for accounts module

Tests account types, deposits, withdrawals and monthly interest accrual.
"""

import pytest
from decimal import Decimal

from banksim.accounts import AccountType, BankAccount
from banksim.errors import InvalidAmountError


def make_account(balance='1000', account_type=AccountType.SAVINGS):
    return BankAccount(
        account_number="ACC1000001",
        account_type=account_type,
        interest_rate=account_type.default_rate,
        balance=Decimal(balance)
    )


class TestAccountType:
    """Test account type rates and parsing"""

    def test_fixed_rates(self):
        assert AccountType.CHECKING.default_rate == Decimal('0.5')
        assert AccountType.SAVINGS.default_rate == Decimal('3.5')
        assert AccountType.DEPOSIT.default_rate == Decimal('5.0')

    @pytest.mark.parametrize("value, expected", [
        ("deposit", AccountType.DEPOSIT),
        ("Savings", AccountType.SAVINGS),
        (" CHECKING ", AccountType.CHECKING),
        (AccountType.DEPOSIT, AccountType.DEPOSIT),
    ])
    def test_parse(self, value, expected):
        assert AccountType.parse(value) is expected

    @pytest.mark.parametrize("value", ["brokerage", "", None])
    def test_unknown_type_defaults_to_checking(self, value):
        assert AccountType.parse(value) is AccountType.CHECKING


class TestBankAccount:
    """Test BankAccount balance operations"""

    def test_deposit(self):
        account = make_account('100')
        account.deposit(Decimal('50.25'))
        assert account.balance == Decimal('150.25')

    @pytest.mark.parametrize("amount", [Decimal('0'), Decimal('-10')])
    def test_deposit_rejects_non_positive(self, amount):
        account = make_account('100')
        with pytest.raises(InvalidAmountError):
            account.deposit(amount)
        assert account.balance == Decimal('100')

    def test_withdraw_success(self):
        account = make_account('100')
        assert account.withdraw(Decimal('40')) is True
        assert account.balance == Decimal('60')

    def test_withdraw_entire_balance(self):
        account = make_account('100')
        assert account.withdraw(Decimal('100')) is True
        assert account.balance == Decimal('0')

    def test_withdraw_insufficient_funds_leaves_balance(self):
        account = make_account('100')
        assert account.withdraw(Decimal('100.01')) is False
        assert account.balance == Decimal('100')

    def test_withdraw_rejects_non_positive(self):
        account = make_account('100')
        with pytest.raises(InvalidAmountError):
            account.withdraw(Decimal('0'))

    def test_negative_opening_balance_rejected(self):
        with pytest.raises(InvalidAmountError):
            make_account('-1')

    def test_open_date_is_set(self):
        assert make_account().open_date is not None


class TestInterest:
    """Test monthly interest accrual"""

    @pytest.mark.parametrize("balance", ['1000', '0', '12345.67', '0.01', '999999999.99'])
    @pytest.mark.parametrize("account_type", list(AccountType))
    def test_interest_is_balance_times_monthly_rate(self, balance, account_type):
        account = make_account(balance, account_type)
        before = account.balance

        credited = account.apply_interest()

        expected = before * (account_type.default_rate / Decimal('100') / Decimal('12'))
        assert credited == expected
        assert account.balance == before + expected

    def test_savings_one_month(self):
        account = make_account('1200', AccountType.SAVINGS)
        account.apply_interest()
        assert account.balance == Decimal('1203.5')

    def test_interest_compounds_monthly_without_rounding(self):
        """Balances keep full precision between months"""
        account = make_account('1000', AccountType.DEPOSIT)
        for _ in range(12):
            account.apply_interest()
        # 1000 * (1 + 0.05/12)^12
        expected = Decimal('1000') * (Decimal('1') + Decimal('5.0') / Decimal('100') / Decimal('12')) ** 12
        assert abs(account.balance - expected) < Decimal('1E-20')
        assert account.balance.quantize(Decimal('0.01')) == Decimal('1051.16')

    def test_monthly_interest_does_not_mutate(self):
        account = make_account('1000')
        account.monthly_interest()
        assert account.balance == Decimal('1000')
