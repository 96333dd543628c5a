"""
Account endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_bank, http_error
from .schemas import AccountAmountRequest, money
from ..bank import Bank
from ..errors import BankingError, InsufficientFundsError


router = APIRouter()


@router.post("/{account_number}/deposit")
async def deposit(account_number: str, request: AccountAmountRequest, bank: Bank = Depends(get_bank)):
    """Credit an account"""
    try:
        account = bank.deposit_to_account(account_number, request.amount)
    except BankingError as e:
        raise http_error(e)
    return {"account_number": account.account_number, "balance": money(account.balance)}


@router.post("/{account_number}/withdraw")
async def withdraw(account_number: str, request: AccountAmountRequest, bank: Bank = Depends(get_bank)):
    """Debit an account"""
    try:
        if not bank.withdraw_from_account(account_number, request.amount):
            raise InsufficientFundsError("insufficient funds")
        _, account = bank.find_account(account_number)
    except BankingError as e:
        raise http_error(e)
    return {"account_number": account.account_number, "balance": money(account.balance)}
