"""
Client endpoints: registration, accounts and loans
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_bank, http_error
from .schemas import ClientModel, CreateClientRequest, GrantLoanRequest, OpenAccountRequest, money
from ..bank import Bank
from ..errors import BankingError
from ..reporting import all_client_details, client_detail


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_client(request: CreateClientRequest, bank: Bank = Depends(get_bank)):
    """Register a new client"""
    client = bank.add_client(request.name)
    return {"client_id": client.id, "message": "Client added successfully"}


@router.get("")
async def list_clients(bank: Bank = Depends(get_bank)):
    """Get every client with accounts and loans"""
    return {"clients": [ClientModel.from_detail(d) for d in all_client_details(bank)]}


@router.get("/{client_id}", response_model=ClientModel)
async def get_client(client_id: int, bank: Bank = Depends(get_bank)):
    """Get client detail"""
    try:
        return ClientModel.from_detail(client_detail(bank, client_id))
    except BankingError as e:
        raise http_error(e)


@router.post("/{client_id}/accounts", status_code=status.HTTP_201_CREATED)
async def open_account(client_id: int, request: OpenAccountRequest, bank: Bank = Depends(get_bank)):
    """Open an account for a client"""
    try:
        account = bank.open_account(client_id, request.initial_deposit, request.account_type)
    except BankingError as e:
        raise http_error(e)

    return {
        "account_number": account.account_number,
        "account_type": account.account_type.label,
        "interest_rate": str(account.interest_rate),
        "balance": money(account.balance),
        "message": "Account opened successfully"
    }


@router.post("/{client_id}/loans", status_code=status.HTTP_201_CREATED)
async def grant_loan(client_id: int, request: GrantLoanRequest, bank: Bank = Depends(get_bank)):
    """Apply for a loan; policy rejections answer 422 with the reason"""
    try:
        decision = bank.grant_loan(client_id, request.amount, request.interest_rate, request.term_months)
        loan = decision.raise_if_rejected()
    except BankingError as e:
        raise http_error(e)

    return {
        "loan_id": loan.id,
        "monthly_payment": money(loan.monthly_payment),
        "message": "Loan granted successfully"
    }
