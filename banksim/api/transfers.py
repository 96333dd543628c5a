"""
Transfer endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_bank, http_error
from .schemas import TransferRequest, money
from ..bank import Bank
from ..errors import BankingError


router = APIRouter()


@router.post("")
async def transfer(request: TransferRequest, bank: Bank = Depends(get_bank)):
    """Move free balance between two clients"""
    try:
        result = bank.transfer(request.from_client_id, request.to_client_id, request.amount)
        result.raise_if_rejected()
    except BankingError as e:
        raise http_error(e)

    return {"amount": money(result.amount), "message": "Transfer completed successfully"}
