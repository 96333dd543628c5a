"""
Bank status and simulation endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends

from .dependencies import get_bank
from .schemas import BankStatusModel, EventModel, ProcessMonthRequest, ProcessMonthResponse
from ..bank import Bank
from ..reporting import bank_summary


router = APIRouter()


@router.get("/status", response_model=BankStatusModel)
async def get_status(bank: Bank = Depends(get_bank)):
    """Capital, reserve fund and portfolio totals"""
    return BankStatusModel.from_summary(bank_summary(bank))


@router.post("/process-month", response_model=ProcessMonthResponse)
async def process_month(request: Optional[ProcessMonthRequest] = None, bank: Bank = Depends(get_bank)):
    """Advance the simulation and return the delinquency and payoff notices"""
    months = request.months if request else 1
    with bank.lock:
        notices = bank.run_months(months)
        summary = bank_summary(bank)

    return ProcessMonthResponse(
        month=summary.month,
        events=[EventModel.from_event(n) for n in notices],
        status=BankStatusModel.from_summary(summary)
    )
