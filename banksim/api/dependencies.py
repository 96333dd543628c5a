"""
Shared bank instance and error mapping for the API
"""

from fastapi import HTTPException, status

from ..bank import Bank
from ..config import get_config
from ..errors import BankingError, UnknownEntityError
from ..seed import seed_bank


def create_bank(seed_demo_data: bool = None) -> Bank:
    """Create the bank served by the API"""
    cfg = get_config()
    bank = Bank.from_config(cfg)
    if cfg.seed_demo_data if seed_demo_data is None else seed_demo_data:
        seed_bank(bank)
    return bank


# Global bank instance
bank = create_bank()


# Dependency to get the bank
def get_bank() -> Bank:
    return bank


def set_bank(new_bank: Bank) -> Bank:
    """Replace the served bank, returning the previous one"""
    global bank
    previous, bank = bank, new_bank
    return previous


def http_error(error: BankingError) -> HTTPException:
    """Map a banking error onto an HTTP error"""
    if isinstance(error, UnknownEntityError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    reason = getattr(error, "reason", None)
    if reason is not None:
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=reason.value)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
