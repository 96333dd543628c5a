"""
Error Taxonomy

Caller mistakes (bad amounts, unknown ids) are raised as BankingError
subclasses. Business-rule refusals are returned as values carrying a
RejectionReason so a monthly cycle or a batch of requests is never aborted
by an expected outcome.
"""

from enum import Enum


class RejectionReason(Enum):
    """Why a request was refused by bank policy"""
    INSUFFICIENT_FUNDS = "insufficient_funds"
    EXCEEDS_EXPOSURE_LIMIT = "exceeds_exposure_limit"
    INSUFFICIENT_OWN_FUNDS = "insufficient_own_funds"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.INSUFFICIENT_FUNDS: "insufficient funds",
    RejectionReason.EXCEEDS_EXPOSURE_LIMIT: "exceeds per-client exposure limit",
    RejectionReason.INSUFFICIENT_OWN_FUNDS: "insufficient own funds",
}


class BankingError(ValueError):
    """Base class for all recoverable banking errors"""


class InvalidAmountError(BankingError):
    """Non-positive or malformed amount"""


class InsufficientFundsError(BankingError):
    """Withdrawal or transfer beyond the available balance"""

    reason = RejectionReason.INSUFFICIENT_FUNDS


class ExceedsExposureLimitError(BankingError):
    """Loan amount above the per-client share of bank capital"""

    reason = RejectionReason.EXCEEDS_EXPOSURE_LIMIT


class InsufficientOwnFundsError(BankingError):
    """Client cannot cover the required down payment share"""

    reason = RejectionReason.INSUFFICIENT_OWN_FUNDS


class UnknownEntityError(BankingError):
    """Referenced client, account or loan does not exist"""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.capitalize()} {entity_id} not found")


def error_for(reason: RejectionReason) -> BankingError:
    """Build the exception matching a rejection, for callers that prefer raising"""
    error_cls = {
        RejectionReason.INSUFFICIENT_FUNDS: InsufficientFundsError,
        RejectionReason.EXCEEDS_EXPOSURE_LIMIT: ExceedsExposureLimitError,
        RejectionReason.INSUFFICIENT_OWN_FUNDS: InsufficientOwnFundsError,
    }[reason]
    return error_cls(reason.message)
