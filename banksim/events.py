"""
Event System Module

Structured domain events for everything the bank does, plus a
publish/subscribe dispatcher. Monthly processing returns its notices as
EventPayload objects so a presentation layer can render them however it
likes.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


class DomainEvent(Enum):
    """Domain events that can occur in the simulated bank"""

    # Client events
    CLIENT_ADDED = "client.added"

    # Account events
    ACCOUNT_OPENED = "account.opened"
    ACCOUNT_DEPOSIT = "account.deposit"
    ACCOUNT_WITHDRAWAL = "account.withdrawal"

    # Loan events
    LOAN_GRANTED = "loan.granted"
    LOAN_REJECTED = "loan.rejected"
    LOAN_PAYMENT = "loan.payment"
    LOAN_PAID_OFF = "loan.paid_off"
    LOAN_DELINQUENT = "loan.delinquent"

    # Transfer events
    TRANSFER_COMPLETED = "transfer.completed"
    TRANSFER_FAILED = "transfer.failed"

    # Simulation events
    MONTH_PROCESSED = "month.processed"


@dataclass
class EventPayload:
    """Payload for domain events"""
    event_type: DomainEvent
    entity_type: str
    entity_id: str
    data: Dict[str, Any]
    month: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'data': self.data,
            'month': self.month,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventPayload':
        """Create from dictionary"""
        return cls(
            event_type=DomainEvent(data['event_type']),
            entity_type=data['entity_type'],
            entity_id=data['entity_id'],
            data=data['data'],
            month=data.get('month', 0),
            timestamp=datetime.fromisoformat(data['timestamp']) if isinstance(data['timestamp'], str) else data['timestamp'],
            event_id=data['event_id']
        )


class EventDispatcher:
    """Central event dispatcher - publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[DomainEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("banksim.events")

    def subscribe(self, event_type: DomainEvent, handler: Callable) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: Callable) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: DomainEvent, handler: Callable) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                self.logger.debug(f"Unsubscribed handler {_handler_name(handler)} from {event_type.value}")
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            self.logger.debug(f"Publishing event {event.event_type.value} for {event.entity_type}:{event.entity_id}")

            handlers = list(self._handlers.get(event.event_type, [])) + list(self._global_handlers)
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    # A failing subscriber must not undo a committed banking operation
                    self.logger.error(f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
            self.logger.info("All event handlers cleared")

    def get_handler_count(self, event_type: Optional[DomainEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)


class EventRecorder:
    """Subscriber that keeps every event it receives, in order"""

    def __init__(self, dispatcher: Optional[EventDispatcher] = None):
        self.events: List[EventPayload] = []
        if dispatcher is not None:
            dispatcher.subscribe_all(self)

    def __call__(self, event: EventPayload) -> None:
        self.events.append(event)

    def of_type(self, event_type: DomainEvent) -> List[EventPayload]:
        return [e for e in self.events if e.event_type == event_type]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__name__', repr(handler))


# Convenience functions for common event patterns
def create_loan_event(event_type: DomainEvent, loan, client, month: int = 0, **extra) -> EventPayload:
    """Create a loan-related event"""
    data = {
        "loan_id": loan.id,
        "client_id": client.id,
        "client_name": client.name,
        "principal": str(loan.principal),
        "interest_rate": str(loan.interest_rate),
        "monthly_payment": str(loan.monthly_payment),
        "months_paid": loan.months_paid,
        "term_months": loan.term_months,
    }
    data.update({k: str(v) if not isinstance(v, (int, str, bool)) else v for k, v in extra.items()})
    return EventPayload(
        event_type=event_type,
        entity_type="loan",
        entity_id=str(loan.id),
        data=data,
        month=month
    )


def create_account_event(event_type: DomainEvent, account, client, month: int = 0, **extra) -> EventPayload:
    """Create an account-related event"""
    data = {
        "account_number": account.account_number,
        "client_id": client.id,
        "account_type": account.account_type.label,
        "interest_rate": str(account.interest_rate),
        "balance": str(account.balance),
    }
    data.update({k: str(v) for k, v in extra.items()})
    return EventPayload(
        event_type=event_type,
        entity_type="account",
        entity_id=account.account_number,
        data=data,
        month=month
    )


def create_client_event(event_type: DomainEvent, client, month: int = 0, **extra) -> EventPayload:
    """Create a client-related event"""
    data = {
        "client_id": client.id,
        "name": client.name,
        "balance": str(client.balance),
    }
    data.update({k: str(v) if not isinstance(v, (int, str, bool)) else v for k, v in extra.items()})
    return EventPayload(
        event_type=event_type,
        entity_type="client",
        entity_id=str(client.id),
        data=data,
        month=month
    )
