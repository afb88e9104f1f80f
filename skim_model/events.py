"""
Events emitted by the vault model.

Each state-changing operation appends a frozen event record to the vault's
EventLog, giving simulations and tests the same trail an indexer would see.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional

from .config import EVENT_LOG_MAXLEN


@dataclass(frozen=True)
class Event:
    timestamp: int


@dataclass(frozen=True)
class Deposited(Event):
    caller: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class Withdrawn(Event):
    caller: str
    receiver: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class Transferred(Event):
    sender: str
    recipient: str
    shares: int


@dataclass(frozen=True)
class Reported(Event):
    profit: int
    loss: int
    burned: int
    vault_value: int
    user_debt_value: int
    beneficiary_debt_value: int


@dataclass(frozen=True)
class RecipientChangeProposed(Event):
    current: str
    pending: str
    effective_at: int


@dataclass(frozen=True)
class RecipientChangeCancelled(Event):
    cancelled: str


@dataclass(frozen=True)
class RecipientChanged(Event):
    previous: str
    current: str
    shares_moved: int
    caller: Optional[str] = None


@dataclass(frozen=True)
class BurningToggled(Event):
    enabled: bool


@dataclass(frozen=True)
class Shutdown(Event):
    caller: Optional[str] = None


class EventLog:
    """Bounded, append-only list of emitted events."""

    def __init__(self, maxlen=EVENT_LOG_MAXLEN):
        self._events = deque(maxlen=maxlen)

    def emit(self, event):
        self._events.append(event)
        return event

    def of_type(self, event_type):
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self, event_type=None):
        events = self._events if event_type is None else self.of_type(event_type)
        return events[-1] if events else None

    def __len__(self):
        return len(self._events)

    def __iter__(self):
        return iter(self._events)
