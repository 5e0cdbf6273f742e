"""
Airdrop Events

Observable, append-only record of administrative actions, the equivalent of
contract logs. Events are emitted only after the operation that produced them
has fully succeeded.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type


@dataclass(frozen=True)
class Event:
    """Base event."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    @property
    def name(self) -> str:
        return type(self).__name__

    def args(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "args": self.args(),
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z")
        }


@dataclass(frozen=True)
class SignatureVerificationDisabled(Event):
    """The administrator switched off the signature claim path."""
    administrator: str = ""

    def args(self) -> Dict[str, Any]:
        return {"administrator": self.administrator}


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    previous_owner: Optional[str] = None
    new_owner: Optional[str] = None

    def args(self) -> Dict[str, Any]:
        return {"previous_owner": self.previous_owner, "new_owner": self.new_owner}


class EventLog:
    """
    In-memory event log.

    Not persistent. Retains at most ``max_events`` entries, oldest dropped
    first.
    """

    def __init__(self, max_events: int = 10000):
        self._events: List[Event] = []
        self._lock = threading.Lock()
        self._max_events = max_events

    def emit(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._max_events:
                self._events = self._events[-self._max_events:]

    def query(self, event_type: Optional[Type[Event]] = None) -> List[Event]:
        with self._lock:
            events = self._events[:]
        if event_type:
            events = [e for e in events if isinstance(e, event_type)]
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
