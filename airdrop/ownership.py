"""
Ownership primitive.

Single-administrator access control: one owner address, an authorization
guard for owner-only operations, and owner-initiated handover.
"""

import threading
from typing import Optional

from .encoding import normalize_address
from .errors import Unauthorized
from .events import EventLog, OwnershipTransferred


class Ownable:
    """
    Current administrator identity plus an authorization check.

    After ``renounce_ownership`` there is no owner and every guarded
    operation is rejected.
    """

    def __init__(self, owner: str, events: Optional[EventLog] = None):
        self._owner: Optional[str] = normalize_address(owner)
        self._events = events
        self._lock = threading.Lock()
        self._emit(OwnershipTransferred(previous_owner=None, new_owner=self._owner))

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    def check_owner(self, caller: str) -> None:
        """
        Raises:
            Unauthorized: caller is not the current owner
        """
        if self._owner is None or normalize_address(caller) != self._owner:
            raise Unauthorized("caller is not the owner")

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        new_owner = normalize_address(new_owner)
        with self._lock:
            self.check_owner(caller)
            previous, self._owner = self._owner, new_owner
        self._emit(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))

    def renounce_ownership(self, caller: str) -> None:
        with self._lock:
            self.check_owner(caller)
            previous, self._owner = self._owner, None
        self._emit(OwnershipTransferred(previous_owner=previous, new_owner=None))

    def _emit(self, event) -> None:
        if self._events is not None:
            self._events.emit(event)
