"""
One-way state machines.

Claimed status and the signature gate are both two-state, forward-only
machines. Moving forward or staying put is allowed; moving back raises.
"""

from enum import Enum
from typing import TypeVar

from .errors import IrreversibleTransition


class ClaimStatus(str, Enum):
    """
    Per-recipient claim state.

    UNCLAIMED: default for every address
    CLAIMED: a claim succeeded (terminal)
    """
    UNCLAIMED = "UNCLAIMED"
    CLAIMED = "CLAIMED"


class SignatureGateState(str, Enum):
    """
    Signature verification kill-switch.

    ENABLED: signature claims accepted
    DISABLED: signature claims rejected forever (terminal)
    """
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


_ORDER = {
    ClaimStatus.UNCLAIMED: 0,
    ClaimStatus.CLAIMED: 1,
    SignatureGateState.ENABLED: 0,
    SignatureGateState.DISABLED: 1,
}

S = TypeVar("S", ClaimStatus, SignatureGateState)


def advance(current: S, target: S) -> S:
    """
    Transition a one-way state.

    Returns target when it is the same state or later; re-asserting a
    terminal state is a no-op.

    Raises:
        IrreversibleTransition: target precedes current
        TypeError: states belong to different machines
    """
    if type(current) is not type(target):
        raise TypeError(f"Cannot mix {type(current).__name__} and {type(target).__name__}")
    if _ORDER[target] < _ORDER[current]:
        raise IrreversibleTransition(current, target)
    return target
