"""
Airdrop Error Taxonomy

Every rejected operation raises a ClaimError subclass. The ``code`` attribute
is the stable identifier callers branch on: retry with corrected inputs
(INVALID_SIGNER, INVALID_LEAF, ...) or stop (ALREADY_CLAIMED, SIGS_DISABLED).

A rejection never leaves partial effects behind.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Stable failure identifiers."""
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    INVALID_SENDER = "INVALID_SENDER"
    SIGNATURES_DISABLED = "SIGS_DISABLED"
    INVALID_SIGNER = "INVALID_SIGNER"
    INVALID_LEAF = "INVALID_LEAF"
    INVALID_MERKLE_ROOT = "INVALID_MERKLE_ROOT"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    UNAUTHORIZED = "UNAUTHORIZED"


class ClaimError(Exception):
    """Base class for all rejected airdrop operations."""

    code: ErrorCode

    def __init__(self, details: Optional[str] = None):
        self.details = details
        message = self.code.value
        if details:
            message = f"{message}: {details}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        d = {"code": self.code.value}
        if self.details:
            d["details"] = self.details
        return d


class AlreadyClaimed(ClaimError):
    """Recipient's ledger entry is already CLAIMED."""
    code = ErrorCode.ALREADY_CLAIMED


class InvalidSender(ClaimError):
    """Caller identity differs from the recipient argument."""
    code = ErrorCode.INVALID_SENDER


class SignaturesDisabled(ClaimError):
    """Signature path invoked after the kill-switch was set."""
    code = ErrorCode.SIGNATURES_DISABLED


class InvalidSigner(ClaimError):
    """Recovered signing identity is not the configured signer."""
    code = ErrorCode.INVALID_SIGNER


class InvalidLeaf(ClaimError):
    """Supplied leaf does not hash from (recipient, amount)."""
    code = ErrorCode.INVALID_LEAF


class InvalidMerkleRoot(ClaimError):
    """Folded proof does not reach the committed root."""
    code = ErrorCode.INVALID_MERKLE_ROOT


class TransferFailed(ClaimError):
    """Token collaborator reported a failed transfer."""
    code = ErrorCode.TRANSFER_FAILED


class Unauthorized(ClaimError):
    """Caller is not the administrator."""
    code = ErrorCode.UNAUTHORIZED


class IrreversibleTransition(RuntimeError):
    """A one-way state was asked to move backwards."""

    def __init__(self, current: Any, target: Any):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition from {current} to {target}")
