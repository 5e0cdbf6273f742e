"""
Airdrop Claim Engine

The stateful core. Pays each recipient at most once, through either of two
mutually exclusive proof paths:

    signature_claim: an EIP-712 Claim{claimer, amount} signed by the
                     configured signer
    merkle_claim:    a sorted-pair Merkle proof that (recipient, amount) is
                     committed under the configured root

Both paths run the same sequence inside one transaction:

    1. caller == recipient                      else InvalidSender
    2. recipient UNCLAIMED                      else AlreadyClaimed
    3. path-specific proof check                else SignaturesDisabled /
                                                     InvalidSigner /
                                                     InvalidLeaf /
                                                     InvalidMerkleRoot
    4. mark recipient CLAIMED
    5. token.transfer(recipient, amount)        else TransferFailed

Step 4 always precedes step 5. The token runs inside the claim and may call
back into the engine; by then the ledger already says CLAIMED, so the nested
claim is rejected. If step 5 fails, the transaction discards step 4.

Operations are serialized by a re-entrant lock: other threads wait, a
callback from the token on the same thread proceeds and meets the ledger
state above.
"""

import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from .eip712 import EIP712Domain, claim_digest
from .encoding import normalize_address, validate_uint256
from .errors import (
    AlreadyClaimed,
    ClaimError,
    InvalidSender,
    InvalidSigner,
    SignaturesDisabled,
    TransferFailed,
    Unauthorized,
)
from .events import EventLog, SignatureVerificationDisabled
from .hashing import Bytes32Like, to_bytes32
from .ledger import ClaimLedger, InMemoryClaimLedger
from .logging_config import audit_log
from .merkle import normalize_proof, verify_claim
from .ownership import Ownable
from .signing import SignatureLike, recover_signer
from .state import ClaimStatus, SignatureGateState, advance
from .token import FungibleToken


class ClaimMethod:
    SIGNATURE = "signature"
    MERKLE = "merkle"


@dataclass(frozen=True)
class AirdropConfig:
    """
    Immutable deployment parameters.

    The domain separator is derived once from the chain id and contract
    address given here and never recomputed, even if the host chain changes.
    """
    merkle_root: bytes
    signer: str
    token: FungibleToken
    chain_id: int
    contract_address: str
    domain_separator: bytes

    @classmethod
    def create(
        cls,
        merkle_root: Bytes32Like,
        signer: str,
        token: FungibleToken,
        chain_id: int,
        contract_address: str
    ) -> "AirdropConfig":
        domain = EIP712Domain(chain_id=chain_id, verifying_contract=contract_address)
        return cls(
            merkle_root=to_bytes32(merkle_root),
            signer=normalize_address(signer),
            token=token,
            chain_id=chain_id,
            contract_address=domain.verifying_contract,
            domain_separator=domain.separator()
        )

    @property
    def domain(self) -> EIP712Domain:
        return EIP712Domain(chain_id=self.chain_id, verifying_contract=self.contract_address)


class Airdrop:
    """
    One-time token distribution with signature and Merkle claim paths.

    Usage:
        airdrop = Airdrop(
            merkle_root=root,
            signer=signer_address,
            token=token.wallet(contract_address),
            owner=admin_address,
            chain_id=1,
            contract_address=contract_address,
        )

        airdrop.merkle_claim(caller, proof, leaf, caller, 1000)
        airdrop.signature_claim(caller, signature, caller, 500)
        airdrop.disable_signature_verification(admin_address)
    """

    def __init__(
        self,
        merkle_root: Bytes32Like,
        signer: str,
        token: FungibleToken,
        owner: str,
        chain_id: int,
        contract_address: str,
        ledger: Optional[ClaimLedger] = None,
        events: Optional[EventLog] = None
    ):
        self.config = AirdropConfig.create(merkle_root, signer, token, chain_id, contract_address)
        self.events = events if events is not None else EventLog()
        self.ledger = ledger if ledger is not None else InMemoryClaimLedger()
        self.ownership = Ownable(owner, self.events)
        self._gate = SignatureGateState.ENABLED
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def token(self) -> FungibleToken:
        return self.config.token

    @property
    def merkle_root(self) -> bytes:
        return self.config.merkle_root

    @property
    def signer(self) -> str:
        return self.config.signer

    @property
    def domain_separator(self) -> bytes:
        return self.config.domain_separator

    @property
    def owner(self) -> Optional[str]:
        return self.ownership.owner

    @property
    def signature_gate(self) -> SignatureGateState:
        return self._gate

    @property
    def is_signature_disabled(self) -> bool:
        return self._gate == SignatureGateState.DISABLED

    def claim_status(self, recipient: str) -> ClaimStatus:
        return self.ledger.status(recipient)

    def is_claimed(self, recipient: str) -> bool:
        return self.ledger.is_claimed(recipient)

    def claim_digest(self, recipient: str, amount: int) -> bytes:
        """Digest the configured signer must sign for (recipient, amount)."""
        return claim_digest(self.config.domain_separator, recipient, amount)

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def signature_claim(
        self,
        caller: str,
        signature: SignatureLike,
        recipient: str,
        amount: int
    ) -> None:
        """
        Claim with a signature from the configured signer.

        Raises:
            InvalidSender, AlreadyClaimed, SignaturesDisabled,
            InvalidSigner, TransferFailed
        """
        caller, recipient, amount = self._normalize(caller, recipient, amount)
        audit_log.claim_requested(ClaimMethod.SIGNATURE, caller, recipient, amount)

        try:
            with self._lock, self.ledger.transaction():
                self._check_claimant(caller, recipient)

                if self.is_signature_disabled:
                    raise SignaturesDisabled()

                recovered = recover_signer(self.claim_digest(recipient, amount), signature)
                if recovered != self.config.signer:
                    raise InvalidSigner(f"recovered {recovered}")

                self._pay(recipient, amount)
        except ClaimError as e:
            audit_log.claim_rejected(ClaimMethod.SIGNATURE, recipient, e.code.value, e.details)
            raise

        audit_log.claim_accepted(ClaimMethod.SIGNATURE, recipient, amount)

    def merkle_claim(
        self,
        caller: str,
        proof: Iterable[Bytes32Like],
        leaf: Bytes32Like,
        recipient: str,
        amount: int
    ) -> None:
        """
        Claim with a membership proof against the committed root.

        Raises:
            InvalidSender, AlreadyClaimed, InvalidLeaf,
            InvalidMerkleRoot, TransferFailed
        """
        caller, recipient, amount = self._normalize(caller, recipient, amount)
        proof = normalize_proof(proof)
        leaf = to_bytes32(leaf)
        audit_log.claim_requested(ClaimMethod.MERKLE, caller, recipient, amount)

        try:
            with self._lock, self.ledger.transaction():
                self._check_claimant(caller, recipient)
                verify_claim(self.config.merkle_root, proof, leaf, recipient, amount)
                self._pay(recipient, amount)
        except ClaimError as e:
            audit_log.claim_rejected(ClaimMethod.MERKLE, recipient, e.code.value, e.details)
            raise

        audit_log.claim_accepted(ClaimMethod.MERKLE, recipient, amount)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def disable_signature_verification(self, caller: str) -> None:
        """
        Permanently switch off signature claims. Owner only.

        Calling it again leaves the gate DISABLED and emits the event again.
        There is no inverse operation.

        Raises:
            Unauthorized: caller is not the owner
        """
        caller = normalize_address(caller)
        with self._lock:
            try:
                self.ownership.check_owner(caller)
            except Unauthorized:
                audit_log.unauthorized_attempt(caller, "disable_signature_verification")
                raise
            self._gate = advance(self._gate, SignatureGateState.DISABLED)

        self.events.emit(SignatureVerificationDisabled(administrator=caller))
        audit_log.signature_verification_disabled(caller)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self.ownership.transfer_ownership(caller, new_owner)

    def renounce_ownership(self, caller: str) -> None:
        self.ownership.renounce_ownership(caller)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize(caller: str, recipient: str, amount: int):
        return normalize_address(caller), normalize_address(recipient), validate_uint256(amount)

    def _check_claimant(self, caller: str, recipient: str) -> None:
        if caller != recipient:
            raise InvalidSender(f"{caller} cannot claim for {recipient}")
        if self.ledger.is_claimed(recipient):
            raise AlreadyClaimed(recipient)

    def _pay(self, recipient: str, amount: int) -> None:
        # ledger first, token second
        if not self.ledger.mark_claimed(recipient):
            raise AlreadyClaimed(recipient)
        if not self.config.token.transfer(recipient, amount):
            raise TransferFailed(f"{amount} to {recipient}")
