"""
Airdrop Claim Verification

Version: 1.0.0
License: Apache 2.0

One-time token distribution to a known set of recipients, authorized by
either of two mutually exclusive proofs:

- an EIP-712 Claim{claimer, amount} signed by a designated signer
- a sorted-pair keccak-256 Merkle proof against a committed root

Each recipient can be paid at most once across both paths. The ledger entry
is written before the token transfer and rolled back if the transfer fails.

Usage:
    from airdrop import Airdrop, InMemoryToken, claim_leaf

    token = InMemoryToken()
    token.mint(contract_address, 10 ** 24)

    airdrop = Airdrop(
        merkle_root=root,
        signer=signer_address,
        token=token.wallet(contract_address),
        owner=admin_address,
        chain_id=1,
        contract_address=contract_address,
    )

    # Merkle path
    leaf = claim_leaf(recipient, 1000)
    airdrop.merkle_claim(recipient, proof, leaf, recipient, 1000)

    # Signature path
    airdrop.signature_claim(recipient, signature, recipient, 500)

    # Kill-switch (owner only, irreversible)
    airdrop.disable_signature_verification(admin_address)
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Primitives
from .hashing import keccak256, to_bytes32, hex32
from .encoding import normalize_address, validate_uint256, encode_claim
from .signing import (
    SignatureParts,
    ClaimSigner,
    recover_signer,
    is_valid_signature,
    sign_digest,
)

# EIP-712
from .eip712 import (
    EIP712Domain,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    DOMAIN_TYPEHASH,
    CLAIM_TYPEHASH,
    domain_separator,
    claim_struct_hash,
    claim_digest,
    claim_typed_data,
)

# Merkle
from .merkle import (
    claim_leaf,
    hash_pair,
    process_proof,
    verify_proof,
    verify_claim,
)

# Errors
from .errors import (
    ErrorCode,
    ClaimError,
    AlreadyClaimed,
    InvalidSender,
    SignaturesDisabled,
    InvalidSigner,
    InvalidLeaf,
    InvalidMerkleRoot,
    TransferFailed,
    Unauthorized,
    IrreversibleTransition,
)

# State and storage
from .state import ClaimStatus, SignatureGateState, advance
from .ledger import ClaimLedger, InMemoryClaimLedger, SqliteClaimLedger
from .events import Event, EventLog, SignatureVerificationDisabled, OwnershipTransferred

# Collaborators
from .ownership import Ownable
from .token import FungibleToken, InMemoryToken, TokenWallet

# Engine
from .engine import Airdrop, AirdropConfig


__all__ = [
    "__version__",

    # Primitives
    "keccak256",
    "to_bytes32",
    "hex32",
    "normalize_address",
    "validate_uint256",
    "encode_claim",
    "SignatureParts",
    "ClaimSigner",
    "recover_signer",
    "is_valid_signature",
    "sign_digest",

    # EIP-712
    "EIP712Domain",
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "DOMAIN_TYPEHASH",
    "CLAIM_TYPEHASH",
    "domain_separator",
    "claim_struct_hash",
    "claim_digest",
    "claim_typed_data",

    # Merkle
    "claim_leaf",
    "hash_pair",
    "process_proof",
    "verify_proof",
    "verify_claim",

    # Errors
    "ErrorCode",
    "ClaimError",
    "AlreadyClaimed",
    "InvalidSender",
    "SignaturesDisabled",
    "InvalidSigner",
    "InvalidLeaf",
    "InvalidMerkleRoot",
    "TransferFailed",
    "Unauthorized",
    "IrreversibleTransition",

    # State and storage
    "ClaimStatus",
    "SignatureGateState",
    "advance",
    "ClaimLedger",
    "InMemoryClaimLedger",
    "SqliteClaimLedger",
    "Event",
    "EventLog",
    "SignatureVerificationDisabled",
    "OwnershipTransferred",

    # Collaborators
    "Ownable",
    "FungibleToken",
    "InMemoryToken",
    "TokenWallet",

    # Engine
    "Airdrop",
    "AirdropConfig",
]
