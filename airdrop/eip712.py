"""
Airdrop EIP-712 Digest Builder

Builds the typed-data digest a signature claim must cover:

    DOMAIN_TYPEHASH  = keccak256("EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)")
    domainSeparator  = keccak256(abi.encode(DOMAIN_TYPEHASH, keccak256("Airdrop"), keccak256("v1"),
                                            chainId, verifyingContract))
    CLAIM_TYPEHASH   = keccak256("Claim(address claimer,uint256 amount)")
    structHash       = keccak256(abi.encode(CLAIM_TYPEHASH, claimer, amount))
    digest           = keccak256(0x1901 || domainSeparator || structHash)

The byte layout is bit-exact; any deviation makes every signature produced by
standard ``signTypedData`` tooling unverifiable.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from .encoding import abi_encode, normalize_address, validate_uint256
from .hashing import Bytes32Like, keccak256, to_bytes32

DOMAIN_NAME = "Airdrop"
DOMAIN_VERSION = "v1"

EIP712_DOMAIN_TYPE = "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
CLAIM_TYPE = "Claim(address claimer,uint256 amount)"

DOMAIN_TYPEHASH = keccak256(EIP712_DOMAIN_TYPE)
CLAIM_TYPEHASH = keccak256(CLAIM_TYPE)

# EIP-191 version byte 0x01 for structured data
EIP712_PREFIX = b"\x19\x01"

CLAIM_TYPES: Dict[str, List[Dict[str, str]]] = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    "Claim": [
        {"name": "claimer", "type": "address"},
        {"name": "amount", "type": "uint256"},
    ],
}


@dataclass(frozen=True)
class EIP712Domain:
    """
    Signing domain bound to one deployment on one chain.

    Prevents a claim signature from being replayed against another
    contract instance or another chain.
    """
    chain_id: int
    verifying_contract: str
    name: str = DOMAIN_NAME
    version: str = DOMAIN_VERSION

    def __post_init__(self):
        validate_uint256(self.chain_id)
        object.__setattr__(self, "verifying_contract", normalize_address(self.verifying_contract))

    def separator(self) -> bytes:
        return domain_separator(self.chain_id, self.verifying_contract, self.name, self.version)

    def to_dict(self) -> Dict[str, Any]:
        """Domain in the layout ``signTypedData`` implementations expect."""
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


def domain_separator(
    chain_id: int,
    verifying_contract: str,
    name: str = DOMAIN_NAME,
    version: str = DOMAIN_VERSION
) -> bytes:
    """Compute the EIP-712 domain separator."""
    encoded = abi_encode(
        ["bytes32", "bytes32", "bytes32", "uint256", "address"],
        [
            DOMAIN_TYPEHASH,
            keccak256(name),
            keccak256(version),
            validate_uint256(chain_id),
            normalize_address(verifying_contract),
        ]
    )
    return keccak256(encoded)


def claim_struct_hash(recipient: str, amount: int) -> bytes:
    """hashStruct(Claim{claimer, amount})."""
    encoded = abi_encode(
        ["bytes32", "address", "uint256"],
        [CLAIM_TYPEHASH, normalize_address(recipient), validate_uint256(amount)]
    )
    return keccak256(encoded)


def typed_data_digest(separator: Bytes32Like, struct_hash: Bytes32Like) -> bytes:
    """keccak256(0x1901 || domainSeparator || structHash)."""
    return keccak256(EIP712_PREFIX + to_bytes32(separator) + to_bytes32(struct_hash))


def claim_digest(separator: Bytes32Like, recipient: str, amount: int) -> bytes:
    """Digest a signer must sign to authorize (recipient, amount)."""
    return typed_data_digest(separator, claim_struct_hash(recipient, amount))


def claim_typed_data(domain: EIP712Domain, recipient: str, amount: int) -> Dict[str, Any]:
    """
    Full typed-data document for off-chain signers.

    Signing this document with any EIP-712 implementation yields a signature
    over ``claim_digest(domain.separator(), recipient, amount)``.
    """
    return {
        "types": CLAIM_TYPES,
        "primaryType": "Claim",
        "domain": domain.to_dict(),
        "message": {
            "claimer": normalize_address(recipient),
            "amount": validate_uint256(amount),
        },
    }
