"""
Airdrop Signature Recovery

Recovers the signing identity (an Ethereum address) from a 32-byte digest and
a 65-byte secp256k1 signature ``r || s || v``.

Acceptance rules follow the EVM ECDSA conventions used by claim contracts:
- signature is exactly 65 bytes
- v is 27 or 28
- 0 < r < n and 0 < s <= n/2 (low-s only, rejects malleated copies)

Anything that fails these rules recovers to no identity (``None``). Callers
treat ``None`` like any other wrong signer.
"""

from dataclasses import dataclass
from typing import Optional, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import to_bytes, is_hexstr

from .encoding import normalize_address
from .hashing import Bytes32Like, to_bytes32

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2

SIGNATURE_LENGTH = 65

SignatureLike = Union[bytes, bytearray, str]


@dataclass(frozen=True)
class SignatureParts:
    """Split ECDSA signature in EVM layout."""
    r: int
    s: int
    v: int

    @classmethod
    def from_bytes(cls, signature: SignatureLike) -> "SignatureParts":
        """
        Split a 65-byte ``r || s || v`` signature.

        Raises:
            ValueError: wrong length or not hex
        """
        if isinstance(signature, str):
            if not is_hexstr(signature):
                raise ValueError("Signature is not a hex string")
            signature = to_bytes(hexstr=signature)
        raw = bytes(signature)
        if len(raw) != SIGNATURE_LENGTH:
            raise ValueError(f"Invalid signature length: {len(raw)}")
        return cls(
            r=int.from_bytes(raw[0:32], 'big'),
            s=int.from_bytes(raw[32:64], 'big'),
            v=raw[64]
        )

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, 'big') + self.s.to_bytes(32, 'big') + bytes([self.v])

    def is_canonical(self) -> bool:
        """Check v, r and s against the EVM acceptance rules."""
        if self.v not in (27, 28):
            return False
        if not 0 < self.r < SECP256K1_N:
            return False
        return 0 < self.s <= SECP256K1_HALF_N


def recover_signer(digest: Bytes32Like, signature: SignatureLike) -> Optional[str]:
    """
    Recover the checksum address that signed ``digest``.

    Returns:
        The signer address, or None when the signature is malformed,
        non-canonical or does not correspond to a curve point.
    """
    msg_hash = to_bytes32(digest)

    try:
        parts = SignatureParts.from_bytes(signature)
    except ValueError:
        return None

    if not parts.is_canonical():
        return None

    try:
        sig = keys.Signature(vrs=(parts.v - 27, parts.r, parts.s))
        public_key = sig.recover_public_key_from_msg_hash(msg_hash)
    except (BadSignature, ValidationError):
        return None

    return public_key.to_checksum_address()


def is_valid_signature(digest: Bytes32Like, signature: SignatureLike, expected_signer: str) -> bool:
    """True if ``signature`` over ``digest`` recovers to ``expected_signer``."""
    recovered = recover_signer(digest, signature)
    if recovered is None:
        return False
    return recovered == normalize_address(expected_signer)


def sign_digest(digest: Bytes32Like, private_key: bytes) -> bytes:
    """
    Sign a 32-byte digest, returning 65 bytes with v in {27, 28}.

    The signing backend emits low-s signatures, so the result always passes
    the acceptance rules above.
    """
    key = keys.PrivateKey(private_key)
    sig = key.sign_msg_hash(to_bytes32(digest))
    return SignatureParts(r=sig.r, s=sig.s, v=sig.v + 27).to_bytes()


class ClaimSigner:
    """
    Holds the authorizing key for signature claims.

    Key custody is out of scope; this class exists so tooling and tests can
    produce signatures the engine will accept.
    """

    def __init__(self, private_key: bytes):
        self._private_key = keys.PrivateKey(private_key)

    @property
    def address(self) -> str:
        return self._private_key.public_key.to_checksum_address()

    def sign_claim(self, domain, recipient: str, amount: int) -> bytes:
        """
        Sign the EIP-712 Claim digest for (recipient, amount) under ``domain``.

        Args:
            domain: an EIP712Domain
            recipient: claimer address
            amount: uint256 amount
        """
        from .eip712 import claim_digest

        digest = claim_digest(domain.separator(), recipient, amount)
        return sign_digest(digest, self._private_key.to_bytes())
