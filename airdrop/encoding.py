"""
Airdrop ABI Word Encoding

Claim payloads are committed to with Solidity ``abi.encode`` semantics: every
static value occupies one 32-byte big-endian word. This module validates the
two payload types (address, uint256) and produces those words.

Encoding rules:
- address: 20 bytes, left-padded with zeros to 32
- uint256: unsigned, 0 <= value < 2**256, left-padded to 32
- bytes32: copied as-is
- Concatenation order is argument order; there is no length prefix
"""

from typing import Any, Sequence

from eth_abi import encode
from eth_utils import is_address, to_checksum_address

UINT256_MAX = 2 ** 256 - 1


def normalize_address(value: Any) -> str:
    """
    Return the EIP-55 checksum form of an address.

    Two addresses that differ only in letter case are the same identity,
    so every comparison in the package goes through this function.
    """
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        return to_checksum_address(bytes(value))
    if not isinstance(value, str):
        raise TypeError(f"Expected address string, got {type(value).__name__}")
    if not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return to_checksum_address(value)


def validate_uint256(value: Any) -> int:
    """Check that value fits a uint256 and return it."""
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected integer amount, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"Amount out of uint256 range: {value}")
    return value


def abi_encode(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    ``abi.encode`` for static types.

    Thin wrapper so callers never hand unchecked values to the encoder.
    """
    return encode(list(types), list(values))


def encode_claim(recipient: str, amount: int) -> bytes:
    """Encode a (recipient, amount) claim payload as two ABI words."""
    return abi_encode(
        ["address", "uint256"],
        [normalize_address(recipient), validate_uint256(amount)]
    )
