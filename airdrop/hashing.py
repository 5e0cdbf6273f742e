"""
Airdrop Hashing Primitive

Every digest in the claim protocol (domain separator, struct hash, typed-data
digest, Merkle leaves and internal nodes) is keccak-256 over raw bytes.
Hashes travel as 32-byte ``bytes``; hex strings are accepted at the boundary
and rendered with a ``0x`` prefix.
"""

from typing import Union

from eth_utils import keccak, to_bytes, encode_hex, is_hexstr

HASH_LENGTH = 32

Bytes32Like = Union[bytes, bytearray, str]


def keccak256(data: Union[bytes, bytearray, str]) -> bytes:
    """
    Compute keccak-256 over raw bytes.

    Strings are hashed as their UTF-8 bytes (``keccak256(bytes("Airdrop"))``
    in Solidity terms), never interpreted as hex.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    return keccak(bytes(data))


def to_bytes32(value: Bytes32Like) -> bytes:
    """
    Normalize a 32-byte hash given as bytes or 0x-prefixed hex.

    Raises:
        ValueError: value is not exactly 32 bytes
        TypeError: value is neither bytes nor str
    """
    if isinstance(value, str):
        if not is_hexstr(value):
            raise ValueError(f"Not a hex string: {value!r}")
        raw = to_bytes(hexstr=value)
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise TypeError(f"Expected bytes or hex string, got {type(value).__name__}")

    if len(raw) != HASH_LENGTH:
        raise ValueError(f"Expected {HASH_LENGTH} bytes, got {len(raw)}")
    return raw


def hash_to_int(value: Bytes32Like) -> int:
    """Interpret a 32-byte hash as a big-endian unsigned integer."""
    return int.from_bytes(to_bytes32(value), byteorder='big')


def hex32(value: Bytes32Like) -> str:
    """Render a 32-byte hash as lowercase 0x-prefixed hex."""
    return encode_hex(to_bytes32(value))
