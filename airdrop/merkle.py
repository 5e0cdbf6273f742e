"""
Airdrop Merkle Proof Verifier

Membership proofs against a committed root, using sorted-pair hashing:

    leaf  = keccak256(abi.encode(recipient, amount))
    node  = keccak256(min(a, b) || max(a, b))     (numeric order of the 32-byte values)

Because every internal node orders its children by value, a proof is just the
list of siblings from leaf to root; no left/right flags are needed. Trees
built by standard tooling with ``sort: true`` use the same rule.
"""

from typing import Iterable, List

from .encoding import encode_claim
from .errors import InvalidLeaf, InvalidMerkleRoot
from .hashing import Bytes32Like, hash_to_int, hex32, keccak256, to_bytes32


def claim_leaf(recipient: str, amount: int) -> bytes:
    """Leaf committing to (recipient, amount)."""
    return keccak256(encode_claim(recipient, amount))


def hash_pair(a: Bytes32Like, b: Bytes32Like) -> bytes:
    """Hash two nodes, smaller value first."""
    a, b = to_bytes32(a), to_bytes32(b)
    if hash_to_int(a) < hash_to_int(b):
        return keccak256(a + b)
    return keccak256(b + a)


def process_proof(leaf: Bytes32Like, proof: Iterable[Bytes32Like]) -> bytes:
    """Fold the proof into the leaf, left to right, and return the root it reaches."""
    computed = to_bytes32(leaf)
    for sibling in proof:
        computed = hash_pair(computed, sibling)
    return computed


def verify_proof(proof: Iterable[Bytes32Like], root: Bytes32Like, leaf: Bytes32Like) -> bool:
    return process_proof(leaf, proof) == to_bytes32(root)


def verify_claim(
    root: Bytes32Like,
    proof: Iterable[Bytes32Like],
    leaf: Bytes32Like,
    recipient: str,
    amount: int
) -> None:
    """
    Check that (recipient, amount) is committed under root.

    The supplied leaf must itself hash from (recipient, amount); a proof for
    some other member cannot be paired with this payload.

    Raises:
        InvalidLeaf: leaf does not match recipient/amount
        InvalidMerkleRoot: proof does not reach root
    """
    expected_leaf = claim_leaf(recipient, amount)
    supplied_leaf = to_bytes32(leaf)
    if supplied_leaf != expected_leaf:
        raise InvalidLeaf(f"expected {hex32(expected_leaf)}, got {hex32(supplied_leaf)}")

    computed_root = process_proof(supplied_leaf, proof)
    if computed_root != to_bytes32(root):
        raise InvalidMerkleRoot(f"proof reaches {hex32(computed_root)}")


def normalize_proof(proof: Iterable[Bytes32Like]) -> List[bytes]:
    return [to_bytes32(p) for p in proof]
