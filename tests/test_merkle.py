"""
Merkle Proof Verifier Test Suite

Proofs are generated by an independent sorted-pair tree builder and checked
with the verifier.
"""

import unittest

from eth_utils import keccak

from airdrop import (
    InvalidLeaf,
    InvalidMerkleRoot,
    claim_leaf,
    hash_pair,
    process_proof,
    verify_claim,
    verify_proof,
)

from airdrop_fixtures import ACCOUNT1, AIRDROP_AMOUNT, REST, TREE, SortedMerkleTree, leaf_for


class TestLeafAndPair(unittest.TestCase):

    def test_leaf_matches_tuple_encoding(self):
        for acct in REST:
            self.assertEqual(claim_leaf(acct.address, AIRDROP_AMOUNT), leaf_for(acct.address, AIRDROP_AMOUNT))

    def test_leaf_case_insensitive(self):
        addr = REST[0].address
        self.assertEqual(claim_leaf(addr.lower(), 1), claim_leaf(addr, 1))

    def test_hash_pair_is_order_independent(self):
        a, b = keccak(b"a"), keccak(b"b")
        self.assertEqual(hash_pair(a, b), hash_pair(b, a))

    def test_hash_pair_smaller_first(self):
        low = b"\x00" * 31 + b"\x01"
        high = b"\xff" * 32
        self.assertEqual(hash_pair(high, low), keccak(low + high))

    def test_hash_pair_equal_values(self):
        a = keccak(b"same")
        self.assertEqual(hash_pair(a, a), keccak(a + a))


class TestProofVerification(unittest.TestCase):
    """Round trip against a sorted-pair tree."""

    def test_every_member_verifies(self):
        for acct in REST:
            leaf = leaf_for(acct.address, AIRDROP_AMOUNT)
            proof = TREE.proof(leaf)
            self.assertEqual(process_proof(leaf, proof), TREE.root)
            self.assertTrue(verify_proof(proof, TREE.root, leaf))
            verify_claim(TREE.root, proof, leaf, acct.address, AIRDROP_AMOUNT)

    def test_hex_inputs(self):
        leaf = leaf_for(REST[1].address, AIRDROP_AMOUNT)
        proof = ["0x" + p.hex() for p in TREE.proof(leaf)]
        verify_claim("0x" + TREE.root.hex(), proof, "0x" + leaf.hex(), REST[1].address, AIRDROP_AMOUNT)

    def test_single_leaf_tree(self):
        leaf = leaf_for(ACCOUNT1.address, 7)
        tree = SortedMerkleTree([leaf])
        self.assertEqual(tree.root, leaf)
        verify_claim(tree.root, [], leaf, ACCOUNT1.address, 7)

    def test_larger_uneven_tree(self):
        leaves = [leaf_for(REST[i % len(REST)].address, i + 1) for i in range(11)]
        tree = SortedMerkleTree(leaves)
        for leaf in leaves:
            self.assertTrue(verify_proof(tree.proof(leaf), tree.root, leaf))

    def test_inconsistent_leaf_rejected(self):
        leaf = leaf_for(REST[0].address, AIRDROP_AMOUNT)
        with self.assertRaises(InvalidLeaf):
            verify_claim(TREE.root, TREE.proof(leaf), leaf, REST[0].address, AIRDROP_AMOUNT + 1)

    def test_other_members_leaf_rejected(self):
        """A valid proof for member A cannot carry member B's payload."""
        leaf = leaf_for(REST[0].address, AIRDROP_AMOUNT)
        with self.assertRaises(InvalidLeaf):
            verify_claim(TREE.root, TREE.proof(leaf), leaf, REST[1].address, AIRDROP_AMOUNT)

    def test_non_member_rejected(self):
        leaf = leaf_for(ACCOUNT1.address, AIRDROP_AMOUNT)
        with self.assertRaises(InvalidMerkleRoot):
            verify_claim(TREE.root, TREE.proof(leaf), leaf, ACCOUNT1.address, AIRDROP_AMOUNT)

    def _deepest_member(self):
        # first sorted leaf has a sibling on every layer
        leaf = TREE.leaves[0]
        acct = next(a for a in REST if leaf_for(a.address, AIRDROP_AMOUNT) == leaf)
        return acct, leaf

    def test_reordered_proof_rejected(self):
        acct, leaf = self._deepest_member()
        proof = TREE.proof(leaf)
        self.assertEqual(len(proof), 3)
        with self.assertRaises(InvalidMerkleRoot):
            verify_claim(TREE.root, list(reversed(proof)), leaf, acct.address, AIRDROP_AMOUNT)

    def test_truncated_proof_rejected(self):
        acct, leaf = self._deepest_member()
        with self.assertRaises(InvalidMerkleRoot):
            verify_claim(TREE.root, TREE.proof(leaf)[:-1], leaf, acct.address, AIRDROP_AMOUNT)

    def test_wrong_root_rejected(self):
        leaf = leaf_for(REST[0].address, AIRDROP_AMOUNT)
        self.assertFalse(verify_proof(TREE.proof(leaf), keccak(b"other root"), leaf))


if __name__ == "__main__":
    unittest.main(verbosity=2)
