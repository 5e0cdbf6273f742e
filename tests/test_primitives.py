"""
Primitive Test Suite

Covers keccak hashing, ABI word encoding, EIP-712 digest construction and
signature recovery.
"""

import unittest

from eth_abi import encode
from eth_utils import keccak

from airdrop import (
    CLAIM_TYPEHASH,
    DOMAIN_TYPEHASH,
    EIP712Domain,
    SignatureParts,
    ClaimSigner,
    claim_digest,
    claim_struct_hash,
    claim_typed_data,
    domain_separator,
    encode_claim,
    hex32,
    is_valid_signature,
    keccak256,
    normalize_address,
    recover_signer,
    sign_digest,
    to_bytes32,
    validate_uint256,
)
from airdrop.eip712 import typed_data_digest
from airdrop.signing import SECP256K1_N

from airdrop_fixtures import ACCOUNT1, ACCOUNT2, CHAIN_ID, CONTRACT, sign_claim


class TestHashing(unittest.TestCase):
    """keccak-256 primitive."""

    def test_empty_input(self):
        self.assertEqual(
            keccak256(b"").hex(),
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_string_hashed_as_utf8(self):
        self.assertEqual(keccak256("Airdrop"), keccak256(b"Airdrop"))

    def test_to_bytes32_accepts_hex(self):
        value = "0x" + "ab" * 32
        self.assertEqual(to_bytes32(value), bytes.fromhex("ab" * 32))
        self.assertEqual(hex32(bytes.fromhex("ab" * 32)), value)

    def test_to_bytes32_rejects_wrong_length(self):
        with self.assertRaises(ValueError):
            to_bytes32(b"\x00" * 31)
        with self.assertRaises(ValueError):
            to_bytes32("0x1234")

    def test_to_bytes32_rejects_other_types(self):
        with self.assertRaises(TypeError):
            to_bytes32(12345)


class TestEncoding(unittest.TestCase):
    """ABI word encoding of claim payloads."""

    def test_address_normalized_to_checksum(self):
        lower = ACCOUNT1.address.lower()
        self.assertEqual(normalize_address(lower), ACCOUNT1.address)

    def test_invalid_address_rejected(self):
        with self.assertRaises(ValueError):
            normalize_address("0x1234")
        with self.assertRaises(TypeError):
            normalize_address(1234)

    def test_uint256_bounds(self):
        self.assertEqual(validate_uint256(0), 0)
        self.assertEqual(validate_uint256(2 ** 256 - 1), 2 ** 256 - 1)
        with self.assertRaises(ValueError):
            validate_uint256(-1)
        with self.assertRaises(ValueError):
            validate_uint256(2 ** 256)
        with self.assertRaises(TypeError):
            validate_uint256(True)
        with self.assertRaises(TypeError):
            validate_uint256("1000")

    def test_claim_is_two_words(self):
        encoded = encode_claim(ACCOUNT1.address, 1000)
        self.assertEqual(len(encoded), 64)
        self.assertEqual(encoded[:12], b"\x00" * 12)
        self.assertEqual(encoded[12:32], bytes.fromhex(ACCOUNT1.address[2:]))
        self.assertEqual(int.from_bytes(encoded[32:], "big"), 1000)

    def test_claim_matches_tuple_encoding(self):
        self.assertEqual(
            encode_claim(ACCOUNT1.address, 1000),
            encode(["(address,uint256)"], [(ACCOUNT1.address, 1000)])
        )


class TestEIP712(unittest.TestCase):
    """Domain separator and Claim digest layout."""

    def test_domain_typehash(self):
        self.assertEqual(
            hex32(DOMAIN_TYPEHASH),
            "0x8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"
        )

    def test_claim_typehash(self):
        self.assertEqual(CLAIM_TYPEHASH, keccak(text="Claim(address claimer,uint256 amount)"))

    def test_reference_domain_separator(self):
        """EIP-712 reference example domain (Ether Mail)."""
        separator = domain_separator(
            1,
            "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
            name="Ether Mail",
            version="1"
        )
        self.assertEqual(
            hex32(separator),
            "0xf2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f"
        )

    def test_domain_separator_layout(self):
        expected = keccak(encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [DOMAIN_TYPEHASH, keccak(text="Airdrop"), keccak(text="v1"), CHAIN_ID, CONTRACT]
        ))
        self.assertEqual(domain_separator(CHAIN_ID, CONTRACT), expected)
        self.assertEqual(EIP712Domain(CHAIN_ID, CONTRACT).separator(), expected)

    def test_digest_layout(self):
        separator = domain_separator(CHAIN_ID, CONTRACT)
        struct_hash = keccak(encode(
            ["bytes32", "address", "uint256"],
            [CLAIM_TYPEHASH, ACCOUNT2.address, 1000]
        ))
        self.assertEqual(claim_struct_hash(ACCOUNT2.address, 1000), struct_hash)
        self.assertEqual(
            claim_digest(separator, ACCOUNT2.address, 1000),
            keccak(b"\x19\x01" + separator + struct_hash)
        )
        self.assertEqual(typed_data_digest(separator, struct_hash), claim_digest(separator, ACCOUNT2.address, 1000))

    def test_domain_binds_chain_and_contract(self):
        base = domain_separator(CHAIN_ID, CONTRACT)
        self.assertNotEqual(base, domain_separator(CHAIN_ID + 1, CONTRACT))
        self.assertNotEqual(base, domain_separator(CHAIN_ID, ACCOUNT1.address))

    def test_eth_account_signature_recovers_over_our_digest(self):
        """A standard signTypedData signature verifies against the digest we build."""
        signature = sign_claim(ACCOUNT2.address, 1000)
        digest = claim_digest(domain_separator(CHAIN_ID, CONTRACT), ACCOUNT2.address, 1000)
        self.assertEqual(recover_signer(digest, signature), ACCOUNT1.address)

    def test_typed_data_document(self):
        domain = EIP712Domain(CHAIN_ID, CONTRACT.lower())
        doc = claim_typed_data(domain, ACCOUNT2.address.lower(), 1000)
        self.assertEqual(doc["primaryType"], "Claim")
        self.assertEqual(doc["domain"], {
            "name": "Airdrop",
            "version": "v1",
            "chainId": CHAIN_ID,
            "verifyingContract": CONTRACT,
        })
        self.assertEqual(doc["message"], {"claimer": ACCOUNT2.address, "amount": 1000})


class TestSignatureRecovery(unittest.TestCase):
    """secp256k1 recovery and acceptance rules."""

    def setUp(self):
        self.digest = keccak(b"airdrop recovery test")
        self.signature = sign_digest(self.digest, ACCOUNT1.key)

    def test_recover_own_signature(self):
        self.assertEqual(recover_signer(self.digest, self.signature), ACCOUNT1.address)
        self.assertTrue(is_valid_signature(self.digest, self.signature, ACCOUNT1.address.lower()))

    def test_sign_digest_layout(self):
        parts = SignatureParts.from_bytes(self.signature)
        self.assertIn(parts.v, (27, 28))
        self.assertTrue(parts.is_canonical())
        self.assertEqual(parts.to_bytes(), self.signature)

    def test_hex_signature_accepted(self):
        self.assertEqual(recover_signer("0x" + self.digest.hex(), "0x" + self.signature.hex()), ACCOUNT1.address)

    def test_wrong_length_recovers_nothing(self):
        self.assertIsNone(recover_signer(self.digest, self.signature[:64]))
        self.assertIsNone(recover_signer(self.digest, self.signature + b"\x00"))
        self.assertIsNone(recover_signer(self.digest, "not hex"))

    def test_bad_v_recovers_nothing(self):
        for v in (0, 1, 26, 29):
            tampered = self.signature[:64] + bytes([v])
            self.assertIsNone(recover_signer(self.digest, tampered))

    def test_high_s_rejected(self):
        parts = SignatureParts.from_bytes(self.signature)
        malleated = SignatureParts(r=parts.r, s=SECP256K1_N - parts.s, v=55 - parts.v)
        self.assertIsNone(recover_signer(self.digest, malleated.to_bytes()))

    def test_zero_r_rejected(self):
        parts = SignatureParts.from_bytes(self.signature)
        self.assertIsNone(recover_signer(self.digest, SignatureParts(0, parts.s, parts.v).to_bytes()))

    def test_other_digest_recovers_other_address(self):
        other = keccak(b"something else")
        self.assertNotEqual(recover_signer(other, self.signature), ACCOUNT1.address)

    def test_claim_signer_matches_eth_account(self):
        signer = ClaimSigner(ACCOUNT1.key)
        self.assertEqual(signer.address, ACCOUNT1.address)
        ours = signer.sign_claim(EIP712Domain(CHAIN_ID, CONTRACT), ACCOUNT2.address, 1000)
        # RFC 6979 signing is deterministic
        self.assertEqual(ours, sign_claim(ACCOUNT2.address, 1000))


if __name__ == "__main__":
    unittest.main(verbosity=2)
