#!/usr/bin/env python3
"""
Airdrop Command Line Interface

Usage:
    airdrop domain-separator (--deployment <file> | --chain-id <id> --contract <addr>)
    airdrop digest --recipient <addr> --amount <n> (--deployment <file> | --chain-id <id> --contract <addr>)
    airdrop leaf --recipient <addr> --amount <n>
    airdrop recover --digest <hash> --signature <sig>
    airdrop verify-signature --recipient <addr> --amount <n> --signature <sig> [--signer <addr>] ...
    airdrop verify-proof --recipient <addr> --amount <n> --proof <h1,h2,...> [--leaf <hash>] [--root <hash>] ...
    airdrop claimed [--ledger <file>] [--recipient <addr>]
    airdrop demo [--ledger <file>]
"""

import argparse
import json
import sys
from typing import List, Optional

from eth_utils import encode_hex

from .config import (
    CHAIN_ID,
    LEDGER_PATH,
    LOG_FILE,
    LOG_JSON,
    LOG_LEVEL,
    Deployment,
    is_debug,
    is_production,
    load_deployment,
)
from .eip712 import EIP712Domain, claim_digest, claim_typed_data
from .encoding import normalize_address
from .errors import ClaimError
from .hashing import hex32, keccak256
from .ledger import SqliteClaimLedger
from .logging_config import configure_logging, set_operation_id
from .merkle import claim_leaf, hash_pair, verify_claim
from .signing import ClaimSigner, recover_signer


def _deployment(args) -> Optional[Deployment]:
    if getattr(args, "deployment", None):
        return load_deployment(args.deployment)
    return None


def _domain(args) -> EIP712Domain:
    deployment = _deployment(args)
    if deployment:
        return EIP712Domain(chain_id=deployment.chain_id, verifying_contract=deployment.contract_address)
    if not args.contract:
        raise ValueError("--contract or --deployment is required")
    return EIP712Domain(chain_id=args.chain_id, verifying_contract=args.contract)


def _split_proof(values: List[str]) -> List[str]:
    proof = []
    for value in values or []:
        proof.extend(p.strip() for p in value.split(",") if p.strip())
    return proof


def cmd_domain_separator(args) -> int:
    domain = _domain(args)
    print(json.dumps({
        "domain": domain.to_dict(),
        "domain_separator": encode_hex(domain.separator())
    }, indent=2))
    return 0


def cmd_digest(args) -> int:
    domain = _domain(args)
    output = {"digest": encode_hex(claim_digest(domain.separator(), args.recipient, args.amount))}
    if args.typed_data:
        output["typed_data"] = claim_typed_data(domain, args.recipient, args.amount)
    print(json.dumps(output, indent=2))
    return 0


def cmd_leaf(args) -> int:
    print(encode_hex(claim_leaf(args.recipient, args.amount)))
    return 0


def cmd_recover(args) -> int:
    recovered = recover_signer(args.digest, args.signature)
    if recovered is None:
        print("✗ Signature does not recover to any address", file=sys.stderr)
        return 1
    print(recovered)
    return 0


def cmd_verify_signature(args) -> int:
    domain = _domain(args)
    deployment = _deployment(args)
    signer = args.signer or (deployment.signer if deployment else None)
    if not signer:
        raise ValueError("--signer or --deployment is required")

    digest = claim_digest(domain.separator(), args.recipient, args.amount)
    recovered = recover_signer(digest, args.signature)

    print(json.dumps({
        "digest": encode_hex(digest),
        "recovered": recovered,
        "expected": normalize_address(signer)
    }, indent=2))

    if recovered == normalize_address(signer):
        print("\n✓ Signature valid", file=sys.stderr)
        return 0
    print("\n✗ INVALID_SIGNER", file=sys.stderr)
    return 1


def cmd_verify_proof(args) -> int:
    deployment = _deployment(args)
    root = args.root or (deployment.merkle_root if deployment else None)
    if not root:
        raise ValueError("--root or --deployment is required")

    leaf = args.leaf or claim_leaf(args.recipient, args.amount)
    proof = _split_proof(args.proof)

    verify_claim(root, proof, leaf, args.recipient, args.amount)
    print(f"✓ ({normalize_address(args.recipient)}, {args.amount}) is committed under {hex32(root)}",
          file=sys.stderr)
    return 0


def cmd_claimed(args) -> int:
    ledger = SqliteClaimLedger(args.ledger)
    try:
        if args.recipient:
            status = ledger.status(args.recipient)
            print(f"{normalize_address(args.recipient)} {status.value}")
            return 0
        for recipient in ledger.claimed_recipients():
            print(recipient)
        return 0
    finally:
        ledger.close()


def cmd_demo(args) -> int:
    """Run both claim paths end to end against in-memory collaborators."""
    from .engine import Airdrop
    from .token import InMemoryToken

    print("=" * 60)
    print("Airdrop Claim Engine Demonstration")
    print("=" * 60)

    signer = ClaimSigner(keccak256("airdrop-demo-signer"))
    admin = ClaimSigner(keccak256("airdrop-demo-admin")).address
    alice = ClaimSigner(keccak256("airdrop-demo-alice")).address
    bob = ClaimSigner(keccak256("airdrop-demo-bob")).address
    carol = ClaimSigner(keccak256("airdrop-demo-carol")).address
    contract = normalize_address("0x" + keccak256("airdrop-demo-contract")[-20:].hex())

    alice_leaf = claim_leaf(alice, 1000)
    bob_leaf = claim_leaf(bob, 2000)
    root = hash_pair(alice_leaf, bob_leaf)

    token = InMemoryToken()
    token.mint(contract, 10 ** 24)
    ledger = SqliteClaimLedger(args.ledger) if args.ledger else None

    airdrop = Airdrop(
        merkle_root=root,
        signer=signer.address,
        token=token.wallet(contract),
        owner=admin,
        chain_id=CHAIN_ID,
        contract_address=contract,
        ledger=ledger
    )

    print(f"\nMerkle root:      {hex32(root)}")
    print(f"Signer:           {signer.address}")
    print(f"Domain separator: {hex32(airdrop.domain_separator)}")

    def attempt(label, fn, *fn_args):
        try:
            fn(*fn_args)
            print(f"  ✓ {label}")
        except ClaimError as e:
            print(f"  ✗ {label}: {e.code.value}")

    print("\n" + "-" * 60)
    print("Merkle path")
    print("-" * 60)
    attempt("alice claims 1000", airdrop.merkle_claim, alice, [bob_leaf], alice_leaf, alice, 1000)
    attempt("alice claims again", airdrop.merkle_claim, alice, [bob_leaf], alice_leaf, alice, 1000)
    attempt("alice claims for bob", airdrop.merkle_claim, alice, [alice_leaf], bob_leaf, bob, 2000)
    print(f"  alice balance: {token.balance_of(alice)}")

    print("\n" + "-" * 60)
    print("Signature path")
    print("-" * 60)
    signature = signer.sign_claim(airdrop.config.domain, carol, 500)
    attempt("carol claims 501 with a 500 signature", airdrop.signature_claim, carol, signature, carol, 501)
    airdrop.disable_signature_verification(admin)
    print("  administrator disabled signature verification")
    attempt("carol claims 500", airdrop.signature_claim, carol, signature, carol, 500)
    print(f"  carol balance: {token.balance_of(carol)}")

    if ledger is not None:
        print(f"\nLedger {args.ledger}: {len(ledger.claimed_recipients())} claimed")
        ledger.close()

    print("\n" + "=" * 60)
    print("Demonstration complete.")
    print("=" * 60)
    return 0


def _add_domain_args(p: argparse.ArgumentParser):
    p.add_argument("-d", "--deployment", help="Deployment JSON file")
    p.add_argument("--chain-id", type=int, default=CHAIN_ID, help="Chain id (default from AIRDROP_CHAIN_ID)")
    p.add_argument("--contract", help="Verifying contract address")


def _add_claim_args(p: argparse.ArgumentParser):
    p.add_argument("-r", "--recipient", required=True, help="Claimer address")
    p.add_argument("-a", "--amount", required=True, type=int, help="Amount (uint256)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airdrop",
        description="Airdrop claim verification CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  airdrop demo
  airdrop domain-separator --chain-id 1 --contract 0x...
  airdrop digest -d deployment.json -r 0x... -a 1000 --typed-data
  airdrop leaf -r 0x... -a 1000
  airdrop recover --digest 0x... --signature 0x...
  airdrop verify-proof -d deployment.json -r 0x... -a 1000 --proof 0x...,0x...
        """
    )
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Log level")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ds_parser = subparsers.add_parser("domain-separator", help="Compute the EIP-712 domain separator")
    _add_domain_args(ds_parser)

    digest_parser = subparsers.add_parser("digest", help="Compute the Claim digest to sign")
    _add_domain_args(digest_parser)
    _add_claim_args(digest_parser)
    digest_parser.add_argument("--typed-data", action="store_true", help="Also print the typed-data document")

    leaf_parser = subparsers.add_parser("leaf", help="Compute the Merkle leaf for a claim")
    _add_claim_args(leaf_parser)

    recover_parser = subparsers.add_parser("recover", help="Recover a signer from digest and signature")
    recover_parser.add_argument("--digest", required=True, help="32-byte digest (hex)")
    recover_parser.add_argument("--signature", required=True, help="65-byte signature (hex)")

    vs_parser = subparsers.add_parser("verify-signature", help="Check a claim signature")
    _add_domain_args(vs_parser)
    _add_claim_args(vs_parser)
    vs_parser.add_argument("--signature", required=True, help="65-byte signature (hex)")
    vs_parser.add_argument("--signer", help="Expected signer (default from deployment)")

    vp_parser = subparsers.add_parser("verify-proof", help="Check a Merkle proof for a claim")
    vp_parser.add_argument("-d", "--deployment", help="Deployment JSON file")
    vp_parser.add_argument("--root", help="Merkle root (default from deployment)")
    _add_claim_args(vp_parser)
    vp_parser.add_argument("--leaf", help="Leaf to check (default: recomputed)")
    vp_parser.add_argument("--proof", action="append", default=[], help="Sibling hashes, comma separated or repeated")

    claimed_parser = subparsers.add_parser("claimed", help="Show claimed recipients in a ledger")
    claimed_parser.add_argument("--ledger", default=LEDGER_PATH, help="SQLite ledger (default from AIRDROP_LEDGER_PATH)")
    claimed_parser.add_argument("-r", "--recipient", help="Show the status of one recipient")

    demo_parser = subparsers.add_parser("demo", help="Run demonstration")
    demo_parser.add_argument("--ledger", help="Persist claims to this SQLite file")

    return parser


COMMANDS = {
    "domain-separator": cmd_domain_separator,
    "digest": cmd_digest,
    "leaf": cmd_leaf,
    "recover": cmd_recover,
    "verify-signature": cmd_verify_signature,
    "verify-proof": cmd_verify_proof,
    "claimed": cmd_claimed,
    "demo": cmd_demo,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = "DEBUG" if is_debug() else args.log_level
    configure_logging(level=level, json_format=LOG_JSON or is_production(), log_file=LOG_FILE)
    set_operation_id()

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args)
    except ClaimError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
