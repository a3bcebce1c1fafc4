#!/usr/bin/env python3
"""Poseidon Merkle verifier end-to-end demo.

Usage (with the service running, e.g. ``uvicorn poseidon_merkle.verifier.app:app``):
    python -m poseidon_merkle.demo.run_demo

The script:
1. Hashes a pair and checks it against the circomlib test vector.
2. Builds an 8-leaf tree locally and derives a proof for one leaf.
3. Verifies the proof through the service.
4. Verifies a tampered copy of the proof (must fail).
5. Runs a batch hash and a short sequential benchmark.
6. Prints the verification counter and the event log.
"""

from __future__ import annotations

from typing import Optional

from poseidon_merkle.config import VERIFIER_URL
from poseidon_merkle.client import VerifierClient
from poseidon_merkle.crypto.merkle import build_proof, compute_root

KNOWN_HASH_1_2 = 0x115CC0F5E7D690413DF64C6B9662E9CF2A3617F2743245519E19607A4417189A

LEAVES = [101, 202, 303, 404, 505, 606, 707, 808]


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def main(client: Optional[VerifierClient] = None) -> dict:
    """Run the demo; returns a summary so the flow can be checked."""
    own_client = client is None
    if client is None:
        client = VerifierClient(VERIFIER_URL)

    summary: dict = {}

    # ---- 1. Single hash ----
    banner("1) hash_two(1, 2)")
    h = client.hash_two(1, 2)
    summary["hash_matches_vector"] = h == KNOWN_HASH_1_2
    match = "✓" if summary["hash_matches_vector"] else "✗"
    print(f"   0x{h:064x} {match}")

    # ---- 2. Build tree + proof ----
    banner(f"2) Build tree over {len(LEAVES)} leaves")
    root = compute_root(LEAVES)
    proof = build_proof(LEAVES, 5)
    print(f"   root  = 0x{root:064x}")
    print(f"   leaf  = {proof.leaf} (index 5), depth {proof.depth}")

    # ---- 3. Verify ----
    banner("3) Verify proof")
    summary["valid_proof"] = client.verify_merkle_path(root, proof.leaf, proof.path, proof.indices)
    print(f"   valid = {summary['valid_proof']}")

    # ---- 4. Tampered proof ----
    banner("4) Verify tampered proof (flipped direction bit)")
    flipped = list(proof.indices)
    flipped[0] = not flipped[0]
    summary["tampered_proof"] = client.verify_merkle_path(root, proof.leaf, proof.path, flipped)
    print(f"   valid = {summary['tampered_proof']}")

    # ---- 5. Batch + benchmark ----
    banner("5) Batch hash and benchmark")
    hashes = client.batch_hash([1, 3, 5], [2, 4, 6])
    summary["batch_size"] = len(hashes)
    for h in hashes:
        print(f"   0x{h:064x}")
    summary["benchmark"] = client.benchmark_hash(10, 1, 2)
    print(f"   benchmark(10) = 0x{summary['benchmark']:064x}")

    # ---- 6. Counter + events ----
    banner("6) Verifier state")
    summary["verification_count"] = client.verification_count()
    last_root, last_ok = client.last_result()
    print(f"   verifications: {summary['verification_count']}")
    print(f"   last result:   {last_ok} for 0x{last_root:064x}")
    events = client.events()
    summary["chain_valid"] = events["chain_valid"]
    print(f"   Chain valid: {events['chain_valid']}")
    for e in events["entries"][-5:]:
        print(f"     [{e['event']}] result={e['result']} {e['entry_hash'][:14]}… ← {e['prev_hash'][:14]}…")

    banner("DEMO COMPLETE")
    if own_client:
        client.close()
    return summary


if __name__ == "__main__":
    main()
