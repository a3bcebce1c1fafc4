"""Global configuration for the Poseidon Merkle verifier."""

import os

# ---------- Finite-field prime (BN254 / alt_bn128 scalar field) ----------
# All field arithmetic is mod PRIME.  Values are exchanged with callers as
# raw 256-bit unsigned integers.
PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617
FIELD_BITS = 254
WORD_BITS = 256

# ---------- Poseidon parameters (circomlib, 2-input instance) ----------
T = 3                # state width: 1 capacity element + 2 inputs
FULL_ROUNDS = 8      # R_F, split evenly before and after the partial rounds
PARTIAL_ROUNDS = 57  # R_P
ALPHA = 5            # S-box exponent

# ---------- Verifier service ----------
# What the service boundary does with inputs in [PRIME, 2**256):
# "reject" answers 422, "reduce" maps them into the field.
INPUT_POLICY = os.environ.get("POSEIDON_MERKLE_INPUT_POLICY", "reject")

MAX_BATCH_SIZE = int(os.environ.get("POSEIDON_MERKLE_MAX_BATCH", "1024"))
MAX_BENCHMARK_ITERATIONS = int(os.environ.get("POSEIDON_MERKLE_MAX_ITERATIONS", "10000"))
MAX_PROOF_DEPTH = int(os.environ.get("POSEIDON_MERKLE_MAX_DEPTH", "64"))

# 0 or 1 hashes batches in-process; N > 1 spreads pairs over N worker processes.
BATCH_WORKERS = int(os.environ.get("POSEIDON_MERKLE_BATCH_WORKERS", "0"))

VERIFIER_URL = os.environ.get("POSEIDON_MERKLE_URL", "http://localhost:8000")
