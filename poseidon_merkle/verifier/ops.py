"""Verifier-side operations around the hash core.

- decoding of externally supplied 256-bit integers into field elements
- pairwise batch hashing (optionally spread over worker processes)
- the sequential hash-chain benchmark
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import Executor, ProcessPoolExecutor
from typing import List, Optional, Sequence, Union

from poseidon_merkle.config import BATCH_WORKERS, INPUT_POLICY, PRIME, WORD_BITS
from poseidon_merkle.crypto.poseidon import hash_two

logger = logging.getLogger(__name__)

RawElement = Union[int, str]

POLICIES = ("reject", "reduce")

_HEX_WORD = re.compile(r"0x[0-9a-f]{1,64}")
_DEC_WORD = re.compile(r"[0-9]{1,78}")


def _parse(value: RawElement) -> int:
    if isinstance(value, bool):
        raise ValueError("Booleans are not field elements")
    if isinstance(value, int):
        return value
    text = value.strip().lower()
    # ASCII digits only, no underscores or signs, at most one 256-bit word
    if _HEX_WORD.fullmatch(text):
        return int(text[2:], 16)
    if _DEC_WORD.fullmatch(text):
        return int(text, 10)
    raise ValueError(f"Not a decimal or 0x-hex word: {value!r}")


def decode_element(value: RawElement, policy: str = INPUT_POLICY) -> int:
    """Turn a caller-supplied uint256 (int, decimal or 0x-hex string) into F_p.

    Values in [p, 2**256) are rejected under the ``"reject"`` policy and
    reduced mod p under ``"reduce"``.  Anything outside the 256-bit word
    range is always rejected.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown input policy '{policy}'")
    v = _parse(value)
    if v < 0 or v >= 1 << WORD_BITS:
        raise ValueError(f"Value does not fit in {WORD_BITS} unsigned bits")
    if v >= PRIME:
        if policy == "reject":
            raise ValueError("Value is not a canonical field element (>= p)")
        # 2**256 > 5p, so a single conditional subtraction is not enough here
        v %= PRIME
    return v


def decode_elements(values: Sequence[RawElement], policy: str = INPUT_POLICY) -> List[int]:
    return [decode_element(v, policy) for v in values]


def encode_element(x: int) -> str:
    """Field element as a 0x-prefixed, 64-digit hex word."""
    return f"0x{x:064x}"


def _hash_pair(pair: tuple) -> int:
    return hash_two(pair[0], pair[1])


def make_pool(workers: int = BATCH_WORKERS) -> Optional[ProcessPoolExecutor]:
    """Process pool for ``batch_hash``, or None when hashing in-process."""
    if workers <= 1:
        return None
    return ProcessPoolExecutor(max_workers=workers)


def batch_hash(
    a_values: Sequence[int],
    b_values: Sequence[int],
    executor: Optional[Executor] = None,
    workers: int = BATCH_WORKERS,
) -> List[int]:
    """Hash ``(a_values[i], b_values[i])`` for every i, in input order.

    With *executor* the pairs are mapped over it; otherwise, for
    ``workers > 1`` a pool is created just for this call.
    """
    if len(a_values) != len(b_values):
        raise ValueError(
            f"Batch length mismatch: {len(a_values)} vs {len(b_values)}"
        )
    pairs = list(zip(a_values, b_values))
    if len(pairs) < 2 or (executor is None and workers <= 1):
        return [hash_two(a, b) for a, b in pairs]

    if executor is not None:
        chunksize = max(1, len(pairs) // (max(workers, 1) * 4))
        return list(executor.map(_hash_pair, pairs, chunksize=chunksize))

    logger.debug("hashing %d pairs on %d worker processes", len(pairs), workers)
    with make_pool(workers) as pool:
        return list(pool.map(_hash_pair, pairs, chunksize=max(1, len(pairs) // (workers * 4))))


def benchmark_hash(iterations: int, seed_a: int, seed_b: int) -> int:
    """Hash chain: r = H(seed_a, seed_b), then r = H(r, seed_b) repeatedly.

    *iterations* counts hashes in total; 0 is treated like 1.
    """
    if iterations < 0:
        raise ValueError(f"Iterations must be >= 0, got {iterations}")
    result = hash_two(seed_a, seed_b)
    for _ in range(1, iterations):
        result = hash_two(result, seed_b)
    return result
