"""Poseidon round constants and MDS matrix for BN254, t=3.

The tables are the circomlib / Poseidon reference parameters for
(x^5, n=254, t=3, R_F=8, R_P=57).  They are derived once at import time
with the reference parameter generator instead of being pasted in:

1. An 80-bit Grain LFSR is seeded with the parameter description
   (field type, s-box type, n, t, R_F, R_P, then thirty 1-bits) and
   clocked 160 times to discard its warm-up output.
2. Output bits are self-shrunk: the LFSR emits bit pairs (a, b) and b is
   kept only when a == 1.
3. Each round constant is the next n kept bits read MSB first, resampled
   while it is >= p.  Constants are produced in consumption order.
4. The MDS matrix is the Cauchy matrix M[i][j] = 1 / (x_i + y_j) over
   2t further n-bit samples reduced mod p (x = first t, y = last t).

API
---
ROUND_CONSTANTS           -> tuple of (R_F + R_P) * t field elements
MDS_MATRIX                -> t x t tuple of tuples
grain_bits(...)           -> infinite generator of kept LFSR bits
generate_round_constants  -> list of constants drawn from a bit stream
generate_mds_matrix       -> Cauchy matrix drawn from the same stream
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Tuple

from poseidon_merkle.config import ALPHA, FIELD_BITS, FULL_ROUNDS, PARTIAL_ROUNDS, PRIME, T

# Parameter-description codes understood by the reference generator.
FIELD_TYPE_PRIME = 1
SBOX_TYPE_POWER = 0  # x^alpha

_LFSR_SIZE = 80
_WARMUP_CLOCKS = 160
_TAPS = (62, 51, 38, 23, 13, 0)

Matrix = Tuple[Tuple[int, ...], ...]


def _seed_bits(field_type: int, sbox_type: int, n: int, t: int, r_f: int, r_p: int) -> List[int]:
    """Initial LFSR register: the parameter description, then thirty 1-bits."""
    bits: List[int] = []
    for value, width in (
        (field_type, 2),
        (sbox_type, 4),
        (n, 12),
        (t, 12),
        (r_f, 10),
        (r_p, 10),
    ):
        bits.extend(int(b) for b in format(value, f"0{width}b"))
    bits.extend([1] * 30)
    if len(bits) != _LFSR_SIZE:
        raise ValueError(f"Grain seed is {len(bits)} bits, expected {_LFSR_SIZE}")
    return bits


def grain_bits(
    n: int = FIELD_BITS,
    t: int = T,
    r_f: int = FULL_ROUNDS,
    r_p: int = PARTIAL_ROUNDS,
    field_type: int = FIELD_TYPE_PRIME,
    sbox_type: int = SBOX_TYPE_POWER,
) -> Iterator[int]:
    """Yield the self-shrunk output bits of the parameter Grain LFSR."""
    register = deque(_seed_bits(field_type, sbox_type, n, t, r_f, r_p), maxlen=_LFSR_SIZE)

    def clock() -> int:
        bit = 0
        for tap in _TAPS:
            bit ^= register[tap]
        register.append(bit)  # maxlen drops register[0]
        return bit

    for _ in range(_WARMUP_CLOCKS):
        clock()

    while True:
        if clock():
            yield clock()
        else:
            clock()


def _take(bits: Iterator[int], n: int) -> int:
    """Read the next *n* bits as an unsigned integer, MSB first."""
    value = 0
    for _ in range(n):
        value = (value << 1) | next(bits)
    return value


def generate_round_constants(
    bits: Iterator[int],
    count: int,
    n: int = FIELD_BITS,
    prime: int = PRIME,
) -> List[int]:
    """Draw *count* round constants, rejecting samples outside [0, prime)."""
    constants: List[int] = []
    for _ in range(count):
        value = _take(bits, n)
        while value >= prime:
            value = _take(bits, n)
        constants.append(value)
    return constants


def generate_mds_matrix(
    bits: Iterator[int],
    t: int = T,
    n: int = FIELD_BITS,
    prime: int = PRIME,
) -> Matrix:
    """Draw a t x t Cauchy matrix M[i][j] = 1 / (x_i + y_j) mod prime."""
    while True:
        samples = [_take(bits, n) % prime for _ in range(2 * t)]
        while len(set(samples)) != len(samples):
            samples = [_take(bits, n) % prime for _ in range(2 * t)]
        xs, ys = samples[:t], samples[t:]
        if any((x + y) % prime == 0 for x in xs for y in ys):
            continue
        return tuple(
            tuple(pow((x + y) % prime, -1, prime) for y in ys)
            for x in xs
        )


def _derive_tables() -> Tuple[Tuple[int, ...], Matrix]:
    if ALPHA != 5:
        raise ValueError(f"Parameter generator is seeded for the x^5 s-box, not x^{ALPHA}")
    bits = grain_bits()
    constants = generate_round_constants(bits, (FULL_ROUNDS + PARTIAL_ROUNDS) * T)
    # The matrix continues the same stream after the last round constant.
    matrix = generate_mds_matrix(bits)
    return tuple(constants), matrix


ROUND_CONSTANTS, MDS_MATRIX = _derive_tables()
