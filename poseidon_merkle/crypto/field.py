"""BN254 scalar-field arithmetic F_p.

All values are Python ints in [0, PRIME).  Inputs are assumed to be
reduced already; none of these functions re-validate them.
"""

from __future__ import annotations

from poseidon_merkle.config import PRIME


def add(a: int, b: int) -> int:
    """Field addition.

    a, b < p implies a + b < 2p, so one conditional subtraction is enough.
    """
    s = a + b
    if s >= PRIME:
        s -= PRIME
    return s


def sub(a: int, b: int) -> int:
    """Field subtraction, wrapping through p on underflow."""
    if a >= b:
        return a - b
    return PRIME - (b - a)


def mul(a: int, b: int) -> int:
    """Field multiplication (double-width product, then mod p)."""
    return (a * b) % PRIME


def pow5(x: int) -> int:
    """x^5 as x^2 -> x^4 -> x^4 * x."""
    x2 = mul(x, x)
    x4 = mul(x2, x2)
    return mul(x4, x)


def is_valid(a: int) -> bool:
    """True iff *a* is a canonical field element."""
    return 0 <= a < PRIME


def reduce(a: int) -> int:
    """Subtract p once if ``a >= p``.

    Only correct for a < 2p.  Use ``a % PRIME`` for arbitrary integers.
    """
    if a >= PRIME:
        return a - PRIME
    return a
