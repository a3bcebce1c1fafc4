"""Poseidon permutation and two-to-one hash over the BN254 scalar field.

Instance (circomlib-compatible):
    width t = 3  (1 capacity element + 2 inputs)
    R_F = 8 full rounds, split 4 before and 4 after
    R_P = 57 partial rounds
    S-box x^5

Every round adds the next t round constants, applies the S-box (to the
whole state in full rounds, to state[0] only in partial rounds) and then
mixes the state with the MDS matrix.  A single constant cursor runs
across all 65 rounds and is never rewound.

API
---
hash_two(a, b)  -> field element   (state [0, a, b], output state[0])
permute(state)  -> new 3-element state
"""

from __future__ import annotations

from typing import List, Sequence

from poseidon_merkle.config import FULL_ROUNDS, PARTIAL_ROUNDS, T
from poseidon_merkle.crypto import field
from poseidon_merkle.crypto.constants import MDS_MATRIX, ROUND_CONSTANTS

State = List[int]


def sbox(x: int) -> int:
    """S-box: x^5 with three field multiplications."""
    return field.pow5(x)


def add_round_constants(state: State, cursor: int) -> None:
    for i in range(T):
        state[i] = field.add(state[i], ROUND_CONSTANTS[cursor + i])


def mds_multiply(state: State) -> State:
    """Return M . state."""
    result = [0] * T
    for i in range(T):
        row = MDS_MATRIX[i]
        acc = 0
        for j in range(T):
            acc = field.add(acc, field.mul(row[j], state[j]))
        result[i] = acc
    return result


def full_round(state: State, cursor: int) -> State:
    """Round constants, S-box on every element, MDS."""
    add_round_constants(state, cursor)
    for i in range(T):
        state[i] = sbox(state[i])
    return mds_multiply(state)


def partial_round(state: State, cursor: int) -> State:
    """Round constants, S-box on state[0] only, MDS."""
    add_round_constants(state, cursor)
    state[0] = sbox(state[0])
    return mds_multiply(state)


def permute(state: Sequence[int]) -> State:
    """Apply the full Poseidon permutation to a copy of *state*."""
    if len(state) != T:
        raise ValueError(f"Poseidon state must have {T} elements, got {len(state)}")
    s = list(state)
    cursor = 0

    for _ in range(FULL_ROUNDS // 2):
        s = full_round(s, cursor)
        cursor += T

    for _ in range(PARTIAL_ROUNDS):
        s = partial_round(s, cursor)
        cursor += T

    for _ in range(FULL_ROUNDS // 2):
        s = full_round(s, cursor)
        cursor += T

    return s


def hash_two(a: int, b: int) -> int:
    """Hash two field elements into one.

    Not symmetric: ``hash_two(a, b) != hash_two(b, a)`` in general.
    """
    return permute([0, a, b])[0]

