"""Tests for BN254 scalar-field arithmetic."""

import random

from poseidon_merkle.config import PRIME
from poseidon_merkle.crypto import field


def test_prime_is_bn254_scalar_field():
    assert PRIME == 0x30644E72E131A029B85045B68181585D2833E84879B9709143E1F593F0000001


def test_add_basic():
    assert field.add(100, 200) == 300


def test_add_wrap():
    assert field.add(PRIME - 1, 2) == 1


def test_add_to_exactly_p():
    assert field.add(PRIME - 1, 1) == 0


def test_sub_basic():
    assert field.sub(200, 100) == 100


def test_sub_underflow():
    assert field.sub(100, 200) == PRIME - 100
    assert field.sub(0, 1) == PRIME - 1


def test_sub_equal():
    assert field.sub(PRIME - 1, PRIME - 1) == 0


def test_mul_basic():
    assert field.mul(7, 8) == 56


def test_mul_wrap():
    # (p-1) * 2 = 2p - 2 = -2 mod p
    assert field.mul(PRIME - 1, 2) == PRIME - 2


def test_mul_minus_one_squared():
    assert field.mul(PRIME - 1, PRIME - 1) == 1


def test_pow5():
    assert field.pow5(2) == 32
    assert field.pow5(PRIME - 1) == PRIME - 1
    x = 123456789123456789
    assert field.pow5(x) == pow(x, 5, PRIME)


def test_is_valid():
    assert field.is_valid(0)
    assert field.is_valid(PRIME - 1)
    assert not field.is_valid(PRIME)
    assert not field.is_valid(2**256 - 1)
    assert not field.is_valid(-1)


def test_reduce():
    assert field.reduce(PRIME + 5) == 5
    assert field.reduce(PRIME) == 0
    assert field.reduce(42) == 42


def test_reduce_subtracts_only_once():
    assert field.reduce(2 * PRIME + 1) == PRIME + 1


def test_closure_random():
    rng = random.Random(1234)
    for _ in range(200):
        a = rng.randrange(PRIME)
        b = rng.randrange(PRIME)
        for result in (field.add(a, b), field.sub(a, b), field.mul(a, b)):
            assert 0 <= result < PRIME
        assert field.add(a, b) == (a + b) % PRIME
        assert field.sub(a, b) == (a - b) % PRIME
        assert field.mul(a, b) == (a * b) % PRIME
