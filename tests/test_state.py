"""Tests for the in-memory verifier state."""

from poseidon_merkle.crypto.merkle import build_proof
from poseidon_merkle.verifier.state import VerifierState


def test_initial_state():
    state = VerifierState()
    assert state.verification_count == 0
    assert state.last_result() == (0, False)
    assert len(state.events) == 0


def test_records_valid_and_invalid():
    state = VerifierState()
    proof = build_proof([1, 2, 3, 4], 2)

    assert state.verify_merkle_path(proof.root, proof.leaf, proof.path, proof.indices)
    assert state.last_result() == (proof.root, True)
    assert state.verification_count == 1

    assert not state.verify_merkle_path(proof.root, proof.leaf + 1, proof.path, proof.indices)
    assert state.last_result() == (proof.root, False)
    assert state.verification_count == 2
    assert state.events.verify_chain()


def test_malformed_proof_still_counted():
    state = VerifierState()
    assert not state.verify_merkle_path(1, 2, [3, 4], [False])
    assert state.verification_count == 1
    assert state.last_result() == (1, False)


def test_counter_is_monotonic():
    state = VerifierState()
    counts = [state.record(7, 7, True) for _ in range(5)]
    assert counts == [1, 2, 3, 4, 5]
