"""Tests for Merkle path verification and the reference tree builder."""

import pytest

from poseidon_merkle.crypto import merkle
from poseidon_merkle.crypto.merkle import (
    MerkleProof,
    build_levels,
    build_proof,
    compute_root,
    generate_test_proof,
    verify,
)
from poseidon_merkle.crypto.poseidon import hash_two


# =========================================================================
# 1. verify
# =========================================================================


class TestVerify:
    def test_empty_path(self):
        leaf = 42
        assert verify(leaf, leaf, [], [])
        assert not verify(1, leaf, [], [])

    def test_two_leaf_tree(self):
        leaf0, leaf1 = 100, 200
        root = hash_two(leaf0, leaf1)
        assert verify(root, leaf0, [leaf1], [False])
        assert verify(root, leaf1, [leaf0], [True])

    def test_four_leaf_tree_by_hand(self):
        leaves = [1, 2, 3, 4]
        h01 = hash_two(leaves[0], leaves[1])
        h23 = hash_two(leaves[2], leaves[3])
        root = hash_two(h01, h23)
        assert verify(root, leaves[0], [leaves[1], h23], [False, False])
        assert verify(root, leaves[3], [leaves[2], h01], [True, True])
        assert compute_root(leaves) == root

    def test_wrong_sibling(self):
        root = hash_two(100, 200)
        assert not verify(root, 100, [999], [False])

    def test_wrong_direction(self):
        root = hash_two(100, 200)
        assert not verify(root, 100, [200], [True])

    def test_wrong_leaf(self):
        root = hash_two(100, 200)
        assert not verify(root, 101, [200], [False])

    def test_length_mismatch(self):
        assert not verify(1, 2, [3, 4], [False])
        assert not verify(1, 1, [], [False])
        # even a proof that would otherwise be valid
        root = hash_two(100, 200)
        assert not verify(root, 100, [200], [False, False])

    def test_alias(self):
        assert merkle.verify_merkle_path is verify


# =========================================================================
# 2. Tree builder
# =========================================================================


class TestTreeBuilder:
    def test_empty_root_is_zero(self):
        assert compute_root([]) == 0

    def test_single_leaf_is_root(self):
        assert compute_root([77]) == 77

    def test_odd_level_duplicates_last(self):
        leaves = [1, 2, 3]
        expected = hash_two(hash_two(1, 2), hash_two(3, 3))
        assert compute_root(leaves) == expected

    def test_levels_shape(self):
        levels = build_levels(list(range(5)))
        assert [len(level) for level in levels] == [5, 3, 2, 1]

    def test_build_levels_rejects_empty(self):
        with pytest.raises(ValueError):
            build_levels([])


# =========================================================================
# 3. Proof construction round-trips
# =========================================================================


class TestProofs:
    def test_four_leaf_round_trip(self):
        leaves = [11, 22, 33, 44]
        root = compute_root(leaves)
        for i in range(len(leaves)):
            proof = build_proof(leaves, i)
            assert proof.root == root
            assert proof.depth == 2
            assert verify(root, leaves[i], proof.path, proof.indices)

    def test_odd_tree_round_trip(self):
        leaves = [5, 6, 7, 8, 9]
        root = compute_root(leaves)
        for i in range(len(leaves)):
            assert build_proof(leaves, i).verify()
        assert build_proof(leaves, 4).root == root

    def test_single_leaf_proof(self):
        proof = build_proof([9], 0)
        assert proof.path == [] and proof.indices == []
        assert proof.verify()

    def test_depth_8_tree(self):
        leaves = list(range(256))
        root = compute_root(leaves)
        proof = build_proof(leaves, 0)
        assert proof.depth == 8
        assert proof.indices == [False] * 8
        assert verify(root, leaves[0], proof.path, proof.indices)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            build_proof([1, 2], 2)
        with pytest.raises(ValueError):
            build_proof([], 0)

    def test_tamper_each_sibling(self):
        leaves = list(range(10, 18))
        proof = build_proof(leaves, 5)
        for k in range(proof.depth):
            path = list(proof.path)
            path[k] += 1
            assert not verify(proof.root, proof.leaf, path, proof.indices)

    def test_tamper_each_direction_bit(self):
        leaves = list(range(10, 18))
        proof = build_proof(leaves, 5)
        for k in range(proof.depth):
            indices = list(proof.indices)
            indices[k] = not indices[k]
            assert not verify(proof.root, proof.leaf, proof.path, indices)

    def test_tamper_leaf(self):
        leaves = list(range(10, 18))
        proof = build_proof(leaves, 5)
        assert not verify(proof.root, leaves[4], proof.path, proof.indices)

    def test_generated_test_proof(self):
        for depth in (0, 1, 8, 16):
            proof = generate_test_proof(depth)
            assert isinstance(proof, MerkleProof)
            assert proof.depth == depth
            assert proof.verify()
        assert generate_test_proof(4).indices == [True, False, True, False]

    def test_generated_test_proof_rejects_negative_depth(self):
        with pytest.raises(ValueError):
            generate_test_proof(-1)
