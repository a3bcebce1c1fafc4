"""Merkle membership proofs over Poseidon ``hash_two``.

A proof is a list of sibling values (``path``) and a list of direction
bits (``indices``) of the same length, ordered from the leaf up to the
root.  ``indices[k]`` is True when the current node at level k is the
*right* child, so its parent is ``hash_two(sibling, current)``;
otherwise the parent is ``hash_two(current, sibling)``.

Example, for the tree::

           root
          /    \\
        h01    h23
       /  \\   /  \\
      l0  l1 l2  l3

the proof for l0 is ``path=[l1, h23], indices=[False, False]`` and the
proof for l3 is ``path=[l2, h01], indices=[True, True]``.

``verify`` never raises: a malformed proof (length mismatch) and a
well-formed but wrong proof both return False, and callers cannot tell
the two apart.

The tree builders here exist to produce fixtures and test proofs; trees
are not stored anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from poseidon_merkle.crypto.poseidon import hash_two


def verify(root: int, leaf: int, path: Sequence[int], indices: Sequence[bool]) -> bool:
    """Return True iff *leaf* hashes up to *root* along *path*/*indices*."""
    if len(path) != len(indices):
        return False

    if not path:
        return leaf == root

    current = leaf
    for sibling, is_right in zip(path, indices):
        if is_right:
            current = hash_two(sibling, current)
        else:
            current = hash_two(current, sibling)

    return current == root


verify_merkle_path = verify


# ---------------------------------------------------------------------------
# Reference tree builder
# ---------------------------------------------------------------------------


def _next_level(level: Sequence[int]) -> List[int]:
    parents: List[int] = []
    for i in range(0, len(level), 2):
        left = level[i]
        # an odd trailing node is paired with itself
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(hash_two(left, right))
    return parents


def build_levels(leaves: Sequence[int]) -> List[List[int]]:
    """Return every tree level, leaves first and ``[root]`` last."""
    if not leaves:
        raise ValueError("Need at least one leaf")
    levels = [list(leaves)]
    while len(levels[-1]) > 1:
        levels.append(_next_level(levels[-1]))
    return levels


def compute_root(leaves: Sequence[int]) -> int:
    """Root of the tree over *leaves* (0 for no leaves, the leaf for one)."""
    if not leaves:
        return 0
    return build_levels(leaves)[-1][0]


@dataclass
class MerkleProof:
    """A membership proof for one leaf."""

    root: int
    leaf: int
    path: List[int] = field(default_factory=list)
    indices: List[bool] = field(default_factory=list)

    def verify(self) -> bool:
        return verify(self.root, self.leaf, self.path, self.indices)

    @property
    def depth(self) -> int:
        return len(self.path)


def build_proof(leaves: Sequence[int], index: int) -> MerkleProof:
    """Build the proof for ``leaves[index]`` by walking the tree levels."""
    if not leaves:
        raise ValueError("Need at least one leaf")
    if not 0 <= index < len(leaves):
        raise IndexError(f"Leaf index {index} out of range for {len(leaves)} leaves")

    levels = build_levels(leaves)
    path: List[int] = []
    indices: List[bool] = []
    position = index
    for level in levels[:-1]:
        sibling = position ^ 1
        # past the end of an odd level the node is its own sibling
        path.append(level[sibling] if sibling < len(level) else level[position])
        indices.append(position % 2 == 1)
        position //= 2

    return MerkleProof(root=levels[-1][0], leaf=leaves[index], path=path, indices=indices)


def generate_test_proof(depth: int) -> MerkleProof:
    """Deterministic valid proof of the given depth, for benchmarks and demos.

    Siblings are 1, 2, ..., depth and the direction bits alternate starting
    with "right"; the root is computed by folding so the proof verifies.
    """
    if depth < 0:
        raise ValueError(f"Depth must be >= 0, got {depth}")
    leaf = 0x1234567890ABCDEF1234567890ABCDEF
    path = [i + 1 for i in range(depth)]
    indices = [i % 2 == 0 for i in range(depth)]

    current = leaf
    for sibling, is_right in zip(path, indices):
        current = hash_two(sibling, current) if is_right else hash_two(current, sibling)

    return MerkleProof(root=current, leaf=leaf, path=path, indices=indices)
