"""Hash-chained log of ``MerkleVerified`` events.

Each entry links to its predecessor through a Poseidon chain:

    digest     = SHA-256(canonical JSON of the entry payload) mod p
    entry_hash = hash_two(prev_hash, digest)

with ``prev_hash = 0`` for the first entry, so rewriting or dropping an
entry breaks every later link.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List

from poseidon_merkle.config import PRIME
from poseidon_merkle.crypto.poseidon import hash_two
from poseidon_merkle.verifier.ops import encode_element

GENESIS = 0


@dataclass(frozen=True)
class VerificationEvent:
    timestamp: float
    root: int
    leaf: int
    result: bool
    prev_hash: int
    entry_hash: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "event": "MerkleVerified",
            "root": encode_element(self.root),
            "leaf": encode_element(self.leaf),
            "result": self.result,
            "prev_hash": encode_element(self.prev_hash),
            "entry_hash": encode_element(self.entry_hash),
        }


def _payload_digest(timestamp: float, root: int, leaf: int, result: bool) -> int:
    payload = json.dumps(
        {
            "timestamp": timestamp,
            "event": "MerkleVerified",
            "root": encode_element(root),
            "leaf": encode_element(leaf),
            "result": result,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return int.from_bytes(hashlib.sha256(payload.encode()).digest(), "big") % PRIME


def _link(prev_hash: int, timestamp: float, root: int, leaf: int, result: bool) -> int:
    return hash_two(prev_hash, _payload_digest(timestamp, root, leaf, result))


class EventLog:
    """Append-only Poseidon-chained event log."""

    def __init__(self) -> None:
        self._entries: List[VerificationEvent] = []
        self._prev_hash: int = GENESIS

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, root: int, leaf: int, result: bool) -> VerificationEvent:
        ts = time.time()
        entry = VerificationEvent(
            timestamp=ts,
            root=root,
            leaf=leaf,
            result=result,
            prev_hash=self._prev_hash,
            entry_hash=_link(self._prev_hash, ts, root, leaf, result),
        )
        self._entries.append(entry)
        self._prev_hash = entry.entry_hash
        return entry

    def entries(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    @property
    def head(self) -> int:
        return self._prev_hash

    def verify_chain(self) -> bool:
        """Re-derive every link from the genesis value."""
        prev = GENESIS
        for e in self._entries:
            if e.prev_hash != prev:
                return False
            if e.entry_hash != _link(e.prev_hash, e.timestamp, e.root, e.leaf, e.result):
                return False
            prev = e.entry_hash
        return True
