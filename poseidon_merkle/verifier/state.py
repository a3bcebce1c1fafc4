"""In-memory verifier storage.

Holds what the on-chain verifier persists between calls: the last root
checked, the outcome of that check, and a running verification count.
Before the first verification the root reads as 0, like unset contract
storage.
"""

from __future__ import annotations

import threading
from typing import Sequence, Tuple

from poseidon_merkle.crypto import merkle
from poseidon_merkle.verifier.events import EventLog


class VerifierState:
    """Per-service mutable state, safe to share between handler threads."""

    def __init__(self) -> None:
        self.last_verified_root: int = 0
        self.last_verification_result: bool = False
        self.verification_count: int = 0
        self.events = EventLog()
        self._lock = threading.Lock()

    def record(self, root: int, leaf: int, result: bool) -> int:
        """Store the outcome of one verification; return the new count."""
        with self._lock:
            self.last_verified_root = root
            self.last_verification_result = result
            self.verification_count += 1
            self.events.append(root, leaf, result)
            return self.verification_count

    def verify_merkle_path(
        self,
        root: int,
        leaf: int,
        path: Sequence[int],
        indices: Sequence[bool],
    ) -> bool:
        """Run the membership check and record its outcome, valid or not."""
        result = merkle.verify(root, leaf, path, indices)
        self.record(root, leaf, result)
        return result

    def last_result(self) -> Tuple[int, bool]:
        with self._lock:
            return self.last_verified_root, self.last_verification_result
