"""HTTP client for the verifier service.

Field elements are sent as 0x-hex strings and decoded back to ints.
HTTP errors surface as ``httpx.HTTPStatusError``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from poseidon_merkle.config import VERIFIER_URL
from poseidon_merkle.verifier.ops import encode_element


def _hex(values: Sequence[int]) -> List[str]:
    return [encode_element(v) for v in values]


class VerifierClient:
    """Thin wrapper over an ``httpx.Client``.

    Pass *client* to reuse an existing client (for example FastAPI's
    ``TestClient``); otherwise one is created for *base_url* and closed by
    ``close()``.
    """

    def __init__(
        self,
        base_url: str = VERIFIER_URL,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "VerifierClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._client.post(path, json=payload)
        resp.raise_for_status()
        return resp.json()

    def _get(self, path: str) -> Dict[str, Any]:
        resp = self._client.get(path)
        resp.raise_for_status()
        return resp.json()

    # ---- endpoints ----

    def hash_two(self, a: int, b: int) -> int:
        body = self._post("/hash", {"a": encode_element(a), "b": encode_element(b)})
        return int(body["hash"], 16)

    def batch_hash(self, a_values: Sequence[int], b_values: Sequence[int]) -> List[int]:
        body = self._post("/batch_hash", {"a_values": _hex(a_values), "b_values": _hex(b_values)})
        return [int(h, 16) for h in body["hashes"]]

    def verify_merkle_path(
        self,
        root: int,
        leaf: int,
        path: Sequence[int],
        indices: Sequence[bool],
    ) -> bool:
        body = self._post(
            "/verify",
            {
                "root": encode_element(root),
                "leaf": encode_element(leaf),
                "path": _hex(path),
                "indices": list(indices),
            },
        )
        return bool(body["valid"])

    def last_result(self) -> Tuple[int, bool]:
        body = self._get("/last_result")
        return int(body["root"], 16), bool(body["result"])

    def verification_count(self) -> int:
        return int(self._get("/verification_count")["count"])

    def benchmark_hash(self, iterations: int, seed_a: int, seed_b: int) -> int:
        body = self._post(
            "/benchmark",
            {
                "iterations": iterations,
                "seed_a": encode_element(seed_a),
                "seed_b": encode_element(seed_b),
            },
        )
        return int(body["result"], 16)

    def events(self) -> Dict[str, Any]:
        return self._get("/events")
