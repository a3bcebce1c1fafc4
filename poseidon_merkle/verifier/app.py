"""Verifier FastAPI application.

Exposes the Poseidon hash and Merkle membership check the way the
on-chain verifier does:

- POST /hash                 - hash_two(a, b)
- POST /batch_hash           - hash_two over two equal-length lists
- POST /verify               - membership check, recorded in state + event log
- GET  /last_result          - (last root, last result)
- GET  /verification_count   - number of /verify calls so far
- POST /benchmark            - sequential hash chain of N iterations
- GET  /events               - the MerkleVerified event log

Field elements are accepted as JSON ints, decimal strings or 0x-hex
strings and returned as 0x-prefixed 64-digit hex strings.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from poseidon_merkle.config import (
    BATCH_WORKERS,
    INPUT_POLICY,
    MAX_BATCH_SIZE,
    MAX_BENCHMARK_ITERATIONS,
    MAX_PROOF_DEPTH,
)
from poseidon_merkle.crypto.poseidon import hash_two
from poseidon_merkle.verifier import ops
from poseidon_merkle.verifier.state import VerifierState

logger = logging.getLogger(__name__)

Element = Union[int, str]

# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class HashRequest(BaseModel):
    a: Element
    b: Element


class BatchHashRequest(BaseModel):
    a_values: List[Element]
    b_values: List[Element]


class VerifyRequest(BaseModel):
    root: Element
    leaf: Element
    path: List[Element]
    indices: List[bool]


class BenchmarkRequest(BaseModel):
    iterations: int
    seed_a: Element
    seed_b: Element


class EventsResponse(BaseModel):
    head: str
    entries: List[Dict[str, Any]]
    chain_valid: bool


def _decode(value: Element, policy: str) -> int:
    try:
        return ops.decode_element(value, policy)
    except ValueError as exc:
        raise HTTPException(422, f"Invalid field element {value!r}: {exc}")


def _decode_all(values: List[Element], policy: str) -> List[int]:
    try:
        return ops.decode_elements(values, policy)
    except ValueError as exc:
        raise HTTPException(422, f"Invalid field element: {exc}")


def create_app(
    state: VerifierState | None = None,
    input_policy: str = INPUT_POLICY,
    batch_workers: int = BATCH_WORKERS,
) -> FastAPI:
    """Factory that creates a verifier app around *state*.

    Hashing endpoints are plain ``def`` handlers, so Starlette runs them in
    its threadpool and the event loop keeps serving other requests.  With
    ``batch_workers > 1`` one process pool is opened at startup and shared
    by every ``/batch_hash`` call.
    """
    if state is None:
        state = VerifierState()
    if input_policy not in ops.POLICIES:
        raise ValueError(f"Unknown input policy '{input_policy}'")

    resources: Dict[str, Any] = {"pool": None}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resources["pool"] = ops.make_pool(batch_workers)
        try:
            yield
        finally:
            pool = resources.pop("pool", None)
            if pool is not None:
                pool.shutdown()

    app = FastAPI(title="Poseidon Merkle Verifier", lifespan=lifespan)
    app.state.verifier = state

    @app.post("/hash")
    def poseidon_hash(req: HashRequest):
        a = _decode(req.a, input_policy)
        b = _decode(req.b, input_policy)
        return {"hash": ops.encode_element(hash_two(a, b))}

    @app.post("/batch_hash")
    def batch_poseidon(req: BatchHashRequest):
        if len(req.a_values) != len(req.b_values):
            raise HTTPException(
                400,
                f"a_values and b_values differ in length "
                f"({len(req.a_values)} vs {len(req.b_values)})",
            )
        if len(req.a_values) > MAX_BATCH_SIZE:
            raise HTTPException(413, f"Batch larger than {MAX_BATCH_SIZE} pairs")
        a_values = _decode_all(req.a_values, input_policy)
        b_values = _decode_all(req.b_values, input_policy)
        hashes = ops.batch_hash(
            a_values, b_values, executor=resources.get("pool"), workers=batch_workers
        )
        return {"hashes": [ops.encode_element(h) for h in hashes]}

    @app.post("/verify")
    def verify_merkle_path(req: VerifyRequest):
        """Check a membership proof and record the outcome.

        Malformed proofs (path/indices length mismatch) are not rejected
        here: they count as a verification and resolve to ``valid=False``.
        """
        if len(req.path) > MAX_PROOF_DEPTH or len(req.indices) > MAX_PROOF_DEPTH:
            raise HTTPException(413, f"Proof deeper than {MAX_PROOF_DEPTH} levels")
        root = _decode(req.root, input_policy)
        leaf = _decode(req.leaf, input_policy)
        path = _decode_all(req.path, input_policy)

        valid = state.verify_merkle_path(root, leaf, path, req.indices)
        logger.info(
            "merkle verification #%d root=%s valid=%s",
            state.verification_count,
            ops.encode_element(root),
            valid,
        )
        return {"valid": valid, "verification_count": state.verification_count}

    @app.get("/last_result")
    async def last_result():
        root, result = state.last_result()
        return {
            "root": ops.encode_element(root),
            "result": result,
        }

    @app.get("/verification_count")
    async def verification_count():
        return {"count": state.verification_count}

    @app.post("/benchmark")
    def benchmark(req: BenchmarkRequest):
        if req.iterations < 0:
            raise HTTPException(422, "iterations must be >= 0")
        if req.iterations > MAX_BENCHMARK_ITERATIONS:
            raise HTTPException(413, f"More than {MAX_BENCHMARK_ITERATIONS} iterations")
        seed_a = _decode(req.seed_a, input_policy)
        seed_b = _decode(req.seed_b, input_policy)
        logger.debug("benchmark: %d iterations", req.iterations)
        result = ops.benchmark_hash(req.iterations, seed_a, seed_b)
        return {"result": ops.encode_element(result), "iterations": req.iterations}

    @app.get("/events")
    async def events():
        """Return the full MerkleVerified event log."""
        return EventsResponse(
            head=ops.encode_element(state.events.head),
            entries=state.events.entries(),
            chain_valid=state.events.verify_chain(),
        )

    return app


app = create_app()
