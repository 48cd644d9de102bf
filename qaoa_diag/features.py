###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Operations on a state-vector shard together with its cost diagonal.

    apply_cost_phase(state, costs, gamma)     state *= exp(-i gamma C)
    get_expectation(state, costs)             <psi|C|psi>
    get_histogram(state, costs, max_value)    probability mass per cost value

``get_expectation`` and ``get_histogram`` are collective: every rank of
``state.group`` has to call them with the same arguments, and each call
performs exactly one SUM reduction.  ``apply_cost_phase`` is purely local.
"""
from __future__ import annotations

import logging

import numpy as np

from .errors import RangeError, SizeMismatchError
from .fur import get_backend
from .groups import ReduceOp
from .sharded import ShardedArray, real_dtype

logger = logging.getLogger(__name__)


def _local_costs(state: ShardedArray, costs: ShardedArray) -> np.ndarray:
    if not state.same_partitioning(costs):
        raise SizeMismatchError(
            f"state (global {state.global_size}, local {state.local_size}) and costs "
            f"(global {costs.global_size}, local {costs.local_size}) are partitioned differently"
        )
    if state.dtype.kind != "c":
        raise TypeError(f"state must be complex, got {state.dtype}")
    if real_dtype(costs.dtype) != real_dtype(state.dtype):
        raise TypeError(f"cost precision {costs.dtype} does not match state precision {state.dtype}")
    # complex cost arrays carry the cost in the real part
    return costs.local.real if costs.dtype.kind == "c" else costs.local


def apply_cost_phase(
    state: ShardedArray,
    costs: ShardedArray,
    gamma: float,
    *,
    backend: str | None = None,
) -> None:
    """Multiply every amplitude by exp(-i * gamma * cost), in-place."""
    diag = _local_costs(state, costs)
    get_backend(backend).apply_diagonal(state.local, gamma, diag)


def get_expectation(
    state: ShardedArray,
    costs: ShardedArray,
    *,
    backend: str | None = None,
) -> float:
    """Sum of cost * |amplitude|**2 over the whole (distributed) state."""
    diag = _local_costs(state, costs)
    local = get_backend(backend).expectation(state.local, diag)
    total = state.group.allreduce(local, ReduceOp.SUM)
    logger.debug("rank %d: local expectation %g, global %g", state.rank, local, total)
    return float(total)


def get_histogram(
    state: ShardedArray,
    costs: ShardedArray,
    max_value: int,
    *,
    backend: str | None = None,
) -> np.ndarray:
    """
    Return ``hist`` of length ``max_value + 1`` where ``hist[b]`` is the total
    probability of basis states whose cost rounds to ``b``.

    Raises
    ------
    RangeError
        ``max_value`` is not positive, or some cost (on any rank) lies outside
        ``[0, max_value]``.
    """
    max_value = int(max_value)
    if max_value <= 0:
        raise RangeError(f"max_value must be positive, got {max_value}")
    diag = _local_costs(state, costs)

    local = get_backend(backend).histogram(state.local, diag, max_value)
    # the trailing bucket counts out-of-range costs and is reduced alongside
    total = state.group.allreduce(local, ReduceOp.SUM)
    n_outside = int(total[-1])
    if n_outside:
        raise RangeError(f"{n_outside} cost values lie outside [0, {max_value}]")
    logger.debug("rank %d: histogram over %d buckets reduced", state.rank, max_value + 1)
    return total[:-1].astype(real_dtype(state.dtype))
