###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
MaxCut cost diagonal.

For a graph with adjacency matrix ``A`` (symmetric, zero diagonal, integer
weights) and a coloring ``s`` in {-1, +1}^n, the number of cut edges is

    cut(s) = (num_edges - s^T A s / 2) / 2

``initialize_maxcut_costs`` evaluates it for every basis state of a shard
(vertex ``v`` is bit ``v`` of the index) and returns the global maximum.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from .errors import InvariantViolationError, SizeMismatchError
from .fur import get_backend
from .groups import ReduceOp
from .sharded import ShardedArray, real_dtype

logger = logging.getLogger(__name__)


def validate_adjacency(adjacency, n_vertices: int | None = None) -> tuple[np.ndarray, int]:
    """
    Check that ``adjacency`` describes an undirected graph and return it as a
    C-contiguous int64 matrix together with the number of edges.

    A flat, row-major sequence of length n*n is accepted as well.

    Raises
    ------
    InvariantViolationError
        non-square, negative or non-integer weights, non-zero diagonal,
        asymmetric, or odd total weight.
    SizeMismatchError
        the graph has a number of vertices other than ``n_vertices``.
    """
    adj = np.asarray(adjacency)
    if adj.ndim == 1:
        n = math.isqrt(adj.size)
        if n * n != adj.size:
            raise InvariantViolationError(f"{adj.size} entries do not form a square matrix")
        adj = adj.reshape(n, n)
    if adj.ndim != 2 or adj.shape[0] != adj.shape[1]:
        raise InvariantViolationError(f"adjacency matrix must be square, got shape {adj.shape}")

    if adj.dtype.kind not in "biu":
        if adj.dtype.kind != "f" or not np.all(np.isfinite(adj)) or np.any(adj != np.round(adj)):
            raise InvariantViolationError("edge weights must be integers")
    adj = np.ascontiguousarray(adj, dtype=np.int64)

    if np.any(adj < 0):
        raise InvariantViolationError("edge weights must be non-negative")
    if np.any(np.diag(adj) != 0):
        raise InvariantViolationError("adjacency matrix must have a zero diagonal")
    if not np.array_equal(adj, adj.T):
        raise InvariantViolationError("adjacency matrix must be symmetric")
    total = int(adj.sum())
    if total % 2:
        raise InvariantViolationError(f"total edge weight {total} is odd")

    if n_vertices is not None and adj.shape[0] != n_vertices:
        raise SizeMismatchError(
            f"graph has {adj.shape[0]} vertices but the register has {n_vertices} qubits"
        )
    return adj, total // 2


def initialize_maxcut_costs(costs: ShardedArray, adjacency, *, backend: str | None = None) -> int:
    """
    Overwrite ``costs`` with the cut count of every basis state in the shard
    and return the maximum cut over *all* ranks.

    Collective: every rank of ``costs.group`` must call it.  Only the value of
    the maximum is reported, not which basis state reaches it.
    """
    adj, num_edges = validate_adjacency(adjacency, costs.n_qubits)
    if costs.dtype.kind not in "fc":
        raise TypeError(f"cost array must be real or complex, got {costs.dtype}")

    kernels = get_backend(backend)
    if costs.dtype.kind == "c":
        out = np.empty(costs.local_size, dtype=real_dtype(costs.dtype))
    else:
        out = costs.local
    local_max, bad = kernels.maxcut_diagonal(adj, num_edges, costs.offset, out)
    if out is not costs.local:
        costs.local[:] = out

    # one MAX reduction carries both the maximum and the "malformed" flag
    global_max, any_bad = costs.group.allreduce(
        np.array([local_max, int(bad > 0)], dtype=np.int64), ReduceOp.MAX
    )
    if any_bad:
        raise InvariantViolationError(
            "odd intermediate while counting cut edges; the adjacency matrix is malformed"
        )
    logger.debug("rank %d: local max cut %d, global max cut %d", costs.rank, local_max, global_max)
    return int(global_max)


def maxcut_costs_like(
    state: ShardedArray,
    adjacency,
    *,
    backend: str | None = None,
) -> tuple[ShardedArray, int]:
    """Allocate a cost array partitioned like ``state`` and fill it."""
    costs = ShardedArray.cost_like(state)
    max_cut = initialize_maxcut_costs(costs, adjacency, backend=backend)
    return costs, max_cut


def brute_force_maxcut(adjacency) -> tuple[np.ndarray, int]:
    """
    Reference cut counts of all 2**n colorings, computed edge by edge with
    NumPy on a single process.  Only meant for small graphs.
    """
    adj, _ = validate_adjacency(adjacency)
    n = adj.shape[0]
    bits = (np.arange(1 << n)[:, None] >> np.arange(n)) & 1
    differ = bits[:, :, None] != bits[:, None, :]
    costs = (differ * adj).sum(axis=(1, 2)) // 2
    return costs.astype(np.float64), int(costs.max())
