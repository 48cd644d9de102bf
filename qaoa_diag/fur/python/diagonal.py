###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Numba (CPU, multi-threaded) kernels that act on ONE shard of a diagonal cost
operator and the matching shard of the state-vector.

Public API (shared with ``qaoa_diag.fur.nbcuda.diagonal``)
----------------------------------------------------------
    apply_diagonal(sv, gamma, costs)                      -> None (in-place)
    expectation(sv, costs)                                -> float
    histogram(sv, costs, max_value)                       -> float64[max_value + 2]
    maxcut_diagonal(adjacency, num_edges, offset, out)    -> (max_cut, n_bad)

``histogram`` returns one extra trailing bucket holding the number of cost
entries outside ``[0, max_value]``; ``maxcut_diagonal`` returns the number of
indices whose intermediate quantities were odd.  Both are turned into errors
by the caller *after* the collective reduction.

Worker-local scratch (bit vectors, histogram rows) is allocated once per
chunk, with one chunk per numba thread, and merged after the parallel loop.
"""
from __future__ import annotations

import math
import threading

import numba
import numpy as np
from numba import prange

from ...bits import decode_into

# the default "workqueue" threading layer must not be entered from two Python
# threads at once (InProcessGroup runs one rank per thread)
_launch_lock = threading.Lock()


def _n_chunks(size: int) -> int:
    return max(1, min(numba.get_num_threads(), size))


# ─────────────────────────────────────────────────────────────────────────────
# kernels
# ─────────────────────────────────────────────────────────────────────────────
@numba.njit(parallel=True, cache=True)
def _apply_diag_kernel(sv, gamma, costs):
    for i in prange(sv.size):
        x = gamma * costs[i]
        sv[i] *= complex(math.cos(x), -math.sin(x))


@numba.njit(parallel=True, cache=True)
def _expectation_kernel(sv, costs):
    total = 0.0
    for i in prange(sv.size):
        z = sv[i]
        total += np.float64(costs[i]) * (np.float64(z.real) ** 2 + np.float64(z.imag) ** 2)
    return total


@numba.njit(parallel=True, cache=True)
def _histogram_kernel(sv, costs, max_value, n_chunks):
    size = sv.size
    chunk = (size + n_chunks - 1) // n_chunks
    n_bins = max_value + 2
    private = np.zeros((n_chunks, n_bins))
    for c in prange(n_chunks):
        for i in range(c * chunk, min((c + 1) * chunk, size)):
            x = np.float64(costs[i])
            if x >= -0.5 and x < max_value + 0.5:
                z = sv[i]
                private[c, int(math.floor(x + 0.5))] += (
                    np.float64(z.real) ** 2 + np.float64(z.imag) ** 2
                )
            else:
                private[c, n_bins - 1] += 1.0
    # merge once, after the parallel region
    hist = np.zeros(n_bins)
    for c in range(n_chunks):
        for b in range(n_bins):
            hist[b] += private[c, b]
    return hist


@numba.njit(parallel=True, cache=True)
def _maxcut_kernel(adjacency, num_edges, offset, out, n_chunks):
    """
    With spins s_v in {-1, +1}:  s^T A s = 2 * (uncut - cut)  and therefore
        cut = (num_edges - s^T A s / 2) / 2
    """
    n = adjacency.shape[0]
    size = out.size
    chunk = (size + n_chunks - 1) // n_chunks
    chunk_max = np.zeros(n_chunks, dtype=np.int64)
    chunk_bad = np.zeros(n_chunks, dtype=np.int64)
    for c in prange(n_chunks):
        spins = np.empty(n, dtype=np.int64)
        local_max = 0
        local_bad = 0
        for i in range(c * chunk, min((c + 1) * chunk, size)):
            decode_into(offset + i, spins)
            for v in range(n):
                spins[v] = 2 * spins[v] - 1
            q = 0
            for v in range(n):
                for u in range(n):
                    q += adjacency[v, u] * spins[v] * spins[u]
            half = num_edges - q // 2
            if q % 2 != 0 or half % 2 != 0:
                local_bad += 1
                out[i] = -1
            else:
                cut = half // 2
                out[i] = cut
                if cut > local_max:
                    local_max = cut
        chunk_max[c] = local_max
        chunk_bad[c] = local_bad
    # merge once, after the parallel region
    return chunk_max.max(), chunk_bad.sum()


# ─────────────────────────────────────────────────────────────────────────────
# public wrappers
# ─────────────────────────────────────────────────────────────────────────────
def apply_diagonal(sv: np.ndarray, gamma: float, costs: np.ndarray) -> None:
    """sv *= exp(-i * gamma * costs), element-wise and in-place."""
    with _launch_lock:
        _apply_diag_kernel(sv, float(gamma), costs)


def expectation(sv: np.ndarray, costs: np.ndarray) -> float:
    """Local sum of costs[i] * |sv[i]|**2, accumulated in float64."""
    with _launch_lock:
        return float(_expectation_kernel(sv, costs))


def histogram(sv: np.ndarray, costs: np.ndarray, max_value: int) -> np.ndarray:
    with _launch_lock:
        return _histogram_kernel(sv, costs, int(max_value), _n_chunks(sv.size))


def maxcut_diagonal(
    adjacency: np.ndarray,
    num_edges: int,
    offset: int,
    out: np.ndarray,
) -> tuple[int, int]:
    with _launch_lock:
        max_cut, n_bad = _maxcut_kernel(
            adjacency, int(num_edges), int(offset), out, _n_chunks(out.size)
        )
    return int(max_cut), int(n_bad)
