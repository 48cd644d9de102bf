###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Diagonal cost operator kernels for a single CUDA device.

Same public API as ``qaoa_diag.fur.python.diagonal``:

    apply_diagonal(sv, gamma, costs)
    expectation(sv, costs)
    histogram(sv, costs, max_value)
    maxcut_diagonal(adjacency, num_edges, offset, out)

Arguments may be host NumPy arrays or device arrays.  Host arrays are copied
to the device for the call and, when the kernel writes to them, copied back.
"""
from __future__ import annotations
import math
import numba.cuda as ncu
import numpy as np
from numba import float64

from .utils import launch_size, max_reduce, min_reduce, sum_reduce, to_device

# ─────────────────────────────────────────────────────────────────────────────
# GPU kernels
# ─────────────────────────────────────────────────────────────────────────────
@ncu.jit
def _apply_diag_kernel(sv, gamma, diag):
    tid = ncu.grid(1)
    if tid < sv.size:
        x = gamma * diag[tid]
        c, s = math.cos(x), math.sin(x)
        sv[tid] *= complex(c, -s)


@ncu.jit
def _weighted_norm_kernel(sv, diag, out):
    tid = ncu.grid(1)
    if tid < sv.size:
        z = sv[tid]
        out[tid] = float64(diag[tid]) * (float64(z.real) ** 2 + float64(z.imag) ** 2)


@ncu.jit
def _histogram_kernel(sv, diag, max_value, hist):
    tid = ncu.grid(1)
    if tid < sv.size:
        x = float64(diag[tid])
        if x >= -0.5 and x < max_value + 0.5:
            z = sv[tid]
            p = float64(z.real) ** 2 + float64(z.imag) ** 2
            ncu.atomic.add(hist, int(math.floor(x + 0.5)), p)
        else:
            ncu.atomic.add(hist, max_value + 1, 1.0)


@ncu.jit
def _maxcut_kernel(adjacency, num_edges, offset, out):
    tid = ncu.grid(1)
    if tid < out.size:
        x = offset + tid
        n = adjacency.shape[0]
        q = 0
        for v in range(n):
            s_v = 2 * ((x >> v) & 1) - 1
            for u in range(n):
                s_u = 2 * ((x >> u) & 1) - 1
                q += adjacency[v, u] * s_v * s_u
        half = num_edges - q // 2
        if q % 2 != 0 or half % 2 != 0:
            out[tid] = -1
        else:
            out[tid] = half // 2


# ─────────────────────────────────────────────────────────────────────────────
# Public wrappers
# ─────────────────────────────────────────────────────────────────────────────
def apply_diagonal(sv, gamma: float, costs) -> None:
    sv_dev, copied = to_device(sv)
    diag_dev, _ = to_device(costs)
    blocks, threads = launch_size(sv_dev.size)
    _apply_diag_kernel[blocks, threads](sv_dev, float(gamma), diag_dev)
    if copied:
        sv_dev.copy_to_host(ary=sv)


def expectation(sv, costs) -> float:
    sv_dev, _ = to_device(sv)
    diag_dev, _ = to_device(costs)
    weighted = ncu.device_array(sv_dev.size, dtype=np.float64)
    blocks, threads = launch_size(sv_dev.size)
    _weighted_norm_kernel[blocks, threads](sv_dev, diag_dev, weighted)
    return float(sum_reduce(weighted))


def histogram(sv, costs, max_value: int) -> np.ndarray:
    """Trailing bucket counts costs outside ``[0, max_value]``."""
    sv_dev, _ = to_device(sv)
    diag_dev, _ = to_device(costs)
    hist = ncu.to_device(np.zeros(max_value + 2, dtype=np.float64))
    blocks, threads = launch_size(sv_dev.size)
    _histogram_kernel[blocks, threads](sv_dev, diag_dev, int(max_value), hist)
    return hist.copy_to_host()


def maxcut_diagonal(adjacency, num_edges: int, offset: int, out) -> tuple[int, int]:
    """Returns ``(max_cut, bad)``; ``bad`` is non-zero iff an index came out odd."""
    adj_dev, _ = to_device(adjacency)
    out_dev, copied = to_device(out)
    blocks, threads = launch_size(out_dev.size)
    _maxcut_kernel[blocks, threads](adj_dev, int(num_edges), int(offset), out_dev)
    max_cut = max(int(max_reduce(out_dev)), 0)
    bad = int(min_reduce(out_dev) < 0)
    if copied:
        out_dev.copy_to_host(ary=out)
    return max_cut, bad
