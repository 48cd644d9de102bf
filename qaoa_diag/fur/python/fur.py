###############################################################################
#  SPDX-License-Identifier: Apache-2.0
#  Copyright : JP Morgan Chase & Co.
###############################################################################
"""
Fast-unitary-rotation (**FUR**) X mixer on a host NumPy state-vector.

    furx(sv, theta, q)           exp(-i theta X_q) on one qubit
    furx_all(sv, theta, n)       the same on qubits 0 .. n-1

Qubit ``q`` is bit ``q`` of the amplitude index, so only qubits below
``log2(sv.size)`` can be addressed on a single shard.
"""
from __future__ import annotations

import math

import numba
import numpy as np
from numba import prange

from .diagonal import _launch_lock


@numba.njit(parallel=True, cache=True)
def _furx_kernel(x, a, b, q):
    n_states = x.size
    mask1 = (1 << q) - 1
    mask2 = mask1 ^ ((n_states - 1) >> 1)
    for i in prange(n_states // 2):
        ia = (i & mask1) | ((i & mask2) << 1)
        ib = ia | (1 << q)
        xa, xb = x[ia], x[ib]
        x[ia] = a * xa + b * xb
        x[ib] = b * xa + a * xb


def furx(sv: np.ndarray, theta: float, q: int) -> None:
    if not 0 <= q < sv.size.bit_length() - 1:
        raise ValueError(f"qubit {q} is not local to a shard of {sv.size} amplitudes")
    with _launch_lock:
        _furx_kernel(sv, math.cos(theta), -1j * math.sin(theta), q)


def furx_all(sv: np.ndarray, theta: float, n_qubits: int) -> None:
    """In-place uniform exp(-i theta X) on every qubit of ``sv``."""
    for q in range(n_qubits):
        furx(sv, theta, q)
