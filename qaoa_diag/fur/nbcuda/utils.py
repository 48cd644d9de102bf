###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""Device-side reductions and host <-> device helpers."""
from __future__ import annotations

from typing import Any

import numba.cuda as ncu
import numpy as np


@ncu.reduce
def sum_reduce(a, b):
    return a + b


@ncu.reduce
def max_reduce(a, b):
    return max(a, b)


@ncu.reduce
def min_reduce(a, b):
    return min(a, b)


def to_device(x: Any) -> tuple[Any, bool]:
    """Return ``(device_array, copied)``; device arrays pass through untouched."""
    if ncu.is_cuda_array(x):
        return x, False
    return ncu.to_device(np.ascontiguousarray(x)), True


def launch_size(n: int, threads: int = 256) -> tuple[int, int]:
    return (n + threads - 1) // threads, threads
