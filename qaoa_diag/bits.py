###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Integer <-> bit-vector conversion.

Bit ``i`` of the vector is ``(k >> i) & 1``: position 0 is the least
significant bit and corresponds to vertex (qubit) 0.  The cost kernels rely on
this ordering, so any state-vector fed to them must use it as well.
"""
from __future__ import annotations

import operator
from collections.abc import Sequence

import numba
import numpy as np

from .errors import RangeError


@numba.njit(cache=True)
def decode_into(k, out):
    """Write the bits of ``k`` into ``out`` (LSB first), no range check."""
    for pos in range(out.size):
        out[pos] = k & 1
        k >>= 1


def decode_to_bits(k: int, width: int) -> np.ndarray:
    """
    Return the ``width``-bit LSB-first representation of ``k``.

    Raises
    ------
    RangeError
        if ``k`` is not in ``[0, 2**width)``.
    TypeError
        if ``k`` or ``width`` is not an integer.
    """
    try:
        k, width = operator.index(k), operator.index(width)
    except TypeError:
        raise TypeError(f"label and width must be integers, got {k!r} and {width!r}") from None
    if width < 0:
        raise RangeError(f"width must be non-negative, got {width}")
    if k < 0 or k >= 1 << width:
        raise RangeError(f"cannot encode {k} with {width} bits")
    bits = np.empty(width, dtype=np.int64)
    for pos in range(width):
        bits[pos] = (k >> pos) & 1
    return bits


def encode_from_bits(bits: Sequence[int] | np.ndarray) -> int:
    """Inverse of :func:`decode_to_bits`: ``sum(bits[i] * 2**i)``."""
    k = 0
    for pos in reversed(range(len(bits))):
        k = 2 * k + int(bits[pos])
    return k
