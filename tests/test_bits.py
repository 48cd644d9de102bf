from __future__ import annotations

import numpy as np
import pytest

from qaoa_diag import RangeError, decode_to_bits, encode_from_bits
from qaoa_diag.bits import decode_into


@pytest.mark.parametrize("width", [1, 3, 6])
def test_round_trip_all_labels(width: int) -> None:
    for k in range(1 << width):
        assert encode_from_bits(decode_to_bits(k, width)) == k


def test_bit_zero_is_least_significant() -> None:
    assert decode_to_bits(1, 4).tolist() == [1, 0, 0, 0]
    assert decode_to_bits(6, 4).tolist() == [0, 1, 1, 0]
    assert encode_from_bits([0, 0, 1]) == 4


def test_round_trip_from_bits() -> None:
    bits = [1, 0, 1, 1, 0, 1]
    assert decode_to_bits(encode_from_bits(bits), len(bits)).tolist() == bits


def test_zero_width() -> None:
    assert decode_to_bits(0, 0).size == 0
    assert encode_from_bits([]) == 0


@pytest.mark.parametrize("k, width", [(8, 3), (-1, 3), (1, 0), (0, -1)])
def test_out_of_range_label(k: int, width: int) -> None:
    with pytest.raises(RangeError):
        decode_to_bits(k, width)


def test_range_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        decode_to_bits(4, 2)


def test_jitted_decode_matches() -> None:
    out = np.empty(5, dtype=np.int64)
    decode_into(19, out)
    assert out.tolist() == decode_to_bits(19, 5).tolist()


@pytest.mark.parametrize("k, width", [(2.7, 3), (2.0, 3), (1, 2.5), ("3", 3)])
def test_non_integer_arguments(k, width) -> None:
    with pytest.raises(TypeError):
        decode_to_bits(k, width)


def test_numpy_integers_accepted() -> None:
    assert decode_to_bits(np.int64(5), np.uint8(3)).tolist() == [1, 0, 1]
