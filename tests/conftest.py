from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest


@pytest.fixture
def triangle() -> np.ndarray:
    return np.array(
        [
            [0, 1, 1],
            [1, 0, 1],
            [1, 1, 0],
        ]
    )


@pytest.fixture
def make_graph() -> Callable[..., np.ndarray]:
    def _make(n: int, seed: int = 0, max_weight: int = 1, p_edge: float = 0.6) -> np.ndarray:
        rng = np.random.default_rng(seed)
        weights = rng.integers(1, max_weight + 1, size=(n, n))
        upper = np.triu((rng.random((n, n)) < p_edge) * weights, k=1)
        return upper + upper.T

    return _make


@pytest.fixture
def make_state() -> Callable[..., np.ndarray]:
    """Random normalised state-vector of 2**n amplitudes."""

    def _make(n: int, seed: int = 0, dtype=np.complex128) -> np.ndarray:
        rng = np.random.default_rng(seed)
        psi = rng.standard_normal(1 << n) + 1j * rng.standard_normal(1 << n)
        psi /= np.linalg.norm(psi)
        return psi.astype(dtype)

    return _make
