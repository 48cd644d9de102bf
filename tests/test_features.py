from __future__ import annotations

import numpy as np
import pytest

from qaoa_diag import (
    RangeError,
    ShardedArray,
    SizeMismatchError,
    apply_cost_phase,
    brute_force_maxcut,
    get_expectation,
    get_histogram,
    maxcut_costs_like,
)


def test_uniform_expectation_is_mean_cost(make_graph) -> None:
    n = 6
    adjacency = make_graph(n, seed=4, max_weight=3)
    state = ShardedArray.uniform(n)
    costs, _ = maxcut_costs_like(state, adjacency)

    expected, _ = brute_force_maxcut(adjacency)
    assert get_expectation(state, costs) == pytest.approx(expected.mean(), rel=1e-9)
    # every edge is cut by exactly half of all colorings
    assert get_expectation(state, costs) == pytest.approx(adjacency.sum() / 4, rel=1e-9)


def test_expectation_of_basis_state(triangle: np.ndarray) -> None:
    psi = np.zeros(8, dtype=np.complex128)
    psi[4] = 1j
    state = ShardedArray.from_global(psi)
    costs, _ = maxcut_costs_like(state, triangle)
    assert get_expectation(state, costs) == pytest.approx(2.0)


@pytest.mark.parametrize("n", [4, 5, 6])
def test_histogram_matches_brute_force(make_graph, make_state, n: int) -> None:
    adjacency = make_graph(n, seed=n, max_weight=2)
    state = ShardedArray.from_global(make_state(n, seed=n))
    costs, max_cut = maxcut_costs_like(state, adjacency)

    hist = get_histogram(state, costs, max_cut)

    expected_costs, _ = brute_force_maxcut(adjacency)
    probs = np.abs(state.local) ** 2
    assert hist.shape == (max_cut + 1,)
    for b in range(max_cut + 1):
        assert hist[b] == pytest.approx(probs[expected_costs == b].sum(), abs=1e-12)
    assert hist.sum() == pytest.approx(1.0, abs=1e-12)


def test_histogram_with_room_to_spare(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(3)
    costs, _ = maxcut_costs_like(state, triangle)
    hist = get_histogram(state, costs, 5)
    np.testing.assert_allclose(hist, [0.25, 0.0, 0.75, 0.0, 0.0, 0.0])


def test_histogram_rounds_costs() -> None:
    state = ShardedArray.uniform(1)
    costs = ShardedArray(np.array([0.9999999, 1.0000001]), 1)
    np.testing.assert_allclose(get_histogram(state, costs, 1), [0.0, 1.0])


def test_phase_preserves_measure(make_graph, make_state) -> None:
    n = 5
    state = ShardedArray.from_global(make_state(n, seed=3))
    costs, max_cut = maxcut_costs_like(state, make_graph(n, seed=3))
    probs = np.abs(state.local) ** 2
    energy = get_expectation(state, costs)
    hist = get_histogram(state, costs, max_cut)

    apply_cost_phase(state, costs, 0.37)

    np.testing.assert_allclose(np.abs(state.local) ** 2, probs, atol=1e-14)
    assert get_expectation(state, costs) == pytest.approx(energy, rel=1e-12)
    np.testing.assert_allclose(get_histogram(state, costs, max_cut), hist, atol=1e-14)


def test_phase_values(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(3)
    costs, _ = maxcut_costs_like(state, triangle)
    before = state.local.copy()
    gamma = 0.8

    apply_cost_phase(state, costs, gamma)

    np.testing.assert_allclose(state.local, before * np.exp(-1j * gamma * costs.local))


def test_phase_on_single_precision(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(3, dtype=np.complex64)
    costs, _ = maxcut_costs_like(state, triangle)
    apply_cost_phase(state, costs, np.pi / 2)
    assert state.dtype == np.complex64
    # cost 2 at index 1: exp(-i pi) = -1
    np.testing.assert_allclose(state.local[1], -1 / np.sqrt(8), atol=1e-6)


def test_single_precision_results(make_graph) -> None:
    n = 5
    adjacency = make_graph(n, seed=9)
    state = ShardedArray.uniform(n, dtype=np.complex64)
    costs, max_cut = maxcut_costs_like(state, adjacency)

    hist = get_histogram(state, costs, max_cut)

    assert hist.dtype == np.float32
    assert hist.sum() == pytest.approx(1.0, abs=1e-5)
    assert get_expectation(state, costs) == pytest.approx(adjacency.sum() / 4, rel=1e-5)


def test_complex_cost_array(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(3)
    costs = ShardedArray.zeros(3)
    costs.local[:] = [0, 2, 2, 2, 2, 2, 2, 0]
    assert get_expectation(state, costs) == pytest.approx(1.5)
    np.testing.assert_allclose(get_histogram(state, costs, 2), [0.25, 0.0, 0.75])


@pytest.mark.parametrize("max_value", [0, -3])
def test_histogram_needs_positive_max_value(triangle: np.ndarray, max_value: int) -> None:
    state = ShardedArray.uniform(3)
    costs, _ = maxcut_costs_like(state, triangle)
    with pytest.raises(RangeError):
        get_histogram(state, costs, max_value)


@pytest.mark.parametrize("bad", [3.0, -1.0, np.nan])
def test_histogram_rejects_out_of_range_cost(bad: float) -> None:
    state = ShardedArray.uniform(2)
    costs = ShardedArray(np.array([0.0, 1.0, bad, 2.0]), 2)
    with pytest.raises(RangeError):
        get_histogram(state, costs, 2)


def test_size_mismatch(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(4)
    costs, _ = maxcut_costs_like(ShardedArray.uniform(3), triangle)
    with pytest.raises(SizeMismatchError):
        apply_cost_phase(state, costs, 0.1)
    with pytest.raises(SizeMismatchError):
        get_expectation(state, costs)
    with pytest.raises(SizeMismatchError):
        get_histogram(state, costs, 2)


def test_precision_mismatch(triangle: np.ndarray) -> None:
    state = ShardedArray.uniform(3, dtype=np.complex64)
    costs, _ = maxcut_costs_like(ShardedArray.uniform(3), triangle)
    with pytest.raises(TypeError):
        get_expectation(state, costs)


def test_state_must_be_complex(triangle: np.ndarray) -> None:
    costs, _ = maxcut_costs_like(ShardedArray.uniform(3), triangle)
    with pytest.raises(TypeError):
        apply_cost_phase(ShardedArray(np.ones(8), 3), costs, 0.1)
