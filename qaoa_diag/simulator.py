###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
MaxCut QAOA driver built on the diagonal cost operator.  This file defines:

* ``QAOAMaxCutSimulator`` – builds the cost diagonal once for a graph, then
  runs p layers of phase-separator + X mixer on a (possibly sharded)
  state-vector and reports expectation / histogram / overlap.
* a convenience wrapper ``simulate_qaoa(...)`` for scripts that do not want
  to instantiate the class:

    >>> from qaoa_diag.simulator import simulate_qaoa
    >>> sim, result = simulate_qaoa(adjacency, depth=3)
    >>> sim.get_expectation(result)
"""
from __future__ import annotations

from collections.abc import Sequence
import logging

import numba
import numpy as np

from .errors import SizeMismatchError
from .features import apply_cost_phase, get_expectation, get_histogram
from .fur.python.fur import furx_all
from .groups import ProcessGroup, SerialGroup
from .maxcut import initialize_maxcut_costs, validate_adjacency
from .sharded import ShardedArray, complex_dtype

logger = logging.getLogger(__name__)


class QAOAMaxCutSimulator:
    """QAOA for MaxCut with ``exp(-i γ C)`` phase layers and ``exp(-i β X)`` mixers."""

    def __init__(
        self,
        adjacency,
        *,
        group: ProcessGroup | None = None,
        precision: str = "double",
        backend: str | None = None,
        n_threads: int | None = None,
    ) -> None:
        adj, self.num_edges = validate_adjacency(adjacency)
        self.n_qubits = adj.shape[0]
        self.group = SerialGroup() if group is None else group
        self.backend = backend
        if n_threads is not None:
            numba.set_num_threads(n_threads)

        # state-vector workspace and cost diagonal share one partitioning
        self._sv = ShardedArray.uniform(self.n_qubits, self.group, complex_dtype(precision))
        self._hc_diag = ShardedArray.cost_like(self._sv)
        self.max_cut = initialize_maxcut_costs(self._hc_diag, adj, backend=backend)
        logger.debug("%d vertices, %d edges, max cut %d", self.n_qubits, self.num_edges, self.max_cut)

    # ------------------------------------------------------------------ init / I-O
    def _initialize(self, sv0: ShardedArray | np.ndarray | None = None) -> None:
        if sv0 is None:
            self._sv.local[:] = 1.0 / np.sqrt(self._sv.global_size)
        elif isinstance(sv0, ShardedArray):
            if not sv0.same_partitioning(self._sv):
                raise SizeMismatchError("initial state is partitioned differently from the simulator")
            self._sv.local[:] = sv0.local
        else:
            shard = ShardedArray.from_global(sv0, self.group)
            if shard.n_qubits != self.n_qubits:
                raise SizeMismatchError(
                    f"initial state has {shard.global_size} amplitudes, expected {self._sv.global_size}"
                )
            self._sv.local[:] = shard.local

    def get_cost_diagonal(self) -> np.ndarray:
        """This rank's shard of the cost diagonal."""
        return self._hc_diag.local.copy()

    def simulate_qaoa(
        self,
        gammas: Sequence[float],
        betas: Sequence[float],
        sv0: ShardedArray | np.ndarray | None = None,
    ) -> ShardedArray:
        """
        Run ``len(gammas)`` layers starting from ``sv0`` (default |+>^n).

        The returned array is the simulator's workspace and is overwritten by
        the next call.
        """
        gammas, betas = list(gammas), list(betas)
        if len(gammas) != len(betas):
            raise ValueError(f"got {len(gammas)} gammas but {len(betas)} betas")
        local_qubits = self._sv.local_size.bit_length() - 1
        if local_qubits < self.n_qubits:
            raise NotImplementedError(
                f"X mixer needs all {self.n_qubits} qubits local, "
                f"this shard holds {local_qubits}"
            )
        self._initialize(sv0)
        self._apply_qaoa(gammas, betas)
        return self._sv

    def _apply_qaoa(self, gammas: Sequence[float], betas: Sequence[float]) -> None:
        for gamma, beta in zip(gammas, betas):
            apply_cost_phase(self._sv, self._hc_diag, gamma, backend=self.backend)
            furx_all(self._sv.local, beta, self.n_qubits)           # mixer

    # ------------------------------------------------------------------ measurement helpers
    def get_statevector(self, result: ShardedArray) -> np.ndarray:
        return result.local.copy()

    def get_probabilities(self, result: ShardedArray) -> np.ndarray:
        return np.abs(result.local) ** 2

    def get_expectation(self, result: ShardedArray) -> float:
        return get_expectation(result, self._hc_diag, backend=self.backend)

    def get_histogram(self, result: ShardedArray) -> np.ndarray:
        # a graph without edges still gets the two buckets [0, 1]
        return get_histogram(result, self._hc_diag, max(self.max_cut, 1), backend=self.backend)

    def get_overlap(self, result: ShardedArray) -> float:
        """Probability of measuring a maximum cut."""
        return float(self.get_histogram(result)[self.max_cut])

    def get_approximation_ratio(self, result: ShardedArray) -> float:
        if self.max_cut == 0:
            raise ValueError("approximation ratio is undefined for a graph without edges")
        return self.get_expectation(result) / self.max_cut


def simulate_qaoa(
    adjacency,
    *,
    depth: int,
    gammas: Sequence[float] | None = None,
    betas: Sequence[float] | None = None,
    seed: int | None = None,
    **kwargs,
) -> tuple[QAOAMaxCutSimulator, ShardedArray]:
    """User-facing helper so callers don't need to instantiate the class.

    Parameters
    ----------
    adjacency     : square integer adjacency matrix of the graph
    depth         : QAOA depth p (len(gammas) == len(betas) == depth)
    gammas/ betas : optional explicit parameter lists; if omitted random values
                    in [0, 1) are used (convenient for smoke tests).
    seed          : seed for the random angles
    **kwargs      : forwarded to ``QAOAMaxCutSimulator``
    """
    rng = np.random.default_rng(seed)
    if gammas is None:
        gammas = rng.random(depth)
    if betas is None:
        betas = rng.random(depth)
    if len(gammas) != depth or len(betas) != depth:
        raise ValueError(f"depth is {depth} but got {len(gammas)} gammas and {len(betas)} betas")

    sim = QAOAMaxCutSimulator(adjacency, **kwargs)
    return sim, sim.simulate_qaoa(gammas, betas)
