#!/usr/bin/env python3
"""
Benchmarks the MaxCut cost-diagonal pipeline on random graphs:

  • build the cost diagonal        (initialize_maxcut_costs)
  • p phase + mixer layers          (QAOAMaxCutSimulator.simulate_qaoa)
  • expectation and histogram       (get_expectation / get_histogram)

for every back-end and size requested.  One row per run is appended to a CSV.

Examples
--------
python examples/bench_maxcut_features.py
python examples/bench_maxcut_features.py --n 12 16 20 --depth 4 --backend python nbcuda
"""
import argparse, time
from pathlib import Path

import numpy as np
import pandas as pd
from memory_profiler import memory_usage
from tqdm.auto import tqdm

from qaoa_diag import QAOAMaxCutSimulator


# --------------------------------------------------------------------------- helpers
def random_graph(n, p_edge=0.5, seed=0):
    """Erdős–Rényi G(n, p) as a symmetric 0/1 adjacency matrix."""
    rng = np.random.default_rng(seed)
    upper = np.triu(rng.random((n, n)) < p_edge, k=1)
    return (upper | upper.T).astype(np.int64)


def bench_case(backend, n, p, precision, seed=0):
    adjacency = random_graph(n, seed=seed)
    rng = np.random.default_rng(123)
    gammas, betas = rng.uniform(-np.pi, np.pi, size=(2, p))

    t0 = time.perf_counter()
    sim = QAOAMaxCutSimulator(adjacency, backend=backend, precision=precision)
    t_build = time.perf_counter() - t0

    def _task():
        result = sim.simulate_qaoa(gammas, betas)
        return sim.get_expectation(result), sim.get_histogram(result)

    t0 = time.perf_counter()
    mem_peak, (energy, hist) = memory_usage(
        (lambda: _task()), retval=True, max_usage=True, interval=0.05
    )
    wall = time.perf_counter() - t0

    return {
        "backend": backend,
        "N": n,
        "p": p,
        "precision": precision,
        "edges": sim.num_edges,
        "max_cut": sim.max_cut,
        "build_s": t_build,
        "wall_s": wall,
        "host_MiB": mem_peak,
        "energy": energy,
        "approx_ratio": energy / sim.max_cut if sim.max_cut else np.nan,
        "p_opt": hist[sim.max_cut],
        "hist_sum": hist.sum(),
    }


# --------------------------------------------------------------------------- main
def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--n", type=int, nargs="+", default=[10, 14, 18], help="# qubits")
    ap.add_argument("-p", "--depth", type=int, default=4, help="QAOA depth")
    ap.add_argument("--backend", nargs="+", default=["python"], choices=["python", "nbcuda"])
    ap.add_argument("--precision", default="double", choices=["double", "single"])
    ap.add_argument("--out", type=Path, default=Path("bench_maxcut_features.csv"))
    args = ap.parse_args()

    cases = [(b, n) for b in args.backend for n in args.n]
    rows = [bench_case(b, n, args.depth, args.precision) for b, n in tqdm(cases)]

    df = pd.DataFrame(rows)
    df.to_csv(args.out, mode="a", header=not args.out.exists(), index=False)
    print(df.to_string(index=False))


if __name__ == "__main__":
    main()
