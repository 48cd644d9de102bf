###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""Diagonal MaxCut cost operator for sharded QAOA state-vectors."""
from .bits import decode_to_bits, encode_from_bits
from .errors import (
    InvariantViolationError,
    QAOADiagError,
    RangeError,
    SizeMismatchError,
)
from .features import apply_cost_phase, get_expectation, get_histogram
from .groups import InProcessGroup, MPIGroup, ProcessGroup, ReduceOp, SerialGroup, run_ranks
from .maxcut import brute_force_maxcut, initialize_maxcut_costs, maxcut_costs_like, validate_adjacency
from .sharded import ShardedArray
from .simulator import QAOAMaxCutSimulator, simulate_qaoa

__version__ = "0.1.0"

__all__ = [
    "decode_to_bits",
    "encode_from_bits",
    "QAOADiagError",
    "SizeMismatchError",
    "InvariantViolationError",
    "RangeError",
    "apply_cost_phase",
    "get_expectation",
    "get_histogram",
    "ProcessGroup",
    "SerialGroup",
    "InProcessGroup",
    "MPIGroup",
    "ReduceOp",
    "run_ranks",
    "validate_adjacency",
    "initialize_maxcut_costs",
    "maxcut_costs_like",
    "brute_force_maxcut",
    "ShardedArray",
    "QAOAMaxCutSimulator",
    "simulate_qaoa",
]
