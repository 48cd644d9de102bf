###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Process groups and the one collective every kernel needs: ``allreduce``.

* ``SerialGroup``     – a single rank, reductions are the identity.
* ``InProcessGroup``  – ``size`` ranks that live on threads of one process and
                        meet at a ``threading.Barrier``.  Handy for checking
                        that results do not depend on the partitioning.
* ``MPIGroup``        – thin wrapper over an ``mpi4py`` communicator
                        (install the ``mpi`` extra).

Every member of a group must call ``allreduce`` the same number of times with
values of the same shape, otherwise the group deadlocks.
"""
from __future__ import annotations

import abc
import enum
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

import numpy as np

T = TypeVar("T")


class ReduceOp(enum.Enum):
    MAX = "max"
    SUM = "sum"

    def combine(self, values: list[np.ndarray]) -> np.ndarray:
        stacked = np.stack(values)
        if self is ReduceOp.MAX:
            return stacked.max(axis=0)
        return stacked.sum(axis=0)


def _like(value: Any, result: np.ndarray) -> Any:
    # scalar in -> Python scalar out
    if np.ndim(value) == 0:
        return np.asarray(result).item()
    return result


class ProcessGroup(abc.ABC):
    """Minimal collective-communication interface."""

    rank: int
    size: int

    @abc.abstractmethod
    def allreduce(self, value: Any, op: ReduceOp) -> Any:
        """Combine ``value`` over all ranks; blocks until every rank arrives."""


class SerialGroup(ProcessGroup):
    def __init__(self) -> None:
        self.rank = 0
        self.size = 1

    def allreduce(self, value: Any, op: ReduceOp) -> Any:
        return _like(value, np.array(value, copy=True))

    def __repr__(self) -> str:
        return "SerialGroup()"


class _Rendezvous:
    def __init__(self, size: int) -> None:
        self.barrier = threading.Barrier(size)
        self.slots: list[np.ndarray | None] = [None] * size


class InProcessGroup(ProcessGroup):
    """One rank of a group whose members are threads of the current process."""

    def __init__(self, rank: int, rendezvous: _Rendezvous) -> None:
        self.rank = rank
        self.size = len(rendezvous.slots)
        self._rendezvous = rendezvous

    @classmethod
    def create(cls, size: int) -> list["InProcessGroup"]:
        if size < 1:
            raise ValueError(f"group size must be positive, got {size}")
        rendezvous = _Rendezvous(size)
        return [cls(rank, rendezvous) for rank in range(size)]

    def allreduce(self, value: Any, op: ReduceOp) -> Any:
        rv = self._rendezvous
        rv.slots[self.rank] = np.asarray(value)
        rv.barrier.wait()
        try:
            result = op.combine(rv.slots)
        finally:
            # nobody may overwrite a slot before everyone has read them
            rv.barrier.wait()
        return _like(value, result)

    def abort(self) -> None:
        """Release the other ranks (they get ``BrokenBarrierError``)."""
        self._rendezvous.barrier.abort()

    def __repr__(self) -> str:
        return f"InProcessGroup(rank={self.rank}, size={self.size})"


def run_ranks(fn: Callable[[InProcessGroup], T], size: int) -> list[T]:
    """
    Run ``fn(group)`` once per rank of a fresh ``InProcessGroup`` and return
    the per-rank results ordered by rank.

    If a rank raises, the barrier is aborted so the others do not hang, and
    the first non-barrier exception is re-raised.
    """
    groups = InProcessGroup.create(size)

    def _call(group: InProcessGroup) -> T:
        try:
            return fn(group)
        except BaseException:
            group.abort()
            raise

    with ThreadPoolExecutor(max_workers=size) as pool:
        futures = [pool.submit(_call, g) for g in groups]
        errors = [f.exception() for f in futures]

    for exc in errors:
        if exc is not None and not isinstance(exc, threading.BrokenBarrierError):
            raise exc
    for exc in errors:
        if exc is not None:
            raise exc
    return [f.result() for f in futures]


class MPIGroup(ProcessGroup):
    """``ProcessGroup`` backed by an mpi4py communicator (default COMM_WORLD)."""

    def __init__(self, comm: Any = None) -> None:
        from mpi4py import MPI

        self._mpi = MPI
        self.comm = MPI.COMM_WORLD if comm is None else comm
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def allreduce(self, value: Any, op: ReduceOp) -> Any:
        mpi_op = self._mpi.MAX if op is ReduceOp.MAX else self._mpi.SUM
        if np.ndim(value) == 0:
            return self.comm.allreduce(np.asarray(value).item(), op=mpi_op)
        send = np.ascontiguousarray(value)
        recv = np.empty_like(send)
        self.comm.Allreduce(send, recv, op=mpi_op)
        return recv

    def __repr__(self) -> str:
        return f"MPIGroup(rank={self.rank}, size={self.size})"
