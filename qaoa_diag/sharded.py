###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Host-side container for one shard of a distributed 2**n vector.

The global index space ``[0, 2**n_qubits)`` is cut into ``group.size``
contiguous, equally sized shards; rank ``r`` owns
``[r * local_size, (r + 1) * local_size)``.  The same class holds both the
complex amplitudes and the real cost diagonal.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .errors import SizeMismatchError
from .groups import ProcessGroup, SerialGroup

PRECISIONS = {
    "double": np.complex128,
    "single": np.complex64,
}


def complex_dtype(precision: str) -> np.dtype:
    try:
        return np.dtype(PRECISIONS[precision])
    except KeyError:
        raise ValueError(f"precision must be one of {list(PRECISIONS)}, got {precision!r}") from None


def real_dtype(dtype: np.dtype) -> np.dtype:
    """float64 for complex128, float32 for complex64 (real dtypes map to themselves)."""
    return np.empty(0, dtype=dtype).real.dtype


@dataclass
class ShardedArray:
    local: np.ndarray
    n_qubits: int
    group: ProcessGroup = field(default_factory=SerialGroup)

    def __post_init__(self) -> None:
        size = self.group.size
        if size & (size - 1) or size > 1 << self.n_qubits:
            raise SizeMismatchError(
                f"cannot split 2**{self.n_qubits} amplitudes over {size} ranks"
            )
        if self.local.ndim != 1 or self.local.size != self.global_size // size:
            raise SizeMismatchError(
                f"rank {self.rank}: local shard has shape {self.local.shape}, "
                f"expected ({self.global_size // size},)"
            )

    # ------------------------------------------------------------------ sizes
    @property
    def global_size(self) -> int:
        return 1 << self.n_qubits

    @property
    def local_size(self) -> int:
        return self.local.size

    @property
    def rank(self) -> int:
        return self.group.rank

    @property
    def offset(self) -> int:
        """Global index of ``local[0]``."""
        return self.rank * self.local_size

    @property
    def dtype(self) -> np.dtype:
        return self.local.dtype

    def __getitem__(self, i):
        return self.local[i]

    def __setitem__(self, i, value) -> None:
        self.local[i] = value

    def same_partitioning(self, other: "ShardedArray") -> bool:
        return (
            self.global_size == other.global_size
            and self.local_size == other.local_size
            and self.rank == other.rank
        )

    # ------------------------------------------------------------------ factories
    @classmethod
    def zeros(
        cls,
        n_qubits: int,
        group: ProcessGroup | None = None,
        dtype=np.complex128,
    ) -> "ShardedArray":
        group = SerialGroup() if group is None else group
        local = np.zeros((1 << n_qubits) // group.size, dtype=dtype)
        return cls(local, n_qubits, group)

    @classmethod
    def uniform(
        cls,
        n_qubits: int,
        group: ProcessGroup | None = None,
        dtype=np.complex128,
    ) -> "ShardedArray":
        """The |+>^n state: every amplitude equals 2**(-n/2)."""
        out = cls.zeros(n_qubits, group, dtype)
        out.local[:] = 1.0 / np.sqrt(out.global_size)
        return out

    @classmethod
    def from_global(
        cls,
        vector: np.ndarray,
        group: ProcessGroup | None = None,
        dtype=None,
    ) -> "ShardedArray":
        """Copy this rank's slice out of a full-length ``vector``."""
        group = SerialGroup() if group is None else group
        vector = np.asarray(vector, dtype=dtype)
        if vector.ndim != 1 or vector.size == 0:
            raise SizeMismatchError(f"expected a non-empty 1-D vector, got shape {vector.shape}")
        n_qubits = int(vector.size).bit_length() - 1
        if vector.size != 1 << n_qubits:
            raise SizeMismatchError(f"vector length {vector.size} is not a power of two")
        if group.size > vector.size:
            raise SizeMismatchError(
                f"cannot split {vector.size} amplitudes over {group.size} ranks"
            )
        local_size = vector.size // group.size
        start = group.rank * local_size
        return cls(vector[start:start + local_size].copy(), n_qubits, group)

    @classmethod
    def cost_like(cls, state: "ShardedArray") -> "ShardedArray":
        """Uninitialised real array with the partitioning and precision of ``state``."""
        local = np.empty(state.local_size, dtype=real_dtype(state.dtype))
        return cls(local, state.n_qubits, state.group)
