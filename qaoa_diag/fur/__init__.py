###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Back-end registry for the shard-local diagonal kernels.

    "python"  – numba CPU kernels, multi-threaded with ``prange``
    "nbcuda"  – numba-CUDA kernels on the current device

The default comes from ``QAOA_DIAG_BACKEND`` (falls back to ``"python"``).
"""
from __future__ import annotations

import importlib
import logging
import os
import warnings
from types import ModuleType

logger = logging.getLogger(__name__)

BACKENDS = ("python", "nbcuda")


def get_backend(name: str | None = None) -> ModuleType:
    """Return the ``diagonal`` module implementing back-end ``name``."""
    if name is None:
        name = os.environ.get("QAOA_DIAG_BACKEND", "python")
    name = name.lower()
    if name not in BACKENDS:
        raise ValueError(f"backend must be one of {BACKENDS}, got {name!r}")

    if name == "nbcuda":
        import numba.cuda

        if not numba.cuda.is_available():
            warnings.warn(
                "CUDA not available – falling back to the numba CPU back-end.",
                RuntimeWarning,
            )
            name = "python"

    logger.debug("using %s back-end", name)
    return importlib.import_module(f".{name}.diagonal", __name__)


__all__ = ["BACKENDS", "get_backend"]
