###############################################################################
# // SPDX-License-Identifier: Apache-2.0
# // Copyright : JP Morgan Chase & Co
###############################################################################
"""
Exception types raised by ``qaoa_diag``.

All of them derive from ``ValueError`` so callers that only guard against
bad input keep working.
"""


class QAOADiagError(Exception):
    """Base class for every error raised by this package."""


class SizeMismatchError(QAOADiagError, ValueError):
    """Amplitude and cost arrays are not partitioned identically."""


class InvariantViolationError(QAOADiagError, ValueError):
    """The adjacency matrix is not a valid (symmetric, even-weight) graph."""


class RangeError(QAOADiagError, ValueError):
    """An integer label or a cost value falls outside its allowed range."""
