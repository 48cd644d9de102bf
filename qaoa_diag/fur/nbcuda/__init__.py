# qaoa_diag/fur/nbcuda/__init__.py
from .diagonal import apply_diagonal, expectation, histogram, maxcut_diagonal

__all__ = [
    "apply_diagonal",
    "expectation",
    "histogram",
    "maxcut_diagonal",
]
