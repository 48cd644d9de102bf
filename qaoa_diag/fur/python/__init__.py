# qaoa_diag/fur/python/__init__.py
from .diagonal import apply_diagonal, expectation, histogram, maxcut_diagonal
from .fur import furx, furx_all

__all__ = [
    "apply_diagonal",
    "expectation",
    "histogram",
    "maxcut_diagonal",
    "furx",
    "furx_all",
]
