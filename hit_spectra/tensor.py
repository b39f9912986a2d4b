"""
Tensor products of 1-D vectors.

Both helpers let the first vector vary fastest, so that the rows line up
with a ``(n1, n2, ...)`` array flattened in column-major (Fortran) order.
"""

from __future__ import annotations

import numpy as np


def tensor_product(*vectors) -> np.ndarray:
    """
    Flattened tensor (Kronecker) product of several vectors.

    ``np.kron`` orders the factors the other way round, e.g.
    ``tensor_product(a, b) == np.kron(b, a)``.
    """
    if not vectors:
        raise ValueError("tensor_product needs at least one vector")
    out = np.ones(1)
    for v in vectors:
        out = np.kron(np.asarray(v).ravel(), out)
    return out


def tensor_product_rows(*vectors) -> np.ndarray:
    """
    Tensor product in matrix form.

    The products are not carried out: row ``i`` holds the factors of the
    ``i``-th element of :func:`tensor_product`, giving an
    ``(n1 * n2 * ..., len(vectors))`` array.
    """
    if not vectors:
        raise ValueError("tensor_product_rows needs at least one vector")
    grids = np.meshgrid(*[np.asarray(v).ravel() for v in vectors], indexing="ij")
    return np.stack([g.ravel(order="F") for g in grids], axis=1)


__all__ = ["tensor_product", "tensor_product_rows"]
