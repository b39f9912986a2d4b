"""
Shared helpers for spherical-shell binning in wavenumber space.
"""

from __future__ import annotations

import numpy as np


def shell_index(k: np.ndarray, dk: float) -> np.ndarray:
    """
    Index of the integer shell each wavenumber falls in, ``round(|k| / dk)``.
    """
    return np.floor(np.asarray(k) / dk + 0.5).astype(np.int64)


def shell_sum(k: np.ndarray, values: np.ndarray, dk: float, n_shells: int) -> np.ndarray:
    """
    Sum ``values`` over the shells ``m = 0 .. n_shells - 1``.

    Contributions whose shell index is ``>= n_shells`` (corners of the cube
    beyond the Nyquist sphere) are discarded.
    """
    m = shell_index(k, dk).ravel()
    v = np.asarray(values, dtype=np.float64).ravel()
    keep = m < n_shells
    return np.bincount(m[keep], weights=v[keep], minlength=n_shells)[:n_shells]


__all__ = ["shell_index", "shell_sum"]
