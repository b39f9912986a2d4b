"""
Kinetic-energy spectrum of 3-D periodic velocity fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .binning import shell_sum
from .fft import rfftn3, to_numpy
from .grid import SpectralGrid


@dataclass
class Spectrum:
    k: np.ndarray
    E: np.ndarray
    dk: float
    Etot: float


def _as_components(u) -> np.ndarray:
    u = np.asarray(to_numpy(u), dtype=np.float64)
    if u.ndim != 4 or u.shape[-1] != 3 or not (u.shape[0] == u.shape[1] == u.shape[2]):
        raise ValueError(f"velocity field must have shape (N, N, N, 3), got {u.shape}")
    return np.ascontiguousarray(np.moveaxis(u, -1, 0))


def kinetic_energy_spectrum(u, L: float) -> Spectrum:
    """
    Shell-summed kinetic energy spectrum E(k) of a velocity field.

    Parameters
    ----------
    u : array_like
        Cell-centred velocity of shape ``(N, N, N, 3)`` (NumPy or CuPy).
    L : float
        Physical edge length of the periodic cube.

    Returns
    -------
    Spectrum
        Shells ``k = m * 2*pi/L`` for ``m = 0 .. N/2``; ``E`` is an energy
        density so that ``sum(E) * dk`` is the resolved kinetic energy per
        unit mass. Bin 0 holds the energy of the mean flow.
    """
    U = _as_components(u)
    N = U.shape[-1]
    grid = SpectralGrid(N=N, L=L)

    U_hat = rfftn3(U) / N**3
    e_hat = 0.5 * np.sum(np.abs(U_hat) ** 2, axis=0) * grid.hermitian_weights

    n_shells = N // 2 + 1
    E = shell_sum(grid.k, e_hat, grid.dk, n_shells) / grid.dk
    k = grid.dk * np.arange(n_shells)
    return Spectrum(k=k, E=E, dk=grid.dk, Etot=float(E.sum() * grid.dk))


def spectrum(u, L: float) -> Tuple[np.ndarray, np.ndarray]:
    """Wavenumber bins and energy density, ``(k, E)``."""
    spec = kinetic_energy_spectrum(u, L)
    return spec.k, spec.E


def cutoff_wavenumber(L: float, N: int) -> float:
    """Wavenumber of twice the grid spacing, ``2*pi / (L / (N/2))``."""
    return 2 * np.pi / (L / (N / 2))


__all__ = ["Spectrum", "kinetic_energy_spectrum", "spectrum", "cutoff_wavenumber"]
