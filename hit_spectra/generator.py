"""
Synthetic isotropic turbulence from a target energy spectrum.

The field is a sum of ``M`` random Fourier modes (Saad et al. 2016,
https://doi.org/10.2514/1.J055230)::

    u(x) = 2 sum_m q_m sigma_m cos(kappa_m khat_m . x + psi_m)

with amplitudes ``q_m = sqrt(E(kappa_m) dkappa)`` taken from the reference
spectrum, wave directions ``khat_m`` uniform on the unit sphere and
polarisations ``sigma_m`` perpendicular to ``khat_m`` so that every mode is
divergence-free.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import Backend, Precision
from .fft import get_array_module
from .reference import ReferenceSpectrum, reference_spectrum
from .tensor import tensor_product_rows


@dataclass
class RandomModes:
    """Wavenumbers, amplitudes, directions, polarisations and phases of the modes."""

    kappa: np.ndarray
    q: np.ndarray
    khat: np.ndarray
    sigma: np.ndarray
    psi: np.ndarray

    @property
    def wave_vectors(self) -> np.ndarray:
        return self.kappa[:, None] * self.khat


def mode_wavenumbers(ref: ReferenceSpectrum, L: float, N: int, M: int):
    """
    Centres and width of ``M`` equal wavenumber bands.

    The band spans from the box wavenumber ``2*pi/L`` to the grid Nyquist
    wavenumber ``pi*N/L``, clipped to the support of ``ref``.
    """
    if M < 1:
        raise ValueError("number of modes M must be at least 1")
    kmin = max(2 * np.pi / L, ref.kmin)
    kmax = min(np.pi * N / L, ref.kmax)
    if kmax <= kmin:
        raise ValueError(
            f"reference spectrum [{ref.kmin:g}, {ref.kmax:g}] does not overlap "
            f"the resolved band [{2 * np.pi / L:g}, {np.pi * N / L:g}]"
        )
    dkappa = (kmax - kmin) / M
    kappa = kmin + (np.arange(M) + 0.5) * dkappa
    return kappa, dkappa


def random_modes(ref: ReferenceSpectrum, L: float, N: int, M: int, seed: Optional[int] = None) -> RandomModes:
    rng = np.random.default_rng(seed)
    kappa, dkappa = mode_wavenumbers(ref, L, N, M)
    q = np.sqrt(ref(kappa) * dkappa)

    theta = np.arccos(1.0 - 2.0 * rng.uniform(size=M))
    phi = 2.0 * np.pi * rng.uniform(size=M)
    alpha = 2.0 * np.pi * rng.uniform(size=M)
    psi = 2.0 * np.pi * rng.uniform(size=M)

    st, ct = np.sin(theta), np.cos(theta)
    sp, cp = np.sin(phi), np.cos(phi)
    sa, ca = np.sin(alpha), np.cos(alpha)
    khat = np.stack([st * cp, st * sp, ct], axis=1)
    sigma = np.stack(
        [cp * ct * ca - sp * sa, sp * ct * ca + cp * sa, -st * ca],
        axis=1,
    )
    return RandomModes(kappa=kappa, q=q, khat=khat, sigma=sigma, psi=psi)


def synthesize(modes: RandomModes, L: float, N: int, *, backend=Backend.CPU, dtype=np.float64, chunk: int = 64):
    """
    Evaluate the modes at the cell centres of an ``N**3`` grid.

    Returns an array of shape ``(N, N, N, 3)`` on the requested backend.
    """
    xp = get_array_module(backend)
    x = (np.arange(N) + 0.5) * (L / N)
    points = xp.asarray(tensor_product_rows(x, x, x))
    u = xp.zeros((N**3, 3), dtype=np.float64)

    kvec = xp.asarray(modes.wave_vectors)
    amp = xp.asarray(2.0 * modes.q[:, None] * modes.sigma)
    psi = xp.asarray(modes.psi)
    for start in range(0, modes.kappa.size, chunk):
        sl = slice(start, start + chunk)
        phase = points @ kvec[sl].T + psi[sl]
        u += xp.cos(phase) @ amp[sl]

    u = xp.moveaxis(u.T.reshape((3, N, N, N), order="F"), 0, -1)
    return xp.ascontiguousarray(u.astype(dtype))


def generate_hit(
    L: float,
    N: int,
    M: int,
    *,
    cbc_path,
    cbc_t: int = 1,
    backend=Backend.CPU,
    precision=Precision.FLOAT32,
    seed: Optional[int] = None,
    verbose: bool = False,
):
    """
    Random isotropic velocity field whose spectrum follows the reference data.

    Parameters
    ----------
    L : float
        Edge length of the periodic cube.
    N : int
        Cells per direction.
    M : int
        Number of Fourier modes.
    cbc_path : str or Path
        Reference table providing the target spectrum.
    cbc_t : int
        Reference station to use as the target.
    backend : Backend
        Where to build the field (NumPy or CuPy).
    precision : Precision
        Floating-point precision of the returned field.
    seed : int, optional
        Seed for the mode directions and phases.

    Returns
    -------
    array, shape (N, N, N, 3)
    """
    ref = reference_spectrum(cbc_path, cbc_t)
    modes = random_modes(ref, L, N, M, seed=seed)
    u = synthesize(modes, L, N, backend=backend, dtype=Precision(precision).dtype)

    if verbose:
        xp = get_array_module(backend)
        E = float(0.5 * xp.mean(xp.sum(u.astype(np.float64) ** 2, axis=-1)))
        urms = np.sqrt(2.0 / 3.0 * E)
        print(f"[IC] N={N}, M={M}, seed={seed}  ->  <E>={E:.6e} <urms>={urms:.6e} (target {np.sum(modes.q**2):.6e})")
    return u


__all__ = ["RandomModes", "mode_wavenumbers", "random_modes", "synthesize", "generate_hit"]
