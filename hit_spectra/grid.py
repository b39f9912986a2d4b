"""
Spectral grid utilities shared across mode synthesis, the solver and spectra.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import Backend
from .fft import get_array_module


@dataclass(frozen=True)
class SpectralGrid:
    """
    Pre-computed spectral quantities for a periodic cube on the rFFT layout.

    Parameters
    ----------
    N : int
        Number of grid points per dimension (must be even to support dealiasing).
    L : float
        Domain size.
    dtype : np.dtype
        Floating-point dtype for physical-space arrays.
    backend : Backend
        Array backend holding the wavenumber arrays.
    """

    N: int
    L: float
    dtype: np.dtype = np.float64
    backend: Backend = Backend.CPU

    def __post_init__(self) -> None:
        if self.N % 2 != 0:
            raise ValueError("Grid resolution N must be even")
        if self.L <= 0:
            raise ValueError("Domain size L must be positive")

        xp = get_array_module(self.backend)
        object.__setattr__(self, "xp", xp)
        object.__setattr__(self, "cdtype", np.complex64 if self.dtype == np.float32 else np.complex128)
        object.__setattr__(self, "dx", self.L / self.N)
        object.__setattr__(self, "dk", 2.0 * np.pi / self.L)
        object.__setattr__(self, "zf", self.N // 2 + 1)

        k1 = xp.asarray((2.0 * np.pi) * np.fft.fftfreq(self.N, d=self.dx), dtype=self.dtype)
        kr = xp.asarray((2.0 * np.pi) * np.fft.rfftfreq(self.N, d=self.dx), dtype=self.dtype)
        kx, ky, kz = xp.meshgrid(k1, k1, kr, indexing="ij")
        object.__setattr__(self, "kx", kx)
        object.__setattr__(self, "ky", ky)
        object.__setattr__(self, "kz", kz)
        k2 = kx**2 + ky**2 + kz**2
        object.__setattr__(self, "k2", k2)
        object.__setattr__(self, "k", xp.sqrt(k2))
        object.__setattr__(self, "inv_k2", xp.where(k2 == 0, 0.0, 1.0 / xp.where(k2 == 0, 1.0, k2)).astype(self.dtype))

        # interior kz planes stand for their Hermitian pair as well
        wz = np.full(self.zf, 2.0)
        wz[0] = 1.0
        wz[-1] = 1.0
        object.__setattr__(self, "hermitian_weights", xp.asarray(wz, dtype=self.dtype)[None, None, :])

    @property
    def shape(self):
        return (self.N, self.N, self.N)

    def dealias_mask(self, mode: str = "two_thirds"):
        """
        Boolean mask on the rFFT grid applied to the nonlinear term.

        - "two_thirds": classic 2/3 truncation in each direction
        - "nyquist": keep all resolvable modes, dropping only the Nyquist planes
        """
        xp = self.xp
        ix = np.rint(np.abs(np.fft.fftfreq(self.N)) * self.N)
        iz = np.rint(np.fft.rfftfreq(self.N) * self.N)
        IX, IY, IZ = (xp.asarray(a) for a in np.meshgrid(ix, ix, iz, indexing="ij"))
        if mode == "two_thirds":
            cut = (2.0 / 3.0) * (self.N // 2)
        elif mode == "nyquist":
            cut = self.N // 2
        else:
            raise ValueError(f"Unknown dealias mode: {mode!r}. Use 'two_thirds' or 'nyquist'.")
        return (IX < cut) & (IY < cut) & (IZ < cut)

    def zeros(self, *, complex_: bool = False, components: int | None = None):
        """Return a zero array shaped like the grid (physical or rFFT layout)."""
        if complex_:
            shape = (self.N, self.N, self.zf)
            dtype = self.cdtype
        else:
            shape = self.shape
            dtype = self.dtype
        if components is not None:
            shape = (components,) + shape
        return self.xp.zeros(shape, dtype=dtype)


__all__ = ["SpectralGrid"]
