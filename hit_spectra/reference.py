"""
Experimental reference spectra (Comte-Bellot & Corrsin 1971).

The tabulated data come in CGS units: column 1 holds the wavenumber in
1/cm and the following columns hold E(k) in cm^3/s^2, one column per
measurement station. Everything returned here is in SI units.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .errors import FormatError, InterpolationDomainError

K_SCALE = 100.0  # 1/cm -> 1/m
E_SCALE = 1e-6  # cm^3/s^2 -> m^3/s^2


@dataclass(frozen=True)
class ReferenceSpectrum:
    """
    Piecewise-linear interpolant of a tabulated spectrum.

    Only defined on ``[k.min(), k.max()]``; evaluating outside raises
    :class:`InterpolationDomainError`.
    """

    k: np.ndarray
    E: np.ndarray

    def __post_init__(self) -> None:
        k = np.asarray(self.k, dtype=np.float64)
        E = np.asarray(self.E, dtype=np.float64)
        order = np.argsort(k, kind="stable")
        k, E = k[order], E[order]
        if np.any(np.diff(k) <= 0):
            raise FormatError("reference wavenumbers must be distinct")
        k.setflags(write=False)
        E.setflags(write=False)
        object.__setattr__(self, "k", k)
        object.__setattr__(self, "E", E)

    @property
    def kmin(self) -> float:
        return float(self.k[0])

    @property
    def kmax(self) -> float:
        return float(self.k[-1])

    def __call__(self, k):
        kq = np.asarray(k, dtype=np.float64)
        if np.any(np.isnan(kq)) or np.any(kq < self.k[0]) or np.any(kq > self.k[-1]):
            raise InterpolationDomainError(
                f"wavenumber outside reference range [{self.kmin:g}, {self.kmax:g}]"
            )
        E = np.interp(kq, self.k, self.E)
        if np.ndim(E) == 0:
            return float(E)
        return E


def read_reference_table(path, delimiter: Optional[str] = None) -> np.ndarray:
    """
    Read a delimited numeric table (whitespace-separated by default).
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"reference spectrum not found: {path}")
    try:
        table = np.loadtxt(path, delimiter=delimiter, ndmin=2, dtype=np.float64)
    except ValueError as err:
        raise FormatError(f"{path}: rows are not uniformly numeric ({err})") from err
    if table.shape[0] < 2 or table.shape[1] < 2:
        raise FormatError(f"{path}: need at least two rows and two columns, got {table.shape}")
    if not np.all(np.isfinite(table)):
        raise FormatError(f"{path}: table contains non-finite values")
    return table


def reference_spectrum(cbc_path, cbc_t: int = 1, *, delimiter: Optional[str] = None) -> ReferenceSpectrum:
    """
    Load one station of the reference table as a :class:`ReferenceSpectrum`.

    Parameters
    ----------
    cbc_path : str or Path
        Reference table.
    cbc_t : int
        1-based column selector counted after the wavenumber column.
    """
    table = read_reference_table(cbc_path, delimiter=delimiter)
    ncols = table.shape[1]
    if isinstance(cbc_t, bool) or not isinstance(cbc_t, (int, np.integer)):
        raise FormatError(f"{cbc_path}: column selector must be an integer, got {cbc_t!r}")
    if not 1 <= cbc_t <= ncols - 1:
        raise FormatError(f"{cbc_path}: column selector {cbc_t} outside 1..{ncols - 1}")
    return ReferenceSpectrum(k=K_SCALE * table[:, 0], E=E_SCALE * table[:, cbc_t])


def load_cbc_spectrum(cbc_path, cbc_t: int = 1, *, delimiter: Optional[str] = None) -> Tuple[np.ndarray, ReferenceSpectrum]:
    """
    Return the scaled reference wavenumbers and the interpolant ``E(k)``.
    """
    ref = reference_spectrum(cbc_path, cbc_t, delimiter=delimiter)
    return ref.k, ref


__all__ = [
    "K_SCALE",
    "E_SCALE",
    "ReferenceSpectrum",
    "read_reference_table",
    "reference_spectrum",
    "load_cbc_spectrum",
]
