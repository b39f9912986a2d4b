"""
Shared FFT and array-backend utilities with optional FFTW acceleration.

The solver, the spectrum estimator and the mode synthesis all go through
these helpers so that CPU runs pick up pyFFTW when it is installed and
GPU runs dispatch to CuPy without each module repeating the selection.
"""

from __future__ import annotations

import os
import numpy as np

from .config import Backend

FFTW_THREADS = int(os.environ.get("FFTW_THREADS", "4"))

_AXES = (-3, -2, -1)

try:  # pragma: no cover - relies on optional dependency
    import pyfftw
    from pyfftw.interfaces.numpy_fft import rfftn as _rfftn
    from pyfftw.interfaces.numpy_fft import irfftn as _irfftn

    pyfftw.interfaces.cache.enable()

    def _cpu_rfftn(a):
        return _rfftn(a, axes=_AXES, threads=FFTW_THREADS)

    def _cpu_irfftn(a, s):
        return _irfftn(a, s=s, axes=_AXES, threads=FFTW_THREADS)

    FFT_BACKEND = "FFTW"
except ImportError:  # pragma: no cover - falls back automatically

    def _cpu_rfftn(a):
        return np.fft.rfftn(a, axes=_AXES)

    def _cpu_irfftn(a, s):
        return np.fft.irfftn(a, s=s, axes=_AXES)

    FFT_BACKEND = "NumPy"


def get_array_module(backend=Backend.CPU):
    """
    Return the array namespace (``numpy`` or ``cupy``) for a backend.

    Parameters
    ----------
    backend : Backend or str
        ``Backend.CPU`` / ``"cpu"`` or ``Backend.GPU`` / ``"gpu"``.
    """
    backend = Backend(backend)
    if backend is Backend.CPU:
        return np
    import cupy

    return cupy


def to_numpy(a) -> np.ndarray:
    """Copy an array to host memory (no-op for NumPy arrays)."""
    if isinstance(a, np.ndarray):
        return a
    return a.get()


def rfftn3(a):
    """Real-to-complex FFT over the last three axes."""
    if isinstance(a, np.ndarray):
        return _cpu_rfftn(a)
    from cupyx.scipy.fft import rfftn

    return rfftn(a, axes=_AXES)


def irfftn3(a, s):
    """Complex-to-real inverse FFT over the last three axes onto shape ``s``."""
    if isinstance(a, np.ndarray):
        return _cpu_irfftn(a, s)
    from cupyx.scipy.fft import irfftn

    return irfftn(a, s=s, axes=_AXES)


def set_fftw_threads(n: int) -> None:
    """
    Update the number of threads used by the FFTW backend.

    Parameters
    ----------
    n : int
        Desired number of threads (>=1). Ignored when FFTW is unavailable.
    """
    global FFTW_THREADS
    FFTW_THREADS = max(1, int(n))


def warm_fft_cache(shape, dtype=np.float64) -> None:
    """
    Perform dummy FFTs to warm plan caches for the given array shape.

    Parameters
    ----------
    shape : tuple[int, int, int]
        Real-space array shape to warm.
    dtype : np.dtype
        Real-space dtype to emulate (np.float64 by default).
    """
    arr = np.zeros(shape, dtype=dtype)
    coeffs = rfftn3(arr)
    _ = irfftn3(coeffs, arr.shape[-3:])


__all__ = [
    "FFT_BACKEND",
    "FFTW_THREADS",
    "get_array_module",
    "to_numpy",
    "rfftn3",
    "irfftn3",
    "set_fftw_threads",
    "warm_fft_cache",
]
