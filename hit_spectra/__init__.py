"""
Isotropic-turbulence toolkit: synthetic initial conditions, an LES solver,
and spectrum comparison against the Comte-Bellot & Corrsin data.
"""

from .config import Backend, ExperimentConfig, HITConfig, Precision
from .errors import FormatError, HITError, InterpolationDomainError, SolverError
from .reference import ReferenceSpectrum, load_cbc_spectrum, reference_spectrum
from .spectra import Spectrum, cutoff_wavenumber, kinetic_energy_spectrum, spectrum
from .plotting import SpectrumFigure, new_spectrum_figure, plot_spectra, set_plot_style
from .tensor import tensor_product, tensor_product_rows
from .generator import generate_hit
from .solver import CFLTimeStep, ConstantTimeStep, SpectralLES, checkpoint_name
from .driver import build_simulation, figure_name, run
from .fft import FFT_BACKEND, set_fftw_threads, warm_fft_cache

__all__ = [
    "Backend",
    "Precision",
    "HITConfig",
    "ExperimentConfig",
    "HITError",
    "FormatError",
    "InterpolationDomainError",
    "SolverError",
    "ReferenceSpectrum",
    "reference_spectrum",
    "load_cbc_spectrum",
    "Spectrum",
    "kinetic_energy_spectrum",
    "spectrum",
    "cutoff_wavenumber",
    "SpectrumFigure",
    "new_spectrum_figure",
    "plot_spectra",
    "set_plot_style",
    "tensor_product",
    "tensor_product_rows",
    "generate_hit",
    "SpectralLES",
    "ConstantTimeStep",
    "CFLTimeStep",
    "checkpoint_name",
    "build_simulation",
    "figure_name",
    "run",
    "FFT_BACKEND",
    "set_fftw_threads",
    "warm_fft_cache",
]
