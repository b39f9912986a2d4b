"""
Run configuration for the isotropic-turbulence experiments.

``HITConfig`` gathers the keyword options of the solver construction;
``ExperimentConfig`` holds the constants of the Comte-Bellot & Corrsin
(1971) decaying-turbulence setup, https://doi.org/10.1017/S0022112071001599.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import numpy as np


class Backend(str, Enum):
    """Array backend used by the generator and the solver."""

    CPU = "cpu"
    GPU = "gpu"


class Precision(str, Enum):
    """Floating-point precision of the velocity field."""

    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def dtype(self):
        return np.float32 if self is Precision.FLOAT32 else np.float64


@dataclass
class HITConfig:
    """
    Options for building a HIT simulation.

    Parameters
    ----------
    load : bool
        Restore a checkpoint instead of generating a new random field.
    length_scale : float
        Length scale ``L`` used to express time in convective units (grid cells).
    velocity_scale : float
        Velocity scale ``U``; one CTU is ``length_scale / velocity_scale``.
    cbc_path : str or Path, optional
        Reference spectrum used as the target of the random field.
    nu : float
        Kinematic viscosity in grid units.
    backend : Backend
        ``Backend.CPU`` (NumPy) or ``Backend.GPU`` (CuPy).
    precision : Precision
        ``Precision.FLOAT32`` or ``Precision.FLOAT64``.
    """

    load: bool = False
    length_scale: float = 1.0
    velocity_scale: float = 1.0
    cbc_path: Optional[Path] = None
    nu: float = 1.48e-5
    backend: Backend = Backend.CPU
    precision: Precision = Precision.FLOAT32

    def __post_init__(self) -> None:
        self.backend = Backend(self.backend)
        self.precision = Precision(self.precision)
        if self.cbc_path is not None:
            self.cbc_path = Path(self.cbc_path)
        if self.length_scale <= 0 or self.velocity_scale <= 0:
            raise ValueError("length_scale and velocity_scale must be positive")
        if self.nu < 0:
            raise ValueError("nu must be non-negative")

    @property
    def dtype(self):
        return self.precision.dtype


@dataclass
class ExperimentConfig:
    """Constants of the CBC experiment and of the LES run that mimics it."""

    M: float = 5.08 / 100  # grid size [m]
    L: float = 9 * 2 * math.pi / 100  # length of HIT cube [m], L = 11M
    velocity_scale: float = 10.0  # U0 in the paper [m/s]
    N: int = 2**5  # cells per direction
    modes: int = 2**11  # following Saad et al 2016, https://doi.org/10.2514/1.J055230
    nu_air: float = 1.48e-5  # dry air at 15C, as Rozema et al 2015
    t0_ctu: float = 42.0
    t1_ctu: float = 98.0
    t2_ctu: float = 171.0
    Cs: float = 0.17  # Smagorinsky constant
    delta: float = math.sqrt(3.0)  # filter width in cells
    scheme: str = "two_thirds"  # dealiasing of the convective term
    dt: float = 0.5  # constant time step, not in CTU
    save: bool = False
    load: bool = False
    seed: Optional[int] = 99
    backend: Backend = Backend.CPU
    precision: Precision = Precision.FLOAT32
    data_dir: Path = Path("data")
    plots_dir: Path = Path("plots")
    cbc_file: str = "cbc_spectrum.dat"
    dpi: int = 600
    verbose: bool = True

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.plots_dir = Path(self.plots_dir)
        if not (self.t0_ctu <= self.t1_ctu <= self.t2_ctu):
            raise ValueError("time windows must satisfy t0 <= t1 <= t2")

    @property
    def reynolds(self) -> float:
        return self.M * self.velocity_scale / self.nu_air

    @property
    def length_scale(self) -> float:
        # the paper uses M for CTU; scaled here with L/N since L = 11M
        return (self.M / self.L) * self.N

    @property
    def nu_numerical(self) -> float:
        return self.length_scale / self.reynolds

    @property
    def cbc_path(self) -> Path:
        return self.data_dir / self.cbc_file

    def hit_config(self) -> HITConfig:
        return HITConfig(
            load=self.load,
            length_scale=self.length_scale,
            velocity_scale=self.velocity_scale,
            cbc_path=self.cbc_path,
            nu=self.nu_numerical,
            backend=self.backend,
            precision=self.precision,
        )


__all__ = ["Backend", "Precision", "HITConfig", "ExperimentConfig"]
