"""
Pseudo-spectral LES of incompressible turbulence in a periodic cube.

Lengths and times are in grid units (cell size 1 unless ``L`` is given);
``sim_time`` reports convective time units ``t * U / length_scale``.
The subgrid stress follows the Smagorinsky-Lilly model
``nu_t = (Cs * delta)**2 * sqrt(2 S_ij S_ij)`` and is switched off when
``Cs == 0``.
"""

from __future__ import annotations

import math
import os
import zipfile
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import Backend, Precision
from .errors import SolverError
from .fft import irfftn3, rfftn3, to_numpy
from .grid import SpectralGrid

RK4_STABILITY = 2.785


@dataclass(frozen=True)
class ConstantTimeStep:
    """Always step by ``dt`` whatever the state of the flow."""

    dt: float

    def __call__(self, solver: "SpectralLES") -> float:
        return self.dt


@dataclass(frozen=True)
class CFLTimeStep:
    """Adaptive ``dt = min(dt_CFL, dt_Fourier, dt_max)``."""

    cfl: float = 0.5
    fourier: float = 0.3
    dt_max: float = math.inf

    def __call__(self, solver: "SpectralLES") -> float:
        umax = solver.max_velocity()
        dt_cfl = self.cfl * solver.grid.dx / umax if umax > 0.0 else math.inf
        nu_eff = solver.max_viscosity()
        k2max = float(solver.grid.xp.max(solver.grid.k2))
        dt_four = self.fourier * RK4_STABILITY / (nu_eff * k2max) if nu_eff > 0.0 else math.inf
        return min(dt_cfl, dt_four, self.dt_max)


def checkpoint_name(N: int, t_ctu: float) -> str:
    return f"flow_N{N}_t{t_ctu:.2f}.npz"


class SpectralLES:
    """
    RK4 pseudo-spectral solver with Smagorinsky-Lilly closure.
    """

    def __init__(
        self,
        N: int,
        *,
        L: Optional[float] = None,
        length_scale: float = 1.0,
        velocity_scale: float = 1.0,
        nu: float = 0.0,
        Cs: float = 0.0,
        delta: Optional[float] = None,
        dealias: str = "two_thirds",
        backend=Backend.CPU,
        precision=Precision.FLOAT32,
    ):
        self.grid = SpectralGrid(N=N, L=float(N) if L is None else L, dtype=Precision(precision).dtype, backend=backend)
        self.xp = self.grid.xp
        self.N = N
        self.length_scale = float(length_scale)
        self.velocity_scale = float(velocity_scale)
        self.nu = float(nu)
        self.Cs = float(Cs)
        # filter width: default diagonal of a cell
        self.delta = math.sqrt(3.0) * self.grid.dx if delta is None else float(delta)
        self.dealias_mode = dealias
        self.dealias = self.grid.dealias_mask(dealias)
        self.resolved = self.grid.dealias_mask("nyquist")

        self.time = 0.0
        self.nstep = 0
        self.U_hat = self.grid.zeros(complex_=True, components=3)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def les(self) -> bool:
        return self.Cs > 0.0

    def sim_time(self) -> float:
        """Elapsed time in convective units."""
        return self.time * self.velocity_scale / self.length_scale

    def set_velocity(self, u) -> None:
        """
        Set the velocity from an ``(N, N, N, 3)`` array.

        The field is projected onto periodic, divergence-free modes; the
        Nyquist planes are dropped.
        """
        xp = self.xp
        u = xp.asarray(u)
        if u.shape != self.grid.shape + (3,):
            raise SolverError(f"velocity field shape {u.shape} does not match grid {self.grid.shape + (3,)}")
        U = xp.moveaxis(u, -1, 0).astype(self.grid.dtype)
        U_hat = rfftn3(xp.ascontiguousarray(U)).astype(self.grid.cdtype) * self.resolved
        self.U_hat = self._project_divfree(U_hat)

    @property
    def velocity(self):
        """Cell-centred velocity, shape ``(N, N, N, 3)``."""
        U = irfftn3(self.U_hat, self.grid.shape)
        return self.xp.ascontiguousarray(self.xp.moveaxis(U, 0, -1)).astype(self.grid.dtype)

    def kinetic_energy(self) -> float:
        U = irfftn3(self.U_hat, self.grid.shape)
        return float(0.5 * self.xp.mean(self.xp.sum(U**2, axis=0)))

    def divergence_max(self) -> float:
        g = self.grid
        div_hat = 1j * (g.kx * self.U_hat[0] + g.ky * self.U_hat[1] + g.kz * self.U_hat[2])
        return float(self.xp.max(self.xp.abs(irfftn3(div_hat, g.shape))))

    def max_velocity(self) -> float:
        return float(self.xp.max(self.xp.abs(irfftn3(self.U_hat, self.grid.shape))))

    def max_viscosity(self) -> float:
        if not self.les:
            return self.nu
        return self.nu + float(self.xp.max(self._eddy_viscosity(self._strain_rate(self.U_hat))))

    # ------------------------------------------------------------------
    # Spectral operators
    # ------------------------------------------------------------------
    def _project_divfree(self, A_hat):
        # P = I - kk^T/|k|^2
        g = self.grid
        KdotA = g.kx * A_hat[0] + g.ky * A_hat[1] + g.kz * A_hat[2]
        return self.xp.stack(
            [A_hat[0] - g.kx * KdotA * g.inv_k2, A_hat[1] - g.ky * KdotA * g.inv_k2, A_hat[2] - g.kz * KdotA * g.inv_k2],
            axis=0,
        )

    def _curl_hat(self, U_hat):
        g = self.grid
        wx = 1j * (g.ky * U_hat[2] - g.kz * U_hat[1])
        wy = 1j * (g.kz * U_hat[0] - g.kx * U_hat[2])
        wz = 1j * (g.kx * U_hat[1] - g.ky * U_hat[0])
        return self.xp.stack([wx, wy, wz], axis=0)

    def _strain_rate(self, U_hat):
        """S_ij in real space, shape (3, 3, N, N, N)."""
        g = self.grid
        K = (g.kx, g.ky, g.kz)
        dU_hat = self.xp.stack([self.xp.stack([1j * K[j] * U_hat[i] for j in range(3)], axis=0) for i in range(3)], axis=0)
        G = irfftn3(dU_hat, g.shape)
        return 0.5 * (G + self.xp.swapaxes(G, 0, 1))

    def _eddy_viscosity(self, S):
        return (self.Cs * self.delta) ** 2 * self.xp.sqrt(2.0 * self.xp.sum(S * S, axis=(0, 1)))

    def _sgs_hat(self, U_hat):
        # F_i = d_j tau_ij with tau_ij = 2 nu_t S_ij
        g = self.grid
        S = self._strain_rate(U_hat)
        tau = 2.0 * S * self._eddy_viscosity(S)[None, None]
        tau_hat = rfftn3(tau)
        return 1j * (g.kx * tau_hat[:, 0] + g.ky * tau_hat[:, 1] + g.kz * tau_hat[:, 2])

    def _rhs(self, U_hat):
        xp = self.xp
        shape = self.grid.shape
        U = irfftn3(U_hat, shape)
        W = irfftn3(self._curl_hat(U_hat), shape)
        lamb = xp.stack([U[1] * W[2] - U[2] * W[1], U[2] * W[0] - U[0] * W[2], U[0] * W[1] - U[1] * W[0]], axis=0)
        rhs = rfftn3(lamb) * self.dealias
        rhs = rhs - self.nu * self.grid.k2 * U_hat
        if self.les:
            rhs = rhs + self._sgs_hat(U_hat) * self.dealias
        return self._project_divfree(rhs).astype(self.grid.cdtype)

    def _rk4(self, U_hat, dt):
        k1 = self._rhs(U_hat)
        k2 = self._rhs(U_hat + 0.5 * dt * k1)
        k3 = self._rhs(U_hat + 0.5 * dt * k2)
        k4 = self._rhs(U_hat + dt * k3)
        return U_hat + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

    # ------------------------------------------------------------------
    # Time integration
    # ------------------------------------------------------------------
    def step(self, dt: float) -> None:
        if not (dt > 0.0 and math.isfinite(dt)):
            raise SolverError(f"time step must be positive and finite, got {dt!r}")
        U_hat = self._rk4(self.U_hat, dt)
        if not bool(self.xp.all(self.xp.isfinite(U_hat))):
            raise SolverError(f"velocity became non-finite at step {self.nstep + 1} (t={self.time + dt:.4g})")
        self.U_hat = U_hat
        self.time += dt
        self.nstep += 1

    def sim_step(self, t_end: float, *, time_step=None, verbose: bool = False) -> None:
        """
        Advance until ``sim_time() >= t_end`` (convective units).

        ``time_step`` maps the solver to the next ``dt``; defaults to
        :class:`CFLTimeStep`.
        """
        time_step = time_step or CFLTimeStep()
        while self.sim_time() < t_end:
            dt = float(time_step(self))
            self.step(dt)
            if verbose:
                print(f"  Step {self.nstep} (tU/L={self.sim_time():.4f}, dt={dt:.3f})")

    # ------------------------------------------------------------------
    # Checkpoints
    # ------------------------------------------------------------------
    def save(self, path) -> None:
        path = os.fspath(path)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        np.savez(
            path,
            u=to_numpy(self.velocity),
            time=self.time,
            N=self.N,
            length_scale=self.length_scale,
            velocity_scale=self.velocity_scale,
        )
        print(f"Checkpoint stored in {path}")

    def load(self, path) -> None:
        """
        Restore velocity and time from a checkpoint written by :meth:`save`.

        The checkpoint must match this solver's resolution and its length
        and velocity scales, otherwise ``sim_time()`` would silently change.
        """
        path = os.fspath(path)
        if not os.path.isfile(path):
            raise FileNotFoundError(f"checkpoint not found: {path}")
        try:
            data = np.load(path)
        except (OSError, ValueError, EOFError, zipfile.BadZipFile) as err:
            raise SolverError(f"{path} is not a readable flow checkpoint ({err})") from err
        if not isinstance(data, np.lib.npyio.NpzFile):
            raise SolverError(f"{path} is not a flow checkpoint archive")
        with data:
            try:
                u = data["u"]
                time, N = float(data["time"]), int(data["N"])
                length_scale = float(data["length_scale"])
                velocity_scale = float(data["velocity_scale"])
            except KeyError as err:
                raise SolverError(f"{path} is not a flow checkpoint: missing {err}") from err
            except (OSError, ValueError, TypeError, zipfile.BadZipFile) as err:
                raise SolverError(f"{path}: corrupt checkpoint entry ({err})") from err
        if N != self.N:
            raise SolverError(f"checkpoint {path} holds N={N}, solver has N={self.N}")
        if not (
            math.isclose(length_scale, self.length_scale, rel_tol=1e-12)
            and math.isclose(velocity_scale, self.velocity_scale, rel_tol=1e-12)
        ):
            raise SolverError(
                f"checkpoint {path} was written with length_scale={length_scale:g}, "
                f"velocity_scale={velocity_scale:g}; solver has {self.length_scale:g}, {self.velocity_scale:g}"
            )
        self.set_velocity(u)
        self.time = time
        self.nstep = 0


__all__ = ["ConstantTimeStep", "CFLTimeStep", "SpectralLES", "checkpoint_name"]
