"""
Decaying-HIT runs compared against the Comte-Bellot & Corrsin data.

The run starts from a random field (or a stored checkpoint) at the first
measurement station ``t0`` and is advanced through the next two stations;
the spectrum is drawn at each station on top of the matching CBC curve.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from .config import ExperimentConfig, HITConfig
from .generator import generate_hit
from .plotting import SpectrumFigure, new_spectrum_figure, plot_spectra, set_plot_style
from .solver import ConstantTimeStep, SpectralLES, checkpoint_name


def figure_name(N: int, modes: int, Cs: float, scheme: str, t_ctu: float) -> str:
    return f"Ek_N{N}_modes{modes}_Cs{Cs:.2f}_{scheme}_t{t_ctu:.2f}.png"


def build_simulation(
    L: float,
    N: int,
    M: int,
    config: HITConfig,
    *,
    Cs: float = 0.0,
    delta: Optional[float] = None,
    dealias: str = "two_thirds",
    checkpoint=None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> SpectralLES:
    """
    Create the solver and fill it with an isotropic initial condition.

    With ``config.load`` the velocity is read from ``checkpoint``; otherwise
    ``M`` random modes are drawn from the reference spectrum at
    ``config.cbc_path``. Either way the field is made periodic and
    divergence-free by the solver.
    """
    sim = SpectralLES(
        N,
        length_scale=config.length_scale,
        velocity_scale=config.velocity_scale,
        nu=config.nu,
        Cs=Cs,
        delta=delta,
        dealias=dealias,
        backend=config.backend,
        precision=config.precision,
    )
    if config.load:
        if checkpoint is None:
            raise ValueError("load=True requires a checkpoint path")
        sim.load(checkpoint)
    else:
        if config.cbc_path is None:
            raise ValueError("a reference spectrum (cbc_path) is required to generate the initial field")
        u0 = generate_hit(
            L,
            N,
            M,
            cbc_path=config.cbc_path,
            backend=config.backend,
            precision=config.precision,
            seed=seed,
            verbose=verbose,
        )
        sim.set_velocity(u0)
    return sim


def run(experiment: ExperimentConfig | None = None) -> Tuple[SpectralLES, SpectrumFigure]:
    """
    Run the three-station CBC comparison and store the spectra figure.
    """
    exp = experiment or ExperimentConfig()
    config = exp.hit_config()
    print(f"N={exp.N}, LES={exp.Cs > 0}, Cs={exp.Cs:.2f}, scheme={exp.scheme}")

    set_plot_style(linewidth=2)
    sim = build_simulation(
        exp.L,
        exp.N,
        exp.modes,
        config,
        Cs=exp.Cs,
        delta=exp.delta,
        dealias=exp.scheme,
        checkpoint=exp.data_dir / checkpoint_name(exp.N, exp.t0_ctu),
        seed=exp.seed,
        verbose=exp.verbose,
    )
    time_step = ConstantTimeStep(exp.dt)
    fig = new_spectrum_figure(title=rf"$N={exp.N}$", dpi=exp.dpi)

    windows = (0.0, exp.t1_ctu - exp.t0_ctu, exp.t2_ctu - exp.t1_ctu)
    for cbc_t, window in enumerate(windows, start=1):
        if window > 0:
            sim.sim_step(sim.sim_time() + window, time_step=time_step, verbose=exp.verbose)
        t_ctu = sim.sim_time() + exp.t0_ctu
        if exp.save:
            sim.save(exp.data_dir / checkpoint_name(exp.N, t_ctu))
        fig_path: Optional[Path] = None
        if cbc_t == len(windows):
            fig_path = exp.plots_dir / figure_name(exp.N, exp.modes, exp.Cs, exp.scheme, t_ctu)
        plot_spectra(
            fig,
            exp.L,
            exp.N,
            sim.velocity,
            cbc_path=config.cbc_path,
            cbc_t=cbc_t,
            fig_path=fig_path,
            label=rf"$t={t_ctu:.2f}$",
        )
    return sim, fig


__all__ = ["build_simulation", "figure_name", "run"]
