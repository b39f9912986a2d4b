#!/usr/bin/env python3
"""
Decaying HIT compared against Comte-Bellot & Corrsin (1971).

Experiment: https://doi.org/10.1017/S0022112071001599. The reference table
is expected at ``examples/data/cbc_spectrum.dat`` (k in 1/cm followed by
E(k) in cm^3/s^2 at the three stations t = 42, 98, 171 M/U0). Checkpoints
go to ``examples/data`` and the spectra figure to ``examples/plots``.

Edit the constants below to change the run.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import matplotlib

matplotlib.use("Agg")

from hit_spectra import Backend, ExperimentConfig, Precision, run  # noqa: E402

HERE = Path(__file__).resolve().parent

EXPERIMENT = ExperimentConfig(
    N=2**5,
    modes=2**11,
    Cs=0.17,
    scheme="two_thirds",
    dt=0.5,
    save=False,
    load=False,
    seed=99,
    backend=Backend.CPU,  # Backend.GPU runs on CuPy
    precision=Precision.FLOAT32,
    data_dir=HERE / "data",
    plots_dir=HERE / "plots",
)


def main() -> None:
    sim, fig = run(EXPERIMENT)
    print(f"Final time: {sim.sim_time() + EXPERIMENT.t0_ctu:.2f} CTU after {sim.nstep} steps")
    fig.close()


if __name__ == "__main__":
    main()
