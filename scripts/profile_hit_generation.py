#!/usr/bin/env python3
"""
Standalone runtime probe for ``generate_hit`` and one LES step.

Uses the same box and reference table as ``examples/run_hit.py`` so the
cost of the initial condition and of a time step can be timed outside a
full run.
"""

import sys
import time
from pathlib import Path

import numpy as np

# Ensure project root is importable when invoked as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hit_spectra import SpectralLES, generate_hit, kinetic_energy_spectrum, set_fftw_threads, warm_fft_cache


def main() -> None:
    N = 64
    L = 9 * 2 * np.pi / 100
    cbc_path = PROJECT_ROOT / "examples" / "data" / "cbc_spectrum.dat"

    set_fftw_threads(8)
    warm_fft_cache((3, N, N, N), dtype=np.float32)

    start = time.perf_counter()
    u = generate_hit(L, N, 2**11, cbc_path=cbc_path, seed=99)
    elapsed = time.perf_counter() - start
    print(f"HIT field generated in {elapsed:.3f} s")
    for c, name in enumerate("uvw"):
        print(f"{name} stats: mean={u[..., c].mean():+.3e}, std={u[..., c].std():.3e}")

    spec = kinetic_energy_spectrum(u, L)
    print(f"E_tot={spec.Etot:.3e} over {spec.k.size} shells")

    sim = SpectralLES(N, nu=1e-4, Cs=0.17)
    sim.set_velocity(u)
    start = time.perf_counter()
    sim.step(0.5)
    print(f"One RK4 step in {time.perf_counter() - start:.3f} s")


if __name__ == "__main__":
    main()
