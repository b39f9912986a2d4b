import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest


def write_table(path, rows, fmt="%.8g", delimiter=" "):
    np.savetxt(path, np.asarray(rows, dtype=float), fmt=fmt, delimiter=delimiter)
    return path


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def square_table(tmp_path):
    """Two-column table with rows (1, 1), (2, 4), (3, 9)."""
    return write_table(tmp_path / "square.dat", [(1, 1), (2, 4), (3, 9)])


@pytest.fixture
def cbc_table(tmp_path):
    """
    CBC-like table: k in 1/cm from 0.05 to 20 and three decaying stations
    of a von Karman shaped spectrum in cm^3/s^2.
    """
    k = np.geomspace(0.05, 20.0, 40)
    E = 300.0 * k**4 / (1.0 + k**2) ** (17.0 / 6.0)
    rows = np.column_stack([k, E, 0.6 * E, 0.4 * E])
    path = tmp_path / "data" / "cbc_spectrum.dat"
    path.parent.mkdir()
    return write_table(path, rows)


def shear_mode(N, L, m=3, component=1):
    """Velocity with one Fourier mode, u_component = cos(2*pi*m*x/L)."""
    x = np.arange(N) * (L / N)
    u = np.zeros((N, N, N, 3))
    u[..., component] = np.cos(2 * np.pi * m * x / L)[:, None, None]
    return u
