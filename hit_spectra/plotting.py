"""
Log-log comparison of simulated spectra against the CBC reference data.

A :class:`SpectrumFigure` accumulates curves over repeated calls to
:func:`plot_spectra`, one call per checkpoint of a run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import cmasher as cmr
import matplotlib.pyplot as plt

from .reference import load_cbc_spectrum
from .spectra import cutoff_wavenumber, spectrum

CBC_LABEL = "CBC (exp)"
PALETTE = tuple(cmr.take_cmap_colors("rainbow", 10, cmap_range=(0.1, 0.9), return_fmt="hex"))


def set_plot_style(fontsize: float = 14, linewidth: float = 1) -> None:
    """Computer Modern fonts, boxed axes with major and minor grids."""
    plt.rcParams.update(
        {
            "font.family": "serif",
            "font.serif": ["Computer Modern Roman", "CMU Serif", "DejaVu Serif"],
            "mathtext.fontset": "cm",
            "axes.formatter.use_mathtext": True,
            "lines.linewidth": linewidth,
            "axes.grid": True,
            "axes.grid.which": "both",
            "font.size": fontsize,
            "axes.titlesize": fontsize,
            "axes.labelsize": fontsize,
            "legend.fontsize": fontsize,
            "xtick.labelsize": fontsize,
            "ytick.labelsize": fontsize,
            "savefig.pad_inches": 5 / 25.4,
        }
    )


@dataclass
class SpectrumFigure:
    """
    Figure state shared by successive :func:`plot_spectra` calls.

    ``n_spectra`` counts the simulated spectra drawn so far and selects the
    next palette colour; ``reference_labelled`` records whether the CBC
    curve already has its legend entry.
    """

    fig: plt.Figure
    ax: plt.Axes
    palette: Sequence = PALETTE
    n_spectra: int = 0
    reference_labelled: bool = False
    saved: List[str] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [line.get_label() for line in self.ax.get_lines()]

    def next_color(self):
        color = self.palette[self.n_spectra % len(self.palette)]
        self.n_spectra += 1
        return color

    def close(self) -> None:
        plt.close(self.fig)


def new_spectrum_figure(title: Optional[str] = None, *, dpi: int = 150) -> SpectrumFigure:
    fig, ax = plt.subplots(figsize=(9.0, 6.0), dpi=dpi)
    if title:
        ax.set_title(title)
    return SpectrumFigure(fig=fig, ax=ax)


def _format_axes(ax: plt.Axes) -> None:
    ax.figure.set_size_inches(9.0, 6.0)
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlim(10, 2e3)
    ax.set_ylim(1e-8, 1e-3)
    ax.set_xlabel(r"$\kappa$")
    ax.set_ylabel(r"$E(\kappa)$")
    for spine in ax.spines.values():
        spine.set_visible(True)
    ax.minorticks_on()
    ax.grid(True, which="major", ls="-", lw=0.5, alpha=0.5)
    ax.grid(True, which="minor", ls=":", lw=0.5, alpha=0.3)


def plot_spectra(
    fig: SpectrumFigure | None,
    L: float,
    N: int,
    u,
    *,
    cbc_path=None,
    cbc_t: int = 1,
    fig_path=None,
    label: str | None = None,
) -> SpectrumFigure:
    """
    Overlay the spectrum of ``u`` (and optionally the CBC data) on ``fig``.

    Parameters
    ----------
    fig : SpectrumFigure or None
        Figure to draw on; a new one is created when ``None``.
    L : float
        Physical edge length of the domain.
    N : int
        Cells per direction, used for the cutoff marker.
    u : array_like
        Velocity field of shape ``(N, N, N, 3)``.
    cbc_path : str or Path, optional
        Reference table to overlay.
    cbc_t : int
        Which reference station (column after the wavenumber) to draw.
    fig_path : str or Path, optional
        Save the figure here once drawn.
    label : str, optional
        Legend label for the simulated spectrum (default ``$N^3$``).

    Returns
    -------
    SpectrumFigure
        The same figure, for chaining across checkpoints.
    """
    if fig is None:
        fig = new_spectrum_figure()
    ax = fig.ax
    if label is None:
        label = rf"${N}^3$"

    if cbc_path is not None:
        k_cbc, E = load_cbc_spectrum(cbc_path, cbc_t)
        ref_label = "_nolegend_" if fig.reference_labelled else CBC_LABEL
        ax.plot(k_cbc, E(k_cbc), color="black", label=ref_label)
        fig.reference_labelled = True

    k, tke = spectrum(u, L)
    ax.plot(
        k[1:],
        tke[1:],
        color=fig.next_color(),
        label=label,
        marker="o",
        markersize=3,
        markevery=1,
        markeredgewidth=0.5,
    )
    ax.axvline(cutoff_wavenumber(L, N), ls="--", color="grey", label="_nolegend_")

    _format_axes(ax)
    ax.legend(frameon=False)

    if fig_path is not None:
        fig_path = os.fspath(fig_path)
        parent = os.path.dirname(fig_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fig.fig.savefig(fig_path, bbox_inches="tight")
        fig.saved.append(fig_path)
        print(f"Figure stored in {fig_path}")
    return fig


__all__ = ["CBC_LABEL", "PALETTE", "SpectrumFigure", "new_spectrum_figure", "plot_spectra", "set_plot_style"]
