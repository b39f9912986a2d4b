"""
Exception types raised by the HIT toolkit.

Missing files surface as the builtin :class:`FileNotFoundError`.
"""

from __future__ import annotations


class HITError(Exception):
    """Base class for errors raised by :mod:`hit_spectra`."""


class FormatError(HITError, ValueError):
    """A reference-spectrum table is not a uniform numeric table."""


class InterpolationDomainError(HITError, ValueError):
    """A reference spectrum was evaluated outside its sampled wavenumbers."""


class SolverError(HITError, RuntimeError):
    """The LES solver could not step, save or restore its state."""


__all__ = ["HITError", "FormatError", "InterpolationDomainError", "SolverError"]
