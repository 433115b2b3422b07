"""
Per-wavenumber opacity tables.

An `OpacityTable` wraps a `BichebyshevInterpolator` holding log
cross-sections on (temperature, log pressure) coordinates. Working in log
space keeps the interpolant accurate over the many orders of magnitude a
cross-section spans across the domain.
"""

from dataclasses import dataclass

import numpy as np

from opacity_tables.core.interpolation import BichebyshevInterpolator


@dataclass(frozen=True, eq=False)
class OpacityTable:
    """Cross-section interpolant for a single wavenumber.

    Attributes:
        interpolator: Chebyshev interpolant of ln(sigma) over (T, ln P)
        empty: True when every sampled cross-section was exactly zero
    """
    interpolator: BichebyshevInterpolator
    empty: bool

    @classmethod
    def from_samples(cls, T, P, sigma) -> "OpacityTable":
        """Build a table from cross-sections sampled on a domain grid.

        Args:
            T: Temperature coordinates [K], shape (nT,)
            P: Pressure coordinates [Pa], shape (nP,)
            sigma: Cross-sections [cm^2/molecule], shape (nT, nP)

        Returns:
            OpacityTable, flagged empty if sigma is all zero
        """
        sigma = np.asarray(sigma, dtype=np.float64)
        lnP = np.log(np.asarray(P, dtype=np.float64))
        if np.all(sigma == 0):
            # avoid log(0) and -inf samples in the interpolator
            return cls(BichebyshevInterpolator(T, lnP, np.zeros(sigma.shape)), True)
        return cls(BichebyshevInterpolator(T, lnP, np.log(sigma)), False)

    def cross_section(self, T: float, P: float) -> float:
        """Cross-section [cm^2/molecule] at temperature T [K] and pressure P [Pa]."""
        if self.empty:
            return 0.0
        return float(np.exp(self.interpolator(T, np.log(P))))

    __call__ = cross_section

    def __eq__(self, other):
        if not isinstance(other, OpacityTable):
            return NotImplemented
        return self.empty == other.empty and self.interpolator == other.interpolator

    __hash__ = None
