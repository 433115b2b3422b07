"""
Accuracy checks for baked opacity tables.

Compares a table against direct line-shape evaluation on a regular grid
spanning its domain, linear in temperature and log-uniform in pressure.
"""

import logging
from typing import Callable, Dict, NamedTuple, Optional, Union

import numpy as np

from opacity_tables.core.bake import as_concentration_function, parallel_map
from opacity_tables.core.constants import LINE_CUTOFF_CM1
from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.core.table import OpacityTable
from opacity_tables.physics.line_shapes import voigt

logger = logging.getLogger(__name__)


class OpacityError(NamedTuple):
    """Error grids from `opacity_error`.

    Attributes:
        T: Temperatures [K], shape (N,)
        P: Pressures [Pa], shape (N,)
        absolute: Table minus exact cross-section, shape (N, N)
        relative: absolute / exact, shape (N, N)
    """
    T: np.ndarray
    P: np.ndarray
    absolute: np.ndarray
    relative: np.ndarray


def opacity_error(
    table: OpacityTable,
    domain: AtmosphericDomain,
    lines,
    wavenumber: float,
    concentration: Union[float, Callable[[float, float], float]],
    shape: Callable = voigt,
    N: int = 50,
    cutoff: float = LINE_CUTOFF_CM1,
    num_threads: Optional[int] = None,
) -> OpacityError:
    """
    Compare a table against exact cross-sections across its domain.

    Parameters
    ----------
    table : OpacityTable
        Table to check
    domain : AtmosphericDomain
        Domain the table was baked on
    lines : SpectralLines
        Line list the table was baked from
    wavenumber : float
        Wavenumber of the table [cm^-1]
    concentration : float or callable
        Molar concentration, constant or C(T, P)
    shape : callable
        Line-shape kernel used for the exact values
    N : int
        Grid points along each axis
    cutoff : float
        Profile truncation distance [cm^-1]
    num_threads : int, optional
        Worker threads (None for one per CPU)

    Returns
    -------
    result : OpacityError
        Named tuple (T, P, absolute, relative). Where the exact value is
        zero the relative error is inf or nan.
    """
    if N < 2:
        raise ValueError(f"N must be at least 2, got {N}")

    C = as_concentration_function(concentration)
    T = np.linspace(domain.Tmin, domain.Tmax, N)
    P = 10.0 ** np.linspace(np.log10(domain.Pmin), np.log10(domain.Pmax), N)
    nu = np.array([float(wavenumber)])

    approx = np.zeros((N, N))
    exact = np.zeros((N, N))

    def _row(i):
        for j in range(N):
            approx[i, j] = table.cross_section(T[i], P[j])
            exact[i, j] = shape(None, nu, lines, T[i], P[j], C(T[i], P[j]) * P[j], cutoff)[0]

    parallel_map(_row, range(N), num_threads)

    absolute = approx - exact
    with np.errstate(divide="ignore", invalid="ignore"):
        relative = absolute / exact

    return OpacityError(T, P, absolute, relative)


def summarize_error(result: OpacityError) -> Dict[str, float]:
    """Maximum and mean absolute relative error, ignoring nan entries."""
    rel = np.abs(result.relative)
    finite = rel[np.isfinite(rel)]
    summary = {
        "max_relative": float(np.nanmax(rel)) if np.any(~np.isnan(rel)) else float("nan"),
        "mean_relative": float(finite.mean()) if finite.size else float("nan"),
        "max_absolute": float(np.nanmax(np.abs(result.absolute))),
        "n_undefined": int(np.sum(~np.isfinite(rel))),
    }
    logger.debug(f"Opacity error summary: {summary}")
    return summary
