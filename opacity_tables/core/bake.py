"""
Opacity table baking.

`bake` evaluates a line-shape kernel at every (temperature, pressure) node
of an `AtmosphericDomain` for a whole wavenumber grid, then builds one
`OpacityTable` per wavenumber from the resulting block of cross-sections.

Line-shape kernels follow the signature

    shape(out, wavenumbers, lines, T, P, Ps, cutoff) -> ndarray

where `out` is a pre-sized float array to accumulate cross-sections into
(or None to allocate one), T is temperature [K], P is total pressure [Pa],
Ps is the partial pressure of the absorber [Pa] and cutoff is the profile
truncation distance [cm^-1]. See `opacity_tables.physics.line_shapes`.

Both the grid fill and the table construction run on a thread pool. Each
grid-fill task owns one temperature slab of the buffer and each table task
reads one wavenumber slab, so no two workers ever write the same memory.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Union

import numpy as np

from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.core.errors import ConcentrationError, WavenumberError
from opacity_tables.core.table import OpacityTable

logger = logging.getLogger(__name__)

ConcentrationFunction = Callable[[float, float], float]
LineShape = Callable[..., Optional[np.ndarray]]


def resolve_num_threads(num_threads: Optional[int] = None) -> int:
    """Number of worker threads to use; None means one per CPU."""
    if num_threads is None:
        return os.cpu_count() or 1
    return max(1, int(num_threads))


def parallel_map(fn: Callable, items: Iterable, num_threads: Optional[int] = None) -> list:
    """Apply fn to every item on a thread pool, preserving order.

    The first exception raised by any call propagates; tasks that have not
    started yet are cancelled.
    """
    items = list(items)
    num_threads = resolve_num_threads(num_threads)
    if num_threads == 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(max_workers=min(num_threads, len(items))) as pool:
        futures = [pool.submit(fn, item) for item in items]
        try:
            return [future.result() for future in futures]
        except BaseException:
            for future in futures:
                future.cancel()
            raise


def check_wavenumbers(wavenumbers) -> np.ndarray:
    """Validate a wavenumber grid and return it as a float array.

    Raises:
        WavenumberError: If the grid is empty, not one-dimensional, not
            strictly ascending, or contains negative or non-finite values
    """
    nu = np.array(wavenumbers, dtype=np.float64)
    if nu.ndim != 1 or nu.size == 0:
        raise WavenumberError("wavenumbers must be a non-empty one-dimensional array")
    if not np.all(np.isfinite(nu)):
        raise WavenumberError("wavenumbers must be finite")
    if not np.all(np.diff(nu) > 0):
        raise WavenumberError("wavenumbers must be unique and in ascending order")
    if not np.all(nu >= 0):
        raise WavenumberError("wavenumbers must be non-negative")
    return nu


def check_concentration(C: float, T: Optional[float] = None, P: Optional[float] = None) -> float:
    """Ensure a molar concentration lies in [0, 1].

    Raises:
        ConcentrationError: If it does not (NaN included)
    """
    if not 0 <= C <= 1:
        where = f" (encountered @ {T} K, {P} Pa)" if T is not None else ""
        raise ConcentrationError(
            f"gas molar concentrations must be in [0,1], not {C}{where}"
        )
    return C


def as_concentration_function(
    concentration: Union[float, ConcentrationFunction],
) -> ConcentrationFunction:
    """Wrap a constant concentration as a function of (T, P)."""
    if callable(concentration):
        return concentration
    value = float(concentration)
    return lambda T, P: value


def _fill_temperature_slab(
    sigma: np.ndarray,
    i: int,
    wavenumbers: np.ndarray,
    lines,
    concentration: ConcentrationFunction,
    shape: LineShape,
    cutoff: float,
    domain: AtmosphericDomain,
) -> None:
    """Evaluate the line shape at every pressure for temperature index i."""
    T = float(domain.T[i])
    for j in range(domain.nP):
        P = float(domain.P[j])
        C = check_concentration(concentration(T, P), T, P)
        column = sigma[:, i, j]
        result = shape(column, wavenumbers, lines, T, P, C * P, cutoff)
        if result is not None and result is not column:
            column[:] = result


def find_mixed_zeros(sigma: np.ndarray) -> np.ndarray:
    """Flag wavenumbers whose samples mix exact zeros with positive values.

    Args:
        sigma: Cross-sections, shape (n_wavenumber, nT, nP)

    Returns:
        Boolean mask, shape (n_wavenumber,)
    """
    flat = sigma.reshape(sigma.shape[0], -1)
    return (flat.min(axis=1) == 0) & (flat.max(axis=1) > 0)


def bake(
    lines,
    concentration: Union[float, ConcentrationFunction],
    shape: LineShape,
    cutoff: float,
    wavenumbers,
    domain: AtmosphericDomain,
    num_threads: Optional[int] = None,
) -> List[OpacityTable]:
    """Build one opacity table per wavenumber.

    Args:
        lines: Spectral line list handed through to the line shape
        concentration: Molar concentration, constant or C(T, P) [mole/mole]
        shape: In-place line-shape kernel (see module docstring)
        cutoff: Profile truncation distance [cm^-1]
        wavenumbers: Strictly ascending, non-negative wavenumbers [cm^-1]
        domain: Sampling domain
        num_threads: Worker threads (None for one per CPU)

    Returns:
        List of OpacityTable, one per wavenumber, in input order

    Raises:
        WavenumberError: If the wavenumbers are not ascending or negative
        ConcentrationError: If the concentration leaves [0, 1] anywhere
            on the grid
    """
    nu = check_wavenumbers(wavenumbers)
    concentration = as_concentration_function(concentration)
    cutoff = float(cutoff)
    n_nu = nu.size
    name = getattr(lines, "name", type(lines).__name__)

    logger.debug(
        f"Baking {n_nu} wavenumbers for {name} on a {domain.nT}x{domain.nP} grid"
    )
    start = time.perf_counter()

    sigma = np.zeros((n_nu, domain.nT, domain.nP))
    parallel_map(
        lambda i: _fill_temperature_slab(
            sigma, i, nu, lines, concentration, shape, cutoff, domain
        ),
        range(domain.nT),
        num_threads,
    )

    mixed = find_mixed_zeros(sigma)
    if np.any(mixed):
        logger.warning(
            f"Zero cross-section values are mixed with non-zero values for the "
            f"following wavenumbers for {name}: {nu[mixed].tolist()}. Likely, "
            f"absorption is extremely weak in these regions, causing underflow. "
            f"Absorption is being set to zero for all temperatures and pressures "
            f"at those wavenumbers to avoid non-smooth and inaccurate interpolation tables."
        )
        sigma[mixed, :, :] = 0.0

    tables = parallel_map(
        lambda k: OpacityTable.from_samples(domain.T, domain.P, sigma[k]),
        range(n_nu),
        num_threads,
    )

    logger.debug(f"Baked {n_nu} tables for {name} in {time.perf_counter() - start:.2f} s")
    return tables
