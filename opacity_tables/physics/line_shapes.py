"""
Line-shape kernels for cross-section synthesis.

Every kernel has the signature used by `opacity_tables.core.bake`:

    shape(out, wavenumbers, lines, T, P, Ps, cutoff) -> ndarray

* out: float array aligned with wavenumbers to accumulate into, or None
  to allocate a zeroed one
* wavenumbers: ascending wavenumbers [cm^-1]
* lines: SpectralLines
* T: temperature [K]
* P: total pressure [Pa]
* Ps: partial pressure of the absorber [Pa]
* cutoff: lines only contribute within this distance of their center [cm^-1]

The returned array holds cross-sections in cm^2/molecule. Line intensities
are scaled from the HITRAN reference temperature, Doppler and Lorentz
half-widths are computed per line, and the profile sums run in
numba-compiled loops that release the GIL so kernels can be driven from a
thread pool.
"""

import numpy as np
from numba import jit

from opacity_tables.core.constants import (
    AVOGADRO_NUMBER,
    BOLTZMANN_CONSTANT,
    C2_RADIATION,
    HITRAN_REFERENCE_TEMPERATURE,
    LINE_CUTOFF_CM1,
    LINEAR_MOLECULES,
    SPEED_OF_LIGHT,
    STANDARD_PRESSURE,
)

SQRT_LN2 = np.sqrt(np.log(2.0))
SQRT_LN2_PI = np.sqrt(np.log(2.0) / np.pi)

VOIGT = 0
LORENTZ = 1
DOPPLER = 2


# =============================================================================
# Numba-accelerated profile sums
# =============================================================================

@jit(nopython=True, cache=True, nogil=True)
def humlicek(x: float, y: float) -> float:
    """Real part of the Faddeeva function, K(x, y).

    Uses the four-region rational approximation of Humlicek (1982)
    JQSRT 27, 437, accurate to about 1e-4 relative.

    Args:
        x: Dimensionless frequency offset from line center
        y: Ratio of Lorentzian to Doppler width (>= 0)

    Returns:
        Voigt function K(x, y)
    """
    t = y - 1j * x
    s = abs(x) + y

    if s >= 15.0:
        # Region I
        w = t * 0.5641896 / (0.5 + t * t)
    elif s >= 5.5:
        # Region II
        u = t * t
        w = t * (1.410474 + u * 0.5641896) / (0.75 + u * (3.0 + u))
    elif y >= 0.195 * abs(x) - 0.176:
        # Region III
        w = (16.4955 + t * (20.20933 + t * (11.96482 + t * (3.778987 + t * 0.5642236)))) / \
            (16.4955 + t * (38.82363 + t * (39.27121 + t * (21.69274 + t * (6.699398 + t)))))
    else:
        # Region IV
        u = t * t
        w = np.exp(u) - t * (36183.31 - u * (3321.9905 - u * (1540.787 - u * (
            219.0313 - u * (35.76683 - u * (1.320522 - u * 0.56419)))))) / \
            (32066.6 - u * (24322.84 - u * (9022.228 - u * (2186.181 - u * (
                364.2191 - u * (61.57037 - u * (1.841439 - u)))))))

    return w.real


@jit(nopython=True, cache=True, nogil=True)
def accumulate_profiles(
    out: np.ndarray,
    wavenumbers: np.ndarray,
    centers: np.ndarray,
    strengths: np.ndarray,
    alpha: np.ndarray,
    gamma: np.ndarray,
    cutoff: float,
    kind: int,
) -> None:
    """Add strength-weighted line profiles into out.

    Args:
        out: Accumulation target aligned with wavenumbers
        wavenumbers: Ascending wavenumber grid [cm^-1]
        centers: Line centers [cm^-1]
        strengths: Line intensities at the current temperature
        alpha: Doppler half-widths [cm^-1]
        gamma: Lorentz half-widths [cm^-1]
        cutoff: Truncation distance [cm^-1]
        kind: VOIGT, LORENTZ or DOPPLER
    """
    for k in range(centers.size):
        c = centers[k]
        lo = np.searchsorted(wavenumbers, c - cutoff, "left")
        hi = np.searchsorted(wavenumbers, c + cutoff, "right")
        if lo >= hi:
            continue

        S = strengths[k]
        a = alpha[k]
        g = gamma[k]
        for m in range(lo, hi):
            dnu = wavenumbers[m] - c
            if kind == VOIGT:
                out[m] += S * SQRT_LN2_PI / a * humlicek(SQRT_LN2 * dnu / a, SQRT_LN2 * g / a)
            elif kind == LORENTZ:
                out[m] += S * g / (np.pi * (dnu * dnu + g * g))
            else:
                out[m] += S * SQRT_LN2_PI / a * np.exp(-np.log(2.0) * (dnu / a) ** 2)


# =============================================================================
# Line parameters at (T, P)
# =============================================================================

def partition_ratio(formula: str, T: float) -> float:
    """Q(Tref)/Q(T) from the rotational partition function power law."""
    j = 1.0 if formula in LINEAR_MOLECULES else 1.5
    return (HITRAN_REFERENCE_TEMPERATURE / T) ** j


def scale_strength(lines, T: float) -> np.ndarray:
    """Line intensities at temperature T [cm^-1/(molecule·cm^-2)].

    S(T) = S(Tref) Q(Tref)/Q(T) exp(-c2 E"/T)/exp(-c2 E"/Tref)
           (1 - exp(-c2 nu/T))/(1 - exp(-c2 nu/Tref))
    """
    Tref = HITRAN_REFERENCE_TEMPERATURE
    boltz = np.exp(-C2_RADIATION * lines.lower_energy * (1.0 / T - 1.0 / Tref))
    stim = np.expm1(-C2_RADIATION * lines.wavenumber / T) / \
        np.expm1(-C2_RADIATION * lines.wavenumber / Tref)
    return lines.intensity * partition_ratio(lines.formula, T) * boltz * stim


def doppler_hwhm(centers: np.ndarray, molar_mass: np.ndarray, T: float) -> np.ndarray:
    """Doppler (Gaussian) half-width at half-maximum [cm^-1]."""
    m = molar_mass / AVOGADRO_NUMBER
    return centers / SPEED_OF_LIGHT * np.sqrt(2.0 * np.log(2.0) * BOLTZMANN_CONSTANT * T / m)


def lorentz_hwhm(lines, T: float, P: float, Ps: float) -> np.ndarray:
    """Pressure-broadened (Lorentzian) half-width at half-maximum [cm^-1].

    P and Ps are in Pa; broadening coefficients are per atm.
    """
    Pa = P / STANDARD_PRESSURE
    Psa = Ps / STANDARD_PRESSURE
    return (HITRAN_REFERENCE_TEMPERATURE / T) ** lines.temp_exp * \
        (lines.air_width * (Pa - Psa) + lines.self_width * Psa)


def _synthesize(kind, out, wavenumbers, lines, T, P, Ps, cutoff):
    nu = np.asarray(wavenumbers, dtype=np.float64)
    if out is None:
        out = np.zeros(nu.shape)
    if lines.num_lines == 0:
        return out

    centers = lines.wavenumber + lines.pressure_shift * (P / STANDARD_PRESSURE)
    strengths = scale_strength(lines, T)
    alpha = doppler_hwhm(centers, lines.molar_mass, T)
    gamma = lorentz_hwhm(lines, T, P, Ps)

    accumulate_profiles(
        out, nu,
        np.ascontiguousarray(centers),
        np.ascontiguousarray(strengths),
        np.ascontiguousarray(alpha),
        np.ascontiguousarray(gamma),
        float(cutoff),
        kind,
    )
    return out


# =============================================================================
# Kernels
# =============================================================================

def voigt(out, wavenumbers, lines, T, P, Ps, cutoff=LINE_CUTOFF_CM1):
    """Voigt profile cross-sections [cm^2/molecule]."""
    return _synthesize(VOIGT, out, wavenumbers, lines, T, P, Ps, cutoff)


def lorentz(out, wavenumbers, lines, T, P, Ps, cutoff=LINE_CUTOFF_CM1):
    """Lorentzian (pressure broadened) profile cross-sections [cm^2/molecule]."""
    return _synthesize(LORENTZ, out, wavenumbers, lines, T, P, Ps, cutoff)


def doppler(out, wavenumbers, lines, T, P, Ps, cutoff=LINE_CUTOFF_CM1):
    """Gaussian (Doppler broadened) profile cross-sections [cm^2/molecule]."""
    return _synthesize(DOPPLER, out, wavenumbers, lines, T, P, Ps, cutoff)


LINE_SHAPES = {
    "voigt": voigt,
    "lorentz": lorentz,
    "doppler": doppler,
}


def get_line_shape(name: str):
    """Look up a line-shape kernel by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return LINE_SHAPES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown line shape '{name}'. Available: {list(LINE_SHAPES)}"
        ) from None
