"""
Physical constants and reference values for opacity table construction.

All units are in SI unless otherwise noted.
Spectroscopic constants follow HITRAN conventions (wavenumbers in cm^-1,
line intensities in cm/molecule, broadening coefficients in cm^-1/atm).
"""

from typing import Dict

# =============================================================================
# Fundamental Physical Constants
# =============================================================================

# Speed of light in vacuum [m/s]
SPEED_OF_LIGHT = 2.99792458e8

# Boltzmann constant [J/K]
BOLTZMANN_CONSTANT = 1.380649e-23

# Avogadro number [mol^-1]
AVOGADRO_NUMBER = 6.02214076e23

# Second radiation constant c2 = hc/k [cm·K]
C2_RADIATION = 1.4387769

# =============================================================================
# Reference Conditions
# =============================================================================

# One standard atmosphere [Pa]
STANDARD_PRESSURE = 101325.0

# Reference temperature for HITRAN line intensities and widths [K]
HITRAN_REFERENCE_TEMPERATURE = 296.0

# =============================================================================
# Opacity Table Limits
# =============================================================================

# Temperature interval over which the partition function ratio Q(Tref)/Q(T)
# is trusted [K]. Sampling domains must fall inside it.
TMIN = 25.0
TMAX = 1000.0

# Default sampling domain: 12 temperatures in [25, 550] K and
# 24 pressures in [1, 1e6] Pa
DEFAULT_TEMPERATURE_RANGE = (25.0, 550.0)
DEFAULT_N_TEMPERATURE = 12
DEFAULT_PRESSURE_RANGE = (1.0, 1e6)
DEFAULT_N_PRESSURE = 24

# Line shape cutoff distance [cm^-1]
LINE_CUTOFF_CM1 = 25.0

# =============================================================================
# Molecule Data (HITRAN molecule IDs)
# =============================================================================

MOLECULE_IDS: Dict[str, int] = {
    "H2O": 1,
    "CO2": 2,
    "O3": 3,
    "N2O": 4,
    "CO": 5,
    "CH4": 6,
    "O2": 7,
    "NO": 8,
    "SO2": 9,
    "NO2": 10,
    "NH3": 11,
    "HNO3": 12,
    "OH": 13,
    "HF": 14,
    "HCl": 15,
    "HBr": 16,
    "HI": 17,
    "ClO": 18,
    "OCS": 19,
    "H2CO": 20,
    "HOCl": 21,
    "N2": 22,
    "HCN": 23,
    "CH3Cl": 24,
    "H2O2": 25,
    "C2H2": 26,
    "C2H6": 27,
    "PH3": 28,
    "COF2": 29,
    "SF6": 30,
}

# Molecule names (reverse mapping)
MOLECULE_NAMES: Dict[int, str] = {v: k for k, v in MOLECULE_IDS.items()}

# Linear molecules have rotational partition functions scaling as T^1,
# nonlinear ones as T^1.5
LINEAR_MOLECULES = frozenset({
    "CO2", "N2O", "CO", "O2", "NO", "OH", "HF", "HCl", "HBr", "HI",
    "ClO", "OCS", "N2", "HCN", "C2H2",
})
