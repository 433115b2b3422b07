"""
Core table machinery.

This module contains:
- AtmosphericDomain: Chebyshev temperature/pressure sampling grid
- OpacityTable: Cross-section interpolant for one wavenumber
- bake: Parallel evaluation of line shapes into tables
- WellMixedGas, VariableGas: Absorbers built from baked tables
- opacity_error: Table accuracy against exact line shapes
"""

from opacity_tables.core.domain import AtmosphericDomain, chebygrid
from opacity_tables.core.interpolation import BichebyshevInterpolator
from opacity_tables.core.table import OpacityTable
from opacity_tables.core.bake import bake
from opacity_tables.core.gases import Gas, WellMixedGas, VariableGas, reconcentrate
from opacity_tables.core.diagnostics import OpacityError, opacity_error, summarize_error

__all__ = [
    "AtmosphericDomain",
    "chebygrid",
    "BichebyshevInterpolator",
    "OpacityTable",
    "bake",
    "Gas",
    "WellMixedGas",
    "VariableGas",
    "reconcentrate",
    "OpacityError",
    "opacity_error",
    "summarize_error",
]
