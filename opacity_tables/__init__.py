"""
opacity-tables: Pre-computed molecular absorption cross-section tables.

Cross-sections from spectral line lists are evaluated once on a
temperature/pressure grid and stored as Chebyshev interpolants, one per
wavenumber, so radiative transfer codes can query them cheaply anywhere in
the atmosphere.

Modules
-------
core
    Sampling domains, Chebyshev tables, the table baker, gas types and
    accuracy diagnostics
data
    HITRAN line lists, isotopologue metadata and HDF5 storage
physics
    Line-shape kernels (Voigt, Lorentz, Doppler)
config
    Bake configuration loaded from YAML or JSON
"""

__version__ = "0.1.0"
__author__ = "opacity-tables Contributors"

from opacity_tables.core import (
    AtmosphericDomain,
    OpacityTable,
    WellMixedGas,
    VariableGas,
    bake,
    reconcentrate,
    opacity_error,
)
from opacity_tables.core.errors import (
    OpacityTablesError,
    DomainError,
    WavenumberError,
    ConcentrationError,
)
from opacity_tables.data import SpectralLines, SpectralDatabase, read_par
from opacity_tables.data.table_store import save_gas, load_gas
from opacity_tables.physics import voigt, lorentz, doppler

__all__ = [
    "__version__",
    "AtmosphericDomain",
    "OpacityTable",
    "WellMixedGas",
    "VariableGas",
    "bake",
    "reconcentrate",
    "opacity_error",
    "OpacityTablesError",
    "DomainError",
    "WavenumberError",
    "ConcentrationError",
    "SpectralLines",
    "SpectralDatabase",
    "read_par",
    "save_gas",
    "load_gas",
    "voigt",
    "lorentz",
    "doppler",
]
