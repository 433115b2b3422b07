"""
Spectral line data for opacity-tables.

This module provides:
- SpectralLines: Per-line parameters of one molecule
- read_par: HITRAN .par file reader
- SpectralDatabase: HDF5 line database for offline baking
- Isotopologue metadata (abundances and molar masses)
"""

from opacity_tables.data.spectral_lines import SpectralLines, read_par
from opacity_tables.data.spectral_db import SpectralDatabase, write_lines
from opacity_tables.data.isotopologues import Isotopologue, isotopologue

__all__ = [
    "SpectralLines",
    "read_par",
    "SpectralDatabase",
    "write_lines",
    "Isotopologue",
    "isotopologue",
]
