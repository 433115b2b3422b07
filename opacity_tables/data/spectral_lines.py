"""
Spectral line lists and HITRAN `.par` file reading.

A `SpectralLines` object carries the per-line parameters that the line-shape
kernels need, together with the isotopologue abundances and molar masses
used to compute a gas's mean molar mass.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

import numpy as np

from opacity_tables.core.constants import MOLECULE_NAMES
from opacity_tables.data.isotopologues import isotopologue as lookup_isotopologue
from opacity_tables.data.isotopologues import parse_isotopologue_code

logger = logging.getLogger(__name__)


@dataclass
class SpectralLines:
    """Container for spectral line data of a single molecule.

    Attributes:
        name: Identifying name of the line list
        formula: Chemical formula of the molecule
        molecule_id: HITRAN molecule IDs
        isotopologue: HITRAN isotopologue numbers
        wavenumber: Line center wavenumbers [cm^-1]
        intensity: Line intensities at 296K [cm^-1/(molecule·cm^-2)]
        abundance: Isotopologue abundances
        molar_mass: Isotopologue molar masses [kg/mol]
        air_width: Air-broadened half-widths [cm^-1/atm]
        self_width: Self-broadened half-widths [cm^-1/atm]
        lower_energy: Lower state energies [cm^-1]
        temp_exp: Temperature dependence exponent of air width
        pressure_shift: Pressure-induced line shift [cm^-1/atm]
    """
    name: str
    formula: str
    molecule_id: np.ndarray
    isotopologue: np.ndarray
    wavenumber: np.ndarray
    intensity: np.ndarray
    abundance: np.ndarray
    molar_mass: np.ndarray
    air_width: np.ndarray
    self_width: np.ndarray
    lower_energy: np.ndarray
    temp_exp: np.ndarray
    pressure_shift: np.ndarray

    _ARRAYS = (
        "molecule_id", "isotopologue", "wavenumber", "intensity", "abundance",
        "molar_mass", "air_width", "self_width", "lower_energy", "temp_exp",
        "pressure_shift",
    )

    def __post_init__(self):
        n = len(self.wavenumber)
        for attr in self._ARRAYS:
            if len(getattr(self, attr)) != n:
                raise ValueError(f"line array '{attr}' has {len(getattr(self, attr))} entries, expected {n}")

    @classmethod
    def from_hitran(
        cls,
        molecule_id,
        isotopologue_number,
        wavenumber,
        intensity,
        air_width,
        self_width,
        lower_energy,
        temp_exp,
        pressure_shift,
        name: Optional[str] = None,
    ) -> "SpectralLines":
        """Assemble a line list from HITRAN parameters, sorted by wavenumber.

        Abundances and molar masses are filled in from the isotopologue table.

        Raises:
            ValueError: If the lines belong to more than one molecule
            KeyError: If an isotopologue is not tabulated
        """
        molecule_id = np.asarray(molecule_id, dtype=np.int32)
        isotopologue_number = np.asarray(isotopologue_number, dtype=np.int32)

        ids = np.unique(molecule_id)
        if ids.size != 1:
            raise ValueError(f"line list must contain a single molecule, found IDs {ids.tolist()}")
        formula = MOLECULE_NAMES.get(int(ids[0]), f"molecule-{int(ids[0])}")

        info = [lookup_isotopologue(ids[0], I) for I in isotopologue_number]
        order = np.argsort(np.asarray(wavenumber, dtype=np.float64), kind="stable")

        def _sorted(values, dtype=np.float64):
            return np.asarray(values, dtype=dtype)[order]

        return cls(
            name=name if name is not None else formula,
            formula=formula,
            molecule_id=molecule_id[order],
            isotopologue=isotopologue_number[order],
            wavenumber=_sorted(wavenumber),
            intensity=_sorted(intensity),
            abundance=_sorted([iso.abundance for iso in info]),
            molar_mass=_sorted([iso.molar_mass * 1e-3 for iso in info]),
            air_width=_sorted(air_width),
            self_width=_sorted(self_width),
            lower_energy=_sorted(lower_energy),
            temp_exp=_sorted(temp_exp),
            pressure_shift=_sorted(pressure_shift),
        )

    @property
    def num_lines(self) -> int:
        """Number of spectral lines."""
        return len(self.wavenumber)

    def mean_molar_mass(self) -> float:
        """Abundance-weighted mean molar mass [kg/mol]."""
        return float(np.sum(self.abundance * self.molar_mass) / np.sum(self.abundance))

    def _subset(self, mask: np.ndarray) -> "SpectralLines":
        return SpectralLines(
            self.name,
            self.formula,
            **{attr: getattr(self, attr)[mask] for attr in self._ARRAYS},
        )

    def filter_by_intensity(self, min_intensity: float = 1e-30) -> "SpectralLines":
        """Keep lines with intensity at or above min_intensity."""
        return self._subset(self.intensity >= min_intensity)

    def select(self, wavenumber_range: Tuple[float, float]) -> "SpectralLines":
        """Keep lines centered inside an inclusive wavenumber range."""
        lo, hi = wavenumber_range
        return self._subset((self.wavenumber >= lo) & (self.wavenumber <= hi))

    def select_isotopologues(self, numbers: Iterable[int]) -> "SpectralLines":
        """Keep lines of the given isotopologue numbers."""
        return self._subset(np.isin(self.isotopologue, [int(n) for n in numbers]))


def read_par(
    path,
    wavenumber_min: float = 0.0,
    wavenumber_max: float = np.inf,
    strength_cutoff: float = 0.0,
    isotopologues: Optional[Iterable[int]] = None,
    name: Optional[str] = None,
) -> SpectralLines:
    """Read a HITRAN 160-character `.par` file for a single molecule.

    Args:
        path: Path to the .par file
        wavenumber_min: Lowest line center to keep [cm^-1]
        wavenumber_max: Highest line center to keep [cm^-1]
        strength_cutoff: Lines weaker than this are dropped
        isotopologues: Isotopologue numbers to keep (all if None)
        name: Name for the line list (defaults to the molecule formula)

    Returns:
        SpectralLines sorted by wavenumber

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: On malformed records, multiple molecules, or when no
            lines survive the filters
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"HITRAN file not found: {path}")

    keep = None if isotopologues is None else set(int(i) for i in isotopologues)
    columns = {key: [] for key in (
        "mol_id", "iso_id", "nu", "sw", "gamma_air", "gamma_self",
        "elower", "n_air", "delta_air",
    )}

    logger.info(f"Loading HITRAN .par file: {path}")
    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            if len(line.rstrip("\n")) < 67:
                raise ValueError(f"{path}:{lineno}: record too short for HITRAN .par format")
            try:
                mol_id = int(line[0:2])
                iso_id = parse_isotopologue_code(line[2:3])
                nu = float(line[3:15])
                sw = float(line[15:25])
                gamma_air = float(line[35:40])
                gamma_self = float(line[40:45])
                elower = float(line[45:55])
                n_air = float(line[55:59])
                delta_air = float(line[59:67])
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: malformed HITRAN record ({e})") from e

            if nu < wavenumber_min or nu > wavenumber_max:
                continue
            if sw < strength_cutoff:
                continue
            if keep is not None and iso_id not in keep:
                continue

            columns["mol_id"].append(mol_id)
            columns["iso_id"].append(iso_id)
            columns["nu"].append(nu)
            columns["sw"].append(sw)
            columns["gamma_air"].append(gamma_air)
            columns["gamma_self"].append(gamma_self)
            columns["elower"].append(elower)
            columns["n_air"].append(n_air)
            columns["delta_air"].append(delta_air)

    if not columns["nu"]:
        raise ValueError(f"no lines selected from {path}")

    lines = SpectralLines.from_hitran(
        columns["mol_id"],
        columns["iso_id"],
        columns["nu"],
        columns["sw"],
        columns["gamma_air"],
        columns["gamma_self"],
        columns["elower"],
        columns["n_air"],
        columns["delta_air"],
        name=name,
    )
    logger.info(f"Loaded {lines.num_lines} lines for {lines.name}")
    return lines
