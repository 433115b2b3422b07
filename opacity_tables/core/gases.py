"""
Absorbing gases backed by baked opacity tables.

A gas owns a wavenumber grid, the `AtmosphericDomain` its tables were baked
on, and one `OpacityTable` per wavenumber. Cross-sections returned by a gas
are weighted by its molar concentration; divide by the concentration (or use
the tables directly) for the molecular cross-section.

Two variants exist:

* `WellMixedGas` has a constant molar concentration.
* `VariableGas` has a concentration that depends on temperature and
  pressure, C(T, P).
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from opacity_tables.core.bake import bake, check_concentration
from opacity_tables.core.constants import LINE_CUTOFF_CM1
from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.core.table import OpacityTable
from opacity_tables.data.spectral_lines import SpectralLines, read_par
from opacity_tables.physics.line_shapes import voigt


class Gas(ABC):
    """
    Abstract base class for atmospheric absorbers.

    Subclasses store name, formula, mu (mean molar mass [kg/mol]),
    wavenumbers [cm^-1], domain, and tables, and implement `concentration`.
    """

    name: str
    formula: str
    mu: float
    wavenumbers: np.ndarray
    domain: AtmosphericDomain
    tables: List[OpacityTable]

    def __post_init__(self):
        if len(self.tables) != len(self.wavenumbers):
            raise ValueError(
                f"{len(self.tables)} tables given for {len(self.wavenumbers)} wavenumbers"
            )

    @abstractmethod
    def concentration(self, T: Optional[float] = None, P: Optional[float] = None) -> float:
        """
        Molar concentration of the gas [mole/mole].

        Parameters
        ----------
        T : float, optional
            Temperature in K
        P : float, optional
            Pressure in Pa

        Returns
        -------
        concentration : float
            Mole fraction in [0, 1]
        """
        pass

    @property
    def n_wavenumbers(self) -> int:
        """Number of wavenumber samples."""
        return len(self.wavenumbers)

    def cross_section(self, i: int, T: float, P: float) -> float:
        """
        Concentration-weighted cross-section at one wavenumber.

        Parameters
        ----------
        i : int
            Index into the wavenumber grid
        T : float
            Temperature in K
        P : float
            Pressure in Pa

        Returns
        -------
        sigma : float
            C(T, P) * sigma_i(T, P) in cm^2/molecule
        """
        return self.concentration(T, P) * self.tables[i].cross_section(T, P)

    def cross_section_vector(self, T: float, P: float) -> np.ndarray:
        """
        Concentration-weighted cross-sections at every wavenumber.

        Parameters
        ----------
        T : float
            Temperature in K
        P : float
            Pressure in Pa

        Returns
        -------
        sigma : ndarray
            Cross-sections in cm^2/molecule, shape (n_wavenumbers,)
        """
        C = self.concentration(T, P)
        return np.array([C * table.cross_section(T, P) for table in self.tables])

    def __call__(self, *args):
        """gas(i, T, P) for one cross-section, gas(T, P) for the full vector."""
        if len(args) == 3:
            return self.cross_section(*args)
        if len(args) == 2:
            return self.cross_section_vector(*args)
        raise TypeError(f"expected (i, T, P) or (T, P), got {len(args)} arguments")


def _bake_gas(lines, concentration, wavenumbers, domain, shape, cutoff, num_threads):
    nu = np.array(wavenumbers, dtype=np.float64)
    tables = bake(lines, concentration, shape, float(cutoff), nu, domain, num_threads)
    return lines.mean_molar_mass(), nu, tables


@dataclass(eq=False)
class WellMixedGas(Gas):
    """Gas with a constant molar concentration.

    Construct with `WellMixedGas.from_lines` or `WellMixedGas.from_par`; the
    field constructor assembles already-baked tables without checks.

    Attributes:
        name: Name of the line list the gas was baked from
        formula: Chemical formula
        mu: Abundance-weighted mean molar mass [kg/mol]
        C: Constant molar concentration [mole/mole]
        wavenumbers: Wavenumber samples [cm^-1]
        domain: Domain the tables were baked on
        tables: One cross-section table per wavenumber
    """
    name: str
    formula: str
    mu: float
    C: float
    wavenumbers: np.ndarray
    domain: AtmosphericDomain
    tables: List[OpacityTable]

    @classmethod
    def from_lines(
        cls,
        lines: SpectralLines,
        C: float,
        wavenumbers,
        domain: AtmosphericDomain,
        shape: Callable = voigt,
        cutoff: float = LINE_CUTOFF_CM1,
        num_threads: Optional[int] = None,
    ) -> "WellMixedGas":
        """Bake a well-mixed gas from a line list.

        Args:
            lines: Spectral line list
            C: Molar concentration [mole/mole]
            wavenumbers: Ascending wavenumber samples [cm^-1]
            domain: Sampling domain
            shape: In-place line-shape kernel
            cutoff: Profile truncation distance [cm^-1]
            num_threads: Worker threads for baking (None for one per CPU)

        Raises:
            ConcentrationError: If C is outside [0, 1]
            WavenumberError: If the wavenumbers are invalid
        """
        C = float(C)
        mu, nu, tables = _bake_gas(lines, C, wavenumbers, domain, shape, cutoff, num_threads)
        return cls(lines.name, lines.formula, mu, C, nu, domain, tables)

    @classmethod
    def from_par(
        cls,
        path,
        C: float,
        wavenumbers,
        domain: AtmosphericDomain,
        shape: Callable = voigt,
        cutoff: float = LINE_CUTOFF_CM1,
        num_threads: Optional[int] = None,
        **kwargs,
    ) -> "WellMixedGas":
        """Bake a well-mixed gas from a HITRAN .par file.

        Keyword arguments are passed through to `read_par`.
        """
        lines = read_par(path, **kwargs)
        return cls.from_lines(lines, C, wavenumbers, domain, shape, cutoff, num_threads)

    def concentration(self, T: Optional[float] = None, P: Optional[float] = None) -> float:
        """Constant molar concentration; T and P are ignored."""
        return self.C

    def reconcentrate(self, C: float) -> "WellMixedGas":
        """Copy of the gas with a different molar concentration.

        The tables are copied, not re-baked, so the self-broadening part of
        the line shapes still reflects the original concentration. That
        contribution is negligible at low partial pressure but can be
        appreciable for bulk constituents; only reconcentrate trace gases.

        Raises:
            ConcentrationError: If C is outside [0, 1]
        """
        C = check_concentration(float(C))
        return WellMixedGas(
            self.name,
            self.formula,
            self.mu,
            C,
            self.wavenumbers.copy(),
            copy.deepcopy(self.domain),
            copy.deepcopy(self.tables),
        )

    def __repr__(self) -> str:
        return (
            f"WellMixedGas(name={self.name!r}, C={self.C:g}, "
            f"{self.n_wavenumbers} wavenumbers, {self.domain!r})"
        )


@dataclass(eq=False)
class VariableGas(Gas):
    """Gas whose molar concentration depends on temperature and pressure.

    Attributes:
        name: Name of the line list the gas was baked from
        formula: Chemical formula
        mu: Abundance-weighted mean molar mass [kg/mol]
        C: Molar concentration as a function C(T, P) [mole/mole]
        wavenumbers: Wavenumber samples [cm^-1]
        domain: Domain the tables were baked on
        tables: One cross-section table per wavenumber
    """
    name: str
    formula: str
    mu: float
    C: Callable[[float, float], float]
    wavenumbers: np.ndarray
    domain: AtmosphericDomain
    tables: List[OpacityTable]

    @classmethod
    def from_lines(
        cls,
        lines: SpectralLines,
        C: Callable[[float, float], float],
        wavenumbers,
        domain: AtmosphericDomain,
        shape: Callable = voigt,
        cutoff: float = LINE_CUTOFF_CM1,
        num_threads: Optional[int] = None,
    ) -> "VariableGas":
        """Bake a variable-concentration gas from a line list.

        C is evaluated at every domain node while baking and must stay in
        [0, 1] there.

        Raises:
            ConcentrationError: If C leaves [0, 1] on the domain grid
            WavenumberError: If the wavenumbers are invalid
        """
        if not callable(C):
            raise TypeError("VariableGas concentration must be a function C(T, P)")
        mu, nu, tables = _bake_gas(lines, C, wavenumbers, domain, shape, cutoff, num_threads)
        return cls(lines.name, lines.formula, mu, C, nu, domain, tables)

    @classmethod
    def from_par(
        cls,
        path,
        C: Callable[[float, float], float],
        wavenumbers,
        domain: AtmosphericDomain,
        shape: Callable = voigt,
        cutoff: float = LINE_CUTOFF_CM1,
        num_threads: Optional[int] = None,
        **kwargs,
    ) -> "VariableGas":
        """Bake a variable-concentration gas from a HITRAN .par file."""
        lines = read_par(path, **kwargs)
        return cls.from_lines(lines, C, wavenumbers, domain, shape, cutoff, num_threads)

    def concentration(self, T: Optional[float] = None, P: Optional[float] = None) -> float:
        """C(T, P); not re-validated after baking."""
        return float(self.C(T, P))

    def __repr__(self) -> str:
        return (
            f"VariableGas(name={self.name!r}, "
            f"{self.n_wavenumbers} wavenumbers, {self.domain!r})"
        )


def reconcentrate(gas: WellMixedGas, C: float) -> WellMixedGas:
    """Copy a well-mixed gas with a new concentration (see WellMixedGas.reconcentrate)."""
    return gas.reconcentrate(C)
