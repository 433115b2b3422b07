"""
Bake configuration data structures.

Describes everything needed to bake a gas from the command line: the
sampling domain, the wavenumber grid and line shape, the line source and
concentration, and system settings.

Example YAML input::

    system: {num_threads: 8, output_path: ./co2.h5}
    domain: {temperature_range: [25, 550], n_temperature: 12,
             pressure_range: [1, 1.0e6], n_pressure: 24}
    spectral: {min_wavenumber: 600, max_wavenumber: 750, resolution: 0.1,
               line_cutoff: 25, line_shape: voigt}
    gas: {par_path: ./CO2.par, concentration: 4.0e-4}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import json

import numpy as np
import yaml

from opacity_tables.core.constants import (
    DEFAULT_N_PRESSURE,
    DEFAULT_N_TEMPERATURE,
    DEFAULT_PRESSURE_RANGE,
    DEFAULT_TEMPERATURE_RANGE,
    LINE_CUTOFF_CM1,
    TMAX,
    TMIN,
)
from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.physics.line_shapes import LINE_SHAPES


@dataclass
class SystemConfig:
    """System-level configuration settings.

    Attributes:
        num_threads: Worker threads for baking (None for one per CPU)
        output_path: HDF5 file the baked gas is written to
    """
    num_threads: Optional[int] = None
    output_path: str = "./gas.h5"


@dataclass
class DomainConfig:
    """Temperature/pressure sampling grid.

    Attributes:
        temperature_range: (lowest, highest) temperature in K
        n_temperature: Number of temperature points
        pressure_range: (lowest, highest) pressure in Pa
        n_pressure: Number of pressure points
    """
    temperature_range: Tuple[float, float] = DEFAULT_TEMPERATURE_RANGE
    n_temperature: int = DEFAULT_N_TEMPERATURE
    pressure_range: Tuple[float, float] = DEFAULT_PRESSURE_RANGE
    n_pressure: int = DEFAULT_N_PRESSURE

    def to_domain(self) -> AtmosphericDomain:
        """Build the validated AtmosphericDomain."""
        return AtmosphericDomain.create(
            self.temperature_range,
            self.n_temperature,
            self.pressure_range,
            self.n_pressure,
        )


@dataclass
class SpectralConfig:
    """Wavenumber grid and line-shape parameters.

    Attributes:
        min_wavenumber: First wavenumber sample in cm^-1
        max_wavenumber: Last wavenumber sample in cm^-1
        resolution: Wavenumber spacing in cm^-1
        line_cutoff: Distance from line center for calculation in cm^-1
        line_shape: Name of the line-shape kernel
    """
    min_wavenumber: float = 600.0
    max_wavenumber: float = 750.0
    resolution: float = 0.1
    line_cutoff: float = LINE_CUTOFF_CM1
    line_shape: str = "voigt"

    def wavenumbers(self) -> np.ndarray:
        """Evenly spaced wavenumbers from min to max inclusive."""
        n = int(round((self.max_wavenumber - self.min_wavenumber) / self.resolution)) + 1
        return np.linspace(self.min_wavenumber, self.max_wavenumber, n)


@dataclass
class GasConfig:
    """Line source and concentration of the gas to bake.

    Exactly one of par_path or database_path must be set; database_path
    also needs molecule.

    Attributes:
        par_path: HITRAN .par file
        database_path: HDF5 line database
        molecule: Molecule name inside the database
        concentration: Molar concentration [mole/mole]
        name: Name for the line list
        strength_cutoff: Lines weaker than this are dropped
        isotopologues: Isotopologue numbers to keep (all if None)
    """
    par_path: Optional[str] = None
    database_path: Optional[str] = None
    molecule: Optional[str] = None
    concentration: float = 0.0
    name: Optional[str] = None
    strength_cutoff: float = 0.0
    isotopologues: Optional[List[int]] = None


@dataclass
class BakeConfig:
    """Complete bake configuration."""
    system: SystemConfig = field(default_factory=SystemConfig)
    domain: DomainConfig = field(default_factory=DomainConfig)
    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    gas: GasConfig = field(default_factory=GasConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "BakeConfig":
        """Create BakeConfig from a dictionary.

        Missing sections and keys take their defaults.

        Args:
            config_dict: Configuration dictionary

        Returns:
            BakeConfig instance
        """
        config_dict = config_dict or {}

        system_dict = config_dict.get("system", {})
        system = SystemConfig(
            num_threads=system_dict.get("num_threads"),
            output_path=system_dict.get("output_path", "./gas.h5"),
        )

        dom_dict = config_dict.get("domain", {})
        domain = DomainConfig(
            temperature_range=tuple(dom_dict.get("temperature_range", DEFAULT_TEMPERATURE_RANGE)),
            n_temperature=dom_dict.get("n_temperature", DEFAULT_N_TEMPERATURE),
            pressure_range=tuple(dom_dict.get("pressure_range", DEFAULT_PRESSURE_RANGE)),
            n_pressure=dom_dict.get("n_pressure", DEFAULT_N_PRESSURE),
        )

        spec_dict = config_dict.get("spectral", {})
        spectral = SpectralConfig(
            min_wavenumber=spec_dict.get("min_wavenumber", 600.0),
            max_wavenumber=spec_dict.get("max_wavenumber", 750.0),
            resolution=spec_dict.get("resolution", 0.1),
            line_cutoff=spec_dict.get("line_cutoff", LINE_CUTOFF_CM1),
            line_shape=spec_dict.get("line_shape", "voigt"),
        )

        gas_dict = config_dict.get("gas", {})
        gas = GasConfig(
            par_path=gas_dict.get("par_path"),
            database_path=gas_dict.get("database_path"),
            molecule=gas_dict.get("molecule"),
            concentration=gas_dict.get("concentration", 0.0),
            name=gas_dict.get("name"),
            strength_cutoff=gas_dict.get("strength_cutoff", 0.0),
            isotopologues=gas_dict.get("isotopologues"),
        )

        return cls(system=system, domain=domain, spectral=spectral, gas=gas)

    @classmethod
    def from_json(cls, json_path: str) -> "BakeConfig":
        """Load configuration from a JSON file."""
        with open(json_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "BakeConfig":
        """Load configuration from a YAML file."""
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_file(cls, path: str) -> "BakeConfig":
        """Load configuration from JSON or YAML, chosen by file extension."""
        if str(path).lower().endswith(".json"):
            return cls.from_json(path)
        return cls.from_yaml(path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a nested dictionary."""
        return {
            "system": {
                "num_threads": self.system.num_threads,
                "output_path": self.system.output_path,
            },
            "domain": {
                "temperature_range": list(self.domain.temperature_range),
                "n_temperature": self.domain.n_temperature,
                "pressure_range": list(self.domain.pressure_range),
                "n_pressure": self.domain.n_pressure,
            },
            "spectral": {
                "min_wavenumber": self.spectral.min_wavenumber,
                "max_wavenumber": self.spectral.max_wavenumber,
                "resolution": self.spectral.resolution,
                "line_cutoff": self.spectral.line_cutoff,
                "line_shape": self.spectral.line_shape,
            },
            "gas": {
                "par_path": self.gas.par_path,
                "database_path": self.gas.database_path,
                "molecule": self.gas.molecule,
                "concentration": self.gas.concentration,
                "name": self.gas.name,
                "strength_cutoff": self.gas.strength_cutoff,
                "isotopologues": self.gas.isotopologues,
            },
        }

    def to_json(self, json_path: str, indent: int = 2) -> None:
        """Save configuration to a JSON file."""
        with open(json_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=indent)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to a YAML file."""
        with open(yaml_path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

    def validate(self) -> list:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        # Domain
        Tlo, Thi = self.domain.temperature_range
        Plo, Phi = self.domain.pressure_range
        if not TMIN <= Tlo < Thi <= TMAX:
            errors.append(
                f"temperature_range must be increasing within [{TMIN}, {TMAX}] K, "
                f"got ({Tlo}, {Thi})"
            )
        if not 0 < Plo < Phi:
            errors.append(f"pressure_range must be positive and increasing, got ({Plo}, {Phi})")
        if self.domain.n_temperature < 2 or self.domain.n_pressure < 2:
            errors.append("n_temperature and n_pressure must be at least 2")

        # Spectral grid
        if self.spectral.min_wavenumber < 0:
            errors.append("min_wavenumber must be non-negative")
        if self.spectral.min_wavenumber >= self.spectral.max_wavenumber:
            errors.append("min_wavenumber must be less than max_wavenumber")
        if self.spectral.resolution <= 0:
            errors.append("spectral resolution must be positive")
        if self.spectral.line_cutoff <= 0:
            errors.append("line_cutoff must be positive")
        if self.spectral.line_shape.lower() not in LINE_SHAPES:
            errors.append(f"Invalid line shape: {self.spectral.line_shape}")

        # Gas
        if (self.gas.par_path is None) == (self.gas.database_path is None):
            errors.append("exactly one of gas.par_path and gas.database_path must be set")
        if self.gas.database_path is not None and not self.gas.molecule:
            errors.append("gas.molecule is required with gas.database_path")
        if not 0 <= self.gas.concentration <= 1:
            errors.append(f"gas concentration must be in [0, 1], got {self.gas.concentration}")

        if self.system.num_threads is not None and self.system.num_threads < 1:
            errors.append("num_threads must be at least 1")

        return errors
