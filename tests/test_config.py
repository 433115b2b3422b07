"""Tests for bake configuration."""

import json

import numpy as np
import pytest
import yaml

from opacity_tables.config import BakeConfig, DomainConfig, SpectralConfig
from opacity_tables.core.domain import AtmosphericDomain


@pytest.fixture
def config_dict():
    return {
        "system": {"num_threads": 2, "output_path": "out.h5"},
        "domain": {
            "temperature_range": [200, 300],
            "n_temperature": 4,
            "pressure_range": [100, 1e5],
            "n_pressure": 6,
        },
        "spectral": {
            "min_wavenumber": 660,
            "max_wavenumber": 670,
            "resolution": 0.5,
            "line_cutoff": 10,
            "line_shape": "lorentz",
        },
        "gas": {"par_path": "CO2.par", "concentration": 4e-4, "isotopologues": [1]},
    }


class TestSectionConfigs:
    """Tests for individual configuration sections."""

    def test_domain_defaults(self):
        """Test the default domain config builds the default domain."""
        assert DomainConfig().to_domain() == AtmosphericDomain.default()

    def test_wavenumbers_inclusive(self):
        """Test the wavenumber grid includes both ends."""
        nu = SpectralConfig(min_wavenumber=600.0, max_wavenumber=601.0, resolution=0.1).wavenumbers()
        assert len(nu) == 11
        assert nu[0] == 600.0
        assert nu[-1] == 601.0
        assert np.allclose(np.diff(nu), 0.1)


class TestBakeConfig:
    """Tests for BakeConfig loading and validation."""

    def test_from_dict(self, config_dict):
        """Test every section is parsed."""
        config = BakeConfig.from_dict(config_dict)
        assert config.system.num_threads == 2
        assert config.domain.temperature_range == (200, 300)
        assert config.domain.n_pressure == 6
        assert config.spectral.line_shape == "lorentz"
        assert config.gas.par_path == "CO2.par"
        assert config.gas.isotopologues == [1]
        assert config.validate() == []

    def test_defaults_for_missing_sections(self):
        """Test an empty dictionary gives defaults."""
        config = BakeConfig.from_dict({})
        assert config.system.num_threads is None
        assert config.domain.n_temperature == 12
        assert config.spectral.line_cutoff == 25.0
        # no line source configured
        assert any("par_path" in e for e in config.validate())

    def test_yaml_and_json_agree(self, tmp_path, config_dict):
        """Test the same content loads identically from YAML and JSON."""
        yaml_path = tmp_path / "bake.yaml"
        json_path = tmp_path / "bake.json"
        yaml_path.write_text(yaml.safe_dump(config_dict))
        json_path.write_text(json.dumps(config_dict))
        assert BakeConfig.from_file(str(yaml_path)) == BakeConfig.from_file(str(json_path))

    def test_to_dict_round_trip(self, tmp_path, config_dict):
        """Test saving and reloading preserves the configuration."""
        config = BakeConfig.from_dict(config_dict)
        path = tmp_path / "saved.yaml"
        config.to_yaml(str(path))
        assert BakeConfig.from_yaml(str(path)) == config
        json_path = tmp_path / "saved.json"
        config.to_json(str(json_path))
        assert BakeConfig.from_json(str(json_path)) == config

    @pytest.mark.parametrize("section,key,value,fragment", [
        ("domain", "temperature_range", [10, 300], "temperature_range"),
        ("domain", "pressure_range", [1e5, 100], "pressure_range"),
        ("domain", "n_temperature", 1, "at least 2"),
        ("spectral", "resolution", 0.0, "resolution"),
        ("spectral", "max_wavenumber", 600, "min_wavenumber"),
        ("spectral", "line_shape", "galatry", "line shape"),
        ("gas", "concentration", 1.5, "concentration"),
        ("system", "num_threads", 0, "num_threads"),
    ])
    def test_validation_errors(self, config_dict, section, key, value, fragment):
        """Test each invalid setting is reported."""
        config_dict[section][key] = value
        errors = BakeConfig.from_dict(config_dict).validate()
        assert len(errors) == 1
        assert fragment in errors[0]

    def test_database_source_needs_molecule(self, config_dict):
        """Test a database source requires a molecule name."""
        config_dict["gas"] = {"database_path": "lines.h5", "concentration": 0.1}
        errors = BakeConfig.from_dict(config_dict).validate()
        assert errors == ["gas.molecule is required with gas.database_path"]

    def test_both_sources_rejected(self, config_dict):
        """Test par_path and database_path are mutually exclusive."""
        config_dict["gas"]["database_path"] = "lines.h5"
        config_dict["gas"]["molecule"] = "CO2"
        errors = BakeConfig.from_dict(config_dict).validate()
        assert any("exactly one" in e for e in errors)
