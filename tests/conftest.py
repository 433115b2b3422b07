"""Shared fixtures: small domains and synthetic HITRAN line data."""

import numpy as np
import pytest

from opacity_tables.core.domain import AtmosphericDomain
from opacity_tables.data.spectral_lines import SpectralLines


def par_record(
    mol=2,
    iso=1,
    nu=667.0,
    sw=1.0e-19,
    gamma_air=0.070,
    gamma_self=0.090,
    elower=100.0,
    n_air=0.75,
    delta=0.0,
):
    """One 160-character HITRAN .par record."""
    record = (
        f"{mol:2d}{iso:1d}{nu:12.6f}{sw:10.3E}{0.0:10.3E}"
        f"{gamma_air:5.3f}{gamma_self:5.3f}{elower:10.4f}{n_air:4.2f}{delta:8.5f}"
    )
    assert len(record) == 67
    return record.ljust(160)


@pytest.fixture
def small_domain():
    """Coarse domain that keeps baking fast."""
    return AtmosphericDomain.create((200.0, 300.0), 3, (1e3, 1e5), 3)


@pytest.fixture
def co2_par_file(tmp_path):
    """A .par file with five CO2 lines, one of them a weak 13C line."""
    records = [
        par_record(nu=667.0, sw=3.0e-19, elower=0.0),
        par_record(nu=667.8, sw=1.5e-19, elower=2.3),
        par_record(nu=668.1, sw=8.0e-20, elower=9.4),
        par_record(iso=2, nu=648.5, sw=2.0e-21, elower=15.0),
        par_record(nu=720.4, sw=5.0e-21, elower=500.0, delta=-0.002),
    ]
    path = tmp_path / "CO2.par"
    path.write_text("\n".join(records) + "\n")
    return path


@pytest.fixture
def single_line():
    """One CO2 line at 667 cm^-1 with no pressure shift."""
    return SpectralLines.from_hitran(
        molecule_id=[2],
        isotopologue_number=[1],
        wavenumber=[667.0],
        intensity=[1.0e-19],
        air_width=[0.07],
        self_width=[0.09],
        lower_energy=[0.0],
        temp_exp=[0.75],
        pressure_shift=[0.0],
        name="CO2-test",
    )


@pytest.fixture
def wavenumbers():
    """Fine grid around the single test line."""
    return np.linspace(660.0, 674.0, 141)
