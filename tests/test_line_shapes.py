"""Tests for line-shape kernels."""

import numpy as np
import pytest
from scipy.special import voigt_profile, wofz

from opacity_tables.core.constants import HITRAN_REFERENCE_TEMPERATURE, STANDARD_PRESSURE
from opacity_tables.physics.line_shapes import (
    LINE_SHAPES,
    doppler,
    doppler_hwhm,
    get_line_shape,
    humlicek,
    lorentz,
    lorentz_hwhm,
    partition_ratio,
    scale_strength,
    voigt,
)

TREF = HITRAN_REFERENCE_TEMPERATURE


class TestHumlicek:
    """Tests for the Faddeeva function approximation."""

    @pytest.mark.parametrize("x", [0.0, 0.3, 1.0, 2.5, 4.0, 8.0, 20.0, 100.0])
    @pytest.mark.parametrize("y", [0.01, 0.1, 0.5, 1.0, 5.0, 30.0])
    def test_matches_faddeeva(self, x, y):
        """Test agreement with scipy's Faddeeva function in every region."""
        expected = wofz(x + 1j * y).real
        assert np.isclose(humlicek(x, y), expected, rtol=1e-3, atol=0)

    def test_symmetric_in_x(self):
        """Test K(x, y) is even in x."""
        for x in [0.2, 3.0, 12.0]:
            assert np.isclose(humlicek(x, 0.4), humlicek(-x, 0.4), rtol=1e-12)


class TestLineParameters:
    """Tests for strength scaling and half-widths."""

    def test_partition_ratio(self):
        """Test linear and nonlinear power laws."""
        assert np.isclose(partition_ratio("CO2", TREF / 2), 2.0)
        assert np.isclose(partition_ratio("H2O", TREF / 4), 8.0)
        assert partition_ratio("CH4", TREF) == 1.0

    def test_strength_at_reference(self, single_line):
        """Test strengths are unchanged at the reference temperature."""
        assert np.allclose(scale_strength(single_line, TREF), single_line.intensity, rtol=1e-12, atol=0)

    def test_strength_boltzmann_factor(self, single_line):
        """Test lines with higher lower-state energy weaken faster when cold."""
        hot = single_line._subset(np.array([True]))
        hot.lower_energy = np.array([1000.0])
        ratio_cold = scale_strength(single_line, 200.0) / single_line.intensity
        ratio_hot = scale_strength(hot, 200.0) / hot.intensity
        assert ratio_hot[0] < ratio_cold[0]

    def test_doppler_width(self, single_line):
        """Test the Doppler HWHM of CO2 near 667 cm^-1 at 296 K (~6e-4 cm^-1)."""
        alpha = doppler_hwhm(single_line.wavenumber, single_line.molar_mass, TREF)
        assert 5e-4 < alpha[0] < 7e-4
        assert np.isclose(
            doppler_hwhm(single_line.wavenumber, single_line.molar_mass, 4 * TREF)[0],
            2 * alpha[0],
        )

    def test_lorentz_width(self, single_line):
        """Test air and self broadening at one atmosphere."""
        gamma_air = lorentz_hwhm(single_line, TREF, STANDARD_PRESSURE, 0.0)
        gamma_self = lorentz_hwhm(single_line, TREF, STANDARD_PRESSURE, STANDARD_PRESSURE)
        assert np.isclose(gamma_air[0], 0.07)
        assert np.isclose(gamma_self[0], 0.09)


class TestKernels:
    """Tests for voigt, lorentz and doppler kernels."""

    def _widths(self, lines, T, P, Ps):
        alpha = doppler_hwhm(lines.wavenumber, lines.molar_mass, T)[0]
        gamma = lorentz_hwhm(lines, T, P, Ps)[0]
        return alpha, gamma

    @pytest.mark.parametrize("P", [10.0, 1e3, 1e5])
    def test_voigt_matches_scipy(self, single_line, wavenumbers, P):
        """Test Voigt cross-sections against scipy's Voigt profile."""
        T, Ps = TREF, 0.01 * P
        sigma = voigt(None, wavenumbers, single_line, T, P, Ps, 25.0)
        alpha, gamma = self._widths(single_line, T, P, Ps)
        expected = single_line.intensity[0] * voigt_profile(
            wavenumbers - 667.0, alpha / np.sqrt(2 * np.log(2)), gamma
        )
        mask = expected > 1e-6 * expected.max()
        assert np.allclose(sigma[mask], expected[mask], rtol=1e-3, atol=0)

    def test_lorentz_profile(self, single_line, wavenumbers):
        """Test the Lorentzian against its closed form."""
        T, P, Ps = TREF, STANDARD_PRESSURE, 0.0
        sigma = lorentz(None, wavenumbers, single_line, T, P, Ps, 25.0)
        gamma = 0.07
        dnu = wavenumbers - 667.0
        expected = 1e-19 * gamma / (np.pi * (dnu**2 + gamma**2))
        assert np.allclose(sigma, expected, rtol=1e-10, atol=0)

    def test_lorentz_area(self, single_line):
        """Test the Lorentzian integrates to the line strength."""
        nu = np.linspace(567.0, 767.0, 200001)
        sigma = lorentz(None, nu, single_line, TREF, 1e4, 0.0, 100.0)
        area = np.sum(sigma) * (nu[1] - nu[0])
        assert np.isclose(area, 1e-19, rtol=2e-3)

    def test_doppler_profile(self, single_line):
        """Test the Gaussian against its closed form."""
        nu = np.linspace(666.99, 667.01, 201)
        sigma = doppler(None, nu, single_line, TREF, 1.0, 0.0, 25.0)
        alpha, _ = self._widths(single_line, TREF, 1.0, 0.0)
        expected = 1e-19 * np.sqrt(np.log(2) / np.pi) / alpha * np.exp(-np.log(2) * ((nu - 667.0) / alpha) ** 2)
        assert np.allclose(sigma, expected, rtol=1e-10, atol=0)

    def test_cutoff(self, single_line, wavenumbers):
        """Test nothing is added beyond the cutoff distance."""
        sigma = voigt(None, wavenumbers, single_line, TREF, 1e5, 0.0, 2.0)
        far = np.abs(wavenumbers - 667.0) > 2.0
        assert np.all(sigma[far] == 0.0)
        assert np.all(sigma[~far] > 0.0)

    def test_accumulates_into_buffer(self, single_line, wavenumbers):
        """Test kernels add into the given buffer and return it."""
        out = np.full(len(wavenumbers), 1e-20)
        result = voigt(out, wavenumbers, single_line, TREF, 1e4, 0.0, 25.0)
        assert result is out
        fresh = voigt(None, wavenumbers, single_line, TREF, 1e4, 0.0, 25.0)
        assert np.allclose(out, fresh + 1e-20, rtol=1e-12, atol=0)

    def test_accumulates_into_strided_view(self, single_line, wavenumbers):
        """Test kernels write through non-contiguous views."""
        block = np.zeros((len(wavenumbers), 2, 3))
        view = block[:, 1, 2]
        voigt(view, wavenumbers, single_line, TREF, 1e4, 0.0, 25.0)
        fresh = voigt(None, wavenumbers, single_line, TREF, 1e4, 0.0, 25.0)
        assert np.array_equal(block[:, 1, 2], fresh)
        assert np.all(block[:, 0, :] == 0.0)

    def test_pressure_shift(self, single_line):
        """Test the line center moves by delta * P[atm]."""
        shifted = single_line._subset(np.array([True]))
        shifted.pressure_shift = np.array([-0.05])
        nu = np.linspace(666.5, 667.5, 1001)
        sigma = lorentz(None, nu, shifted, TREF, 2 * STANDARD_PRESSURE, 0.0, 25.0)
        assert np.isclose(nu[np.argmax(sigma)], 666.9, atol=1e-3)


class TestRegistry:
    """Tests for line-shape lookup."""

    def test_lookup(self):
        """Test names resolve case-insensitively."""
        assert get_line_shape("voigt") is voigt
        assert get_line_shape("Lorentz") is lorentz
        assert set(LINE_SHAPES) == {"voigt", "lorentz", "doppler"}

    def test_unknown(self):
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown line shape"):
            get_line_shape("galatry")
