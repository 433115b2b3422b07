"""Tests for opacity table baking."""

import logging
import threading

import numpy as np
import pytest

from opacity_tables.core.bake import (
    bake,
    check_concentration,
    check_wavenumbers,
    find_mixed_zeros,
    parallel_map,
    resolve_num_threads,
)
from opacity_tables.core.errors import ConcentrationError, WavenumberError


class FakeLines:
    """Minimal line list; bake only needs a name."""
    name = "fake"


class CountingKernel:
    """Kernel filling a constant and recording every call."""

    def __init__(self, value=1.0):
        self.value = value
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, out, wavenumbers, lines, T, P, Ps, cutoff):
        with self._lock:
            self.calls.append((T, P, Ps, cutoff))
        if out is None:
            out = np.zeros(len(wavenumbers))
        out[:] += self.value
        return out


class TestHelpers:
    """Tests for validation and threading helpers."""

    def test_resolve_num_threads(self):
        """Test None means one thread per CPU and values are floored at 1."""
        assert resolve_num_threads(None) >= 1
        assert resolve_num_threads(3) == 3
        assert resolve_num_threads(0) == 1

    @pytest.mark.parametrize("num_threads", [1, 4])
    def test_parallel_map_preserves_order(self, num_threads):
        """Test results come back in input order."""
        assert parallel_map(lambda x: x * x, range(10), num_threads) == [x * x for x in range(10)]

    def test_parallel_map_propagates_errors(self):
        """Test the first worker exception is raised."""
        def fn(x):
            if x == 3:
                raise RuntimeError("boom")
            return x

        with pytest.raises(RuntimeError, match="boom"):
            parallel_map(fn, range(8), 4)

    @pytest.mark.parametrize("bad", [
        [1.0, 1.0, 2.0],
        [3.0, 2.0, 1.0],
        [-1.0, 0.0, 1.0],
        [1.0, np.nan, 3.0],
        [1.0, 2.0, np.inf],
        [],
        [[1.0, 2.0], [3.0, 4.0]],
    ])
    def test_check_wavenumbers_rejects(self, bad):
        """Test duplicate, descending, negative, NaN and malformed grids are rejected."""
        with pytest.raises(WavenumberError):
            check_wavenumbers(bad)

    def test_check_wavenumbers_accepts(self):
        """Test a valid grid is returned as a float array copy."""
        nu = [0.0, 1.5, 3]
        out = check_wavenumbers(nu)
        assert out.dtype == np.float64
        assert np.array_equal(out, [0.0, 1.5, 3.0])

    @pytest.mark.parametrize("C", [0.0, 0.5, 1.0])
    def test_check_concentration_accepts(self, C):
        """Test bounds are inclusive."""
        assert check_concentration(C) == C

    @pytest.mark.parametrize("C", [-0.1, 1.5, float("nan")])
    def test_check_concentration_rejects(self, C):
        """Test values outside [0, 1] are rejected."""
        with pytest.raises(ConcentrationError):
            check_concentration(C)

    def test_concentration_message_location(self):
        """Test the message reports the value and where it was found."""
        with pytest.raises(ConcentrationError, match=r"1\.5.*250\.0 K.*1000\.0 Pa"):
            check_concentration(1.5, 250.0, 1000.0)

    def test_find_mixed_zeros(self):
        """Test only slabs with both zeros and positive values are flagged."""
        sigma = np.ones((4, 2, 2))
        sigma[1] = 0.0
        sigma[2, 0, 1] = 0.0
        assert find_mixed_zeros(sigma).tolist() == [False, False, True, False]


class TestBake:
    """Tests for the bake driver."""

    def test_one_table_per_wavenumber(self, small_domain):
        """Test the table count matches the wavenumber count."""
        kernel = CountingKernel(2.0)
        tables = bake(FakeLines(), 0.5, kernel, 25.0, [1.0, 2.0, 3.0, 4.0], small_domain, 2)
        assert len(tables) == 4
        assert all(not t.empty for t in tables)
        assert np.isclose(tables[0](250.0, 1e4), 2.0)

    def test_kernel_called_at_every_node(self, small_domain):
        """Test the kernel sees every (T, P) node with Ps = C * P."""
        kernel = CountingKernel()
        bake(FakeLines(), 0.25, kernel, 10.0, [1.0, 2.0], small_domain, 3)
        assert len(kernel.calls) == small_domain.nT * small_domain.nP
        seen = {(T, P) for T, P, _, _ in kernel.calls}
        expected = {(float(T), float(P)) for T in small_domain.T for P in small_domain.P}
        assert seen == expected
        for T, P, Ps, cutoff in kernel.calls:
            assert np.isclose(Ps, 0.25 * P)
            assert cutoff == 10.0

    @pytest.mark.parametrize("bad", [
        [1.0, 1.0, 2.0], [3.0, 2.0, 1.0], [-2.0, 1.0], [1.0, np.nan, 3.0], [np.nan],
    ])
    def test_bad_wavenumbers_before_any_work(self, small_domain, bad):
        """Test invalid wavenumbers fail with zero kernel calls."""
        kernel = CountingKernel()
        with pytest.raises(WavenumberError):
            bake(FakeLines(), 0.5, kernel, 25.0, bad, small_domain)
        assert kernel.calls == []

    def test_concentration_out_of_range(self, small_domain):
        """Test concentration 1.5 aborts the bake."""
        with pytest.raises(ConcentrationError):
            bake(FakeLines(), 1.5, CountingKernel(), 25.0, [1.0, 2.0], small_domain, 2)

    @pytest.mark.parametrize("C", [0.0, 1.0])
    def test_concentration_bounds_inclusive(self, small_domain, C):
        """Test concentrations exactly 0 and 1 are accepted."""
        tables = bake(FakeLines(), C, CountingKernel(), 25.0, [1.0, 2.0], small_domain, 2)
        assert len(tables) == 2

    def test_variable_concentration_checked_per_node(self, small_domain):
        """Test a function leaving [0, 1] at one node is caught."""
        C = lambda T, P: 2.0 if T == small_domain.Tmax and P == small_domain.Pmin else 0.1
        with pytest.raises(ConcentrationError, match="300.0 K"):
            bake(FakeLines(), C, CountingKernel(), 25.0, [1.0], small_domain, 1)

    def test_kernel_returning_new_array(self, small_domain):
        """Test kernels that ignore the buffer and return a fresh array still work."""
        def shape(out, wavenumbers, lines, T, P, Ps, cutoff):
            return np.full(len(wavenumbers), 5.0)

        tables = bake(FakeLines(), 0.5, shape, 25.0, [1.0, 2.0], small_domain, 2)
        assert np.isclose(tables[1](250.0, 1e4), 5.0)

    def test_zero_kernel_gives_empty_tables(self, small_domain):
        """Test an all-zero kernel yields empty tables."""
        tables = bake(FakeLines(), 0.5, CountingKernel(0.0), 25.0, [1.0, 2.0], small_domain, 2)
        assert all(t.empty for t in tables)

    def test_mixed_zero_sanitized(self, small_domain, caplog):
        """Test a slab mixing zeros and positives is zeroed and reported."""
        def shape(out, wavenumbers, lines, T, P, Ps, cutoff):
            out[0] += 1.0
            out[1] += 1.0 if P > small_domain.Pmin else 0.0
            return out

        with caplog.at_level(logging.WARNING, logger="opacity_tables.core.bake"):
            tables = bake(FakeLines(), 0.5, shape, 25.0, [10.0, 20.0], small_domain, 2)

        assert not tables[0].empty
        assert tables[1].empty
        assert tables[1](250.0, 1e4) == 0.0
        assert "20.0" in caplog.text
        assert "fake" in caplog.text

    def test_thread_count_does_not_change_result(self, small_domain):
        """Test serial and threaded bakes give identical tables."""
        def shape(out, wavenumbers, lines, T, P, Ps, cutoff):
            out += np.asarray(wavenumbers) * 1e-3 * (T / 300.0) * (P / 1e5) ** 0.5
            return out

        nu = np.linspace(1.0, 5.0, 9)
        serial = bake(FakeLines(), 0.5, shape, 25.0, nu, small_domain, 1)
        threaded = bake(FakeLines(), 0.5, shape, 25.0, nu, small_domain, 4)
        assert serial == threaded
