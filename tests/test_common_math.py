"""
Table Lookup Tests

Tests for bracket search, polynomial evaluation, bilinear grid
interpolation and airspeed-scheduled polynomial coefficients.
"""

import pytest
import numpy as np
import os
import sys

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from scipy.interpolate import RegularGridInterpolator

from vtolsim.exceptions import WrongTableError
from vtolsim.core.common_math import (
    prev_index,
    lerp,
    polyval,
    griddata,
    calculate_polynomial,
    normalized,
)


class TestPrevIndex:
    """Test bracket search in monotonic sequences."""

    @pytest.fixture
    def increasing(self):
        return np.array([5, 10, 15, 20, 25, 30, 35, 40], dtype=float)

    @pytest.mark.parametrize("x, expected", [
        (-1, 0), (10, 0), (10.1, 1), (15.1, 2), (34.9, 5),
        (35.1, 6), (39.9, 6), (40.1, 6), (50, 6),
    ])
    def test_increasing(self, increasing, x, expected):
        """Test bracket indices in an increasing sequence."""
        assert prev_index(increasing, x) == expected

    @pytest.mark.parametrize("x, expected", [
        (-1, 6), (10, 5), (10.1, 5), (15.1, 4), (34.9, 1),
        (35.1, 0), (39.9, 0), (40.1, 0), (50, 0),
    ])
    def test_decreasing(self, increasing, x, expected):
        """Test bracket indices in a decreasing sequence."""
        assert prev_index(increasing[::-1], x) == expected

    def test_endpoints(self, increasing):
        """Queries at or past the ends map to the first and last brackets."""
        assert prev_index(increasing, increasing[0]) == 0
        assert prev_index(increasing, increasing[-1]) == len(increasing) - 2

    def test_two_entries(self):
        """A two-entry sequence has a single bracket."""
        for x in (-100.0, 0.5, 100.0):
            assert prev_index([0.0, 1.0], x) == 0

    def test_too_short(self):
        """A single entry cannot be bracketed."""
        with pytest.raises(WrongTableError):
            prev_index([1.0], 0.5)


class TestPolyval:
    """Test Horner polynomial evaluation."""

    def test_reference_value(self):
        """Test seven coefficients at 0.5."""
        coeffs = [1.1, 1.2, 1.3, 1.4, 1.5, 1.6, 1.7]
        assert polyval(coeffs, 0.5) == pytest.approx(3.1859, abs=1e-4)

    def test_matches_power_sum(self):
        """Horner result equals the explicit power sum."""
        rng = np.random.default_rng(3)
        coeffs = rng.normal(size=7)
        x = 1.7
        expected = sum(c * x**(6 - i) for i, c in enumerate(coeffs))
        assert polyval(coeffs, x) == pytest.approx(expected, rel=1e-12)
        assert polyval(coeffs, x) == pytest.approx(np.polyval(coeffs, x), rel=1e-12)

    def test_constant(self):
        """A single coefficient is a constant."""
        assert polyval([4.2], 123.0) == pytest.approx(4.2)


class TestGriddata:
    """Test bilinear interpolation on a rectilinear grid."""

    @pytest.fixture
    def grid(self):
        x = np.array([1.0, 2.0, 3.0])
        y = np.array([2.0, 3.0, 4.0, 5.0])
        z = np.array([[2.5, 3.0, 3.5],
                      [3.0, 3.5, 4.0],
                      [3.5, 4.0, 4.5],
                      [4.0, 4.5, 5.0]])
        return x, y, z

    def test_reference_points(self, grid):
        """Test values between grid nodes."""
        x, y, z = grid
        assert griddata(x, y, z, 2.25, 3.75) == pytest.approx(4.0, abs=1e-3)
        assert griddata(x, y, z, 1.1, 4.75) == pytest.approx(3.925, abs=1e-3)

    def test_exact_at_nodes(self):
        """Interpolation returns the stored value at every node."""
        rng = np.random.default_rng(7)
        x = np.array([-3.0, -1.0, 0.5, 2.0, 4.0])
        y = np.array([5.0, 10.0, 20.0])
        z = rng.normal(size=(3, 5))
        for j, yj in enumerate(y):
            for i, xi in enumerate(x):
                assert griddata(x, y, z, xi, yj) == pytest.approx(z[j, i], abs=1e-12)

    def test_matches_scipy_inside_grid(self):
        """Test agreement with scipy's linear grid interpolator."""
        rng = np.random.default_rng(11)
        x = np.linspace(-20.0, 20.0, 9)
        y = np.array([5.0, 10.0, 15.0, 20.0, 25.0, 30.0, 35.0, 40.0])
        z = rng.normal(size=(y.size, x.size))
        reference = RegularGridInterpolator((y, x), z, method='linear')

        for _ in range(50):
            xv = rng.uniform(x[0], x[-1])
            yv = rng.uniform(y[0], y[-1])
            assert griddata(x, y, z, xv, yv) == pytest.approx(reference([yv, xv])[0], abs=1e-12)

    def test_decreasing_axis(self):
        """A decreasing axis interpolates the same as the mirrored increasing one."""
        x = np.array([-2.0, 0.0, 2.0])
        y = np.array([0.0, 1.0])
        z = np.array([[1.0, 2.0, 4.0],
                      [2.0, 3.0, 5.0]])
        value = griddata(x, y, z, 1.0, 0.5)
        mirrored = griddata(-x, y, z, -1.0, 0.5)
        assert value == pytest.approx(mirrored)
        assert value == pytest.approx(3.5)

    def test_degenerate_step(self):
        """Nodes closer than the minimum step are rejected."""
        x = np.array([0.0, 0.0001, 1.0])
        y = np.array([0.0, 1.0])
        z = np.zeros((2, 3))
        with pytest.raises(WrongTableError):
            griddata(x, y, z, 0.00005, 0.5)


class TestCalculatePolynomial:
    """Test airspeed-scheduled polynomial coefficients."""

    def test_single_coefficient(self):
        """Test interpolation half way between two rows."""
        table = [[0.0, 0.0],
                 [1.0, 1.0]]
        assert np.allclose(calculate_polynomial(table, 0.5), [0.5])

    def test_two_coefficients(self):
        """Every coefficient column is interpolated."""
        table = [[0.0, 0.0, 1.0],
                 [1.0, 1.0, 2.0]]
        assert np.allclose(calculate_polynomial(table, 0.5), [0.5, 1.5])

    def test_clamped_outside_table(self):
        """Speeds outside the table reuse the endpoint rows."""
        table = [[5.0, 1.0, 10.0],
                 [10.0, 2.0, 20.0],
                 [15.0, 3.0, 30.0]]
        assert np.allclose(calculate_polynomial(table, 0.0), [1.0, 10.0])
        assert np.allclose(calculate_polynomial(table, 99.0), [3.0, 30.0])

    def test_single_row(self):
        """A table with one row is rejected."""
        with pytest.raises(WrongTableError):
            calculate_polynomial([[0.0, 1.0]], 0.5)

    def test_zero_table(self):
        """A table whose airspeed column does not advance is rejected."""
        with pytest.raises(WrongTableError):
            calculate_polynomial(np.zeros((2, 2)), 0.5)


class TestVectorHelpers:
    """Test lerp and normalization helpers."""

    def test_lerp(self):
        """Test linear interpolation on scalars and arrays."""
        assert lerp(1.0, 3.0, 0.25) == pytest.approx(1.5)
        assert np.allclose(lerp(np.zeros(2), np.array([2.0, 4.0]), 0.5), [1.0, 2.0])

    def test_normalized(self):
        """Test unit vector and zero vector."""
        assert np.allclose(normalized(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])
        assert np.allclose(normalized(np.zeros(3)), np.zeros(3))
