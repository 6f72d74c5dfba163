"""
Aerodynamics Tests

Tests for airspeed and aerodynamic angles, airspeed-scheduled
coefficient polynomials and the table-based VTOL aerodynamic model
with the reference configuration.
"""

import copy

import pytest
import numpy as np
import os
import sys

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vtolsim.core.aerodynamics import (
    VtolAeroModel,
    calculate_airspeed,
    calculate_angle_of_attack,
    calculate_angle_of_sideslip,
)
from vtolsim.core.common_math import calculate_polynomial
from vtolsim.io.config import ConfigSource, load_config, load_vtol_tables, load_vtol_params


@pytest.fixture(scope="module")
def source():
    return load_config()


@pytest.fixture(scope="module")
def model(source):
    return VtolAeroModel(load_vtol_tables(source), load_vtol_params(source), verbose=False)


class TestAerodynamicAngles:
    """Test angle of attack, angle of sideslip and airspeed."""

    @pytest.mark.parametrize("airspeed, expected", [
        ((0, 0, 0), 0.0),
        ((10, 1, 1), 0.099669),
        ((1, 10, 1), 0.785398),
        ((1, 1, 10), 1.471128),
        ((1, 2, 3), 1.2490),
        ((-10, 1, 1), 3.041924),
        ((-1, 10, 1), 2.356194),
        ((-1, 1, 10), 1.670465),
        ((-1, 2, 3), 1.892547),
        ((10, 1, -1), -0.099669),
        ((1, 10, -1), -0.785398),
        ((1, 1, -10), -1.471128),
        ((1, 2, -3), -1.249046),
    ])
    def test_angle_of_attack(self, airspeed, expected):
        """Test angle of attack over all quadrants."""
        aoa = calculate_angle_of_attack(np.array(airspeed, dtype=float))
        assert aoa == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize("airspeed, expected", [
        ((0, 0, 0), 0.0),
        ((10, 1, 1), 0.099177),
        ((1, 10, 1), 1.430307),
        ((1, 1, 10), 0.099177),
        ((1, 2, 3), 0.563943),
        ((10, -1, 1), -0.099177),
        ((1, -10, 1), -1.430307),
        ((1, -1, 10), -0.099177),
        ((1, -2, 3), -0.563943),
        ((10, 1, -1), 0.099177),
        ((1, 10, -1), 1.430307),
        ((1, 1, -10), 0.099177),
        ((1, 2, -3), 0.563943),
    ])
    def test_angle_of_sideslip(self, airspeed, expected):
        """Sideslip follows the sign of the lateral airspeed."""
        aos = calculate_angle_of_sideslip(np.array(airspeed, dtype=float))
        assert aos == pytest.approx(expected, abs=1e-3)

    def test_airspeed_with_wind(self):
        """Headwind adds to the body-frame airspeed."""
        airspeed = calculate_airspeed(np.eye(3), np.array([10.0, 0.0, 0.0]),
                                      np.array([-5.0, 0.0, 0.0]))
        assert np.allclose(airspeed, [15, 0, 0])

    def test_airspeed_clamped(self, capsys):
        """Each component is limited to 40 m/s."""
        airspeed = calculate_airspeed(np.eye(3), np.array([55.0, -60.0, 3.0]), np.zeros(3))
        assert np.allclose(airspeed, [40, -40, 3])
        assert "airspeed is out of limit" in capsys.readouterr().out

    def test_airspeed_rotated_to_body(self):
        """Velocity is expressed in the body frame."""
        rotation = np.array([[0.0, 1.0, 0.0],
                             [-1.0, 0.0, 0.0],
                             [0.0, 0.0, 1.0]])
        airspeed = calculate_airspeed(rotation, np.array([0.0, 10.0, 0.0]), np.zeros(3))
        assert np.allclose(airspeed, [10, 0, 0])


class TestCoefficientPolynomials:
    """Test airspeed-scheduled lift polynomial from the reference tables."""

    def test_cl_at_10(self, model):
        """Test coefficients at a tabulated airspeed."""
        expected = [-3.9340e-11, 8.2040e-09, 1.9350e-07, -3.0750e-05,
                    -4.2090e-04, 0.055200, 0.44380]
        coeffs = calculate_polynomial(model.tables.CLPolynomial, 10.0)
        assert coeffs.shape == (7,)
        assert np.allclose(coeffs, expected, rtol=1e-4, atol=1e-12)

    def test_cl_above_table(self, model):
        """Speeds above the table use the last row."""
        expected = [-5.9110e-11, 7.8790e-09, 2.5740e-07, -2.9610e-05,
                    -4.8380e-04, 0.054580, 0.46370]
        coeffs = calculate_polynomial(model.tables.CLPolynomial, 45.0)
        assert np.allclose(coeffs, expected, rtol=1e-4, atol=1e-12)

    def test_cl_below_table(self, model):
        """Speeds below the table use the first row."""
        first_row = model.tables.CLPolynomial[0, 1:]
        assert np.allclose(calculate_polynomial(model.tables.CLPolynomial, 0.0), first_row)
        assert np.allclose(calculate_polynomial(model.tables.CLPolynomial, -10.0), first_row)

    def test_cd_has_five_coefficients(self, model):
        """The drag table has fewer columns than the others."""
        assert calculate_polynomial(model.tables.CDPolynomial, 12.0).shape == (5,)

    def test_cmz_sign(self, model):
        """Yaw moment coefficient is the negated table polynomial."""
        coeffs = calculate_polynomial(model.tables.CmzPolynomial, 10.0)
        assert model.calculate_cmz(10.0, 20.0) == pytest.approx(-np.polyval(coeffs, 20.0))


class TestVtolAeroModel:
    """Test forces and moments of the table-based model."""

    def test_sideways_flow(self, model):
        """Test reference case with airspeed along -y body."""
        airspeed = np.array([0.000001, -9.999999, 0.000001])
        force, moment = model.compute_forces_moments(airspeed, 0.958191, -1.570796, 0.0, 0.0, 0.0)

        assert np.allclose(force, [0.0, 29.513, 0.0], atol=1e-3)
        assert np.allclose(moment, [0.21470, 0.69480, -0.31633], atol=1e-3)

    def test_breakdown_sums_to_total(self, model):
        """Lift, side and drag add up to the total force."""
        result = model.compute(np.array([12.0, 1.0, 2.0]), 0.15, 0.05, 3.0, -4.0, 2.0)
        assert np.allclose(result.lift + result.side + result.drag, result.force)
        assert np.allclose(result.steer_moment + result.airspeed_moment, result.moment)

    def test_drag_opposes_airspeed(self, model):
        """Drag points against the airspeed vector."""
        airspeed = np.array([15.0, 0.0, 1.0])
        aoa = calculate_angle_of_attack(airspeed)
        result = model.compute(airspeed, aoa, 0.0)
        assert np.dot(result.drag, airspeed) < 0
        assert np.allclose(np.cross(result.drag, airspeed), 0.0, atol=1e-9)

    def test_elevator_sign_symmetry(self, model):
        """Opposite elevator deflections give opposite pitch steering moments."""
        airspeed = np.array([15.0, 0.0, 1.0])
        aoa = calculate_angle_of_attack(airspeed)
        up = model.compute(airspeed, aoa, 0.0, elevator=5.0)
        down = model.compute(airspeed, aoa, 0.0, elevator=-5.0)
        assert up.steer_moment[1] != 0.0
        assert up.steer_moment[1] == pytest.approx(-down.steer_moment[1])

    def test_zero_airspeed(self, model):
        """No airflow produces no load."""
        force, moment = model.compute_forces_moments(np.zeros(3), 0.0, 0.0)
        assert np.allclose(force, 0.0)
        assert np.allclose(moment, 0.0)

    def test_broken_table_gives_nan(self, source):
        """A table that cannot be interpolated only affects its own coefficient."""
        raw = copy.deepcopy(source.raw_config)
        raw['uav']['aerodynamics_coeffs']['CLPolynomial'] = [0.0] * 64
        broken = ConfigSource(raw)
        model = VtolAeroModel(load_vtol_tables(broken), load_vtol_params(broken), verbose=False)

        assert np.isnan(model.calculate_cl(10.0, 5.0))
        assert np.isfinite(model.calculate_cd(10.0, 5.0))
        assert np.isfinite(model.calculate_cmy(10.0, 5.0))
