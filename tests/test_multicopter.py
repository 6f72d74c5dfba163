"""
Quadrotor Backend Tests
"""

import pytest
import numpy as np
import os
import sys

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vtolsim.exceptions import ConfigError, WrongCommandSizeError
from vtolsim.dynamics import (
    InnoVtolDynamicsSim,
    MulticopterDynamicsSim,
    create_dynamics,
)
from vtolsim.dynamics.multicopter import map_cmd_actuator

GRAVITY = 9.80665


@pytest.fixture
def quad():
    dynamics = MulticopterDynamicsSim(seed=0, verbose=False)
    assert dynamics.init() == 0
    dynamics.set_initial_position((0, 0, -10), (1, 0, 0, 0))
    return dynamics


def hover_speed(dynamics):
    p = dynamics.params
    return np.sqrt(p.mass * p.gravity / (4 * p.thrust_coefficient))


class TestCommandOrder:
    """Test the PX4 to model rotor permutation."""

    def test_permutation(self):
        """[FR, TL, FL, TR] becomes [FL, TL, TR, FR]."""
        assert np.allclose(map_cmd_actuator([1, 2, 3, 4]), [3, 2, 4, 1])

    def test_extra_channels_ignored(self):
        """Channels past the first four are ignored."""
        assert np.allclose(map_cmd_actuator([1, 2, 3, 4, 9, 9, 9, 9]), [3, 2, 4, 1])

    def test_short_command(self):
        """Fewer than four channels cannot be mapped."""
        with pytest.raises(WrongCommandSizeError):
            map_cmd_actuator([1, 2, 3])


class TestMulticopterDynamics:
    """Test rotor forces and integration."""

    def test_hover(self, quad):
        """Hover speed on all rotors balances gravity."""
        w = hover_speed(quad)
        assert w / quad.params.max_prop_speed == pytest.approx(0.6307, abs=1e-3)

        quad.rotor_speed = np.full(4, w)
        quad.process(0.001, [w / quad.params.max_prop_speed] * 4, True)
        assert np.allclose(quad.get_linear_acceleration(), 0.0, atol=1e-6)
        assert np.allclose(quad.state.angular_accel, 0.0, atol=1e-9)

    def test_free_fall(self, quad):
        """Stopped rotors fall at g."""
        quad.process(0.001, [0.0] * 4, True)
        assert np.allclose(quad.get_linear_acceleration(), [0, 0, GRAVITY], atol=1e-9)

    def test_roll_from_left_rotors(self, quad):
        """Faster left rotors roll right wing down."""
        _, moments = quad.rotor_forces_moments(map_cmd_actuator([1000, 1200, 1200, 1000]))
        assert moments.sum(axis=0)[0] > 0
        assert moments.sum(axis=0)[1] == pytest.approx(0.0, abs=1e-9)

    def test_pitch_from_front_rotors(self, quad):
        """Faster front rotors pitch nose up."""
        _, moments = quad.rotor_forces_moments(map_cmd_actuator([1200, 1000, 1200, 1000]))
        assert moments.sum(axis=0)[1] > 0
        assert moments.sum(axis=0)[0] == pytest.approx(0.0, abs=1e-9)

    def test_yaw_from_rotor_pair(self, quad):
        """Front right and tail left rotors turn the vehicle the same way."""
        _, moments = quad.rotor_forces_moments(map_cmd_actuator([1200, 1200, 1000, 1000]))
        total = moments.sum(axis=0)
        assert total[2] > 0
        assert np.allclose(total[0:2], 0.0, atol=1e-9)

    def test_motor_lag(self, quad):
        """Rotor speed approaches the command through the motor lag."""
        quad.process(0.001, [1.0] * 4, True)
        speed = quad.rotor_speed
        assert np.all(speed > 0)
        assert np.all(speed < quad.params.max_prop_speed)

    def test_physical_command_clipped(self, quad):
        """Physical speed commands are limited to the maximum rotor speed."""
        for _ in range(500):
            quad.process(0.001, [1e5] * 4, False)
        assert np.allclose(quad.rotor_speed, quad.params.max_prop_speed, rtol=1e-6)

    def test_takeoff_from_ground(self):
        """Rotors keep spinning up on the ground until the vehicle lifts off."""
        quad = MulticopterDynamicsSim(seed=0, verbose=False)
        assert quad.init() == 0
        quad.set_initial_position((0, 0, 0), (1, 0, 0, 0))
        for _ in range(300):
            quad.process(0.001, [1.0] * 4, True)
        assert quad.get_position()[2] < 0

    def test_land_stops_rotors(self, quad):
        """land() resets the pose and stops the rotors."""
        quad.process(0.001, [1.0] * 4, True)
        quad.land()
        assert quad.get_position()[2] == 0.0
        assert np.allclose(quad.get_motors_rpm(), 0.0)
        assert len(quad.get_motors_rpm()) == 4

    def test_wrong_command_size(self, quad, capsys):
        """A short command skips the step."""
        before = quad.get_position()
        quad.process(0.001, [0.5] * 3, True)
        assert np.allclose(quad.get_position(), before)
        assert "skipped step" in capsys.readouterr().out

    def test_calibration_unsupported(self, quad):
        """The quadrotor backend does not calibrate."""
        assert quad.calibrate(1) == -1

    def test_imu_at_rest(self, quad):
        """IMU at rest on the ground measures the gravity reaction."""
        quad.land()
        accel, gyro = quad.get_imu()
        assert np.allclose(accel, [0, 0, -GRAVITY], atol=0.2)
        assert np.allclose(gyro, 0.0, atol=0.1)

    def test_negative_wind_variance_rejected(self, quad, capsys):
        """An invalid wind setting is reported and the previous wind kept."""
        quad.set_wind((1, 0, 0), 0.0)
        quad.set_wind((0, 0, 0), -1.0)
        assert np.allclose(quad.wind.mean_velocity, [1, 0, 0])
        assert "kept previous wind" in capsys.readouterr().out


class TestCreateDynamics:
    """Test backend selection by name."""

    def test_known_names(self):
        """Test both configured backend names."""
        assert isinstance(create_dynamics('inno_vtol', verbose=False), InnoVtolDynamicsSim)
        assert isinstance(create_dynamics('flightgoggles_multicopter', verbose=False),
                          MulticopterDynamicsSim)

    def test_unknown_name(self):
        """Unknown backends are configuration errors."""
        with pytest.raises(ConfigError):
            create_dynamics('tailsitter')
