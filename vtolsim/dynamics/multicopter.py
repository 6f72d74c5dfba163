"""
Quadrotor dynamics backend.

A compact rotor model behind the same interface as the VTOL backend:
rotor speed follows the command through a first-order lag, each rotor
produces thrust k_f*w^2 along -z body and drag torque k_m*w^2 about z.
Rotors are laid out in X configuration. Commands arrive in PX4 quad-X
order [front right, tail left, front left, tail right] and are permuted
to the model order [front left, tail left, tail right, front right].
"""

import numpy as np
from typing import Tuple

from ..exceptions import ConfigError, WrongCommandSizeError
from ..core.actuators import first_order_lag
from ..core.dynamics import RigidBodyDynamics
from ..core.quaternion import Quaternion
from ..core.state import VtolState
from ..environment.wind import WindModel
from ..io.config import ConfigSource, load_config, load_multicopter_params
from ..sensors.imu import ImuSensor
from .base import UavDynamicsSim, as_quaternion

NUM_ROTORS = 4

# Model order [FL, TL, TR, FR]: unit arm directions in body FRD and
# direction of each rotor's drag torque about body z
ROTOR_DIRECTIONS = np.array([
    [1.0, -1.0, 0.0],
    [-1.0, -1.0, 0.0],
    [-1.0, 1.0, 0.0],
    [1.0, 1.0, 0.0],
]) / np.sqrt(2.0)
ROTOR_SPIN = np.array([-1.0, 1.0, -1.0, 1.0])

RAD_S_TO_RPM = 60.0 / (2 * np.pi)


def map_cmd_actuator(cmd) -> np.ndarray:
    """
    Convert rotor commands from PX4 order to model order.

    Parameters:
    -----------
    cmd : array_like
        At least four values: front right, tail left, front left, tail right

    Returns:
    --------
    cmd : np.ndarray, shape (4,)
        front left, tail left, tail right, front right
    """
    cmd = np.asarray(cmd, dtype=float).ravel()
    if cmd.size < NUM_ROTORS:
        raise WrongCommandSizeError(
            f"wrong control size. It is {cmd.size}, but should be at least {NUM_ROTORS}")
    return np.array([cmd[2], cmd[1], cmd[3], cmd[0]])


class MulticopterDynamicsSim(UavDynamicsSim):
    """
    Quadrotor backend.

    Parameters
    ----------
    config : ConfigSource, str or Path, optional
        Configuration document or YAML file, the packaged configuration
        by default (``/uav/multicopter_params``)
    seed : int, optional
        Seed of the private random source used for wind and IMU noise
    verbose : bool
        Print initialisation summary
    """

    def __init__(self, config=None, seed=None, verbose: bool = True):
        self.config = config
        self.verbose = verbose
        self.rng = np.random.default_rng(seed)
        self.state = VtolState()
        self.wind = WindModel(rng=self.rng)
        self.rotor_speed = np.zeros(NUM_ROTORS)
        self.params = None

    def init(self) -> int:
        try:
            source = self.config if isinstance(self.config, ConfigSource) else load_config(self.config)
            self.params = load_multicopter_params(source)
        except ConfigError as err:
            print(f"ERROR: multicopter dynamics init failed: {err}")
            return -1

        self.rigid_body = RigidBodyDynamics(self.params.mass, self.params.inertia,
                                            self.params.gravity)
        self.imu = ImuSensor(self.params.acc_variance, self.params.gyro_variance, rng=self.rng)
        self.rotors_location = self.params.arm_length * ROTOR_DIRECTIONS
        self.state.f_specific = np.array([0.0, 0.0, -self.params.gravity])

        if self.verbose:
            hover = np.sqrt(self.params.mass * self.params.gravity
                            / (NUM_ROTORS * self.params.thrust_coefficient))
            print("Multicopter dynamics initialized:")
            print(f"  mass={self.params.mass} kg, hover rotor speed={hover:.1f} rad/s")
        return 0

    def set_initial_position(self, position, attitude):
        self.state.position = np.array(position, dtype=float).reshape(3)
        self.state.attitude = as_quaternion(attitude)
        self.state.initial_position = self.state.position.copy()
        self.state.initial_attitude = self.state.attitude.copy()

    def set_initial_velocity(self, linear_velocity, angular_velocity):
        self.state.linear_vel = np.array(linear_velocity, dtype=float).reshape(3)
        self.state.angular_vel = np.array(angular_velocity, dtype=float).reshape(3)

    def set_wind(self, mean_velocity, variance: float):
        # Stored only, the rotor model has no airframe aerodynamics
        try:
            self.wind.set(mean_velocity, variance)
        except ValueError as err:
            print(f"ERROR: multicopter dynamics kept previous wind, {err}")

    def _ground_contact(self):
        self.state.f_specific = np.array([0.0, 0.0, -self.params.gravity])
        self.state.linear_vel = np.zeros(3)
        self.state.position[2] = 0.0
        self.state.attitude = self.state.initial_attitude.copy()
        self.state.angular_vel = np.zeros(3)

    def land(self):
        """Hold the vehicle on the ground with rotors stopped."""
        self._ground_contact()
        self.rotor_speed = np.zeros(NUM_ROTORS)

    def rotor_forces_moments(self, rotor_speed: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Per-rotor forces and moments in body frame.

        Returns:
        --------
        forces : np.ndarray, shape (4, 3)
        moments : np.ndarray, shape (4, 3)
        """
        w2 = rotor_speed**2
        forces = np.zeros((NUM_ROTORS, 3))
        forces[:, 2] = -self.params.thrust_coefficient * w2

        moments = np.cross(self.rotors_location, forces)
        moments[:, 2] += ROTOR_SPIN * self.params.torque_coefficient * w2
        return forces, moments

    def process(self, dt: float, command, is_command_percent: bool):
        try:
            command = map_cmd_actuator(command)
        except WrongCommandSizeError as err:
            print(f"ERROR: multicopter dynamics skipped step, {err}")
            return

        max_speed = self.params.max_prop_speed
        if is_command_percent:
            speed_cmd = np.clip(command, 0.0, 1.0) * max_speed
        else:
            speed_cmd = np.clip(command, 0.0, max_speed)
        self.rotor_speed = first_order_lag(self.rotor_speed, speed_cmd, dt,
                                           np.full(NUM_ROTORS, self.params.motor_time_constant))

        forces, moments = self.rotor_forces_moments(self.rotor_speed)
        f_specific, f_total = self.rigid_body.step(
            self.state, forces.sum(axis=0), moments.sum(axis=0), dt)
        self.state.f_total = f_total
        self.state.m_total = moments.sum(axis=0)

        if self.state.position[2] >= 0:
            self._ground_contact()
        else:
            self.state.f_specific = f_specific

    def get_position(self) -> np.ndarray:
        return self.state.position.copy()

    def get_attitude(self) -> Quaternion:
        return self.state.attitude.copy()

    def get_velocity(self) -> np.ndarray:
        return self.state.linear_vel.copy()

    def get_angular_velocity(self) -> np.ndarray:
        return self.state.angular_vel.copy()

    def get_imu(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.imu.measure(self.state.f_specific, self.state.angular_vel)

    def get_motors_rpm(self) -> np.ndarray:
        """Rotor speeds (rev/min) in model order."""
        return self.rotor_speed * RAD_S_TO_RPM

    def get_linear_acceleration(self) -> np.ndarray:
        return self.state.linear_accel.copy()
