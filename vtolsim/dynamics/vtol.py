"""
Innopolis VTOL dynamics.

Quadplane with four lift motors, a forward pusher and aileron, elevator
and rudder surfaces. Each step:
1. Sample wind and compute body airspeed, angle of attack and sideslip
2. Map the command to physical actuator values and apply actuator lag
3. Compute aerodynamics from the lagged surface positions
4. Compute motor forces and integrate the rigid body
5. Apply the ground-contact reset when the vehicle reaches z >= 0
"""

import numpy as np
from typing import Tuple

from ..exceptions import ConfigError, WrongCommandSizeError
from ..core.actuators import MIXERS, check_command_size, first_order_lag
from ..core.aerodynamics import (
    VtolAeroModel,
    calculate_airspeed,
    calculate_angle_of_attack,
    calculate_angle_of_sideslip,
)
from ..core.calibration import CalibrationSequencer
from ..core.dynamics import RigidBodyDynamics
from ..core.propulsion import VtolPropulsion
from ..core.quaternion import Quaternion
from ..core.state import VtolState
from ..environment.wind import WindModel
from ..io.config import ConfigSource, load_config, load_vtol_tables, load_vtol_params
from ..sensors.imu import ImuSensor
from .base import UavDynamicsSim, as_quaternion


class InnoVtolDynamicsSim(UavDynamicsSim):
    """
    VTOL dynamics backend.

    Parameters
    ----------
    config : ConfigSource, str or Path, optional
        Configuration document or YAML file, the packaged Innopolis VTOL
        configuration by default
    mixer : str
        Mixer used for normalized commands: 'inno' or 'standard'
    seed : int, optional
        Seed of the private random source used for wind and IMU noise
    verbose : bool
        Print initialisation summary and warnings
    """

    def __init__(self, config=None, mixer: str = 'inno', seed=None, verbose: bool = True):
        if mixer not in MIXERS:
            raise ConfigError(f"Unknown mixer '{mixer}', expected one of {sorted(MIXERS)}")
        self.config = config
        self.mixer = MIXERS[mixer]
        self.verbose = verbose
        self.rng = np.random.default_rng(seed)

        self.state = VtolState()
        self.wind = WindModel(rng=self.rng)
        self.tables = None
        self.params = None

    # Initialisation

    def init(self) -> int:
        try:
            source = self.config if isinstance(self.config, ConfigSource) else load_config(self.config)
            self.tables = load_vtol_tables(source)
            self.params = load_vtol_params(source)
        except ConfigError as err:
            print(f"ERROR: VTOL dynamics init failed: {err}")
            return -1

        self.aero = VtolAeroModel(self.tables, self.params, verbose=self.verbose)
        self.propulsion = VtolPropulsion(self.tables.prop, self.params.propellers_location,
                                         verbose=self.verbose)
        self.rigid_body = RigidBodyDynamics(self.params.mass, self.params.inertia,
                                            self.params.gravity)
        self.calibration = CalibrationSequencer(self.params.gravity, verbose=self.verbose)
        self.imu = ImuSensor(self.params.acc_variance, self.params.gyro_variance, rng=self.rng)
        self.state.f_specific = np.array([0.0, 0.0, -self.params.gravity])

        if self.verbose:
            print("VTOL dynamics initialized:")
            print(f"  mass={self.params.mass} kg, wing area={self.params.wing_area} m^2")
            print(f"  airspeed table {self.tables.airspeed[0]}..{self.tables.airspeed[-1]} m/s, "
                  f"propeller table {self.tables.prop.shape[0]} rows")
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
        """Set mean wind (NED, m/s) and per-axis turbulence variance."""
        try:
            self.wind.set(mean_velocity, variance)
        except ValueError as err:
            print(f"ERROR: VTOL dynamics kept previous wind, {err}")
            return
        self.state.wind_velocity = self.wind.mean_velocity.copy()
        self.state.wind_variance = self.wind.variance

    # Stepping

    def land(self):
        """Ground-contact reset: vehicle at rest on the pad in its initial attitude."""
        self.state.f_specific = np.array([0.0, 0.0, -self.params.gravity])
        self.state.linear_vel = np.zeros(3)
        self.state.position[2] = 0.0
        self.state.attitude = self.state.initial_attitude.copy()
        self.state.angular_vel = np.zeros(3)
        self.state.motors_rpm = np.zeros_like(self.state.motors_rpm)

    def calibrate(self, case) -> int:
        self.calibration.step(self.state, case)
        return 1

    def map_command(self, command, is_command_percent: bool) -> np.ndarray:
        """Convert a command to physical actuator values, raising on wrong size."""
        if is_command_percent:
            actuators = self.mixer(command, self.params.actuator_min, self.params.actuator_max)
        else:
            actuators = command
        return check_command_size(actuators)

    def update_actuators(self, command: np.ndarray, dt: float) -> np.ndarray:
        """Apply first-order lag toward the commanded actuator positions."""
        self.state.prev_actuators = self.state.crnt_actuators.copy()
        self.state.crnt_actuators = first_order_lag(
            self.state.prev_actuators, command, dt, self.tables.actuator_time_constants)
        return self.state.crnt_actuators.copy()

    def process(self, dt: float, command, is_command_percent: bool):
        wind = self.wind.sample()
        rotation = self.state.attitude.to_rotation_matrix()
        airspeed = calculate_airspeed(rotation, self.state.linear_vel, wind,
                                      self.aero.airspeed_warning)
        aoa = calculate_angle_of_attack(airspeed)
        aos = calculate_angle_of_sideslip(airspeed)

        try:
            command = self.map_command(command, is_command_percent)
        except WrongCommandSizeError as err:
            print(f"ERROR: VTOL dynamics skipped step, {err}")
            return
        actuators = self.update_actuators(command, dt)

        aero = self.aero.compute(airspeed, aoa, aos, actuators[5], actuators[6], actuators[7])
        self.state.f_aero = aero.force
        self.state.m_aero = aero.moment
        self.state.f_lift = aero.lift
        self.state.f_side = aero.side
        self.state.f_drag = aero.drag
        self.state.m_steer = aero.steer_moment
        self.state.m_airspeed = aero.airspeed_moment

        self.calculate_new_state(self.state.m_aero, self.state.f_aero, actuators, dt)

    def calculate_new_state(self, m_aero: np.ndarray, f_aero: np.ndarray,
                            actuators: np.ndarray, dt: float):
        """
        Integrate one step from aerodynamic loads and physical actuator values.

        Parameters:
        -----------
        m_aero : np.ndarray, shape (3,)
            Aerodynamic moment in body frame (N*m)
        f_aero : np.ndarray, shape (3,)
            Aerodynamic force in body frame (N)
        actuators : np.ndarray, shape (8,)
            Physical actuator values, motors in channels 0..4
        dt : float
            Step duration (s)
        """
        forces, moments, rpm = self.propulsion.compute_motors(actuators)
        self.state.f_motors = forces
        self.state.m_motors = moments
        self.state.motors_rpm = rpm

        m_motors_total = moments.sum(axis=0)
        m_total = np.asarray(m_aero, dtype=float) + m_motors_total
        force = np.asarray(f_aero, dtype=float) + forces.sum(axis=0)

        f_specific, f_total = self.rigid_body.step(self.state, force, m_total, dt)
        self.state.f_total = f_total
        self.state.m_total = m_total

        if self.state.position[2] >= 0:
            self.land()
        else:
            self.state.f_specific = f_specific

        self.state.m_motors_total = m_motors_total
        self.state.body_linear_vel = self.state.attitude.to_rotation_matrix() @ self.state.linear_vel

    # State getters (NED position and velocity, FRD body rates)

    def get_position(self) -> np.ndarray:
        return self.state.position.copy()

    def get_attitude(self) -> Quaternion:
        return self.state.attitude.copy()

    def get_velocity(self) -> np.ndarray:
        return self.state.linear_vel.copy()

    def get_angular_velocity(self) -> np.ndarray:
        return self.state.angular_vel.copy()

    def get_imu(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.imu.measure(self.state.f_specific, self.state.angular_vel,
                                self.state.accel_bias, self.state.gyro_bias)

    def get_motors_rpm(self) -> np.ndarray:
        return self.state.motors_rpm.copy()

    # Diagnostics

    def get_actuators(self) -> np.ndarray:
        return self.state.crnt_actuators.copy()

    def get_linear_acceleration(self) -> np.ndarray:
        return self.state.linear_accel.copy()

    def get_angular_acceleration(self) -> np.ndarray:
        return self.state.angular_accel.copy()

    def get_aero_force(self) -> np.ndarray:
        return self.state.f_aero.copy()

    def get_aero_moment(self) -> np.ndarray:
        return self.state.m_aero.copy()

    def get_total_force(self) -> np.ndarray:
        return self.state.f_total.copy()

    def get_total_moment(self) -> np.ndarray:
        return self.state.m_total.copy()

    def get_lift_force(self) -> np.ndarray:
        return self.state.f_lift.copy()

    def get_drag_force(self) -> np.ndarray:
        return self.state.f_drag.copy()

    def get_side_force(self) -> np.ndarray:
        return self.state.f_side.copy()

    def get_steer_moment(self) -> np.ndarray:
        return self.state.m_steer.copy()

    def get_airspeed_moment(self) -> np.ndarray:
        return self.state.m_airspeed.copy()

    def get_motors_total_moment(self) -> np.ndarray:
        return self.state.m_motors_total.copy()

    def get_motors_forces(self) -> np.ndarray:
        return self.state.f_motors.copy()

    def get_motors_moments(self) -> np.ndarray:
        return self.state.m_motors.copy()

    def get_body_linear_velocity(self) -> np.ndarray:
        return self.state.body_linear_vel.copy()
