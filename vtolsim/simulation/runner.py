"""
Simulation runner.

Drives a dynamics backend with a fixed nominal step. Each step either
advances a calibration case, integrates the armed vehicle with the
latest actuator command or keeps the disarmed vehicle on the ground.
Sensors are sampled after every step and the result is appended to a
telemetry history.
"""

import numpy as np
import pandas as pd
from typing import Optional

from ..exceptions import ConfigError
from ..core.calibration import CalibrationType
from ..core.diagnostics import Throttle
from ..core.frames import ned_to_enu
from ..core.quaternion import Quaternion
from ..dynamics import create_dynamics
from ..io.config import ConfigSource, load_config, load_sim_params
from ..sensors.air_data import AirDataSensor
from ..sensors.engine import FuelTankSensor, IceStatusSensor
from ..sensors.esc import EscStatusSensor

MAX_TIME_JUMP = 10.0
STATUS_PERIOD = 1.0
PUSHER_MOTOR = 4
THROTTLE_CHANNEL = 7

SCENARIO_NONE = 0
SCENARIO_ICE_STALL = 1


class SimulationRunner:
    """
    Synchronous simulation loop around one dynamics backend.

    Parameters
    ----------
    config : ConfigSource, str or Path, optional
        Configuration document or YAML file, the packaged configuration
        by default
    dynamics : UavDynamicsSim, optional
        Backend to drive, created from ``/uav/sim_params/dynamics`` by default
    seed : int, optional
        Seed passed to a created backend
    verbose : bool
        Print the status line once per simulated second

    Raises
    ------
    ConfigError
        If the configuration is invalid or the backend fails to initialise
    """

    def __init__(self, config=None, dynamics=None, seed=None, verbose: bool = True):
        source = config if isinstance(config, ConfigSource) else load_config(config)
        self.sim_params = load_sim_params(source)
        self.verbose = verbose

        if dynamics is None:
            dynamics = create_dynamics(self.sim_params.dynamics, source, seed=seed, verbose=verbose)
        self.dynamics = dynamics
        if self.dynamics.init() != 0:
            raise ConfigError(f"{self.sim_params.dynamics} dynamics failed to initialise")

        pose = self.sim_params.init_pose
        attitude = Quaternion.from_xyzw(*pose[3:7])
        attitude.normalize()
        self.dynamics.set_initial_position(pose[0:3], attitude)
        self.dynamics.set_wind(self.sim_params.wind_mean, self.sim_params.wind_variance)

        self.dt = self.sim_params.dt
        self.time = 0.0
        self.armed = False
        self.calibration = CalibrationType.WORK_MODE
        self.scenario = SCENARIO_NONE
        self.actuators = np.zeros(8)
        self.is_command_percent = True

        self.ice = IceStatusSensor()
        self.fuel = FuelTankSensor()
        self.air_data = AirDataSensor(self.sim_params.alt_ref)
        self.esc = EscStatusSensor()
        self.ice_status = self.ice.measure(0.0)
        self.fuel_level = self.fuel.level
        self.air = self.air_data.measure(self.dynamics.get_position(), self.dynamics.get_velocity())
        self.esc_status = None
        self.imu = (np.zeros(3), np.zeros(3))

        self._rows = []
        self._time_jump = Throttle()
        self._next_status_time = STATUS_PERIOD
        self._steps_since_status = 0

    # Inputs

    def arm(self, armed: bool = True):
        self.armed = bool(armed)

    def set_actuators(self, command, is_command_percent: bool = True):
        """Latest actuator command, applied on every armed step until replaced."""
        self.actuators = np.asarray(command, dtype=float).ravel().copy()
        self.is_command_percent = is_command_percent

    def set_calibration(self, case):
        self.calibration = CalibrationType(case)

    def set_scenario(self, scenario: int):
        """
        Select a failure scenario.

        SCENARIO_ICE_STALL forces the pusher throttle to zero and makes
        the engine report FAULT; SCENARIO_NONE restores normal operation.
        """
        self.scenario = scenario
        if scenario == SCENARIO_ICE_STALL:
            self.ice.start_stall_emulation()
        else:
            self.ice.stop_stall_emulation()

    # Stepping

    def step(self, dt: Optional[float] = None):
        """
        Perform one physics step.

        Parameters:
        -----------
        dt : float, optional
            Elapsed time since the previous step (s), the nominal step by
            default. Steps longer than 10 nominal steps are clamped.
        """
        dt = self.dt if dt is None else dt

        if self.calibration != CalibrationType.WORK_MODE:
            self.dynamics.calibrate(self.calibration)
        elif self.armed:
            max_dt = MAX_TIME_JUMP * self.dt
            if dt > max_dt:
                self._time_jump.print(f"Time jumping: dt={dt:.4f} s, clamped to {max_dt:.4f} s")
                dt = max_dt
            command = self.actuators.copy()
            if self.scenario == SCENARIO_ICE_STALL and command.size > THROTTLE_CHANNEL:
                command[THROTTLE_CHANNEL] = 0.0
            self.dynamics.process(dt, command, self.is_command_percent)
        else:
            self.dynamics.land()

        self.time += dt
        self._steps_since_status += 1
        self._sample_sensors()
        self._record()

        if self.time >= self._next_status_time - 1e-9:
            if self.verbose:
                print(self.status_line())
            self._next_status_time += STATUS_PERIOD
            self._steps_since_status = 0

    def run(self, duration: float, dt: Optional[float] = None) -> pd.DataFrame:
        """Run for ``duration`` seconds of simulated time and return the history."""
        dt = self.dt if dt is None else dt
        for _ in range(int(round(duration / dt))):
            self.step(dt)
        return self.history()

    def _sample_sensors(self):
        self.imu = self.dynamics.get_imu()
        self.air = self.air_data.measure(self.dynamics.get_position(), self.dynamics.get_velocity())
        rpm = self.dynamics.get_motors_rpm()
        engine_rpm = float(rpm[PUSHER_MOTOR]) if rpm is not None and len(rpm) > PUSHER_MOTOR else 0.0
        self.ice_status = self.ice.measure(engine_rpm)
        self.fuel_level = self.fuel.measure(engine_rpm)
        if rpm is not None and len(rpm) > 0:
            self.esc_status = self.esc.measure(rpm)

    def _record(self):
        position = self.dynamics.get_position()
        velocity = self.dynamics.get_velocity()
        omega = self.dynamics.get_angular_velocity()
        roll, pitch, yaw = self.dynamics.get_attitude().to_euler_angles()
        enu = ned_to_enu(position)
        accel, gyro = self.imu

        row = {
            'time': self.time,
            'north': position[0], 'east': position[1], 'down': position[2],
            'x_enu': enu[0], 'y_enu': enu[1], 'z_enu': enu[2],
            'vn': velocity[0], 've': velocity[1], 'vd': velocity[2],
            'roll': roll, 'pitch': pitch, 'yaw': yaw,
            'p': omega[0], 'q': omega[1], 'r': omega[2],
            'acc_x': accel[0], 'acc_y': accel[1], 'acc_z': accel[2],
            'gyro_x': gyro[0], 'gyro_y': gyro[1], 'gyro_z': gyro[2],
        }
        rpm = self.dynamics.get_motors_rpm()
        if rpm is not None:
            for i, value in enumerate(rpm):
                row[f'rpm_{i}'] = value
        row['temperature'] = self.air['temperature']
        row['abs_pressure'] = self.air['abs_pressure']
        row['diff_pressure'] = self.air['diff_pressure']
        if self.esc_status is not None:
            row['esc_idx'] = self.esc_status['esc_idx']
            row['esc_rpm'] = self.esc_status['rpm']
        row['fuel'] = self.fuel_level
        row['ice_state'] = int(self.ice_status['state'])
        row['armed'] = self.armed
        row['calibration'] = int(self.calibration)
        self._rows.append(row)

    # Outputs

    def history(self) -> pd.DataFrame:
        """Telemetry of every step taken so far, one row per step."""
        return pd.DataFrame(self._rows)

    def status_line(self) -> str:
        """Armed flag, backend, physics-loop completeness, actuators and ENU pose."""
        expected = STATUS_PERIOD / self.dt
        completeness = 100.0 * self._steps_since_status / expected
        a = self.actuators
        text = "[Armed] " if self.armed else "[Disarmed] "
        text += f"{self.sim_params.dynamics}: dyn={completeness:.0f}%, "
        text += "mc [" + ", ".join(f"{v:.2f}" for v in a[0:4]) + "]"
        if self.sim_params.dynamics == 'inno_vtol' and a.size >= 8:
            text += ", fw rpy [" + ", ".join(f"{v:.2f}" for v in a[4:7]) + "]"
            text += f" throttle [{a[7]:.2f}]"
        enu = ned_to_enu(self.dynamics.get_position())
        text += f", enu pose [{enu[0]:.1f}, {enu[1]:.1f}, {enu[2]:.1f}]"
        return text
