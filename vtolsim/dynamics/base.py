"""
Common interface of the UAV dynamics backends.

The simulation runner only talks to a backend through this interface:
initialise it from configuration, place it, step it with actuator
commands (or calibration cases, or keep it landed) and sample its
state. Positions and velocities are NED, angular quantities and IMU
samples are body FRD.
"""

import numpy as np
from typing import Optional, Tuple
from abc import ABC, abstractmethod

from ..core.quaternion import Quaternion


def as_quaternion(attitude) -> Quaternion:
    """Accept a Quaternion or a scalar-first [w, x, y, z] sequence."""
    if isinstance(attitude, Quaternion):
        return attitude.copy()
    return Quaternion(np.asarray(attitude, dtype=float).reshape(4))


class UavDynamicsSim(ABC):
    """
    Base class for dynamics backends.

    Operations are not reentrant; the owner serializes all calls.
    """

    @abstractmethod
    def init(self) -> int:
        """Load configuration. Returns 0 on success, -1 on configuration error."""
        pass

    @abstractmethod
    def set_initial_position(self, position, attitude):
        """
        Place the vehicle and remember the pose for ground-contact resets.

        Parameters:
        -----------
        position : array_like, shape (3,)
            Position in NED (m)
        attitude : Quaternion or array_like, shape (4,)
            FRD to NED attitude, scalar first
        """
        pass

    def set_initial_velocity(self, linear_velocity, angular_velocity):
        """Set NED linear velocity (m/s) and FRD angular velocity (rad/s)."""
        pass

    @abstractmethod
    def process(self, dt: float, command, is_command_percent: bool):
        """
        Advance the dynamics by one step.

        Parameters:
        -----------
        dt : float
            Step duration (s)
        command : array_like
            Actuator command vector
        is_command_percent : bool
            True for normalized mixer outputs, False for physical values
        """
        pass

    def set_wind(self, mean_velocity, variance: float):
        """Set mean wind (NED, m/s) and per-axis turbulence variance."""
        pass

    def land(self):
        """Hold the vehicle on the ground."""
        pass

    def calibrate(self, case) -> int:
        """Perform one calibration step. Returns -1 when unsupported."""
        return -1

    @abstractmethod
    def get_position(self) -> np.ndarray:
        pass

    @abstractmethod
    def get_attitude(self) -> Quaternion:
        pass

    @abstractmethod
    def get_velocity(self) -> np.ndarray:
        pass

    @abstractmethod
    def get_angular_velocity(self) -> np.ndarray:
        pass

    @abstractmethod
    def get_imu(self) -> Tuple[np.ndarray, np.ndarray]:
        """Noisy accelerometer (m/s^2) and gyroscope (rad/s) samples, body FRD."""
        pass

    def get_motors_rpm(self) -> Optional[np.ndarray]:
        """Motor speeds (rev/min), or None if the backend does not report them."""
        return None
