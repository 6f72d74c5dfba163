"""
Inertial measurement unit synthesis.

The accelerometer reports the body-frame specific force and the
gyroscope the body angular velocity, each with a constant bias and
additive white Gaussian noise.
"""

import numpy as np
from typing import Tuple

from ..core.quaternion import Quaternion


class ImuSensor:
    """
    IMU model.

    Parameters
    ----------
    acc_variance : float
        Accelerometer noise variance ((m/s^2)^2)
    gyro_variance : float
        Gyroscope noise variance ((rad/s)^2)
    rng : np.random.Generator, optional
        Random source
    orientation : Quaternion, optional
        IMU mounting relative to the body frame, identity by default
    """

    def __init__(self, acc_variance: float, gyro_variance: float, rng=None,
                 orientation: Quaternion = None):
        self.acc_variance = acc_variance
        self.gyro_variance = gyro_variance
        self.rng = rng if rng is not None else np.random.default_rng()
        self.orientation = orientation if orientation is not None else Quaternion()

    def _to_imu_frame(self, v: np.ndarray) -> np.ndarray:
        # q_imu^-1 applied to a body vector
        return self.orientation.body_to_world().T @ v

    def measure(self, f_specific: np.ndarray, angular_vel: np.ndarray,
                accel_bias=None, gyro_bias=None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sample accelerometer and gyroscope.

        Parameters:
        -----------
        f_specific : np.ndarray, shape (3,)
            Specific force in body FRD frame (m/s^2)
        angular_vel : np.ndarray, shape (3,)
            Angular velocity in body FRD frame (rad/s)
        accel_bias, gyro_bias : np.ndarray, shape (3,), optional
            Constant sensor biases, zero by default

        Returns:
        --------
        accel : np.ndarray, shape (3,)
        gyro : np.ndarray, shape (3,)
        """
        accel_bias = np.zeros(3) if accel_bias is None else accel_bias
        gyro_bias = np.zeros(3) if gyro_bias is None else gyro_bias

        acc_noise = np.sqrt(self.acc_variance) * self.rng.standard_normal(3)
        gyro_noise = np.sqrt(self.gyro_variance) * self.rng.standard_normal(3)
        accel = self._to_imu_frame(f_specific) + accel_bias + acc_noise
        gyro = self._to_imu_frame(angular_vel) + gyro_bias + gyro_noise
        return accel, gyro
