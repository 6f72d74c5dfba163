"""
Mutable simulation state of the VTOL dynamics.

State includes:
- Position in NED world frame and attitude quaternion (FRD body to NED)
- Linear velocity (NED) and angular velocity (FRD body)
- Accelerations, specific force and IMU biases
- Wind mean velocity and variance
- Actuator positions before and after the last lag update
- Per-motor forces, moments and RPM
- Aerodynamic force and moment plus their diagnostic breakdown
"""

import numpy as np

from archimedes import struct, field

from .quaternion import Quaternion

NUM_ACTUATORS = 8
NUM_MOTORS = 5


def _zeros3():
    return np.zeros(3)


@struct(frozen=False)
class VtolState:
    """
    Complete state owned by one dynamics instance.

    All vectors are numpy arrays of floats. Body-frame quantities use
    the forward-right-down convention, world-frame quantities use
    north-east-down with z positive down.
    """

    # Kinematics
    position: np.ndarray = field(default_factory=_zeros3)
    attitude: Quaternion = field(default_factory=Quaternion)
    linear_vel: np.ndarray = field(default_factory=_zeros3)
    angular_vel: np.ndarray = field(default_factory=_zeros3)
    linear_accel: np.ndarray = field(default_factory=_zeros3)
    angular_accel: np.ndarray = field(default_factory=_zeros3)

    # Sensor synthesis
    f_specific: np.ndarray = field(default_factory=_zeros3)
    accel_bias: np.ndarray = field(default_factory=_zeros3)
    gyro_bias: np.ndarray = field(default_factory=_zeros3)

    # Wind
    wind_velocity: np.ndarray = field(default_factory=_zeros3)
    wind_variance: float = 0.0

    # Actuators and motors
    prev_actuators: np.ndarray = field(default_factory=lambda: np.zeros(NUM_ACTUATORS))
    crnt_actuators: np.ndarray = field(default_factory=lambda: np.zeros(NUM_ACTUATORS))
    f_motors: np.ndarray = field(default_factory=lambda: np.zeros((NUM_MOTORS, 3)))
    m_motors: np.ndarray = field(default_factory=lambda: np.zeros((NUM_MOTORS, 3)))
    motors_rpm: np.ndarray = field(default_factory=lambda: np.zeros(NUM_MOTORS))

    # Aerodynamics
    f_aero: np.ndarray = field(default_factory=_zeros3)
    m_aero: np.ndarray = field(default_factory=_zeros3)

    # Pose captured by set_initial_position, restored on ground contact
    initial_position: np.ndarray = field(default_factory=_zeros3)
    initial_attitude: Quaternion = field(default_factory=Quaternion)

    # Diagnostics
    f_lift: np.ndarray = field(default_factory=_zeros3)
    f_drag: np.ndarray = field(default_factory=_zeros3)
    f_side: np.ndarray = field(default_factory=_zeros3)
    m_steer: np.ndarray = field(default_factory=_zeros3)
    m_airspeed: np.ndarray = field(default_factory=_zeros3)
    f_total: np.ndarray = field(default_factory=_zeros3)
    m_total: np.ndarray = field(default_factory=_zeros3)
    m_motors_total: np.ndarray = field(default_factory=_zeros3)
    body_linear_vel: np.ndarray = field(default_factory=_zeros3)
