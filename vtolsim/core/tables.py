"""
Immutable vehicle parameters and aerodynamic tables.

Both containers are built once by the configuration loader and never
mutated afterwards. Array shapes follow the parameter-server layout of
the Innopolis VTOL airframe description.
"""

import numpy as np

from archimedes import struct

# (name in configuration, shape after row-major reshape)
TABLE_SHAPES = {
    'CS_rudder_table': (8, 20),
    'CS_beta': (8, 90),
    'AoA': (47,),
    'AoS': (90,),
    'actuator_table': (20,),
    'airspeed_table': (8,),
    'CLPolynomial': (8, 8),
    'CSPolynomial': (8, 8),
    'CDPolynomial': (8, 6),
    'CmxPolynomial': (8, 8),
    'CmyPolynomial': (8, 8),
    'CmzPolynomial': (8, 8),
    'CmxAileron': (8, 20),
    'CmyElevator': (8, 20),
    'CmzRudder': (8, 20),
    'prop': (40, 5),
    'actuatorTimeConstants': (8,),
}

# Columns of the propeller table
PROP_CONTROL = 0
PROP_THRUST = 1
PROP_TORQUE = 2
PROP_RPM = 4


@struct(frozen=True)
class AeroTables:
    """
    Tabulated aerodynamic and propeller data.

    Polynomial tables hold one row per airspeed: the airspeed followed
    by the coefficients (highest order first) of a polynomial in angle
    of attack in degrees. Control-surface grids hold one row per
    airspeed and one column per ``actuator`` entry.
    """

    CS_rudder: np.ndarray
    CS_beta: np.ndarray
    AoA: np.ndarray
    AoS: np.ndarray
    actuator: np.ndarray
    airspeed: np.ndarray
    CLPolynomial: np.ndarray
    CSPolynomial: np.ndarray
    CDPolynomial: np.ndarray
    CmxPolynomial: np.ndarray
    CmyPolynomial: np.ndarray
    CmzPolynomial: np.ndarray
    CmxAileron: np.ndarray
    CmyElevator: np.ndarray
    CmzRudder: np.ndarray
    prop: np.ndarray
    actuator_time_constants: np.ndarray


@struct(frozen=True)
class VtolParams:
    """
    Scalar vehicle parameters (SI units).

    ``propellers_location`` has one row per motor: four lift motors
    followed by the forward pusher. ``actuator_min`` is the signed lower
    bound of each channel, so control surfaces carry negative values.
    """

    mass: float
    gravity: float
    atmo_rho: float
    wing_area: float
    characteristic_length: float
    inertia: np.ndarray
    propellers_location: np.ndarray
    actuator_min: np.ndarray
    actuator_max: np.ndarray
    acc_variance: float
    gyro_variance: float


def propellers_location(x: float, y: float, z: float, main_engine_x: float) -> np.ndarray:
    """
    Lay out the five motor positions in the body frame.

    Lift motors sit on a rectangle around the centre of gravity, front
    right and tail left on one diagonal, front left and tail right on
    the other. The pusher sits on the body x axis.
    """
    return np.array([
        [x, y, z],
        [-x, -y, z],
        [x, -y, z],
        [-x, y, z],
        [main_engine_x, 0.0, 0.0],
    ], dtype=float)


@struct(frozen=True)
class MulticopterParams:
    """
    Quadrotor parameters (SI units).

    Rotor thrust is ``thrust_coefficient * w^2`` and rotor drag torque
    ``torque_coefficient * w^2`` with w the rotor speed in rad/s.
    """

    mass: float
    gravity: float
    inertia: np.ndarray
    arm_length: float
    thrust_coefficient: float
    torque_coefficient: float
    motor_time_constant: float
    max_prop_speed: float
    acc_variance: float
    gyro_variance: float
