"""
Calibration state generator.

While the autopilot calibrates its magnetometer, accelerometer or
airspeed sensor, the vehicle is held on the ground and turned through
scripted attitudes and rotations instead of being driven by actuator
commands.
"""

from enum import IntEnum

import numpy as np

from .diagnostics import Throttle
from .quaternion import Quaternion
from .state import VtolState

CALIBRATION_DT = 0.001
MAG_ROTATION_SPEED = 2 * np.pi / 10


class CalibrationType(IntEnum):
    WORK_MODE = 0
    MAG_1_NORMAL = 1
    MAG_2_OVERTURNED = 2
    MAG_3_HEAD_DOWN = 3
    MAG_4_HEAD_UP = 4
    MAG_5_TURNED_LEFT = 5
    MAG_6_TURNED_RIGHT = 6
    MAG_7_ARDUPILOT = 7
    MAG_8_ARDUPILOT = 8
    MAG_9_ARDUPILOT = 9
    ACC_1_NORMAL = 10
    ACC_2_OVERTURNED = 11
    ACC_3_HEAD_DOWN = 12
    ACC_4_HEAD_UP = 13
    ACC_5_TURNED_LEFT = 14
    ACC_6_TURNED_RIGHT = 15
    AIRSPEED = 16


_NORMAL = (1.0, 0.0, 0.0, 0.0)
_OVERTURNED = (0.0, 1.0, 0.0, 0.0)
_HEAD_DOWN = (0.707, 0.0, -0.707, 0.0)
_HEAD_UP = (0.707, 0.0, 0.707, 0.0)
_TURNED_LEFT = (0.707, -0.707, 0.0, 0.0)
_TURNED_RIGHT = (0.707, 0.707, 0.0, 0.0)

_W = MAG_ROTATION_SPEED

# case -> (attitude applied on entry or None, angular velocity)
CALIBRATION_CASES = {
    CalibrationType.MAG_1_NORMAL: (_NORMAL, (0.0, 0.0, -_W)),
    CalibrationType.MAG_2_OVERTURNED: (_OVERTURNED, (0.0, 0.0, _W)),
    CalibrationType.MAG_3_HEAD_DOWN: (_HEAD_DOWN, (-_W, 0.0, 0.0)),
    CalibrationType.MAG_4_HEAD_UP: (_HEAD_UP, (_W, 0.0, 0.0)),
    CalibrationType.MAG_5_TURNED_LEFT: (_TURNED_LEFT, (0.0, _W, 0.0)),
    CalibrationType.MAG_6_TURNED_RIGHT: (_TURNED_RIGHT, (0.0, -_W, 0.0)),
    CalibrationType.MAG_7_ARDUPILOT: (None, (_W, _W, _W)),
    CalibrationType.MAG_8_ARDUPILOT: (None, (-_W, _W, _W)),
    CalibrationType.MAG_9_ARDUPILOT: (None, (_W, -_W, _W)),
    CalibrationType.ACC_1_NORMAL: (_NORMAL, (0.0, 0.0, 0.0)),
    CalibrationType.ACC_2_OVERTURNED: (_OVERTURNED, (0.0, 0.0, 0.0)),
    CalibrationType.ACC_3_HEAD_DOWN: (_HEAD_DOWN, (0.0, 0.0, 0.0)),
    CalibrationType.ACC_4_HEAD_UP: (_HEAD_UP, (0.0, 0.0, 0.0)),
    CalibrationType.ACC_5_TURNED_LEFT: (_TURNED_LEFT, (0.0, 0.0, 0.0)),
    CalibrationType.ACC_6_TURNED_RIGHT: (_TURNED_RIGHT, (0.0, 0.0, 0.0)),
}


class CalibrationSequencer:
    """
    Applies one calibration step to a dynamics state.

    The reference attitude of a case is applied only when the case
    differs from the one seen on the previous call, so the vehicle keeps
    rotating from wherever the last step left it.
    """

    def __init__(self, gravity: float, verbose: bool = True):
        self.gravity = gravity
        self.verbose = verbose
        self.prev_case = CalibrationType.WORK_MODE
        self._throttle = Throttle(period=1.0)
        self._unknown = Throttle(period=1.0)

    def step(self, state: VtolState, case) -> None:
        try:
            case = CalibrationType(case)
        except ValueError:
            self._unknown.print(f"WARNING: unknown calibration case {case}, attitude and rates kept")
            case = int(case)
        entering = case != self.prev_case

        state.linear_vel = np.zeros(3)
        state.position[2] = 0.0

        if case == CalibrationType.WORK_MODE:
            state.attitude = Quaternion()
            state.angular_vel = np.zeros(3)
        elif case == CalibrationType.AIRSPEED:
            state.attitude = Quaternion()
            state.angular_vel = np.zeros(3)
            state.linear_vel = np.array([10.0, 10.0, 0.0])
        elif case in CALIBRATION_CASES:
            attitude, angular_vel = CALIBRATION_CASES[case]
            if entering and attitude is not None:
                state.attitude = Quaternion(np.array(attitude))
            state.angular_vel = np.array(angular_vel)

        if self.verbose:
            label = "init cal" if entering else "cal"
            self._throttle.print(f"{label} {int(case)}")
        self.prev_case = case

        state.attitude = state.attitude.integrate(state.angular_vel, CALIBRATION_DT)
        rotation = state.attitude.to_rotation_matrix()
        state.f_specific = rotation @ np.array([0.0, 0.0, -self.gravity])
