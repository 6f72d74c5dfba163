"""
Actuator command mapping and first-order actuator lag.

Canonical actuator vector used by the VTOL engine (8 channels):
- 0..3: lift motors (front right, tail left, front left, tail right)
- 4: forward pusher throttle
- 5: aileron
- 6: elevator
- 7: rudder

Motor channels carry propeller-table control values, surface channels
carry deflections in degrees.
"""

import numpy as np

from ..exceptions import WrongCommandSizeError
from .state import NUM_ACTUATORS

NUM_MOTOR_CHANNELS = 5


def check_command_size(cmd) -> np.ndarray:
    """Return cmd as a float array, raising if it is not 8 channels long."""
    cmd = np.asarray(cmd, dtype=float).ravel()
    if cmd.size != NUM_ACTUATORS:
        raise WrongCommandSizeError(
            f"wrong control size. It is {cmd.size}, but should be {NUM_ACTUATORS}")
    return cmd


def scale_to_physical(actuators: np.ndarray, actuator_min: np.ndarray,
                      actuator_max: np.ndarray) -> np.ndarray:
    """
    Scale normalized channels to physical actuator values.

    Motor channels are clamped to [0, 1] and scaled by the channel
    maximum. Surface channels are clamped to [-1, 1] and scaled by the
    maximum when non-negative, by the magnitude of the signed minimum
    otherwise.
    """
    out = np.array(actuators, dtype=float)
    motors = slice(0, NUM_MOTOR_CHANNELS)
    surfaces = slice(NUM_MOTOR_CHANNELS, NUM_ACTUATORS)

    out[motors] = np.clip(out[motors], 0.0, 1.0) * actuator_max[motors]

    deflection = np.clip(out[surfaces], -1.0, 1.0)
    scale = np.where(deflection >= 0, actuator_max[surfaces], -actuator_min[surfaces])
    out[surfaces] = deflection * scale
    return out


def map_cmd_standard_vtol(cmd, actuator_min: np.ndarray, actuator_max: np.ndarray) -> np.ndarray:
    """
    Map a StandardVTOL mixer output to canonical actuators.

    Input channels: 0..3 lift motors, 4 pusher, 5 right aileron,
    6 left aileron, 7 elevator. The rudder has no input and stays at 0.
    A command of the wrong size is reported and returned unchanged.
    """
    try:
        cmd = check_command_size(cmd)
    except WrongCommandSizeError as err:
        print(f"ERROR: VTOL dynamics {err}")
        return cmd

    actuators = np.zeros(NUM_ACTUATORS)
    actuators[0:5] = cmd[0:5]
    actuators[5] = (cmd[5] - cmd[6]) / 2    # aileron, roll
    actuators[6] = -cmd[7]                  # elevator, pitch
    actuators[7] = 0.0                      # rudder, yaw
    return scale_to_physical(actuators, actuator_min, actuator_max)


def map_cmd_inno_vtol(cmd, actuator_min: np.ndarray, actuator_max: np.ndarray) -> np.ndarray:
    """
    Map an InnoVTOL mixer output to canonical actuators.

    Input channels:
    - 0..3: lift motors [0, 1]
    - 4: aileron [0, 1], neutral at 0.5
    - 5: elevator [-1, 1]
    - 6: rudder [-1, 1]
    - 7: pusher throttle [0, 1]

    A command of the wrong size is reported and returned unchanged.
    """
    try:
        cmd = check_command_size(cmd)
    except WrongCommandSizeError as err:
        print(f"ERROR: VTOL dynamics {err}")
        return cmd

    actuators = np.zeros(NUM_ACTUATORS)
    actuators[0:4] = cmd[0:4]
    actuators[4] = cmd[7]
    actuators[5] = (cmd[4] - 0.5) * 2
    actuators[6] = cmd[5]
    actuators[7] = cmd[6]
    return scale_to_physical(actuators, actuator_min, actuator_max)


MIXERS = {
    'inno': map_cmd_inno_vtol,
    'standard': map_cmd_standard_vtol,
}


def first_order_lag(previous: np.ndarray, cmd: np.ndarray, dt: float,
                    time_constants: np.ndarray) -> np.ndarray:
    """
    Exact discretization of a first-order lag over one step.

    Parameters:
    -----------
    previous : np.ndarray
        Actuator positions at the start of the step
    cmd : np.ndarray
        Commanded positions
    dt : float
        Step duration (s)
    time_constants : np.ndarray
        Per-channel time constants (s); zero means no lag

    Returns:
    --------
    current : np.ndarray
        Positions at the end of the step
    """
    tau = np.asarray(time_constants, dtype=float)
    decay = np.where(tau > 0, np.exp(-dt / np.where(tau > 0, tau, 1.0)), 0.0)
    return cmd + (previous - cmd) * decay
