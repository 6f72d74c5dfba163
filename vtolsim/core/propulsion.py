"""
Propulsion models for the VTOL flight dynamics.

Provides:
- Base propulsion model interface
- Propeller lookup table (control -> thrust, torque, rpm)
- Quadplane motor set: four lift motors and a forward pusher
"""

import numpy as np
from typing import Tuple
from abc import ABC, abstractmethod

from ..exceptions import WrongTableError
from .common_math import MIN_TABLE_STEP, prev_index, lerp
from .diagnostics import Throttle
from .state import NUM_MOTORS
from .tables import PROP_CONTROL, PROP_THRUST, PROP_TORQUE, PROP_RPM

# Reaction torque direction of each lift motor about body z
LIFT_MOTOR_SPIN = np.array([1.0, 1.0, -1.0, -1.0])


class PropulsionModel(ABC):
    """
    Base class for propulsion models.

    Provides interface for computing thrust forces and moments.
    """

    @abstractmethod
    def compute_thrust(self, actuators: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute total propulsion forces and moments.

        Parameters:
        -----------
        actuators : np.ndarray
            Physical actuator values

        Returns:
        --------
        forces : np.ndarray, shape (3,)
            Thrust forces in body frame [Fx, Fy, Fz] (N)
        moments : np.ndarray, shape (3,)
            Thrust moments in body frame [L, M, N] (N*m)
        """
        pass


class PropellerTable:
    """
    Tabulated propeller performance.

    Rows are sorted by control value; columns are control, thrust (N),
    torque (N*m), shaft power (unused) and rpm.
    """

    def __init__(self, table: np.ndarray):
        self.table = np.asarray(table, dtype=float)

    def thruster(self, control: float) -> Tuple[float, float, float]:
        """
        Look up thrust, torque and rpm for a control value.

        Values between rows are interpolated linearly. Controls outside
        the table reuse the first or last row, and results are never
        negative.

        Returns:
        --------
        thrust : float
            Thrust (N)
        torque : float
            Shaft torque (N*m)
        rpm : float
            Propeller speed (rev/min)

        Raises:
        -------
        WrongTableError
            If the bracketing rows are closer than MIN_TABLE_STEP
        """
        controls = self.table[:, PROP_CONTROL]
        idx = prev_index(controls, control)
        prev_row = self.table[idx]
        next_row = self.table[idx + 1]

        step = next_row[PROP_CONTROL] - prev_row[PROP_CONTROL]
        if abs(step) < MIN_TABLE_STEP:
            raise WrongTableError("control step between propeller rows is too small")

        t = (control - prev_row[PROP_CONTROL]) / step
        t = min(max(t, 0.0), 1.0)

        thrust = lerp(prev_row[PROP_THRUST], next_row[PROP_THRUST], t)
        torque = lerp(prev_row[PROP_TORQUE], next_row[PROP_TORQUE], t)
        rpm = lerp(prev_row[PROP_RPM], next_row[PROP_RPM], t)
        return max(thrust, 0.0), max(torque, 0.0), max(rpm, 0.0)


class VtolPropulsion(PropulsionModel):
    """
    Quadplane motor set.

    Motors 0-3 push along -z body (counter-rotating pairs 0/1 and 2/3),
    motor 4 pushes along +x body and its reaction torque acts about -x.
    Each motor also produces a moment r x F from its mounting position.
    """

    def __init__(self, prop_table: np.ndarray, propellers_location: np.ndarray,
                 verbose: bool = True):
        """
        Parameters:
        -----------
        prop_table : np.ndarray, shape (rows, 5)
            Propeller table shared by all five motors
        propellers_location : np.ndarray, shape (5, 3)
            Motor positions relative to the centre of gravity (m)
        verbose : bool
            Print table lookup failures
        """
        self.propeller = PropellerTable(prop_table)
        self.propellers_location = np.asarray(propellers_location, dtype=float)
        self.verbose = verbose
        self._table_warning = Throttle(period=1.0)

    def compute_motors(self, actuators: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Per-motor forces, moments and rpm.

        Parameters:
        -----------
        actuators : np.ndarray
            Physical actuator values; only channels 0..4 are read

        Returns:
        --------
        forces : np.ndarray, shape (5, 3)
            Motor forces in body frame (N)
        moments : np.ndarray, shape (5, 3)
            Reaction torque plus arm moment of each motor (N*m)
        rpm : np.ndarray, shape (5,)
            Motor speeds (rev/min)
        """
        thrust = np.zeros(NUM_MOTORS)
        torque = np.zeros(NUM_MOTORS)
        rpm = np.zeros(NUM_MOTORS)
        for idx in range(NUM_MOTORS):
            try:
                thrust[idx], torque[idx], rpm[idx] = self.propeller.thruster(actuators[idx])
            except WrongTableError as err:
                if self.verbose:
                    self._table_warning.print(f"Warning: motor {idx} propeller lookup failed: {err}")
                thrust[idx] = torque[idx] = rpm[idx] = np.nan

        forces = np.zeros((NUM_MOTORS, 3))
        forces[0:4, 2] = -thrust[0:4]
        forces[4, 0] = thrust[4]

        reaction = np.zeros((NUM_MOTORS, 3))
        reaction[0:4, 2] = LIFT_MOTOR_SPIN * torque[0:4]
        reaction[4, 0] = -torque[4]

        moments = reaction + np.cross(self.propellers_location, forces)
        return forces, moments, rpm

    def compute_thrust(self, actuators: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Total motor force and moment (body frame)."""
        forces, moments, _ = self.compute_motors(actuators)
        return forces.sum(axis=0), moments.sum(axis=0)
