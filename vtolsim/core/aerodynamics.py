"""
Aerodynamic models for the VTOL flight dynamics.

Provides:
- Base aerodynamic model interface
- Airspeed, angle of attack and angle of sideslip from the vehicle state
- Table-based model of the Innopolis VTOL airframe: airspeed-scheduled
  polynomials in angle of attack plus control-surface grids
"""

import numpy as np
from typing import Tuple
from abc import ABC, abstractmethod

from archimedes import struct, field

from ..exceptions import WrongTableError
from .common_math import calculate_polynomial, griddata, polyval, normalized
from .diagnostics import Throttle
from .tables import AeroTables, VtolParams

MAX_AIRSPEED_COMPONENT = 40.0
MIN_TABLE_AIRSPEED = 5.0
MAX_TABLE_AIRSPEED = 40.0
MAX_AOA_DEG = 45.0
MAX_AOS_DEG = 90.0
MIN_ANGLE_AIRSPEED = 0.001

_Y_AXIS = np.array([0.0, 1.0, 0.0])


def calculate_airspeed(rotation: np.ndarray, velocity: np.ndarray,
                       wind: np.ndarray, warning: Throttle = None) -> np.ndarray:
    """
    Airspeed vector in the body frame.

    Parameters:
    -----------
    rotation : np.ndarray, shape (3, 3)
        World-to-body rotation matrix
    velocity : np.ndarray, shape (3,)
        Vehicle velocity in the world frame (m/s)
    wind : np.ndarray, shape (3,)
        Wind velocity in the world frame (m/s)
    warning : Throttle, optional
        Rate limiter for the out-of-limit diagnostic, unthrottled if None

    Returns:
    --------
    airspeed : np.ndarray, shape (3,)
        Body-frame airspeed, each component clamped to +/-40 m/s
    """
    airspeed = rotation @ (velocity - wind)
    if np.any(np.abs(airspeed) > MAX_AIRSPEED_COMPONENT):
        airspeed = np.clip(airspeed, -MAX_AIRSPEED_COMPONENT, MAX_AIRSPEED_COMPONENT)
        message = "Warning: airspeed is out of limit."
        if warning is None:
            print(message)
        else:
            warning.print(message)
    return airspeed


def calculate_angle_of_attack(airspeed: np.ndarray) -> float:
    """
    Angle of attack (rad) in (-pi, pi].

    Zero when the airspeed projection on the body x-z plane vanishes.
    """
    vx, _, vz = airspeed
    a = np.hypot(vx, vz)
    if a < MIN_ANGLE_AIRSPEED:
        return 0.0
    s = np.clip(vz / a, -1.0, 1.0)
    aoa = np.arcsin(s) if vx > 0 else np.pi - np.arcsin(s)
    return float(aoa - 2 * np.pi if aoa > np.pi else aoa)


def calculate_angle_of_sideslip(airspeed: np.ndarray) -> float:
    """Angle of sideslip (rad), zero at vanishing airspeed."""
    b = np.linalg.norm(airspeed)
    if b < MIN_ANGLE_AIRSPEED:
        return 0.0
    return float(np.arcsin(np.clip(airspeed[1] / b, -1.0, 1.0)))


@struct(frozen=False)
class AeroForces:
    """Aerodynamic force and moment with their breakdown (body frame)."""

    force: np.ndarray = field(default_factory=lambda: np.zeros(3))
    moment: np.ndarray = field(default_factory=lambda: np.zeros(3))
    lift: np.ndarray = field(default_factory=lambda: np.zeros(3))
    side: np.ndarray = field(default_factory=lambda: np.zeros(3))
    drag: np.ndarray = field(default_factory=lambda: np.zeros(3))
    steer_moment: np.ndarray = field(default_factory=lambda: np.zeros(3))
    airspeed_moment: np.ndarray = field(default_factory=lambda: np.zeros(3))


class AeroModel(ABC):
    """
    Base class for aerodynamic models.

    Provides interface for computing forces and moments from the body
    airspeed, aerodynamic angles and control-surface positions.
    """

    @abstractmethod
    def compute_forces_moments(self, airspeed: np.ndarray, aoa: float, aos: float,
                               aileron: float = 0.0, elevator: float = 0.0,
                               rudder: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute aerodynamic forces and moments.

        Parameters:
        -----------
        airspeed : np.ndarray, shape (3,)
            Airspeed in body frame (m/s)
        aoa, aos : float
            Angle of attack and angle of sideslip (rad)
        aileron, elevator, rudder : float
            Control surface deflections (deg)

        Returns:
        --------
        forces : np.ndarray, shape (3,)
            Forces in body frame (N)
        moments : np.ndarray, shape (3,)
            Moments in body frame (N*m)
        """
        pass


class VtolAeroModel(AeroModel):
    """
    Table-based aerodynamics of the Innopolis VTOL.

    Force and moment coefficients are polynomials in angle of attack
    (deg) whose coefficients are interpolated between airspeed rows.
    Side force adds rudder and sideslip grids; moments add aileron,
    elevator and rudder grids. A table that cannot be interpolated
    yields NaN for that coefficient only.
    """

    def __init__(self, tables: AeroTables, params: VtolParams, verbose: bool = True):
        self.tables = tables
        self.params = params
        self.verbose = verbose
        self._table_warning = Throttle(period=1.0)
        self.airspeed_warning = Throttle(period=1.0)

    def _report(self, channel: str, err: WrongTableError):
        if self.verbose:
            self._table_warning.print(f"Warning: {channel} table lookup failed: {err}")

    def _polynomial(self, channel: str, table: np.ndarray, airspeed: float, aoa_deg: float) -> float:
        try:
            return polyval(calculate_polynomial(table, airspeed), aoa_deg)
        except WrongTableError as err:
            self._report(channel, err)
            return np.nan

    def _grid(self, channel: str, x_axis: np.ndarray, z: np.ndarray, x_val: float,
              airspeed: float) -> float:
        try:
            return griddata(x_axis, self.tables.airspeed, z, x_val, airspeed)
        except WrongTableError as err:
            self._report(channel, err)
            return np.nan

    # Airspeed-scheduled polynomials in angle of attack (deg)

    def calculate_cl(self, airspeed: float, aoa_deg: float) -> float:
        return self._polynomial('CL', self.tables.CLPolynomial, airspeed, aoa_deg)

    def calculate_cs(self, airspeed: float, aoa_deg: float) -> float:
        return self._polynomial('CS', self.tables.CSPolynomial, airspeed, aoa_deg)

    def calculate_cd(self, airspeed: float, aoa_deg: float) -> float:
        return self._polynomial('CD', self.tables.CDPolynomial, airspeed, aoa_deg)

    def calculate_cmx(self, airspeed: float, aoa_deg: float) -> float:
        return self._polynomial('Cmx', self.tables.CmxPolynomial, airspeed, aoa_deg)

    def calculate_cmy(self, airspeed: float, aoa_deg: float) -> float:
        return self._polynomial('Cmy', self.tables.CmyPolynomial, airspeed, aoa_deg)

    def calculate_cmz(self, airspeed: float, aoa_deg: float) -> float:
        return -self._polynomial('Cmz', self.tables.CmzPolynomial, airspeed, aoa_deg)

    # Control-surface and sideslip grids

    def calculate_cs_rudder(self, rudder: float, airspeed: float) -> float:
        return self._grid('CS_rudder', -self.tables.actuator, self.tables.CS_rudder,
                          rudder, airspeed)

    def calculate_cs_beta(self, aos_deg: float, airspeed: float) -> float:
        return self._grid('CS_beta', -self.tables.AoS, self.tables.CS_beta, aos_deg, airspeed)

    def calculate_cmx_aileron(self, aileron: float, airspeed: float) -> float:
        return self._grid('CmxAileron', self.tables.actuator, self.tables.CmxAileron,
                          aileron, airspeed)

    def calculate_cmy_elevator(self, elevator: float, airspeed: float) -> float:
        return self._grid('CmyElevator', self.tables.actuator, self.tables.CmyElevator,
                          elevator, airspeed)

    def calculate_cmz_rudder(self, rudder: float, airspeed: float) -> float:
        return self._grid('CmzRudder', self.tables.actuator, self.tables.CmzRudder,
                          rudder, airspeed)

    def dynamic_pressure(self, airspeed_mod: float) -> float:
        """rho * V^2 * S, the 1/2 factor is applied at force assembly."""
        return self.params.atmo_rho * airspeed_mod**2 * self.params.wing_area

    def compute(self, airspeed: np.ndarray, aoa: float, aos: float,
                aileron: float = 0.0, elevator: float = 0.0,
                rudder: float = 0.0) -> AeroForces:
        """
        Compute aerodynamic force, moment and their breakdown.

        Parameters:
        -----------
        airspeed : np.ndarray, shape (3,)
            Airspeed in body frame (m/s)
        aoa, aos : float
            Angle of attack and angle of sideslip (rad)
        aileron, elevator, rudder : float
            Control surface deflections (deg)

        Returns:
        --------
        result : AeroForces
            Total force and moment plus lift/side/drag forces and
            steering/airspeed moments, all in body frame
        """
        airspeed = np.asarray(airspeed, dtype=float)
        aoa_deg = float(np.clip(np.degrees(aoa), -MAX_AOA_DEG, MAX_AOA_DEG))
        aos_deg = float(np.clip(np.degrees(aos), -MAX_AOS_DEG, MAX_AOS_DEG))
        airspeed_mod = float(np.linalg.norm(airspeed))
        speed = float(np.clip(airspeed_mod, MIN_TABLE_AIRSPEED, MAX_TABLE_AIRSPEED))
        half_q = 0.5 * self.dynamic_pressure(airspeed_mod)
        half_q_l = half_q * self.params.characteristic_length

        # Forces
        lift_dir = np.cross(_Y_AXIS, normalized(airspeed))
        side_dir = np.cross(airspeed, lift_dir)
        drag_dir = normalized(-airspeed)

        cl = self.calculate_cl(speed, aoa_deg)
        cs = (self.calculate_cs(speed, aoa_deg)
              + self.calculate_cs_rudder(rudder, speed)
              + self.calculate_cs_beta(aos_deg, speed))
        cd = self.calculate_cd(speed, aoa_deg)

        lift = half_q * lift_dir * cl
        side = half_q * side_dir * cs
        drag = half_q * drag_dir * cd

        # Moments. The elevator grid is read at |elevator| and multiplied by
        # the signed deflection, so the pitch moment follows the surface sign.
        cm_airspeed = np.array([
            self.calculate_cmx(speed, aoa_deg),
            self.calculate_cmy(speed, aoa_deg),
            self.calculate_cmz(speed, aoa_deg),
        ])
        cm_steer = np.array([
            self.calculate_cmx_aileron(aileron, speed) * aileron,
            self.calculate_cmy_elevator(abs(elevator), speed) * elevator,
            self.calculate_cmz_rudder(rudder, speed) * rudder,
        ])

        return AeroForces(
            force=lift + side + drag,
            moment=half_q_l * (cm_airspeed + cm_steer),
            lift=lift,
            side=side,
            drag=drag,
            steer_moment=half_q_l * cm_steer,
            airspeed_moment=half_q_l * cm_airspeed,
        )

    def compute_forces_moments(self, airspeed: np.ndarray, aoa: float, aos: float,
                               aileron: float = 0.0, elevator: float = 0.0,
                               rudder: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
        """Compute aerodynamic force and moment (body frame)."""
        result = self.compute(airspeed, aoa, aos, aileron, elevator, rudder)
        return result.force, result.moment
