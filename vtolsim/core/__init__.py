"""
Core VTOL flight dynamics components.

This module provides the numerical building blocks of the simulator:
table interpolation, attitude quaternions, actuator mapping, the
aerodynamic and propulsion models and the rigid-body integrator.
"""

from .quaternion import Quaternion
from .state import VtolState
from .tables import AeroTables, VtolParams, MulticopterParams
from .aerodynamics import AeroModel, AeroForces, VtolAeroModel
from .propulsion import PropulsionModel, PropellerTable, VtolPropulsion
from .dynamics import RigidBodyDynamics
from .calibration import CalibrationType, CalibrationSequencer
from .diagnostics import Throttle

__all__ = [
    'Quaternion',
    'VtolState',
    'AeroTables',
    'VtolParams',
    'MulticopterParams',
    'AeroModel',
    'AeroForces',
    'VtolAeroModel',
    'PropulsionModel',
    'PropellerTable',
    'VtolPropulsion',
    'RigidBodyDynamics',
    'CalibrationType',
    'CalibrationSequencer',
    'Throttle',
]
