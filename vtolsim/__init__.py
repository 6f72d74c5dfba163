"""
VTOL and quadrotor 6-DOF dynamics simulator.

Table-driven aerodynamics and propulsion of the Innopolis VTOL
quadplane, a quadrotor backend and a simulation loop with IMU and
engine sensors.
"""

from .exceptions import ConfigError, WrongTableError, WrongCommandSizeError
from .core.quaternion import Quaternion
from .dynamics import create_dynamics, InnoVtolDynamicsSim, MulticopterDynamicsSim
from .simulation import SimulationRunner

__version__ = '0.1.0'

__all__ = [
    'ConfigError',
    'WrongTableError',
    'WrongCommandSizeError',
    'Quaternion',
    'create_dynamics',
    'InnoVtolDynamicsSim',
    'MulticopterDynamicsSim',
    'SimulationRunner',
]
