"""
Sensor models sampled from the simulated vehicle state.
"""

from .imu import ImuSensor
from .air_data import AirDataSensor
from .engine import IceState, IceStatusSensor, FuelTankSensor
from .esc import EscStatusSensor

__all__ = [
    'ImuSensor',
    'AirDataSensor',
    'IceState',
    'IceStatusSensor',
    'FuelTankSensor',
    'EscStatusSensor',
]
